from fastapi import APIRouter, Depends, HTTPException, Request

from api.profile.schemas import PublicTestimonial
from api.request_context import client_ip, resolve_session_id
from api.security import get_current_user_id, get_optional_user_id
from api.testimonial.schemas import (
    Testimonial,
    TestimonialListResponse,
    TestimonialSubmitRequest,
    TestimonialSubmitResponse,
)
from .service import (
    ProfileNotFoundError,
    approve_owner_testimonial,
    delete_owner_testimonial,
    list_owner_testimonials,
    list_public_testimonials,
    submit_testimonial,
)

router = APIRouter(prefix="/api/testimonials")


@router.get("", response_model=TestimonialListResponse)
def owner_testimonials_route(user_id: str = Depends(get_current_user_id)):
    try:
        return list_owner_testimonials(user_id)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to load testimonials: {exc}") from exc


@router.post("/{testimonial_id}/approve", response_model=Testimonial)
def approve_route(testimonial_id: str, user_id: str = Depends(get_current_user_id)):
    try:
        testimonial = approve_owner_testimonial(user_id, testimonial_id)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to approve testimonial: {exc}") from exc
    if testimonial is None:
        raise HTTPException(status_code=404, detail="Testimonial not found")
    return testimonial


@router.delete("/{testimonial_id}")
def delete_route(testimonial_id: str, user_id: str = Depends(get_current_user_id)):
    try:
        deleted = delete_owner_testimonial(user_id, testimonial_id)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to delete testimonial: {exc}") from exc
    if not deleted:
        raise HTTPException(status_code=404, detail="Testimonial not found")
    return {"message": "Testimonial deleted"}


@router.get("/{username}", response_model=list[PublicTestimonial])
def public_testimonials_route(username: str):
    try:
        return list_public_testimonials(username)
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to load testimonials: {exc}") from exc


@router.post("/{username}", response_model=TestimonialSubmitResponse)
def submit_route(
    username: str,
    payload: TestimonialSubmitRequest,
    request: Request,
    author_id: str | None = Depends(get_optional_user_id),
    session_id: str = Depends(resolve_session_id),
):
    try:
        testimonial = submit_testimonial(
            username,
            payload,
            author_id=author_id,
            session_id=session_id,
            user_agent=request.headers.get("user-agent"),
            client_ip=client_ip(request),
        )
        return TestimonialSubmitResponse(
            id=testimonial.id,
            message="Testimonial submitted! It will appear after approval.",
        )
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to submit testimonial: {exc}") from exc
