from fastapi import APIRouter, Depends, HTTPException, Query, Request

from api.profile.schemas import (
    PublicProfileResponse,
    UserProfileSaveRequest,
    UserProfileSaveResponse,
    VisibilityRequest,
    VisibilityResponse,
)
from api.request_context import client_ip, resolve_session_id
from api.security import get_current_user_id, get_optional_user_id
from utils import render_resume_response
from .service import (
    UsernameTakenError,
    VisitorContext,
    delete_user_profile,
    get_public_profile,
    get_user_profile,
    render_public_resume,
    save_user_profile,
    update_visibility,
)

router = APIRouter(prefix="/api/profile")


def _visitor(request: Request, viewer_id: str | None, session_id: str) -> VisitorContext:
    return VisitorContext(
        viewer_id=viewer_id,
        session_id=session_id,
        user_agent=request.headers.get("user-agent"),
        client_ip=client_ip(request),
        referrer=request.headers.get("referer"),
    )


def _save(user_id: str, request: UserProfileSaveRequest, message: str) -> UserProfileSaveResponse:
    try:
        profile_id = save_user_profile(user_id, request)
        return UserProfileSaveResponse(id=profile_id, username=request.username, message=message)
    except UsernameTakenError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to save profile: {exc}") from exc


@router.post("", response_model=UserProfileSaveResponse)
def create_profile_route(request: UserProfileSaveRequest, user_id: str = Depends(get_current_user_id)):
    return _save(user_id, request, "Profile saved successfully")


@router.put("", response_model=UserProfileSaveResponse)
def update_profile_route(request: UserProfileSaveRequest, user_id: str = Depends(get_current_user_id)):
    return _save(user_id, request, "Profile updated successfully")


@router.get("")
def get_profile_route(user_id: str = Depends(get_current_user_id)):
    try:
        profile = get_user_profile(user_id)
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to load profile: {exc}") from exc


@router.delete("")
def delete_profile_route(
    confirm: str = Query(..., description="The profile's username, typed to confirm deletion"),
    user_id: str = Depends(get_current_user_id),
):
    try:
        if not delete_user_profile(user_id, confirm):
            raise HTTPException(status_code=404, detail="Profile not found")
        return {"message": "Profile deleted successfully"}
    except HTTPException:
        raise
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to delete profile: {exc}") from exc


@router.patch("/visibility", response_model=VisibilityResponse)
def visibility_route(request: VisibilityRequest, user_id: str = Depends(get_current_user_id)):
    try:
        profile = update_visibility(user_id, request.is_public)
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        message = "Profile is now public" if profile["is_public"] else "Profile is now private"
        return VisibilityResponse(is_public=profile["is_public"], message=message)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to update visibility: {exc}") from exc


@router.get("/public/{username}", response_model=PublicProfileResponse)
def public_profile_route(
    username: str,
    request: Request,
    viewer_id: str | None = Depends(get_optional_user_id),
    session_id: str = Depends(resolve_session_id),
):
    return get_public_profile(username, _visitor(request, viewer_id, session_id))


@router.get("/public/{username}/export")
def export_profile_route(
    username: str,
    request: Request,
    format: str = Query(default="pdf", pattern="^(pdf|docx)$"),
    viewer_id: str | None = Depends(get_optional_user_id),
    session_id: str = Depends(resolve_session_id),
):
    try:
        resume = render_public_resume(username, _visitor(request, viewer_id, session_id))
        if resume is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return render_resume_response(resume, format)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to export profile: {exc}") from exc
