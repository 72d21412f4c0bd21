import logging
import re

from api.analytics.schemas import EventType
from api.analytics.service import build_metadata, record_event
from api.profile.schemas import PublicTestimonial
from api.testimonial.schemas import Testimonial, TestimonialListResponse, TestimonialSubmitRequest
from profile_store import get_profile_by_username
from testimonial_store import approve_testimonial, create_testimonial, delete_testimonial, list_testimonials

logger = logging.getLogger(__name__)


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ProfileNotFoundError(LookupError):
    pass


def _public_profile_id(username: str) -> tuple[str, str]:
    profile = get_profile_by_username(username)
    if not profile or profile.get("is_public") is False:
        raise ProfileNotFoundError(f"Profile '{username}' not found")
    return profile["id"], profile["username"]


def _newest_first(docs: list[dict]) -> list[dict]:
    return sorted(docs, key=lambda doc: doc.get("created_at", ""), reverse=True)


def submit_testimonial(
    username: str,
    request: TestimonialSubmitRequest,
    *,
    author_id: str | None,
    session_id: str,
    user_agent: str | None = None,
    client_ip: str | None = None,
) -> Testimonial:
    author_name = request.author_name.strip()
    author_email = request.author_email.strip()
    content = request.content.strip()
    if not author_name or not author_email or not content:
        raise ValueError("Please fill in all required fields")
    if not EMAIL_PATTERN.match(author_email):
        raise ValueError("Please enter a valid email address")

    profile_id, profile_username = _public_profile_id(username)
    stored = create_testimonial(
        {
            "profile_user_id": profile_id,
            "author_id": author_id,
            "author_name": author_name,
            "author_title": request.author_title.strip(),
            "author_email": author_email,
            "content": content,
            "rating": request.rating,
        }
    )
    logger.info("Testimonial submitted id=%s profile_id=%s", stored["id"], profile_id)

    try:
        record_event(
            profile_id=profile_id,
            username=profile_username,
            event_type=EventType.TESTIMONIAL_VIEW,
            session_id=session_id,
            metadata=build_metadata(user_agent, client_ip, action="submit"),
        )
    except Exception:
        logger.exception("Failed to record testimonial submission profile_id=%s", profile_id)
    return Testimonial.model_validate(stored)


def list_public_testimonials(username: str) -> list[PublicTestimonial]:
    profile_id, _ = _public_profile_id(username)
    docs = list_testimonials(profile_id, approved=True)
    return [PublicTestimonial.model_validate(doc) for doc in _newest_first(docs)]


def list_owner_testimonials(owner_id: str) -> TestimonialListResponse:
    docs = _newest_first(list_testimonials(owner_id))
    return TestimonialListResponse(
        pending=[Testimonial.model_validate(doc) for doc in docs if not doc.get("approved")],
        approved=[Testimonial.model_validate(doc) for doc in docs if doc.get("approved")],
    )


def approve_owner_testimonial(owner_id: str, testimonial_id: str) -> Testimonial | None:
    """Approve and return the stored record; None when it is unknown or not the owner's."""
    doc = approve_testimonial(testimonial_id, owner_id)
    if doc is None:
        logger.warning("Approve rejected testimonial_id=%s owner_id=%s", testimonial_id, owner_id)
        return None
    return Testimonial.model_validate(doc)


def delete_owner_testimonial(owner_id: str, testimonial_id: str) -> bool:
    return delete_testimonial(testimonial_id, owner_id)
