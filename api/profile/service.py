import logging

from api.analytics.schemas import EventType, PageViewRequest
from api.analytics.service import build_metadata, record_event, track_page_view
from api.layout.schemas import RenderedResume
from api.profile.schemas import (
    PublicProfileResponse,
    PublicProfileState,
    PublicTestimonial,
    UserProfile,
    UserProfileSaveRequest,
)
from layout_engine import render_resume
from layout_presets import default_layout
from profile_store import (
    delete_profile,
    find_username_owner,
    get_profile,
    get_profile_by_username,
    save_profile,
    set_visibility,
)
from testimonial_store import list_testimonials

logger = logging.getLogger(__name__)


class UsernameTakenError(ValueError):
    pass


class VisitorContext:
    """Who is looking at a public profile, as seen by the HTTP layer."""

    def __init__(
        self,
        viewer_id: str | None,
        session_id: str,
        user_agent: str | None = None,
        client_ip: str | None = None,
        referrer: str | None = None,
    ) -> None:
        self.viewer_id = viewer_id
        self.session_id = session_id
        self.user_agent = user_agent
        self.client_ip = client_ip
        self.referrer = referrer


def save_user_profile(owner_id: str, request: UserProfileSaveRequest) -> str:
    owner = find_username_owner(request.username)
    if owner is not None and owner != owner_id:
        raise UsernameTakenError(f"Username '{request.username}' is already taken.")
    data = request.model_dump(mode="json")
    if data.get("layout") is None:
        data["layout"] = default_layout().model_dump(mode="json")
    return save_profile(owner_id, data)


def get_user_profile(owner_id: str) -> dict | None:
    return get_profile(owner_id)


def update_visibility(owner_id: str, is_public: bool) -> dict | None:
    return set_visibility(owner_id, is_public)


def delete_user_profile(owner_id: str, confirm_username: str) -> bool:
    profile = get_profile(owner_id)
    if not profile:
        return False
    if confirm_username != profile.get("username"):
        raise ValueError("Please type your username correctly to confirm deletion.")
    return delete_profile(owner_id)


def _approved_testimonials(profile_id: str) -> list[PublicTestimonial]:
    try:
        docs = list_testimonials(profile_id, approved=True)
    except Exception:
        logger.exception("Failed to load testimonials profile_id=%s", profile_id)
        return []
    docs.sort(key=lambda doc: doc.get("created_at", ""), reverse=True)
    return [PublicTestimonial.model_validate(doc) for doc in docs]


def _load_public(username: str) -> tuple[PublicProfileState, dict | None]:
    try:
        doc = get_profile_by_username(username)
    except Exception:
        logger.exception("Failed to load profile username=%s", username)
        return PublicProfileState.NOT_FOUND, None
    if not doc:
        return PublicProfileState.NOT_FOUND, None
    if doc.get("is_public") is False:
        return PublicProfileState.PRIVATE, doc
    return PublicProfileState.FOUND, doc


def get_public_profile(username: str, visitor: VisitorContext) -> PublicProfileResponse:
    state, doc = _load_public(username)
    if doc is None:
        return PublicProfileResponse(state=state)

    profile_id = doc["id"]
    is_owner = visitor.viewer_id is not None and visitor.viewer_id == profile_id
    if state is PublicProfileState.PRIVATE:
        return PublicProfileResponse(state=state, is_owner=is_owner)

    profile = UserProfile.model_validate(doc)
    if profile.layout is None:
        profile.layout = default_layout()

    tracked = False
    if not is_owner:
        tracked = track_page_view(
            PageViewRequest(
                profile_id=profile_id,
                username=profile.username,
                path=f"/{profile.username}",
                referrer=visitor.referrer,
            ),
            visitor.session_id,
            visitor.user_agent,
            visitor.client_ip,
        )

    return PublicProfileResponse(
        state=state,
        is_owner=is_owner,
        profile=profile,
        resume=render_resume(profile),
        testimonials=_approved_testimonials(profile_id),
        page_view_tracked=tracked,
    )


def render_public_resume(username: str, visitor: VisitorContext) -> RenderedResume | None:
    """Rendered resume for download, or None when the profile is missing or private."""
    state, doc = _load_public(username)
    if state is not PublicProfileState.FOUND:
        return None

    profile = UserProfile.model_validate(doc)
    if visitor.viewer_id != doc["id"]:
        try:
            record_event(
                profile_id=doc["id"],
                username=profile.username,
                event_type=EventType.DOWNLOAD_CLICK,
                session_id=visitor.session_id,
                metadata=build_metadata(visitor.user_agent, visitor.client_ip, visitor.referrer),
            )
        except Exception:
            logger.exception("Failed to record download username=%s", username)
    return render_resume(profile)
