import logging
import threading
import time
from datetime import datetime, timezone

from analytics import DIRECT_REFERRER, detect_browser, detect_device, detect_os, empty_summary, summarize_events
from analytics_store import insert_event, list_events
from api.analytics.schemas import AnalyticsSummary, EventMetadata, EventType, PageViewRequest, TrackEventRequest
from geolocation import lookup_visitor
from page_view_guard import DEDUP_WINDOW_SECONDS, PageViewGuard

logger = logging.getLogger(__name__)


# One guard per visitor session. Session storage is kept apart from the guard
# so a rebuilt guard still sees what the session already tracked. A session is
# dropped once nothing in it is newer than the dedup window.
_guards: dict[str, PageViewGuard] = {}
_session_storage: dict[str, dict[str, str]] = {}
_last_seen: dict[str, float] = {}
_registry_lock = threading.Lock()
_clock = time.time


def _last_activity(session_id: str) -> float:
    stamps = [_last_seen.get(session_id, 0.0)]
    guard = _guards.get(session_id)
    if guard is not None:
        stamps.append(guard.last_tracked_at)
    for value in _session_storage.get(session_id, {}).values():
        try:
            stamps.append(float(value))
        except (TypeError, ValueError):
            continue
    return max(stamps)


def _evict_idle_sessions(now: float) -> None:
    idle = [
        session_id
        for session_id in set(_guards) | set(_session_storage)
        if now - _last_activity(session_id) >= DEDUP_WINDOW_SECONDS
        and not (session_id in _guards and _guards[session_id].in_flight)
    ]
    for session_id in idle:
        _guards.pop(session_id, None)
        _session_storage.pop(session_id, None)
        _last_seen.pop(session_id, None)
    if idle:
        logger.debug("Evicted %d idle page view sessions", len(idle))


def get_guard(session_id: str) -> PageViewGuard:
    now = _clock()
    with _registry_lock:
        _evict_idle_sessions(now)
        _last_seen[session_id] = now
        guard = _guards.get(session_id)
        if guard is None:
            storage = _session_storage.setdefault(session_id, {})
            guard = PageViewGuard(session_storage=storage)
            _guards[session_id] = guard
        return guard


def reset_guards() -> None:
    with _registry_lock:
        _guards.clear()
        _session_storage.clear()
        _last_seen.clear()


def build_metadata(
    user_agent: str | None,
    client_ip: str | None,
    referrer: str | None = None,
    **extra,
) -> EventMetadata:
    ua = user_agent or ""
    visitor = lookup_visitor(client_ip)
    return EventMetadata(
        user_agent=ua,
        referrer=referrer or DIRECT_REFERRER,
        device=detect_device(ua),
        browser=detect_browser(ua),
        os=detect_os(ua),
        ip=visitor.get("ip"),
        country=visitor.get("country"),
        city=visitor.get("city"),
        **{key: value for key, value in extra.items() if value is not None},
    )


def record_event(
    *,
    profile_id: str,
    username: str,
    event_type: EventType,
    session_id: str,
    metadata: EventMetadata,
) -> str:
    event = {
        "profile_id": profile_id,
        "username": username,
        "event_type": event_type.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "session_id": session_id,
        "metadata": metadata.model_dump(mode="json", exclude_none=True),
    }
    event_id = insert_event(event)
    logger.info("Recorded event type=%s profile_id=%s session_id=%s", event_type.value, profile_id, session_id)
    return event_id


def track_event(
    request: TrackEventRequest,
    session_id: str,
    user_agent: str | None,
    client_ip: str | None,
) -> str:
    metadata = build_metadata(
        user_agent,
        client_ip,
        request.referrer,
        link_url=request.link_url,
        contact_type=request.contact_type,
        action=request.action,
    )
    return record_event(
        profile_id=request.profile_id,
        username=request.username,
        event_type=request.event_type,
        session_id=session_id,
        metadata=metadata,
    )


def track_page_view(
    request: PageViewRequest,
    session_id: str,
    user_agent: str | None,
    client_ip: str | None,
) -> bool:
    """Record a page view unless this session just tracked the same page."""
    page_key = f"{request.profile_id}:{request.path or request.username}"

    def write() -> None:
        record_event(
            profile_id=request.profile_id,
            username=request.username,
            event_type=EventType.PAGE_VIEW,
            session_id=session_id,
            metadata=build_metadata(user_agent, client_ip, request.referrer),
        )

    return get_guard(session_id).track(request.profile_id, page_key, write)


def get_summary(profile_id: str) -> AnalyticsSummary:
    try:
        events = list_events(profile_id)
    except Exception:
        logger.exception("Failed to load analytics events profile_id=%s", profile_id)
        return empty_summary()
    return summarize_events(events)
