from fastapi import APIRouter, Depends, HTTPException, Request

from api.analytics.schemas import (
    AnalyticsSummary,
    PageViewRequest,
    PageViewResponse,
    TrackEventRequest,
    TrackEventResponse,
)
from api.request_context import client_ip, resolve_session_id
from api.security import get_current_user_id
from .service import get_summary, track_event, track_page_view

router = APIRouter(prefix="/api/analytics")


@router.post("/events", response_model=TrackEventResponse)
def track_event_route(
    payload: TrackEventRequest,
    request: Request,
    session_id: str = Depends(resolve_session_id),
):
    try:
        track_event(payload, session_id, request.headers.get("user-agent"), client_ip(request))
        return TrackEventResponse(status="recorded", session_id=session_id)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to record event: {exc}") from exc


@router.post("/page-view", response_model=PageViewResponse)
def page_view_route(
    payload: PageViewRequest,
    request: Request,
    session_id: str = Depends(resolve_session_id),
):
    tracked = track_page_view(payload, session_id, request.headers.get("user-agent"), client_ip(request))
    return PageViewResponse(tracked=tracked, session_id=session_id)


@router.get("/summary", response_model=AnalyticsSummary)
def summary_route(user_id: str = Depends(get_current_user_id)):
    return get_summary(user_id)
