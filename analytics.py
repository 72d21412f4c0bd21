"""Visit analytics: visitor classification and event-log aggregation.

The aggregator rescans the complete event list of a profile on every call.
That is fine for personal resume sites with small event volumes; it is not
meant to scale to high-traffic profiles.
"""

import logging
import random
import re
import string
import time
from collections import Counter
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Iterable
from urllib.parse import urlparse

from api.analytics.schemas import (
    AnalyticsEvent,
    AnalyticsSummary,
    ClickThroughs,
    CountryCount,
    DailyViews,
    DeviceBreakdown,
    DeviceType,
    EventType,
    HourCount,
    RecentView,
    ReferrerCount,
)

logger = logging.getLogger(__name__)


TOP_N = 5
RECENT_VIEWS = 10
TREND_DAYS = 7
DIRECT_REFERRER = "direct"

TABLET_PATTERN = re.compile(r"tablet|ipad|playbook|silk", re.IGNORECASE)
MOBILE_PATTERN = re.compile(
    r"mobile|iphone|ipod|android|blackberry|opera|mini|windows\sce|palm|smartphone|iemobile",
    re.IGNORECASE,
)

_SESSION_ALPHABET = string.digits + string.ascii_lowercase


def generate_session_id(now_ms: int | None = None) -> str:
    millis = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(random.choices(_SESSION_ALPHABET, k=9))
    return f"{millis}-{suffix}"


def detect_device(user_agent: str | None) -> DeviceType:
    ua = user_agent or ""
    # Tablets often carry mobile tokens too, so they are matched first.
    if TABLET_PATTERN.search(ua):
        return DeviceType.TABLET
    if MOBILE_PATTERN.search(ua):
        return DeviceType.MOBILE
    return DeviceType.DESKTOP


def detect_browser(user_agent: str | None) -> str:
    ua = user_agent or ""
    if "Edg" in ua:
        return "Edge"
    if "OPR" in ua or "Opera" in ua:
        return "Opera"
    if "Chrome" in ua:
        return "Chrome"
    if "Firefox" in ua:
        return "Firefox"
    if "Safari" in ua:
        return "Safari"
    return "Unknown"


def detect_os(user_agent: str | None) -> str:
    ua = user_agent or ""
    if "Windows" in ua:
        return "Windows"
    if "Android" in ua:
        return "Android"
    if any(token in ua for token in ("iPhone", "iPad", "iPod", "iOS")):
        return "iOS"
    if "Mac" in ua:
        return "macOS"
    if "Linux" in ua:
        return "Linux"
    return "Unknown"


def normalize_referrer(referrer: str | None) -> str:
    value = (referrer or "").strip()
    if not value or value.lower() == DIRECT_REFERRER:
        return "Direct"
    try:
        parsed = urlparse(value)
        hostname = parsed.hostname
    except ValueError:
        return "Unknown"
    if not parsed.scheme or not hostname:
        return "Unknown"
    return hostname


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _device_for(event: AnalyticsEvent) -> DeviceType:
    if event.metadata.user_agent:
        return detect_device(event.metadata.user_agent)
    return event.metadata.device or DeviceType.DESKTOP


def _trend_days(now: datetime) -> list[str]:
    today = now.astimezone(timezone.utc)
    return [(today - timedelta(days=offset)).date().isoformat() for offset in range(TREND_DAYS - 1, -1, -1)]


def empty_summary(now: datetime | None = None) -> AnalyticsSummary:
    now = now or datetime.now(timezone.utc)
    return AnalyticsSummary(
        peak_hours=[HourCount(hour=hour, count=0) for hour in range(24)],
        weekly_trend=[DailyViews(date=day, views=0) for day in _trend_days(now)],
    )


def _summarize(
    events: Iterable[Any],
    now: datetime,
    tz: tzinfo | None,
) -> AnalyticsSummary:
    parsed = [event if isinstance(event, AnalyticsEvent) else AnalyticsEvent.model_validate(event) for event in events]
    stamped = [(parse_timestamp(event.timestamp), event) for event in parsed]
    # Newest first; equal-count groups below keep this first-seen order.
    stamped.sort(key=lambda pair: pair[0], reverse=True)

    page_views = [(ts, event) for ts, event in stamped if event.event_type is EventType.PAGE_VIEW]

    week_ago = now - timedelta(days=7)
    month_ago = now - timedelta(days=30)

    countries = Counter(event.metadata.country or "Unknown" for _, event in page_views)
    referrers = Counter(normalize_referrer(event.metadata.referrer) for _, event in page_views)

    devices = DeviceBreakdown()
    hours = Counter()
    days = Counter()
    for ts, event in page_views:
        device = _device_for(event)
        setattr(devices, device.value, getattr(devices, device.value) + 1)
        hours[ts.astimezone(tz).hour] += 1
        days[ts.astimezone(timezone.utc).date().isoformat()] += 1

    clicks = ClickThroughs()
    for _, event in stamped:
        if event.event_type is EventType.CONTACT_CLICK:
            bucket = event.metadata.contact_type.value if event.metadata.contact_type else "links"
            setattr(clicks, bucket, getattr(clicks, bucket) + 1)
        elif event.event_type is EventType.LINK_CLICK:
            clicks.links += 1

    recent_views = [
        RecentView(
            timestamp=event.timestamp,
            country=event.metadata.country,
            device=_device_for(event).value,
            referrer="Direct"
            if not event.metadata.referrer or event.metadata.referrer.lower() == DIRECT_REFERRER
            else event.metadata.referrer,
        )
        for _, event in page_views[:RECENT_VIEWS]
    ]

    return AnalyticsSummary(
        total_views=len(page_views),
        unique_visitors=len({event.session_id for _, event in page_views}),
        views_this_week=sum(1 for ts, _ in page_views if ts >= week_ago),
        views_this_month=sum(1 for ts, _ in page_views if ts >= month_ago),
        top_countries=[CountryCount(country=name, count=count) for name, count in countries.most_common(TOP_N)],
        top_referrers=[ReferrerCount(referrer=name, count=count) for name, count in referrers.most_common(TOP_N)],
        device_breakdown=devices,
        recent_views=recent_views,
        click_throughs=clicks,
        peak_hours=[HourCount(hour=hour, count=hours.get(hour, 0)) for hour in range(24)],
        weekly_trend=[DailyViews(date=day, views=days.get(day, 0)) for day in _trend_days(now)],
    )


def summarize_events(
    events: Iterable[Any],
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> AnalyticsSummary:
    """Reduce a profile's event log into an ``AnalyticsSummary``.

    ``now`` defaults to the current wall-clock time and anchors the 7/30 day
    windows and the weekly trend. ``tz`` selects the zone for the peak-hour
    histogram (server local time when omitted).

    Never raises: any failure while reading or aggregating yields the zeroed
    summary, so callers cannot tell "no events yet" from a failed read.
    """
    try:
        now = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)
    except (TypeError, ValueError):
        logger.warning("Unreadable summary anchor now=%r; returning empty summary", now)
        return empty_summary(datetime.now(timezone.utc))
    try:
        return _summarize(events, now, tz)
    except Exception:
        logger.exception("Analytics aggregation failed; returning empty summary")
        return empty_summary(now)
