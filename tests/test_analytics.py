import re
from datetime import datetime, timezone

import pytest

from analytics import (
    detect_browser,
    detect_device,
    detect_os,
    generate_session_id,
    normalize_referrer,
    summarize_events,
)
from api.analytics.schemas import DeviceType
from factories import make_event

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

IPAD_UA = "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15 Mobile/15E148 Safari/604.1"
IPHONE_UA = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 Mobile/15E148 Safari/604.1"
EDGE_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0 Safari/537.36 Edg/120.0"
)
ANDROID_UA = "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 Chrome/120.0 Mobile Safari/537.36"


def test_unique_visitors_count_distinct_sessions():
    events = [make_event(session_id="A"), make_event(session_id="A"), make_event(session_id="B")]
    summary = summarize_events(events, now=NOW)

    assert summary.total_views == 3
    assert summary.unique_visitors == 2


def test_non_page_view_events_do_not_count_as_views():
    events = [make_event(), make_event("link_click"), make_event("download_click", session_id="Z")]
    summary = summarize_events(events, now=NOW)

    assert summary.total_views == 1
    assert summary.unique_visitors == 1


def test_referrers_grouped_by_hostname():
    events = [
        make_event(referrer="https://linkedin.com/feed"),
        make_event(referrer="https://linkedin.com/in/jane"),
        make_event(referrer=""),
        make_event(referrer="direct"),
        make_event(),
        make_event(referrer="not a url"),
    ]
    summary = summarize_events(events, now=NOW)

    counts = {entry.referrer: entry.count for entry in summary.top_referrers}
    assert counts == {"linkedin.com": 2, "Direct": 3, "Unknown": 1}


@pytest.mark.parametrize(
    "referrer, expected",
    [
        ("https://www.google.com/search?q=x", "www.google.com"),
        (None, "Direct"),
        ("DIRECT", "Direct"),
        ("google.com", "Unknown"),
    ],
)
def test_normalize_referrer(referrer, expected):
    assert normalize_referrer(referrer) == expected


def test_top_countries_truncated_with_first_seen_tie_order():
    events = []
    for hour, country in enumerate(["A", "B", "C", "D", "E", "F", "G"]):
        events.append(make_event(timestamp=f"2026-10-19T0{hour}:00:00Z", country=country))
    events.append(make_event(timestamp="2026-10-18T00:00:00Z", country="C"))
    events.append(make_event(timestamp="2026-10-18T00:00:00Z"))

    summary = summarize_events(events, now=NOW)

    names = [entry.country for entry in summary.top_countries]
    assert len(names) == 5
    assert names[0] == "C"
    # Remaining ties keep newest-first order.
    assert names[1:] == ["G", "F", "E", "D"]


def test_weekly_trend_has_seven_increasing_days():
    events = [
        make_event(timestamp="2026-10-19T01:00:00Z"),
        make_event(timestamp="2026-10-17T23:59:00Z"),
        make_event(timestamp="2026-10-17T00:00:00Z"),
        make_event(timestamp="2026-10-01T00:00:00Z"),
    ]
    summary = summarize_events(events, now=NOW)

    dates = [day.date for day in summary.weekly_trend]
    assert dates == [
        "2026-10-13",
        "2026-10-14",
        "2026-10-15",
        "2026-10-16",
        "2026-10-17",
        "2026-10-18",
        "2026-10-19",
    ]
    assert [day.views for day in summary.weekly_trend] == [0, 0, 0, 0, 2, 0, 1]


def test_weekly_trend_present_without_events():
    summary = summarize_events([], now=NOW)

    assert len(summary.weekly_trend) == 7
    assert all(day.views == 0 for day in summary.weekly_trend)
    assert len(summary.peak_hours) == 24


def test_week_and_month_windows_use_rolling_time():
    events = [
        make_event(timestamp="2026-10-19T11:00:00Z"),
        make_event(timestamp="2026-10-12T12:00:00Z"),
        make_event(timestamp="2026-10-12T11:59:00Z"),
        make_event(timestamp="2026-09-20T12:00:00Z"),
        make_event(timestamp="2026-09-01T00:00:00Z"),
    ]
    summary = summarize_events(events, now=NOW)

    assert summary.views_this_week == 2
    assert summary.views_this_month == 4


def test_device_breakdown_prefers_user_agent():
    events = [
        make_event(user_agent=IPAD_UA, device="mobile"),
        make_event(user_agent=IPHONE_UA),
        make_event(device="mobile"),
        make_event(),
    ]
    breakdown = summarize_events(events, now=NOW).device_breakdown

    assert (breakdown.mobile, breakdown.tablet, breakdown.desktop) == (2, 1, 1)


def test_click_throughs_bucket_by_contact_type():
    events = [
        make_event("contact_click", contact_type="email"),
        make_event("contact_click", contact_type="phone"),
        make_event("contact_click", contact_type="social"),
        make_event("contact_click"),
        make_event("link_click", link_url="https://github.com/jane"),
    ]
    clicks = summarize_events(events, now=NOW).click_throughs

    assert (clicks.email, clicks.phone, clicks.social, clicks.links) == (1, 1, 1, 2)


def test_peak_hours_in_requested_zone():
    events = [make_event(timestamp="2026-10-19T09:30:00Z"), make_event(timestamp="2026-10-18T09:05:00Z")]
    summary = summarize_events(events, now=NOW, tz=timezone.utc)

    assert summary.peak_hours[9].count == 2
    assert sum(hour.count for hour in summary.peak_hours) == 2


def test_recent_views_are_newest_first_and_capped():
    events = [make_event(timestamp=f"2026-10-18T{hour:02d}:00:00Z") for hour in range(12)]
    recent = summarize_events(events, now=NOW).recent_views

    assert len(recent) == 10
    assert recent[0].timestamp == "2026-10-18T11:00:00Z"
    assert recent[0].referrer == "Direct"


def test_malformed_events_yield_empty_summary():
    summary = summarize_events([{"event_type": "page_view"}, "garbage"], now=NOW)

    assert summary.total_views == 0
    assert len(summary.weekly_trend) == 7
    assert len(summary.peak_hours) == 24


def test_unreadable_source_yields_empty_summary():
    def broken():
        yield make_event()
        raise IOError("connection reset")

    summary = summarize_events(broken(), now=NOW)

    assert summary.total_views == 0


@pytest.mark.parametrize("now", ["not-a-date", "2026-13-45", 12.5])
def test_unreadable_anchor_yields_empty_summary(now):
    summary = summarize_events([make_event()], now=now)

    assert summary.total_views == 0
    assert len(summary.weekly_trend) == 7


def test_classification():
    assert detect_device(IPAD_UA) is DeviceType.TABLET
    assert detect_device(ANDROID_UA) is DeviceType.MOBILE
    assert detect_device(None) is DeviceType.DESKTOP
    assert detect_browser(EDGE_UA) == "Edge"
    assert detect_browser(ANDROID_UA) == "Chrome"
    assert detect_browser(IPHONE_UA) == "Safari"
    assert detect_os(EDGE_UA) == "Windows"
    assert detect_os(ANDROID_UA) == "Android"
    assert detect_os(IPAD_UA) == "iOS"


def test_session_id_format():
    session_id = generate_session_id(now_ms=1700000000000)

    assert re.fullmatch(r"1700000000000-[0-9a-z]{9}", session_id)
