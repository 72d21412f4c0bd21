from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    PAGE_VIEW = "page_view"
    LINK_CLICK = "link_click"
    CONTACT_CLICK = "contact_click"
    DOWNLOAD_CLICK = "download_click"
    SHARE_CLICK = "share_click"
    TESTIMONIAL_VIEW = "testimonial_view"


class DeviceType(str, Enum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


class ContactType(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    SOCIAL = "social"


class EventMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    user_agent: str = ""
    referrer: str = ""
    device: DeviceType = DeviceType.DESKTOP
    browser: str = "Unknown"
    os: str = "Unknown"
    ip: str | None = None
    country: str | None = None
    city: str | None = None
    link_url: str | None = None
    contact_type: ContactType | None = None
    action: str | None = None


class AnalyticsEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    profile_id: str
    username: str = ""
    event_type: EventType
    timestamp: str
    session_id: str
    metadata: EventMetadata = Field(default_factory=EventMetadata)


class CountryCount(BaseModel):
    country: str
    count: int


class ReferrerCount(BaseModel):
    referrer: str
    count: int


class DeviceBreakdown(BaseModel):
    mobile: int = 0
    tablet: int = 0
    desktop: int = 0


class RecentView(BaseModel):
    timestamp: str
    country: str | None = None
    device: str
    referrer: str


class ClickThroughs(BaseModel):
    email: int = 0
    phone: int = 0
    social: int = 0
    links: int = 0


class HourCount(BaseModel):
    hour: int
    count: int


class DailyViews(BaseModel):
    date: str
    views: int


class AnalyticsSummary(BaseModel):
    total_views: int = 0
    unique_visitors: int = 0
    views_this_week: int = 0
    views_this_month: int = 0
    top_countries: list[CountryCount] = Field(default_factory=list)
    top_referrers: list[ReferrerCount] = Field(default_factory=list)
    device_breakdown: DeviceBreakdown = Field(default_factory=DeviceBreakdown)
    recent_views: list[RecentView] = Field(default_factory=list)
    click_throughs: ClickThroughs = Field(default_factory=ClickThroughs)
    peak_hours: list[HourCount] = Field(default_factory=list)
    weekly_trend: list[DailyViews] = Field(default_factory=list)


class TrackEventRequest(BaseModel):
    profile_id: str = Field(..., min_length=1)
    username: str = ""
    event_type: EventType
    referrer: str | None = Field(default=None, description="document.referrer of the visitor, if any")
    link_url: str | None = None
    contact_type: ContactType | None = None
    action: str | None = None


class TrackEventResponse(BaseModel):
    status: str
    session_id: str


class PageViewRequest(BaseModel):
    profile_id: str = Field(..., min_length=1)
    username: str = ""
    path: str = ""
    referrer: str | None = None


class PageViewResponse(BaseModel):
    tracked: bool
    session_id: str
