from typing import Any

from pydantic import BaseModel, Field


class MarketplaceStatusResponse(BaseModel):
    has_marketplace_subscription: bool = False
    plan: str = "free"
    plan_name: str | None = None
    billing_cycle: str | None = None
    status: str | None = None
    on_free_trial: bool | None = None
    free_trial_ends_on: str | None = None
    next_billing_date: str | None = None
    is_pro: bool = False
    has_active_subscription: bool = False


class MarketplaceLinkRequest(BaseModel):
    github_login: str = Field(..., description="GitHub login that bought the Marketplace plan")


class MarketplaceLinkResponse(BaseModel):
    result: Any = None
    status: MarketplaceStatusResponse
