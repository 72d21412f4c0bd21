import logging
import os
from typing import Any

import httpx
from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)


STATUS_FUNCTION = "getMarketplaceStatus"
LINK_FUNCTION = "linkGitHubMarketplace"


class MarketplaceStatus(BaseModel):
    has_marketplace_subscription: bool = False
    plan: str = "free"
    plan_name: str | None = None
    billing_cycle: str | None = None
    status: str | None = None
    on_free_trial: bool | None = None
    free_trial_ends_on: str | None = None
    next_billing_date: str | None = None

    @property
    def is_pro(self) -> bool:
        return self.plan == "pro"

    @property
    def has_active_subscription(self) -> bool:
        return self.has_marketplace_subscription and self.status == "active"


class MarketplaceError(RuntimeError):
    pass


_STATUS_FIELDS = {
    "hasMarketplaceSubscription": "has_marketplace_subscription",
    "planName": "plan_name",
    "billingCycle": "billing_cycle",
    "onFreeTrial": "on_free_trial",
    "freeTrialEndsOn": "free_trial_ends_on",
    "nextBillingDate": "next_billing_date",
}


def _functions_base_url() -> str:
    load_dotenv()
    base_url = os.getenv("MARKETPLACE_FUNCTIONS_URL", "").rstrip("/")
    if not base_url:
        raise MarketplaceError("Missing MARKETPLACE_FUNCTIONS_URL. Add it to your environment or .env file.")
    return base_url


def _build_client(timeout_seconds: float) -> httpx.Client:
    return httpx.Client(timeout=timeout_seconds, follow_redirects=True)


def call_function(name: str, id_token: str, data: dict[str, Any] | None = None, timeout_seconds: float = 20.0) -> Any:
    """Invoke a callable cloud function: POST {"data": ...}, answer {"result": ...}."""
    url = f"{_functions_base_url()}/{name}"
    logger.info("Calling marketplace function name=%s", name)
    try:
        with _build_client(timeout_seconds) as client:
            resp = client.post(
                url,
                json={"data": data or {}},
                headers={"Authorization": f"Bearer {id_token}", "Content-Type": "application/json"},
            )
    except Exception as exc:
        logger.exception("Marketplace function %s request failed", name)
        raise MarketplaceError(f"{name} request failed: {exc}") from exc

    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    if resp.status_code >= 400 or "error" in body:
        error = body.get("error")
        message = error.get("message") if isinstance(error, dict) else None
        logger.error("Marketplace function %s failed status=%d body=%s", name, resp.status_code, resp.text[:500])
        raise MarketplaceError(message or f"{name} failed: HTTP {resp.status_code}")
    return body.get("result")


def parse_status(result: Any) -> MarketplaceStatus:
    if not isinstance(result, dict):
        return MarketplaceStatus()
    normalized = {_STATUS_FIELDS.get(key, key): value for key, value in result.items()}
    return MarketplaceStatus.model_validate(normalized)


def get_marketplace_status(id_token: str) -> MarketplaceStatus:
    return parse_status(call_function(STATUS_FUNCTION, id_token))


def link_github_account(id_token: str, github_login: str) -> tuple[Any, MarketplaceStatus]:
    login = github_login.strip()
    if not login:
        raise ValueError("GitHub login is required.")
    result = call_function(LINK_FUNCTION, id_token, {"githubLogin": login})
    return result, get_marketplace_status(id_token)
