import logging
from datetime import datetime, timezone

from analytics import parse_timestamp
from api.coupon.schemas import CouponRedeemResponse, CouponValidationResponse
from coupon_store import find_coupon, increment_usage

logger = logging.getLogger(__name__)


def _rejection_reason(coupon: dict | None, now: datetime) -> str | None:
    if coupon is None:
        return "Invalid coupon code"
    if not coupon.get("is_active"):
        return "Coupon is not active"
    usage_limit = coupon.get("usage_limit")
    if usage_limit and coupon.get("used_count", 0) >= usage_limit:
        return "Coupon usage limit reached"
    expiry = coupon.get("expiry_date")
    if expiry and parse_timestamp(expiry) < now:
        return "Coupon has expired"
    return None


def validate_coupon(code: str, now: datetime | None = None) -> CouponValidationResponse:
    normalized = code.strip().upper()
    if not normalized:
        return CouponValidationResponse(code=normalized, valid=False, reason="Coupon code is required")

    try:
        coupon = find_coupon(normalized)
        reason = _rejection_reason(coupon, now or datetime.now(timezone.utc))
    except Exception:
        logger.exception("Coupon validation failed code=%s", normalized)
        reason = "Coupon could not be validated"

    return CouponValidationResponse(code=normalized, valid=reason is None, reason=reason)


def redeem_coupon(code: str, now: datetime | None = None) -> CouponRedeemResponse:
    normalized = code.strip().upper()
    if not normalized:
        return CouponRedeemResponse(code=normalized, redeemed=False, reason="Coupon code is required")

    try:
        coupon = find_coupon(normalized)
        reason = _rejection_reason(coupon, now or datetime.now(timezone.utc))
        if reason is None and not increment_usage(normalized, coupon.get("used_count")):
            reason = "Coupon could not be redeemed"
    except Exception:
        logger.exception("Coupon redemption failed code=%s", normalized)
        reason = "Coupon could not be redeemed"

    if reason is not None:
        logger.info("Coupon not redeemed code=%s reason=%s", normalized, reason)
    return CouponRedeemResponse(code=normalized, redeemed=reason is None, reason=reason)
