from datetime import datetime, timezone

from database import COUPONS_COLLECTION, get_collection, serialize_document


def _coupons():
    return get_collection(COUPONS_COLLECTION)


def find_coupon(code: str) -> dict | None:
    doc = _coupons().find_one({"code": code.strip().upper()})
    return serialize_document(doc) if doc else None


def increment_usage(code: str, expected_used_count: int | None) -> bool:
    """Count one use, but only if the coupon is still active and nobody redeemed it since it was read."""
    result = _coupons().update_one(
        {"code": code.strip().upper(), "is_active": True, "used_count": expected_used_count},
        {
            "$inc": {"used_count": 1},
            "$set": {"last_used": datetime.now(timezone.utc).isoformat()},
        },
    )
    return result.modified_count > 0
