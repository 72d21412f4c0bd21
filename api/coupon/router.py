from fastapi import APIRouter

from api.coupon.schemas import CouponRedeemResponse, CouponRequest, CouponValidationResponse
from .service import redeem_coupon, validate_coupon

router = APIRouter(prefix="/api/coupon")


@router.post("/validate", response_model=CouponValidationResponse)
def validate_route(request: CouponRequest):
    return validate_coupon(request.code)


@router.post("/redeem", response_model=CouponRedeemResponse)
def redeem_route(request: CouponRequest):
    return redeem_coupon(request.code)
