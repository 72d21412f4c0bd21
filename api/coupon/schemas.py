from pydantic import BaseModel, Field


class CouponRequest(BaseModel):
    code: str = Field(..., description="Coupon code; matched case-insensitively")


class CouponValidationResponse(BaseModel):
    code: str
    valid: bool
    reason: str | None = None


class CouponRedeemResponse(BaseModel):
    code: str
    redeemed: bool
    reason: str | None = None
