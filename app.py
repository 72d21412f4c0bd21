import logging
import os

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.analytics.router import router as analytics_router
from api.coupon.router import router as coupon_router
from api.image.router import router as image_router
from api.layout.router import router as layout_router
from api.marketplace.router import router as marketplace_router
from api.profile.router import router as profile_router
from api.request_context import SESSION_HEADER
from api.security import verify_api_access
from api.share.router import router as share_router
from api.testimonial.router import router as testimonial_router
from api.username.router import router as username_router

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Resumin API", version="1.0.0", dependencies=[Depends(verify_api_access)])

app.add_middleware(
    CORSMiddleware,
    allow_origins=[],              # keep empty when using regex
    allow_origin_regex=os.getenv("CORS_ORIGIN_REGEX", ".*"),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[SESSION_HEADER, "Content-Disposition"],
)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(profile_router)
app.include_router(layout_router)
app.include_router(analytics_router)
app.include_router(testimonial_router)
app.include_router(username_router)
app.include_router(share_router)
app.include_router(coupon_router)
app.include_router(image_router)
app.include_router(marketplace_router)
