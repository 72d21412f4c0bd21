import os

from dotenv import load_dotenv

from api.share.schemas import ShareLinkResponse
from qr_generator import generate_qr_code, to_data_url

DEFAULT_PUBLIC_BASE_URL = "https://resumin.link"


def public_profile_url(username: str) -> str:
    load_dotenv()
    base_url = os.getenv("PUBLIC_BASE_URL", DEFAULT_PUBLIC_BASE_URL).rstrip("/")
    return f"{base_url}/{username}"


def profile_qr_code(username: str, size: int, margin: int, dark: str, light: str) -> bytes:
    if not username.strip():
        raise ValueError("Username is required.")
    return generate_qr_code(public_profile_url(username.strip().lower()), size=size, margin=margin, dark=dark, light=light)


def profile_share_link(username: str, size: int, margin: int, dark: str, light: str) -> ShareLinkResponse:
    """Public URL plus the same QR code inlined as a data URL, for embedding in a page."""
    png = profile_qr_code(username, size, margin, dark, light)
    normalized = username.strip().lower()
    return ShareLinkResponse(username=normalized, url=public_profile_url(normalized), qr_code=to_data_url(png))
