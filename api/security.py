import hmac
import logging
import os

from dotenv import load_dotenv
from fastapi import Header, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

logger = logging.getLogger(__name__)


load_dotenv()

API_KEY_HEADER = os.getenv("API_KEY_HEADER", "X-API-Key")
USER_ID_HEADER = "X-User-Id"
api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)

PUBLIC_PATHS = {
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
}


def _allowed_ips() -> set[str]:
    return {ip.strip() for ip in os.getenv("ALLOWED_IPS", "").split(",") if ip.strip()}


def verify_api_access(
    request: Request,
    provided_key: str | None = Security(api_key_header),
) -> None:
    path = request.url.path
    if path in PUBLIC_PATHS:
        return

    api_key = os.getenv("API_KEY", "")
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="API security is not configured. Set API_KEY environment variable.",
        )

    client_ip = request.client.host if request.client else None
    allowed_ips = _allowed_ips()
    if allowed_ips and client_ip not in allowed_ips:
        logger.warning("Rejected request from ip=%s path=%s", client_ip, path)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied from this IP address.",
        )

    if not provided_key or not hmac.compare_digest(provided_key, api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key.",
        )


def get_optional_user_id(x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER)) -> str | None:
    """Signed-in caller as forwarded by the auth gateway, if any."""
    value = (x_user_id or "").strip()
    return value or None


def get_current_user_id(x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER)) -> str:
    user_id = get_optional_user_id(x_user_id)
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign in required.")
    return user_id


def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token.")
    return token.strip()
