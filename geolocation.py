import ipaddress
import logging
import os

import httpx
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


DEFAULT_GEOLOCATION_URL = "https://ipapi.co"


def _build_client(timeout_seconds: float) -> httpx.Client:
    return httpx.Client(timeout=timeout_seconds, follow_redirects=True)


def _is_public_ip(ip: str | None) -> bool:
    if not ip:
        return False
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return address.is_global


def lookup_visitor(ip: str | None, timeout_seconds: float = 3.0) -> dict[str, str]:
    """Best-effort IP geolocation. Returns {} when disabled, private or failing."""
    load_dotenv()
    base_url = os.getenv("GEOLOCATION_URL", DEFAULT_GEOLOCATION_URL).rstrip("/")
    if not base_url or not _is_public_ip(ip):
        return {}

    url = f"{base_url}/{ip}/json/"
    try:
        with _build_client(timeout_seconds) as client:
            resp = client.get(url)
        if resp.status_code >= 400:
            logger.warning("Geolocation lookup returned status=%d for ip=%s", resp.status_code, ip)
            return {}
        data = resp.json()
    except Exception:
        logger.exception("Geolocation lookup failed for ip=%s", ip)
        return {}

    visitor = {
        "ip": data.get("ip") or ip,
        "country": data.get("country_name"),
        "city": data.get("city"),
        "timezone": data.get("timezone"),
    }
    return {key: value for key, value in visitor.items() if value}
