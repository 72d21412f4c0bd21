import base64
import logging
import os
import time

import httpx
from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)


GITHUB_API_URL = "https://api.github.com"
MAX_IMAGE_BYTES = 5 * 1024 * 1024
_PLACEHOLDER_TOKENS = {"", "your_github_personal_access_token_here"}


class UploadResult(BaseModel):
    success: bool
    url: str | None = None
    error: str | None = None


def _settings() -> dict[str, str]:
    load_dotenv()
    return {
        "token": os.getenv("GITHUB_TOKEN", ""),
        "owner": os.getenv("GITHUB_OWNER", "razinrayees"),
        "repo": os.getenv("GITHUB_REPO", "resumin-assets"),
        "path": os.getenv("GITHUB_PATH", "images"),
        "branch": os.getenv("GITHUB_BRANCH", "main"),
    }


def _build_client(timeout_seconds: float) -> httpx.Client:
    return httpx.Client(base_url=GITHUB_API_URL, timeout=timeout_seconds)


def _contents_path(settings: dict[str, str], filename: str) -> str:
    return f"/repos/{settings['owner']}/{settings['repo']}/contents/{settings['path']}/{filename}"


def raw_url(filename: str) -> str:
    settings = _settings()
    return (
        f"https://raw.githubusercontent.com/{settings['owner']}/{settings['repo']}/"
        f"{settings['branch']}/{settings['path']}/{filename}"
    )


def generate_unique_filename(original_name: str, user_id: str, now_ms: int | None = None) -> str:
    extension = original_name.rsplit(".", 1)[-1] if "." in original_name else "png"
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"profile_{user_id}_{timestamp}.{extension.lower()}"


def validate_image(content_type: str | None, size: int) -> None:
    if not (content_type or "").startswith("image/"):
        raise ValueError("Please select an image file.")
    if size > MAX_IMAGE_BYTES:
        raise ValueError("Image size must be less than 5MB.")


def upload_image(content: bytes, filename: str, timeout_seconds: float = 30.0) -> UploadResult:
    settings = _settings()
    if settings["token"] in _PLACEHOLDER_TOKENS:
        return UploadResult(success=False, error="GitHub token not configured. Set GITHUB_TOKEN in your .env file.")

    payload = {
        "message": f"Upload profile picture: {filename}",
        "content": base64.b64encode(content).decode("ascii"),
        "branch": settings["branch"],
    }
    headers = {"Authorization": f"token {settings['token']}", "Accept": "application/vnd.github+json"}

    try:
        with _build_client(timeout_seconds) as client:
            resp = client.put(_contents_path(settings, filename), json=payload, headers=headers)
    except Exception as exc:
        logger.exception("GitHub upload failed for filename=%s", filename)
        return UploadResult(success=False, error=str(exc))

    logger.info("GitHub upload filename=%s status=%d", filename, resp.status_code)
    if resp.status_code == 401:
        return UploadResult(success=False, error="Invalid GitHub token. Check GITHUB_TOKEN.")
    if resp.status_code == 403:
        return UploadResult(success=False, error='GitHub token lacks required permissions. It needs the "repo" scope.')
    if resp.status_code >= 400:
        message = ""
        try:
            message = resp.json().get("message", "")
        except ValueError:
            pass
        return UploadResult(success=False, error=message or f"GitHub API error: {resp.status_code}")

    return UploadResult(success=True, url=raw_url(filename))


def delete_image(filename: str, timeout_seconds: float = 30.0) -> bool:
    settings = _settings()
    if settings["token"] in _PLACEHOLDER_TOKENS:
        logger.error("GitHub token not configured; cannot delete filename=%s", filename)
        return False

    headers = {"Authorization": f"token {settings['token']}", "Accept": "application/vnd.github+json"}
    path = _contents_path(settings, filename)
    try:
        with _build_client(timeout_seconds) as client:
            existing = client.get(path, headers=headers, params={"ref": settings["branch"]})
            if existing.status_code >= 400:
                return False
            sha = existing.json().get("sha")
            resp = client.request(
                "DELETE",
                path,
                headers=headers,
                json={"message": f"Delete profile picture: {filename}", "sha": sha, "branch": settings["branch"]},
            )
    except Exception:
        logger.exception("GitHub delete failed for filename=%s", filename)
        return False

    logger.info("GitHub delete filename=%s status=%d", filename, resp.status_code)
    return resp.status_code < 400
