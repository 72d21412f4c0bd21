from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response

from qr_generator import DEFAULT_DARK, DEFAULT_LIGHT, DEFAULT_MARGIN, DEFAULT_SIZE
from api.share.schemas import ShareLinkResponse
from .service import profile_qr_code, profile_share_link

router = APIRouter(prefix="/api/share")

HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


@router.get("/{username}/qr")
def qr_route(
    username: str,
    size: int = Query(default=DEFAULT_SIZE, ge=64, le=1024),
    margin: int = Query(default=DEFAULT_MARGIN, ge=0, le=16),
    dark: str = Query(default=DEFAULT_DARK, pattern=HEX_COLOR),
    light: str = Query(default=DEFAULT_LIGHT, pattern=HEX_COLOR),
):
    try:
        png = profile_qr_code(username, size, margin, dark, light)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"QR code generation failed: {exc}") from exc
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="{username}-qr.png"'},
    )


@router.get("/{username}", response_model=ShareLinkResponse)
def share_link_route(
    username: str,
    size: int = Query(default=DEFAULT_SIZE, ge=64, le=1024),
    margin: int = Query(default=DEFAULT_MARGIN, ge=0, le=16),
    dark: str = Query(default=DEFAULT_DARK, pattern=HEX_COLOR),
    light: str = Query(default=DEFAULT_LIGHT, pattern=HEX_COLOR),
):
    try:
        return profile_share_link(username, size, margin, dark, light)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"QR code generation failed: {exc}") from exc
