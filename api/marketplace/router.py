from fastapi import APIRouter, Depends, HTTPException

from api.marketplace.schemas import MarketplaceLinkRequest, MarketplaceLinkResponse, MarketplaceStatusResponse
from api.security import get_bearer_token
from marketplace import MarketplaceError
from .service import fetch_status, link_account

router = APIRouter(prefix="/api/marketplace")


@router.get("/status", response_model=MarketplaceStatusResponse)
def status_route(id_token: str = Depends(get_bearer_token)):
    try:
        return fetch_status(id_token)
    except MarketplaceError as exc:
        raise HTTPException(status_code=502, detail=f"Marketplace status failed: {exc}") from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Marketplace status failed: {exc}") from exc


@router.post("/link", response_model=MarketplaceLinkResponse)
def link_route(request: MarketplaceLinkRequest, id_token: str = Depends(get_bearer_token)):
    try:
        return link_account(id_token, request.github_login)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except MarketplaceError as exc:
        raise HTTPException(status_code=502, detail=f"Marketplace link failed: {exc}") from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Marketplace link failed: {exc}") from exc
