from api.marketplace.schemas import MarketplaceLinkResponse, MarketplaceStatusResponse
from marketplace import MarketplaceStatus, get_marketplace_status, link_github_account


def _to_response(status: MarketplaceStatus) -> MarketplaceStatusResponse:
    return MarketplaceStatusResponse(
        **status.model_dump(),
        is_pro=status.is_pro,
        has_active_subscription=status.has_active_subscription,
    )


def fetch_status(id_token: str) -> MarketplaceStatusResponse:
    return _to_response(get_marketplace_status(id_token))


def link_account(id_token: str, github_login: str) -> MarketplaceLinkResponse:
    result, status = link_github_account(id_token, github_login)
    return MarketplaceLinkResponse(result=result, status=_to_response(status))
