from api.share.service import public_profile_url
from api.username.schemas import UsernameCheckResponse
from profile_store import find_username_owner
from username_check import UsernameStatus, check_username_availability, normalize_username


def check_username(raw_value: str, current_user_id: str | None = None) -> UsernameCheckResponse:
    username = normalize_username(raw_value)
    status = check_username_availability(username, find_username_owner, current_user_id)
    url = public_profile_url(username) if status is UsernameStatus.AVAILABLE else None
    return UsernameCheckResponse(username=username, status=status, url=url)
