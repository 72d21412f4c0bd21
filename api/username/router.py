from fastapi import APIRouter, Depends, Query

from api.security import get_optional_user_id
from api.username.schemas import UsernameCheckResponse
from .service import check_username

router = APIRouter(prefix="/api/username")


@router.get("/check", response_model=UsernameCheckResponse)
def check_route(
    username: str = Query(default="", description="Raw input; normalised before checking"),
    user_id: str | None = Depends(get_optional_user_id),
):
    return check_username(username, user_id)
