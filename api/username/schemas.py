from pydantic import BaseModel

from username_check import UsernameStatus


class UsernameCheckResponse(BaseModel):
    username: str
    status: UsernameStatus
    url: str | None = None
