from pydantic import BaseModel


class ShareLinkResponse(BaseModel):
    username: str
    url: str
    qr_code: str
