from pydantic import BaseModel


class ImageUploadResponse(BaseModel):
    filename: str
    url: str


class ImageDeleteResponse(BaseModel):
    filename: str
    deleted: bool
