from pydantic import BaseModel, ConfigDict, Field


class TestimonialSubmitRequest(BaseModel):
    author_name: str = Field(..., description="Name shown next to the testimonial")
    author_title: str = ""
    author_email: str
    content: str
    rating: int = Field(default=5, ge=1, le=5)


class Testimonial(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    profile_user_id: str
    author_id: str | None = None
    author_name: str
    author_title: str = ""
    author_email: str
    content: str
    rating: int
    created_at: str
    approved: bool = False


class TestimonialSubmitResponse(BaseModel):
    id: str
    message: str


class TestimonialListResponse(BaseModel):
    pending: list[Testimonial] = Field(default_factory=list)
    approved: list[Testimonial] = Field(default_factory=list)
