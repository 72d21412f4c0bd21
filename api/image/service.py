import logging

from api.image.schemas import ImageDeleteResponse, ImageUploadResponse
from image_hosting import delete_image, generate_unique_filename, upload_image, validate_image

logger = logging.getLogger(__name__)


class ImageUploadError(RuntimeError):
    pass


def upload_profile_picture(
    user_id: str,
    original_name: str,
    content_type: str | None,
    content: bytes,
) -> ImageUploadResponse:
    validate_image(content_type, len(content))
    filename = generate_unique_filename(original_name or "upload.png", user_id)
    result = upload_image(content, filename)
    if not result.success or not result.url:
        raise ImageUploadError(result.error or "Failed to upload image")
    logger.info("Profile picture uploaded user_id=%s filename=%s", user_id, filename)
    return ImageUploadResponse(filename=filename, url=result.url)


def delete_profile_picture(user_id: str, filename: str) -> ImageDeleteResponse:
    # Pictures are named after their owner; refuse to touch anyone else's.
    if not filename.startswith(f"profile_{user_id}_"):
        raise PermissionError("You can only delete your own pictures.")
    return ImageDeleteResponse(filename=filename, deleted=delete_image(filename))
