from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from api.image.schemas import ImageDeleteResponse, ImageUploadResponse
from api.security import get_current_user_id
from .service import ImageUploadError, delete_profile_picture, upload_profile_picture

router = APIRouter(prefix="/api/images")


@router.post("", response_model=ImageUploadResponse)
def upload_route(file: UploadFile = File(...), user_id: str = Depends(get_current_user_id)):
    try:
        content = file.file.read()
        return upload_profile_picture(user_id, file.filename or "", file.content_type, content)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ImageUploadError as exc:
        raise HTTPException(status_code=502, detail=f"Image upload failed: {exc}") from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Image upload failed: {exc}") from exc


@router.delete("/{filename}", response_model=ImageDeleteResponse)
def delete_route(filename: str, user_id: str = Depends(get_current_user_id)):
    try:
        return delete_profile_picture(user_id, filename)
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Image delete failed: {exc}") from exc
