from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from api.layout.schemas import LayoutPreviewRequest, RenderedResume, ResumeLayout, ThemeEntry
from .service import list_layout_presets, list_themes, preview_layout

router = APIRouter(prefix="/api/layout")


@router.get("/presets", response_model=list[ResumeLayout])
def presets_route():
    return list_layout_presets()


@router.get("/themes", response_model=list[ThemeEntry])
def themes_route():
    return list_themes()


@router.post("/preview", response_model=RenderedResume)
def preview_route(request: LayoutPreviewRequest):
    try:
        return preview_layout(request)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False, include_input=False)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Failed to render preview: {exc}") from exc
