from api.layout.schemas import LayoutPreviewRequest, RenderedResume, ResumeLayout, ThemeEntry
from api.profile.schemas import UserProfile
from layout_engine import THEME_PALETTES, render_resume
from layout_presets import get_preset, list_presets


def list_layout_presets() -> list[ResumeLayout]:
    return list_presets()


def list_themes() -> list[ThemeEntry]:
    return [ThemeEntry(id=theme.value, palette=palette) for theme, palette in THEME_PALETTES.items()]


def preview_layout(request: LayoutPreviewRequest) -> RenderedResume:
    layout = request.layout
    if request.preset_id:
        layout = get_preset(request.preset_id)
        if layout is None:
            raise ValueError(f"Unknown layout preset: {request.preset_id}")

    profile_data = {"username": "preview", **request.profile}
    profile = UserProfile.model_validate(profile_data)
    return render_resume(profile, layout)
