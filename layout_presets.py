from types import MappingProxyType

from api.layout.schemas import (
    ExperienceDisplay,
    HeaderStyle,
    LayoutStructure,
    ProjectsDisplay,
    ResumeLayout,
    SectionKey,
    SkillsDisplay,
    Spacing,
)


ALL_VISIBLE = MappingProxyType({key.value: True for key in SectionKey})


def _preset(
    preset_id: str,
    name: str,
    description: str,
    structure: LayoutStructure,
    header_style: HeaderStyle,
    section_order: list[str],
    spacing: Spacing,
    skills_display: SkillsDisplay,
    projects_display: ProjectsDisplay,
    experience_display: ExperienceDisplay,
) -> ResumeLayout:
    return ResumeLayout(
        id=preset_id,
        name=name,
        description=description,
        structure=structure,
        header_style=header_style,
        section_order=section_order,
        section_visibility=dict(ALL_VISIBLE),
        spacing=spacing,
        skills_display=skills_display,
        projects_display=projects_display,
        experience_display=experience_display,
    )


_PRESETS: tuple[ResumeLayout, ...] = (
    _preset(
        "professional",
        "Professional",
        "Clean two-column layout perfect for corporate roles",
        LayoutStructure.TWO_COLUMN,
        HeaderStyle.FULL_WIDTH,
        ["socials", "bio", "experience", "education", "skills", "projects", "certifications", "achievements", "languages"],
        Spacing.NORMAL,
        SkillsDisplay.BARS,
        ProjectsDisplay.CARDS,
        ExperienceDisplay.TIMELINE,
    ),
    _preset(
        "creative",
        "Creative",
        "Modern single-column layout for designers and creatives",
        LayoutStructure.SINGLE_COLUMN,
        HeaderStyle.CENTERED,
        ["socials", "bio", "projects", "skills", "experience", "education", "achievements", "certifications", "languages"],
        Spacing.SPACIOUS,
        SkillsDisplay.GRID,
        ProjectsDisplay.CARDS,
        ExperienceDisplay.CARDS,
    ),
    _preset(
        "developer",
        "Developer",
        "Tech-focused layout highlighting projects and skills",
        LayoutStructure.SIDEBAR_LEFT,
        HeaderStyle.SPLIT,
        ["socials", "bio", "skills", "projects", "experience", "education", "certifications", "achievements", "languages"],
        Spacing.COMPACT,
        SkillsDisplay.TAGS,
        ProjectsDisplay.LIST,
        ExperienceDisplay.LIST,
    ),
    _preset(
        "minimal",
        "Minimal",
        "Clean and simple layout with all essential information",
        LayoutStructure.SINGLE_COLUMN,
        HeaderStyle.MINIMAL,
        ["socials", "bio", "experience", "education", "skills", "projects", "certifications", "achievements", "languages"],
        Spacing.NORMAL,
        SkillsDisplay.LIST,
        ProjectsDisplay.LIST,
        ExperienceDisplay.LIST,
    ),
    _preset(
        "executive",
        "Executive",
        "Sophisticated layout for senior professionals",
        LayoutStructure.SIDEBAR_RIGHT,
        HeaderStyle.FULL_WIDTH,
        ["socials", "bio", "experience", "achievements", "education", "skills", "projects", "certifications", "languages"],
        Spacing.SPACIOUS,
        SkillsDisplay.BARS,
        ProjectsDisplay.CARDS,
        ExperienceDisplay.TIMELINE,
    ),
    _preset(
        "modern",
        "Modern",
        "Contemporary three-column layout with balanced sections",
        LayoutStructure.THREE_COLUMN,
        HeaderStyle.CENTERED,
        ["socials", "bio", "skills", "experience", "projects", "education", "certifications", "achievements", "languages"],
        Spacing.NORMAL,
        SkillsDisplay.GRID,
        ProjectsDisplay.CARDS,
        ExperienceDisplay.CARDS,
    ),
)

_DEFAULT = _preset(
    "default",
    "Professional",
    "Clean two-column layout with sidebar",
    LayoutStructure.TWO_COLUMN,
    HeaderStyle.FULL_WIDTH,
    ["socials", "bio", "experience", "education", "skills", "projects", "certifications", "achievements", "languages"],
    Spacing.NORMAL,
    SkillsDisplay.BARS,
    ProjectsDisplay.CARDS,
    ExperienceDisplay.TIMELINE,
)


def list_presets() -> list[ResumeLayout]:
    # Callers get copies; the built-in presets are never handed out for mutation.
    return [preset.model_copy(deep=True) for preset in _PRESETS]


def get_preset(preset_id: str) -> ResumeLayout | None:
    for preset in _PRESETS:
        if preset.id == preset_id:
            return preset.model_copy(deep=True)
    return None


def default_layout() -> ResumeLayout:
    return _DEFAULT.model_copy(deep=True)
