"""Resume layout engine.

Turns a ``UserProfile`` plus a ``ResumeLayout`` into a ``RenderedResume``:
a header block and the visible, non-empty sections in ``section_order``,
distributed over the columns of the chosen structure. Rendering is a pure
function of its inputs; neither the profile nor the layout is modified, and
missing data only ever suppresses a section.
"""

import logging
from enum import Enum
from typing import Any, Callable, Sequence, TypeVar

from api.layout.schemas import (
    AvailabilityBadge,
    ColumnRole,
    ContactBlock,
    ExperienceDisplay,
    HeaderStyle,
    LayoutStructure,
    ProjectsDisplay,
    RenderedColumn,
    RenderedHeader,
    RenderedResume,
    RenderedSection,
    ResumeLayout,
    SectionKey,
    SkillsDisplay,
    Spacing,
    ThemePalette,
)
from api.profile.schemas import Availability, SkillCategory, SkillLevel, Theme, UserProfile
from layout_presets import default_layout

logger = logging.getLogger(__name__)

T = TypeVar("T")


SKILL_LEVEL_WIDTHS: dict[SkillLevel, str] = {
    SkillLevel.BEGINNER: "25%",
    SkillLevel.INTERMEDIATE: "50%",
    SkillLevel.ADVANCED: "75%",
    SkillLevel.EXPERT: "100%",
}

SKILL_LEVEL_COLORS: dict[SkillLevel, str] = {
    SkillLevel.BEGINNER: "#f87171",
    SkillLevel.INTERMEDIATE: "#facc15",
    SkillLevel.ADVANCED: "#60a5fa",
    SkillLevel.EXPERT: "#4ade80",
}

SKILL_LEVEL_TONES: dict[SkillLevel, str] = {
    SkillLevel.BEGINNER: "red",
    SkillLevel.INTERMEDIATE: "yellow",
    SkillLevel.ADVANCED: "blue",
    SkillLevel.EXPERT: "green",
}

SKILL_CATEGORY_LABELS: dict[SkillCategory, str] = {
    SkillCategory.TECHNICAL: "Technical Skills",
    SkillCategory.SOFT: "Soft Skills",
    SkillCategory.TOOL: "Tools & Technologies",
    SkillCategory.LANGUAGE: "Programming Languages",
}

THEME_PALETTES: dict[Theme, ThemePalette] = {
    Theme.BLUE: ThemePalette(start="#60a5fa", middle="#3b82f6", end="#2563eb"),
    Theme.GREEN: ThemePalette(start="#4ade80", middle="#22c55e", end="#16a34a"),
    Theme.PURPLE: ThemePalette(start="#c084fc", middle="#a855f7", end="#9333ea"),
    Theme.ORANGE: ThemePalette(start="#fb923c", middle="#f472b6", end="#a855f7"),
    Theme.PINK: ThemePalette(start="#f472b6", middle="#fb7185", end="#ef4444"),
    Theme.TEAL: ThemePalette(start="#2dd4bf", middle="#06b6d4", end="#3b82f6"),
    Theme.INDIGO: ThemePalette(start="#818cf8", middle="#a855f7", end="#ec4899"),
    Theme.EMERALD: ThemePalette(start="#34d399", middle="#22c55e", end="#14b8a6"),
    Theme.RED: ThemePalette(start="#f87171", middle="#ec4899", end="#f43f5e"),
    Theme.AMBER: ThemePalette(start="#fbbf24", middle="#f97316", end="#ef4444"),
    Theme.VIOLET: ThemePalette(start="#a78bfa", middle="#a855f7", end="#6366f1"),
    Theme.CYAN: ThemePalette(start="#22d3ee", middle="#3b82f6", end="#6366f1"),
}

AVAILABILITY_BADGES: dict[Availability, AvailabilityBadge] = {
    Availability.AVAILABLE: AvailabilityBadge(text="Available for Work", tone="green"),
    Availability.NOT_AVAILABLE: AvailabilityBadge(text="Not Available", tone="red"),
    Availability.OPEN_TO_OFFERS: AvailabilityBadge(text="Open to Offers", tone="blue"),
}

HEADER_ALIGNMENT: dict[HeaderStyle, str] = {
    HeaderStyle.FULL_WIDTH: "left",
    HeaderStyle.CENTERED: "center",
    HeaderStyle.MINIMAL: "center",
    HeaderStyle.SPLIT: "split",
}

SPACING_GAPS: dict[Spacing, int] = {
    Spacing.COMPACT: 3,
    Spacing.NORMAL: 6,
    Spacing.SPACIOUS: 8,
}

SECTION_TITLES: dict[SectionKey, str] = {
    SectionKey.BIO: "About",
    SectionKey.EXPERIENCE: "Experience",
    SectionKey.EDUCATION: "Education",
    SectionKey.SKILLS: "Skills & Expertise",
    SectionKey.PROJECTS: "Projects",
    SectionKey.CERTIFICATIONS: "Certifications",
    SectionKey.ACHIEVEMENTS: "Achievements",
    SectionKey.LANGUAGES: "Languages",
    SectionKey.SOCIALS: "Connect",
}


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


# Column roles/spans and the split function for each structure. Splits use
# integer arithmetic so that e.g. 30% of 10 sections is exactly 3.
COLUMN_ROLES: dict[LayoutStructure, list[tuple[ColumnRole, int]]] = {
    LayoutStructure.SINGLE_COLUMN: [(ColumnRole.MAIN, 1)],
    LayoutStructure.TWO_COLUMN: [(ColumnRole.COLUMN, 1), (ColumnRole.COLUMN, 1)],
    LayoutStructure.THREE_COLUMN: [(ColumnRole.COLUMN, 1), (ColumnRole.COLUMN, 1), (ColumnRole.COLUMN, 1)],
    LayoutStructure.SIDEBAR_LEFT: [(ColumnRole.SIDEBAR, 1), (ColumnRole.MAIN, 2)],
    LayoutStructure.SIDEBAR_RIGHT: [(ColumnRole.MAIN, 2), (ColumnRole.SIDEBAR, 1)],
}

_SPLITTERS: dict[LayoutStructure, Callable[[Sequence[Any]], list[list[Any]]]] = {
    LayoutStructure.SINGLE_COLUMN: lambda items: [list(items)],
    LayoutStructure.TWO_COLUMN: lambda items: _split_at(items, _ceil_div(len(items), 2)),
    LayoutStructure.THREE_COLUMN: lambda items: _split_at(
        items, _ceil_div(len(items), 3), 2 * _ceil_div(len(items), 3)
    ),
    LayoutStructure.SIDEBAR_LEFT: lambda items: _split_at(items, _ceil_div(len(items) * 3, 10)),
    LayoutStructure.SIDEBAR_RIGHT: lambda items: _split_at(items, _ceil_div(len(items) * 7, 10)),
}


def _split_at(items: Sequence[T], *cuts: int) -> list[list[T]]:
    bounds = [0, *[min(cut, len(items)) for cut in cuts], len(items)]
    return [list(items[start:end]) for start, end in zip(bounds, bounds[1:])]


def distribute_sections(sections: Sequence[T], structure: LayoutStructure) -> list[list[T]]:
    """Split an ordered section list into the columns of ``structure``.

    The columns, read left to right, always concatenate back to ``sections``.
    """
    return _SPLITTERS[LayoutStructure(structure)](sections)


def split_description(text: str | None) -> list[str]:
    if not text:
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]


def initials_for(name: str | None) -> str:
    parts = [part for part in (name or "").split() if part]
    return "".join(part[0] for part in parts).upper() or "U"


def render_header(profile: UserProfile, layout: ResumeLayout) -> RenderedHeader:
    style = HeaderStyle(layout.header_style)
    email = profile.email if profile.show_email and profile.email else None
    contact = ContactBlock(
        email=email,
        phone=(profile.phone or "").strip() or None,
        location=(profile.location or "").strip() or None,
    )
    availability = AVAILABILITY_BADGES[profile.availability] if profile.availability else None

    header = RenderedHeader(
        style=style,
        alignment=HEADER_ALIGNMENT[style],
        name=profile.name,
        title=profile.title,
        initials=initials_for(profile.name),
        profile_picture=profile.profile_picture or None,
        availability=availability,
    )
    if style is HeaderStyle.MINIMAL:
        header.contact_line = [value for value in (contact.email, contact.phone, contact.location) if value]
    else:
        header.gradient = THEME_PALETTES.get(profile.theme, THEME_PALETTES[Theme.ORANGE])
        header.contact_block = contact
    return header


def _group_skills_by_category(profile: UserProfile) -> list[tuple[SkillCategory, list]]:
    groups: dict[SkillCategory, list] = {}
    for skill in profile.skills:
        groups.setdefault(skill.category, []).append(skill)
    return list(groups.items())


def _skills_as_bars(profile: UserProfile) -> list[dict[str, Any]]:
    return [
        {
            "category": category.value,
            "label": SKILL_CATEGORY_LABELS[category],
            "skills": [
                {
                    "name": skill.name,
                    "level": skill.level.value,
                    "width": SKILL_LEVEL_WIDTHS[skill.level],
                    "color": SKILL_LEVEL_COLORS[skill.level],
                }
                for skill in skills
            ],
        }
        for category, skills in _group_skills_by_category(profile)
    ]


def _skills_as_tags(profile: UserProfile) -> list[dict[str, Any]]:
    return [
        {"name": skill.name, "level": skill.level.value, "tone": SKILL_LEVEL_TONES[skill.level]}
        for skill in profile.skills
    ]


def _skills_as_list(profile: UserProfile) -> list[dict[str, Any]]:
    return [
        {
            "category": category.value,
            "label": SKILL_CATEGORY_LABELS[category],
            "text": ", ".join(skill.name for skill in skills),
        }
        for category, skills in _group_skills_by_category(profile)
    ]


def _skills_as_grid(profile: UserProfile) -> list[dict[str, Any]]:
    return [{"name": skill.name, "level": skill.level.value} for skill in profile.skills]


SKILL_RENDERERS: dict[SkillsDisplay, Callable[[UserProfile], list[dict[str, Any]]]] = {
    SkillsDisplay.BARS: _skills_as_bars,
    SkillsDisplay.TAGS: _skills_as_tags,
    SkillsDisplay.LIST: _skills_as_list,
    SkillsDisplay.GRID: _skills_as_grid,
}


def _project_item(project, display: ProjectsDisplay) -> dict[str, Any]:
    item = project.model_dump(mode="json")
    if display is ProjectsDisplay.LIST:
        item["tech_line"] = ", ".join(project.technologies) if project.technologies else ""
    else:
        item["tags"] = list(project.technologies)
    return item


PROJECT_DISPLAYS: frozenset[ProjectsDisplay] = frozenset(ProjectsDisplay)


def _experience_item(entry, display: ExperienceDisplay) -> dict[str, Any]:
    item = entry.model_dump(mode="json", exclude={"desc"})
    item["type_label"] = entry.type.value.replace("-", " ") if entry.type else None
    item["bullets"] = split_description(entry.desc)
    if display is ExperienceDisplay.LIST:
        # List style shows role and company only, with the description as one paragraph.
        item["summary"] = " ".join(item["bullets"])
    return item


EXPERIENCE_DISPLAYS: frozenset[ExperienceDisplay] = frozenset(ExperienceDisplay)


def _render_bio(profile: UserProfile, layout: ResumeLayout) -> RenderedSection | None:
    bio = (profile.bio or "").strip()
    if not bio:
        return None
    return RenderedSection(key=SectionKey.BIO, title=SECTION_TITLES[SectionKey.BIO], items=[{"text": bio}])


def _render_socials(profile: UserProfile, layout: ResumeLayout) -> RenderedSection | None:
    links = [
        {"platform": platform, "url": url.strip()}
        for platform, url in profile.socials.model_dump().items()
        if url and url.strip()
    ]
    if not links:
        return None
    return RenderedSection(key=SectionKey.SOCIALS, title=SECTION_TITLES[SectionKey.SOCIALS], items=links)


def _render_skills(profile: UserProfile, layout: ResumeLayout) -> RenderedSection | None:
    if not profile.skills:
        return None
    display = SkillsDisplay(layout.skills_display)
    return RenderedSection(
        key=SectionKey.SKILLS,
        title=SECTION_TITLES[SectionKey.SKILLS],
        display=display.value,
        items=SKILL_RENDERERS[display](profile),
    )


def _render_projects(profile: UserProfile, layout: ResumeLayout) -> RenderedSection | None:
    if not profile.projects:
        return None
    display = ProjectsDisplay(layout.projects_display)
    return RenderedSection(
        key=SectionKey.PROJECTS,
        title=SECTION_TITLES[SectionKey.PROJECTS],
        display=display.value,
        items=[_project_item(project, display) for project in profile.projects],
    )


def _render_experience(profile: UserProfile, layout: ResumeLayout) -> RenderedSection | None:
    if not profile.experience:
        return None
    display = ExperienceDisplay(layout.experience_display)
    return RenderedSection(
        key=SectionKey.EXPERIENCE,
        title=SECTION_TITLES[SectionKey.EXPERIENCE],
        display=display.value,
        items=[_experience_item(entry, display) for entry in profile.experience],
    )


def _plain_section(key: SectionKey, attribute: str) -> Callable[[UserProfile, ResumeLayout], RenderedSection | None]:
    def render(profile: UserProfile, layout: ResumeLayout) -> RenderedSection | None:
        entries = getattr(profile, attribute) or []
        if not entries:
            return None
        return RenderedSection(
            key=key,
            title=SECTION_TITLES[key],
            items=[entry.model_dump(mode="json") for entry in entries],
        )

    return render


SECTION_RENDERERS: dict[SectionKey, Callable[[UserProfile, ResumeLayout], RenderedSection | None]] = {
    SectionKey.BIO: _render_bio,
    SectionKey.SOCIALS: _render_socials,
    SectionKey.SKILLS: _render_skills,
    SectionKey.PROJECTS: _render_projects,
    SectionKey.EXPERIENCE: _render_experience,
    SectionKey.EDUCATION: _plain_section(SectionKey.EDUCATION, "education"),
    SectionKey.CERTIFICATIONS: _plain_section(SectionKey.CERTIFICATIONS, "certifications"),
    SectionKey.ACHIEVEMENTS: _plain_section(SectionKey.ACHIEVEMENTS, "achievements"),
    SectionKey.LANGUAGES: _plain_section(SectionKey.LANGUAGES, "languages"),
}


def _require_exhaustive(table: dict | frozenset, enum_type: type[Enum]) -> None:
    missing = [member.value for member in enum_type if member not in table]
    if missing:
        raise RuntimeError(f"{enum_type.__name__} values without a renderer: {missing}")


for _table, _enum in (
    (SECTION_RENDERERS, SectionKey),
    (SKILL_RENDERERS, SkillsDisplay),
    (PROJECT_DISPLAYS, ProjectsDisplay),
    (EXPERIENCE_DISPLAYS, ExperienceDisplay),
    (COLUMN_ROLES, LayoutStructure),
    (_SPLITTERS, LayoutStructure),
    (HEADER_ALIGNMENT, HeaderStyle),
    (SPACING_GAPS, Spacing),
    (SKILL_LEVEL_WIDTHS, SkillLevel),
    (SKILL_LEVEL_COLORS, SkillLevel),
    (SKILL_CATEGORY_LABELS, SkillCategory),
    (THEME_PALETTES, Theme),
    (AVAILABILITY_BADGES, Availability),
):
    _require_exhaustive(_table, _enum)


def render_section(profile: UserProfile, layout: ResumeLayout, key: str) -> RenderedSection | None:
    if not layout.section_visibility.get(key):
        return None
    try:
        section_key = SectionKey(key)
    except ValueError:
        return None
    return SECTION_RENDERERS[section_key](profile, layout)


def render_sections(profile: UserProfile, layout: ResumeLayout) -> list[RenderedSection]:
    sections: list[RenderedSection] = []
    seen: set[str] = set()
    for key in layout.section_order:
        if key in seen:
            continue
        seen.add(key)
        section = render_section(profile, layout, key)
        if section is not None:
            sections.append(section)
    return sections


def render_resume(profile: UserProfile, layout: ResumeLayout | None = None) -> RenderedResume:
    resolved_layout = layout or profile.layout or default_layout()
    structure = LayoutStructure(resolved_layout.structure)
    spacing = Spacing(resolved_layout.spacing)

    sections = render_sections(profile, resolved_layout)
    columns = [
        RenderedColumn(role=role, span=span, sections=column_sections)
        for (role, span), column_sections in zip(COLUMN_ROLES[structure], distribute_sections(sections, structure))
    ]
    logger.debug(
        "Rendered resume username=%s structure=%s sections=%d",
        profile.username,
        structure.value,
        len(sections),
    )
    return RenderedResume(
        username=profile.username,
        structure=structure,
        spacing=spacing,
        section_gap=SPACING_GAPS[spacing],
        header=render_header(profile, resolved_layout),
        columns=columns,
    )
