from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SectionKey(str, Enum):
    BIO = "bio"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    PROJECTS = "projects"
    CERTIFICATIONS = "certifications"
    ACHIEVEMENTS = "achievements"
    LANGUAGES = "languages"
    SOCIALS = "socials"


class LayoutStructure(str, Enum):
    SINGLE_COLUMN = "single-column"
    TWO_COLUMN = "two-column"
    THREE_COLUMN = "three-column"
    SIDEBAR_LEFT = "sidebar-left"
    SIDEBAR_RIGHT = "sidebar-right"


class HeaderStyle(str, Enum):
    FULL_WIDTH = "full-width"
    CENTERED = "centered"
    MINIMAL = "minimal"
    SPLIT = "split"


class Spacing(str, Enum):
    COMPACT = "compact"
    NORMAL = "normal"
    SPACIOUS = "spacious"


class SkillsDisplay(str, Enum):
    BARS = "bars"
    TAGS = "tags"
    LIST = "list"
    GRID = "grid"


class ProjectsDisplay(str, Enum):
    CARDS = "cards"
    LIST = "list"
    TIMELINE = "timeline"


class ExperienceDisplay(str, Enum):
    TIMELINE = "timeline"
    CARDS = "cards"
    LIST = "list"


class ResumeLayout(BaseModel):
    id: str = "custom"
    name: str = "Custom"
    description: str = ""
    structure: LayoutStructure = LayoutStructure.TWO_COLUMN
    header_style: HeaderStyle = HeaderStyle.FULL_WIDTH
    section_order: list[str] = Field(default_factory=list)
    section_visibility: dict[str, bool] = Field(default_factory=dict)
    spacing: Spacing = Spacing.NORMAL
    skills_display: SkillsDisplay = SkillsDisplay.BARS
    projects_display: ProjectsDisplay = ProjectsDisplay.CARDS
    experience_display: ExperienceDisplay = ExperienceDisplay.TIMELINE


class ColumnRole(str, Enum):
    MAIN = "main"
    SIDEBAR = "sidebar"
    COLUMN = "column"


class ContactBlock(BaseModel):
    email: str | None = None
    phone: str | None = None
    location: str | None = None


class AvailabilityBadge(BaseModel):
    text: str
    tone: str


class ThemePalette(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str
    middle: str
    end: str


class RenderedHeader(BaseModel):
    style: HeaderStyle
    alignment: str = "left"
    name: str
    title: str
    initials: str
    profile_picture: str | None = None
    availability: AvailabilityBadge | None = None
    gradient: ThemePalette | None = None
    contact_block: ContactBlock | None = None
    contact_line: list[str] = Field(default_factory=list)


class RenderedSection(BaseModel):
    key: SectionKey
    title: str
    display: str | None = None
    items: list[dict[str, Any]] = Field(default_factory=list)


class RenderedColumn(BaseModel):
    role: ColumnRole
    span: int = 1
    sections: list[RenderedSection] = Field(default_factory=list)


class RenderedResume(BaseModel):
    username: str
    structure: LayoutStructure
    spacing: Spacing
    section_gap: int
    header: RenderedHeader
    columns: list[RenderedColumn]

    def section_keys(self) -> list[str]:
        return [section.key.value for column in self.columns for section in column.sections]


class LayoutPreviewRequest(BaseModel):
    profile: dict[str, Any]
    layout: ResumeLayout | None = None
    preset_id: str | None = Field(default=None, description="Render with a built-in preset instead of 'layout'")


class ThemeEntry(BaseModel):
    id: str
    palette: ThemePalette
