from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.layout.schemas import RenderedResume, ResumeLayout
from username_check import normalize_username, validate_username


class Theme(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    ORANGE = "orange"
    PINK = "pink"
    TEAL = "teal"
    INDIGO = "indigo"
    EMERALD = "emerald"
    RED = "red"
    AMBER = "amber"
    VIOLET = "violet"
    CYAN = "cyan"


class FontFamily(str, Enum):
    INTER = "inter"
    POPPINS = "poppins"
    DM_SANS = "dm-sans"


class Availability(str, Enum):
    AVAILABLE = "available"
    NOT_AVAILABLE = "not-available"
    OPEN_TO_OFFERS = "open-to-offers"


class SkillLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class SkillCategory(str, Enum):
    TECHNICAL = "technical"
    SOFT = "soft"
    LANGUAGE = "language"
    TOOL = "tool"


class EmploymentType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class AchievementCategory(str, Enum):
    AWARD = "award"
    RECOGNITION = "recognition"
    PUBLICATION = "publication"
    OTHER = "other"


class LanguageProficiency(str, Enum):
    NATIVE = "native"
    FLUENT = "fluent"
    CONVERSATIONAL = "conversational"
    BASIC = "basic"


class SkillWithLevel(BaseModel):
    name: str
    level: SkillLevel = SkillLevel.INTERMEDIATE
    category: SkillCategory = SkillCategory.TECHNICAL


class SocialLinks(BaseModel):
    github: str | None = None
    linkedin: str | None = None
    website: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    behance: str | None = None
    dribbble: str | None = None


class EducationEntry(BaseModel):
    institution: str = ""
    degree: str = ""
    year: str = ""
    gpa: str | None = None
    honors: str | None = None


class ExperienceEntry(BaseModel):
    role: str = ""
    company: str = ""
    duration: str = ""
    desc: str = ""
    location: str | None = None
    type: EmploymentType | None = None


class ProjectEntry(BaseModel):
    name: str = ""
    desc: str = ""
    link: str | None = None
    technologies: list[str] = Field(default_factory=list)
    featured: bool = False


class CertificationEntry(BaseModel):
    name: str = ""
    issuer: str = ""
    date: str = ""
    link: str | None = None
    expiry_date: str | None = None


class AchievementEntry(BaseModel):
    title: str = ""
    description: str = ""
    date: str = ""
    category: AchievementCategory | None = None


class LanguageEntry(BaseModel):
    name: str
    proficiency: LanguageProficiency = LanguageProficiency.CONVERSATIONAL


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str
    name: str = ""
    title: str = ""
    bio: str = ""
    email: str = ""
    show_email: bool = False
    phone: str | None = None
    location: str | None = None
    availability: Availability | None = None
    preferred_location: str | None = None
    profile_picture: str | None = None
    is_public: bool = True
    theme: Theme = Theme.ORANGE
    font_family: FontFamily = FontFamily.INTER
    layout: ResumeLayout | None = None

    skills: list[SkillWithLevel] = Field(default_factory=list)
    socials: SocialLinks = Field(default_factory=SocialLinks)
    education: list[EducationEntry] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    certifications: list[CertificationEntry] = Field(default_factory=list)
    achievements: list[AchievementEntry] = Field(default_factory=list)
    languages: list[LanguageEntry] = Field(default_factory=list)


class UserProfileSaveRequest(UserProfile):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str) -> str:
        normalized = normalize_username(value)
        if not validate_username(normalized):
            raise ValueError(
                "Username must be 3-30 characters of letters, digits and single hyphens, "
                "and must not start or end with a hyphen."
            )
        return normalized


class UserProfileSaveResponse(BaseModel):
    id: str
    username: str
    message: str


class VisibilityRequest(BaseModel):
    is_public: bool


class VisibilityResponse(BaseModel):
    is_public: bool
    message: str


class PublicProfileState(str, Enum):
    FOUND = "found"
    PRIVATE = "private"
    NOT_FOUND = "not_found"


class PublicTestimonial(BaseModel):
    id: str
    author_name: str
    author_title: str = ""
    content: str
    rating: int
    created_at: str


class PublicProfileResponse(BaseModel):
    state: PublicProfileState
    is_owner: bool = False
    profile: UserProfile | None = None
    resume: RenderedResume | None = None
    testimonials: list[PublicTestimonial] = Field(default_factory=list)
    page_view_tracked: bool = False
