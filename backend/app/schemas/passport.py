from pydantic import BaseModel, Field

from app.models.passport import Tier


class AboutSection(BaseModel):
    public: str
    employer: str | None = None
    private: str | None = None


class SkillCard(BaseModel):
    name: str
    proficiency: str
    status: str
    visibility: str


class ExperienceItem(BaseModel):
    role: str
    company: str
    dates: str
    start_date: str | None = None
    end_date: str | None = None
    description: str = ""


class ProjectCard(BaseModel):
    name: str
    description: str = ""


class TrainingItem(BaseModel):
    name: str
    provider: str | None = None
    completion_date: str | None = None


class PassportView(BaseModel):
    tier: Tier
    person_name: str
    about: AboutSection | None = None
    skills: list[SkillCard] = Field(default_factory=list)
    experiences: list[ExperienceItem] = Field(default_factory=list)
    projects: list[ProjectCard] = Field(default_factory=list)
    training: list[TrainingItem] = Field(default_factory=list)
    notices: dict[str, str] = Field(default_factory=dict)


class SessionRead(BaseModel):
    session_id: str
    view: PassportView


class SelectTierRequest(BaseModel):
    tier: Tier
    access_code: str | None = None
