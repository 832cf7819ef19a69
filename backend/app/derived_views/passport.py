"""Derived view builders for the passport page.

All builders:
- Resolve aliased field names to one display value
- Substitute the documented placeholder when a field is missing
- Never raise on malformed records
"""

from typing import Any

from app.config import settings
from app.models.passport import Tier
from app.schemas.passport import (
    AboutSection,
    ExperienceItem,
    PassportView,
    ProjectCard,
    SkillCard,
    TrainingItem,
)
from app.schemas.records import Record
from app.services import field_normalizer as fn

ABOUT_PUBLIC_PLACEHOLDER = "Add your public profile in Airtable → People → About (Public)"
ABOUT_EMPLOYER_PLACEHOLDER = "Add employer information in Airtable → People → About (Employer)"
ABOUT_PRIVATE_PLACEHOLDER = "Add private notes in Airtable → People → About (Private)"

NO_SKILLS_NOTICE = "No skills to display for this view."


def about_section(person_fields: dict[str, Any], tier: Tier) -> AboutSection:
    """Public text always; employer text from the employer tier up; private text only in private."""
    about = AboutSection(
        public=fn.resolve_aliased_text(
            person_fields, fn.ABOUT_PUBLIC_ALIASES, ABOUT_PUBLIC_PLACEHOLDER
        )
    )
    if tier.rank >= Tier.employer.rank:
        about.employer = fn.resolve_aliased_text(
            person_fields, fn.ABOUT_EMPLOYER_ALIASES, ABOUT_EMPLOYER_PLACEHOLDER
        )
    if tier is Tier.private:
        about.private = fn.resolve_aliased_text(
            person_fields, fn.ABOUT_PRIVATE_ALIASES, ABOUT_PRIVATE_PLACEHOLDER
        )
    return about


def skill_card(skill_name: str, fields: dict[str, Any]) -> SkillCard:
    return SkillCard(
        name=skill_name,
        proficiency=fn.resolve_aliased_text(fields, ("Proficiency",), "Not specified"),
        status=fn.resolve_aliased_text(fields, ("Status",), "Current"),
        visibility=fn.visibility_tag(fields) or "Public",
    )


def _date_span(start: str | None, end: str | None) -> str | None:
    if start and end:
        return f"{start} – {end}"
    if start:
        return f"{start} – Present"
    return None


def experience_item(fields: dict[str, Any]) -> ExperienceItem:
    start = fn.optional_text(fields, fn.EXPERIENCE_START_ALIASES)
    end = fn.optional_text(fields, fn.EXPERIENCE_END_ALIASES)
    dates = (
        fn.optional_text(fields, fn.EXPERIENCE_DATES_ALIASES)
        or _date_span(start, end)
        or "Dates"
    )
    return ExperienceItem(
        role=fn.resolve_aliased_text(fields, fn.EXPERIENCE_ROLE_ALIASES, "Role"),
        company=fn.resolve_aliased_text(fields, fn.EXPERIENCE_COMPANY_ALIASES, "Company"),
        dates=dates,
        start_date=start,
        end_date=end,
        description=fn.resolve_aliased_text(fields, fn.EXPERIENCE_DESCRIPTION_ALIASES),
    )


def project_card(fields: dict[str, Any]) -> ProjectCard:
    return ProjectCard(
        name=fn.resolve_aliased_text(fields, fn.PROJECT_NAME_ALIASES, "Project"),
        description=fn.resolve_aliased_text(fields, fn.PROJECT_DESCRIPTION_ALIASES),
    )


def training_item(fields: dict[str, Any]) -> TrainingItem:
    return TrainingItem(
        name=fn.resolve_aliased_text(fields, fn.TRAINING_NAME_ALIASES, "Training"),
        provider=fn.optional_text(fields, fn.TRAINING_PROVIDER_ALIASES),
        completion_date=fn.optional_text(fields, fn.TRAINING_DATE_ALIASES),
    )


class PassportViewBuilder:
    """Renderer callbacks for one view load, collected into a PassportView."""

    def __init__(self, tier: Tier, person_name: str | None = None):
        self.view = PassportView(
            tier=tier, person_name=person_name or settings.person_name
        )

    @property
    def tier(self) -> Tier:
        return self.view.tier

    def render_about(self, person_fields: dict[str, Any] | None) -> None:
        # No person record: leave the section empty
        if person_fields is None:
            return
        self.view.about = about_section(person_fields, self.tier)

    def render_skills(self, skills: list[tuple[str, Record]]) -> None:
        self.view.skills = [skill_card(name, r.fields) for name, r in skills]
        if not skills:
            self.view.notices["skills"] = NO_SKILLS_NOTICE

    def render_experiences(self, records: list[Record]) -> None:
        self.view.experiences = [experience_item(r.fields) for r in records]
        if not records:
            self.view.notices["experiences"] = (
                f"Add experiences in Airtable → {settings.experiences_table} table"
            )

    def render_projects(self, records: list[Record]) -> None:
        self.view.projects = [project_card(r.fields) for r in records]
        if not records:
            self.view.notices["projects"] = (
                f"Add projects in Airtable → {settings.achievements_table} table"
            )

    def render_training(self, records: list[Record]) -> None:
        self.view.training = [training_item(r.fields) for r in records]
        if not records:
            self.view.notices["training"] = (
                f"Add training in Airtable → {settings.training_table} table"
            )
