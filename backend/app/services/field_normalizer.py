"""Field normalizer: one logical value out of inconsistently shaped fields.

Airtable fields in this base have accumulated several historical names, and
link fields come back either as a bare string or as a list of strings.
Nothing here raises on missing or malformed fields.
"""

from typing import Any

from app.models.passport import Absent, Linked, PersonReference, Scalar

PERSON_ALIASES = ("Person", "People")
FULL_NAME_ALIASES = ("Full Name", "Name")
VISIBILITY_FIELD = "Visibility"

ABOUT_PUBLIC_ALIASES = ("About (Public)", "About Public", "Public Bio")
ABOUT_EMPLOYER_ALIASES = ("About (Employer)", "About Employer", "Employer Bio")
ABOUT_PRIVATE_ALIASES = ("About (Private)", "About Private", "Private Notes")

EXPERIENCE_ROLE_ALIASES = ("Role", "Title", "Position")
EXPERIENCE_COMPANY_ALIASES = ("Organization", "Company", "Organisation")
EXPERIENCE_DATES_ALIASES = ("Date Range", "Dates")
EXPERIENCE_START_ALIASES = ("Start Date", "Start")
EXPERIENCE_END_ALIASES = ("End Date", "End")
EXPERIENCE_DESCRIPTION_ALIASES = ("Description", "Summary", "Notes")

PROJECT_NAME_ALIASES = ("Name", "Title", "Achievement")
PROJECT_DESCRIPTION_ALIASES = ("Description", "Notes", "Details")

TRAINING_NAME_ALIASES = ("Course/Training Name", "Course Name", "Name")
TRAINING_PROVIDER_ALIASES = ("Provider", "Organization")
TRAINING_DATE_ALIASES = ("Completion Date", "Date Completed", "Date")


def classify_person_reference(fields: dict[str, Any]) -> PersonReference:
    """Convert the raw person-reference field into a PersonReference.

    `Person` takes precedence over `People`; the first alias present wins
    even if its value turns out to be unusable.
    """
    for alias in PERSON_ALIASES:
        if alias not in fields:
            continue
        raw = fields[alias]
        if isinstance(raw, str):
            return Scalar(raw)
        if isinstance(raw, list) and raw and all(isinstance(v, str) for v in raw):
            return Linked(tuple(raw))
        return Absent()
    return Absent()


def resolve_person_reference(fields: dict[str, Any]) -> str | None:
    """The person name a child record points at, or None."""
    ref = classify_person_reference(fields)
    if isinstance(ref, Scalar):
        return ref.value
    if isinstance(ref, Linked):
        return ref.values[0]
    return None


def matches_person(fields: dict[str, Any], person_name: str) -> bool:
    """Exact, case-sensitive comparison. No trimming."""
    return resolve_person_reference(fields) == person_name


def _as_text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        for item in value:
            text = _as_text(item)
            if text:
                return text
    return ""


def resolve_aliased_text(
    fields: dict[str, Any],
    aliases: tuple[str, ...] | list[str],
    placeholder: str = "",
) -> str:
    """First non-empty value across aliases in priority order, else placeholder."""
    for alias in aliases:
        text = _as_text(fields.get(alias))
        if text:
            return text
    return placeholder


def optional_text(fields: dict[str, Any], aliases: tuple[str, ...]) -> str | None:
    return resolve_aliased_text(fields, aliases) or None


def visibility_tag(fields: dict[str, Any]) -> str | None:
    """Raw Visibility value; empty means absent."""
    return resolve_aliased_text(fields, (VISIBILITY_FIELD,)) or None
