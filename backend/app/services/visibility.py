"""Visibility filter: which records each tier may see.

Tags are ordered Public < Employer < Private; a tier sees every tag at or
below its own rank. An untagged record follows the caller's AbsentDefault.
Unrecognised tags (including other casings) are visible in no tier.
"""

from collections.abc import Iterable

from app.models.passport import AbsentDefault, Tier, VisibilityTag
from app.schemas.records import Record
from app.services.field_normalizer import visibility_tag

_TAGS_BY_VALUE = {tag.value: tag for tag in VisibilityTag}


def is_visible(
    tag: str | None,
    tier: Tier | str,
    default_when_absent: AbsentDefault | str = AbsentDefault.all,
) -> bool:
    tier = Tier(tier)
    if not tag:
        if AbsentDefault(default_when_absent) is AbsentDefault.all:
            return True
        return tier is Tier.public

    known = _TAGS_BY_VALUE.get(tag)
    if known is None:
        return False
    return known.rank <= tier.rank


def filter_records(
    records: Iterable[Record],
    tier: Tier | str,
    default_when_absent: AbsentDefault | str,
) -> list[Record]:
    return [
        r for r in records
        if is_visible(visibility_tag(r.fields), tier, default_when_absent)
    ]
