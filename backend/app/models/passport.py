"""Domain value types for the skills passport.

Records themselves live in Airtable; these types describe how they are
interpreted once fetched.
"""

import enum
from dataclasses import dataclass


class Tier(str, enum.Enum):
    public = "public"
    employer = "employer"
    private = "private"

    @property
    def rank(self) -> int:
        return _TIER_RANKS[self]


class VisibilityTag(str, enum.Enum):
    """Per-record classification, as spelled in the Visibility field."""

    public = "Public"
    employer = "Employer"
    private = "Private"

    @property
    def rank(self) -> int:
        return _TIER_RANKS[Tier(self.name)]


class AbsentDefault(str, enum.Enum):
    """How a record with no Visibility tag is treated."""

    public = "public"  # lowest tier only
    all = "all"  # every tier


_TIER_RANKS = {Tier.public: 0, Tier.employer: 1, Tier.private: 2}


@dataclass(frozen=True)
class Scalar:
    """Person reference stored as a bare string."""

    value: str


@dataclass(frozen=True)
class Linked:
    """Person reference stored as a linked-record list."""

    values: tuple[str, ...]


@dataclass(frozen=True)
class Absent:
    """No usable person reference."""


PersonReference = Scalar | Linked | Absent
