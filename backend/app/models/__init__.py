# Domain types shared by services, derived views and routers.
from app.models.passport import (  # noqa: F401
    Absent,
    AbsentDefault,
    Linked,
    PersonReference,
    Scalar,
    Tier,
    VisibilityTag,
)
