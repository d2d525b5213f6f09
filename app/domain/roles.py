from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    ADMIN_PRODUCER = "ADMIN_PRODUCER"
    PRODUCER = "PRODUCER"
    COORDINATOR = "COORDINATOR"
    ACCOUNTANT = "ACCOUNTANT"


class UserType(str, enum.Enum):
    INTERNAL_STAFF = "INTERNAL_STAFF"
    EXTERNAL_CONTRACTOR = "EXTERNAL_CONTRACTOR"


# Role sets used by the access-control dependencies. Flat: no role implies another.
ADMIN_ROLES = frozenset({UserRole.ADMIN_PRODUCER})
PRODUCTION_ROLES = frozenset(
    {
        UserRole.ADMIN_PRODUCER,
        UserRole.PRODUCER,
        UserRole.COORDINATOR,
        UserRole.ACCOUNTANT,
    }
)
PROJECT_CREATOR_ROLES = frozenset({UserRole.ADMIN_PRODUCER, UserRole.PRODUCER})
PROJECT_OVERSIGHT_ROLES = frozenset({UserRole.ADMIN_PRODUCER, UserRole.ACCOUNTANT})
