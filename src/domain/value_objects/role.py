from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    FARMER = "farmer"
    REGIONAL_ADMIN = "regional_admin"
    M_ADMIN = "m_admin"
    SUPER_ADMIN = "super_admin"

    @property
    def is_admin(self) -> bool:
        return self is not Role.FARMER

    @property
    def is_region_scoped(self) -> bool:
        return self in {Role.REGIONAL_ADMIN, Role.M_ADMIN}

    def can_review_registrations(self) -> bool:
        return self in {Role.REGIONAL_ADMIN, Role.SUPER_ADMIN}

    def can_identify(self) -> bool:
        return self in {Role.M_ADMIN, Role.SUPER_ADMIN}


REVIEWER_ROLES = frozenset(role for role in Role if role.can_review_registrations())
IDENTIFIER_ROLES = frozenset(role for role in Role if role.can_identify())
