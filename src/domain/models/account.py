from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from src.domain.value_objects.role import Role


@dataclass(slots=True)
class Account:
    """Identity-store record for a farmer or an administrator.

    For farmers ``region``/``district``/``pin_code`` are the address; for
    region-scoped admins ``region`` is the assigned state.
    """

    id: UUID
    full_name: str
    email: str
    role: Role
    region: str | None = None
    district: str | None = None
    pin_code: str | None = None
    is_active: bool = True
    is_approved: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        full_name: str,
        email: str,
        role: Role,
        *,
        region: str | None = None,
        district: str | None = None,
        pin_code: str | None = None,
        is_active: bool = True,
        is_approved: bool = True,
    ) -> Account:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            full_name=full_name,
            email=email.lower(),
            role=role,
            region=region,
            district=district,
            pin_code=pin_code,
            is_active=is_active,
            is_approved=is_approved,
            created_at=now,
            updated_at=now,
        )
