from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from src.domain.value_objects.cattle_status import LifecycleStatus, VerificationStatus
from src.infrastructure.db.base import Base, JSONType, enum_type


class CattleORM(Base):
    __tablename__ = "cattle"
    __table_args__ = (
        Index("ix_cattle_state_verification", "state", "verification_status"),
        Index("ix_cattle_owner_created", "owner_id", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    cattle_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    tag_no: Mapped[str | None] = mapped_column(String(64), nullable=True)
    temporary_id: Mapped[str | None] = mapped_column(String(40), nullable=True)
    owner_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("accounts.id"), nullable=False
    )
    breed: Mapped[str] = mapped_column(String(128), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    color: Mapped[str | None] = mapped_column(String(64), nullable=True)
    type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    medical_history: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # {"muzzle": [{filename, path, size, mimetype, uploaded_at}, ...], ...}
    images: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)

    # Location snapshot taken from the owner at registration
    state: Mapped[str] = mapped_column(String(128), nullable=False)
    district: Mapped[str] = mapped_column(String(128), nullable=False)
    pin_code: Mapped[str | None] = mapped_column(String(16), nullable=True)

    status: Mapped[LifecycleStatus] = mapped_column(enum_type(LifecycleStatus), nullable=False)
    verification_status: Mapped[VerificationStatus] = mapped_column(
        enum_type(VerificationStatus), nullable=False
    )
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    turnaround_deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    overdue_notified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    regional_reviewed_by: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    regional_reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    forwarded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    regional_denial_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    verified_by: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    archived_by: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)

    transfer_history: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    identification_history: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
