from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.domain.models.identification_request import IdentificationStatus, RequestPriority
from src.infrastructure.db.base import Base, JSONType, enum_type


class IdentificationRequestORM(Base):
    __tablename__ = "identification_requests"
    __table_args__ = (
        Index("ix_identification_requests_user_created", "user_id", "created_at"),
        Index("ix_identification_requests_region_status", "region", "status"),
        Index("ix_identification_requests_status_expires", "status", "expires_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    request_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("accounts.id"), nullable=False
    )
    region: Mapped[str] = mapped_column(String(128), nullable=False)
    image: Mapped[dict] = mapped_column(JSONType, nullable=False)
    status: Mapped[IdentificationStatus] = mapped_column(
        enum_type(IdentificationStatus), nullable=False
    )
    priority: Mapped[RequestPriority] = mapped_column(enum_type(RequestPriority), nullable=False)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    device_info: Mapped[str | None] = mapped_column(String(512), nullable=True)

    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    processed_by: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    time_taken_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)

    result_found: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    result_cattle_ref: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("cattle.id", ondelete="RESTRICT"), nullable=True
    )
    result_cattle_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    result_confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    result_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    result_identified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    cancelled_by: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
