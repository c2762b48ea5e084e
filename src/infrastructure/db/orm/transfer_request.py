from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, Text, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from src.domain.models.transfer_request import TransferStatus, TransferType
from src.infrastructure.db.base import Base, enum_type


class TransferRequestORM(Base):
    __tablename__ = "transfer_requests"
    __table_args__ = (
        # At most one pending request per cattle
        Index(
            "ux_transfer_requests_pending_cattle",
            "cattle_ref",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
        Index("ix_transfer_requests_to_status", "to_owner_id", "status"),
        Index("ix_transfer_requests_from_status", "from_owner_id", "status"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    cattle_ref: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("cattle.id", ondelete="CASCADE"), nullable=False
    )
    from_owner_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("accounts.id"), nullable=False
    )
    to_owner_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("accounts.id"), nullable=False
    )
    transfer_type: Mapped[TransferType] = mapped_column(enum_type(TransferType), nullable=False)
    status: Mapped[TransferStatus] = mapped_column(enum_type(TransferStatus), nullable=False)
    price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    transfer_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    response_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_by: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
