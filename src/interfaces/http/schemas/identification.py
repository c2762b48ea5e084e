from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.application.interfaces.repositories.identification_requests import IdentificationStats
from src.domain.models.identification_request import (
    IdentificationRequest,
    IdentificationStatus,
    RequestPriority,
)
from src.interfaces.http.schemas.cattle import ImageFileSchema


class IdentificationCreate(BaseModel):
    image: ImageFileSchema
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    address: str | None = Field(default=None, max_length=300)
    device_info: str | None = Field(default=None, max_length=300)
    priority: RequestPriority = RequestPriority.NORMAL


class IdentificationComplete(BaseModel):
    found: bool
    cattle_ref: UUID | None = None
    cattle_code: str | None = None
    confidence: float | None = None
    message: str | None = None
    admin_notes: str | None = None


class IdentificationFail(BaseModel):
    message: str | None = None
    reason: str | None = None


class IdentificationCancel(BaseModel):
    reason: str | None = None


class GeoSchema(BaseModel):
    latitude: float
    longitude: float


class ProcessingSchema(BaseModel):
    started_at: datetime | None = None
    completed_at: datetime | None = None
    processed_by: UUID | None = None
    time_taken_seconds: int | None = None


class ResultSchema(BaseModel):
    found: bool | None = None
    cattle_ref: UUID | None = None
    cattle_code: str | None = None
    confidence: float | None = None
    message: str | None = None
    identified_at: datetime | None = None


class IdentificationResponse(BaseModel):
    id: UUID
    request_id: str
    user_id: UUID
    region: str
    image: ImageFileSchema
    status: IdentificationStatus
    priority: RequestPriority
    location: GeoSchema | None = None
    address: str | None = None
    device_info: str | None = None
    processing: ProcessingSchema
    result: ResultSchema
    admin_notes: str | None = None
    expires_at: datetime
    cancelled_by: UUID | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, request: IdentificationRequest) -> IdentificationResponse:
        location = None
        if request.latitude is not None and request.longitude is not None:
            location = GeoSchema(latitude=request.latitude, longitude=request.longitude)
        return cls(
            id=request.id,
            request_id=request.request_id,
            user_id=request.user_id,
            region=request.region,
            image=ImageFileSchema.from_domain(request.image),
            status=request.status,
            priority=request.priority,
            location=location,
            address=request.address,
            device_info=request.device_info,
            processing=ProcessingSchema(
                started_at=request.started_at,
                completed_at=request.completed_at,
                processed_by=request.processed_by,
                time_taken_seconds=request.time_taken_seconds,
            ),
            result=ResultSchema(
                found=request.result.found,
                cattle_ref=request.result.cattle_ref,
                cattle_code=request.result.cattle_code,
                confidence=request.result.confidence,
                message=request.result.message,
                identified_at=request.result.identified_at,
            ),
            admin_notes=request.admin_notes,
            expires_at=request.expires_at,
            cancelled_by=request.cancelled_by,
            cancelled_at=request.cancelled_at,
            cancellation_reason=request.cancellation_reason,
            created_at=request.created_at,
            updated_at=request.updated_at,
        )


class IdentificationListResponse(BaseModel):
    items: list[IdentificationResponse]
    total: int
    limit: int
    offset: int


class IdentificationStatsResponse(BaseModel):
    total: int
    by_status: dict[str, int]
    found: int
    not_found: int
    avg_time_taken_seconds: float | None = None

    @classmethod
    def from_domain(cls, stats: IdentificationStats) -> IdentificationStatsResponse:
        return cls(
            total=stats.total,
            by_status=stats.by_status,
            found=stats.found,
            not_found=stats.not_found,
            avg_time_taken_seconds=stats.avg_time_taken_seconds,
        )
