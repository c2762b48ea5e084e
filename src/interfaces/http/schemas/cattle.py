from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.application.use_cases.cattle.cattle_statistics import CattleStatistics
from src.domain.models.cattle import Cattle, IdentificationEntry, ImageFile
from src.domain.models.transfer_request import TransferType
from src.domain.value_objects.cattle_status import LifecycleStatus, VerificationStatus
from src.domain.value_objects.image_category import ImageCategory


class ImageFileSchema(BaseModel):
    filename: str = Field(min_length=1)
    path: str = Field(min_length=1)
    size: int | None = Field(default=None, ge=0)
    mimetype: str | None = None
    uploaded_at: datetime | None = None

    def to_domain(self) -> ImageFile:
        image = ImageFile(
            filename=self.filename, path=self.path, size=self.size, mimetype=self.mimetype
        )
        if self.uploaded_at is not None:
            image.uploaded_at = self.uploaded_at
        return image

    @classmethod
    def from_domain(cls, image: ImageFile) -> ImageFileSchema:
        return cls(
            filename=image.filename,
            path=image.path,
            size=image.size,
            mimetype=image.mimetype,
            uploaded_at=image.uploaded_at,
        )


class CattleCreate(BaseModel):
    breed: str = Field(min_length=1, max_length=100)
    age: int = Field(ge=0, le=50)
    tag_no: str | None = Field(default=None, max_length=50)
    color: str | None = Field(default=None, max_length=50)
    type: str | None = Field(default=None, max_length=50)
    medical_history: str | None = None
    # Keys are photo categories: muzzle, face, left, right, full_body_left, full_body_right
    images: dict[str, list[ImageFileSchema]] = Field(default_factory=dict)

    @field_validator("breed")
    @classmethod
    def strip_breed(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("breed must not be blank")
        return v


class LocationSchema(BaseModel):
    state: str
    district: str
    pin_code: str | None = None


class VerificationSchema(BaseModel):
    status: VerificationStatus
    submitted_at: datetime
    turnaround_deadline: datetime | None = None
    is_overdue: bool = False
    overdue_notified_at: datetime | None = None
    reviewed_by_regional_admin: UUID | None = None
    regional_reviewed_at: datetime | None = None
    forwarded_at: datetime | None = None
    regional_denial_reason: str | None = None
    verified_by: UUID | None = None
    verified_at: datetime | None = None
    rejection_reason: str | None = None


class IdentificationEntrySchema(BaseModel):
    identified_at: datetime
    identified_by: UUID
    method: str

    @classmethod
    def from_domain(cls, entry: IdentificationEntry) -> IdentificationEntrySchema:
        return cls(
            identified_at=entry.identified_at,
            identified_by=entry.identified_by,
            method=entry.method,
        )


class CattleResponse(BaseModel):
    id: UUID
    cattle_id: str
    owner_id: UUID
    breed: str
    age: int
    tag_no: str | None = None
    temporary_id: str | None = None
    color: str | None = None
    type: str | None = None
    medical_history: str = ""
    images: dict[str, list[ImageFileSchema]]
    total_images: int
    location: LocationSchema
    status: LifecycleStatus
    verification: VerificationSchema
    archived_at: datetime | None = None
    archived_by: UUID | None = None
    transfer_history: list[UUID] = Field(default_factory=list)
    identification_history: list[IdentificationEntrySchema] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    version: int

    @classmethod
    def from_domain(cls, cattle: Cattle) -> CattleResponse:
        return cls(
            id=cattle.id,
            cattle_id=cattle.cattle_id,
            owner_id=cattle.owner_id,
            breed=cattle.breed,
            age=cattle.age,
            tag_no=cattle.tag_no,
            temporary_id=cattle.temporary_id,
            color=cattle.color,
            type=cattle.type,
            medical_history=cattle.medical_history,
            images={
                category.value: [
                    ImageFileSchema.from_domain(f) for f in cattle.images.get(category, [])
                ]
                for category in ImageCategory
            },
            total_images=cattle.total_images,
            location=LocationSchema(
                state=cattle.location.state,
                district=cattle.location.district,
                pin_code=cattle.location.pin_code,
            ),
            status=cattle.status,
            verification=VerificationSchema(
                status=cattle.verification_status,
                submitted_at=cattle.submitted_at,
                turnaround_deadline=cattle.turnaround_deadline,
                overdue_notified_at=cattle.overdue_notified_at,
                is_overdue=cattle.is_overdue(),
                reviewed_by_regional_admin=cattle.regional_reviewed_by,
                regional_reviewed_at=cattle.regional_reviewed_at,
                forwarded_at=cattle.forwarded_at,
                regional_denial_reason=cattle.regional_denial_reason,
                verified_by=cattle.verified_by,
                verified_at=cattle.verified_at,
                rejection_reason=cattle.rejection_reason,
            ),
            archived_at=cattle.archived_at,
            archived_by=cattle.archived_by,
            transfer_history=list(cattle.transfer_history),
            identification_history=[
                IdentificationEntrySchema.from_domain(e) for e in cattle.identification_history
            ],
            created_at=cattle.created_at,
            updated_at=cattle.updated_at,
            version=cattle.version,
        )


class CattleListResponse(BaseModel):
    items: list[CattleResponse]
    total: int
    limit: int
    offset: int


class DistrictCountsResponse(BaseModel):
    total: int
    active: int
    pending_verification: int


class CattleStatisticsResponse(BaseModel):
    total: int
    by_status: dict[str, int]
    by_verification_status: dict[str, int]
    by_district: dict[str, DistrictCountsResponse]
    overdue: int

    @classmethod
    def from_domain(cls, stats: CattleStatistics) -> CattleStatisticsResponse:
        return cls(
            total=stats.total,
            by_status=stats.by_status,
            by_verification_status=stats.by_verification_status,
            by_district={
                district: DistrictCountsResponse(
                    total=counts.total,
                    active=counts.active,
                    pending_verification=counts.pending_verification,
                )
                for district, counts in stats.by_district.items()
            },
            overdue=stats.overdue,
        )


class ReasonRequest(BaseModel):
    reason: str | None = None


class TransferCreate(BaseModel):
    to_owner_id: UUID
    transfer_type: TransferType = TransferType.SELL
    price: Decimal | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, max_length=500)


class PresignImageRequest(BaseModel):
    category: ImageCategory
    filename: str = Field(min_length=1, max_length=200)
    content_type: str = Field(pattern=r"^image/")


class PresignImageResponse(BaseModel):
    upload_url: str
    storage_key: str
    fields: dict[str, str] | None = None
    public_url: str
