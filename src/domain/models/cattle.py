from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Mapping
from uuid import UUID, uuid4

from src.domain.value_objects.cattle_status import (
    VERIFICATION_TRANSITIONS,
    LifecycleEvent,
    LifecycleStatus,
    VerificationEvent,
    VerificationStatus,
)
from src.domain.value_objects.image_category import REQUIRED_IMAGE_COUNTS, ImageCategory
from src.domain.value_objects.transitions import InvalidTransition

DEFAULT_TURNAROUND_HOURS = 48


@dataclass(slots=True)
class ImageFile:
    filename: str
    path: str
    size: int | None = None
    mimetype: str | None = None
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "path": self.path,
            "size": self.size,
            "mimetype": self.mimetype,
            "uploaded_at": self.uploaded_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> ImageFile:
        uploaded_at = data.get("uploaded_at")
        if isinstance(uploaded_at, str):
            uploaded_at = datetime.fromisoformat(uploaded_at)
        return cls(
            filename=data["filename"],
            path=data["path"],
            size=data.get("size"),
            mimetype=data.get("mimetype"),
            uploaded_at=uploaded_at or datetime.now(timezone.utc),
        )


@dataclass(slots=True, frozen=True)
class Location:
    state: str
    district: str
    pin_code: str | None = None


@dataclass(slots=True, frozen=True)
class IdentificationEntry:
    identified_at: datetime
    identified_by: UUID
    method: str  # image_scan | manual_search | admin_approval

    def to_dict(self) -> dict:
        return {
            "identified_at": self.identified_at.isoformat(),
            "identified_by": str(self.identified_by),
            "method": self.method,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> IdentificationEntry:
        return cls(
            identified_at=datetime.fromisoformat(data["identified_at"]),
            identified_by=UUID(str(data["identified_by"])),
            method=data["method"],
        )


def generate_cattle_code() -> str:
    """System cattle id: 'C' + last 8 digits of the ms clock + 4 random digits."""
    timestamp = str(int(time.time() * 1000))[-8:]
    suffix = str(random.randint(0, 9999)).zfill(4)
    return f"C{timestamp}{suffix}"


def empty_image_set() -> dict[ImageCategory, list[ImageFile]]:
    return {category: [] for category in ImageCategory}


@dataclass(slots=True)
class Cattle:
    id: UUID
    cattle_id: str
    owner_id: UUID
    breed: str
    age: int
    location: Location
    tag_no: str | None = None
    temporary_id: str | None = None
    color: str | None = None
    type: str | None = None
    medical_history: str = ""
    images: dict[ImageCategory, list[ImageFile]] = field(default_factory=empty_image_set)

    status: LifecycleStatus = LifecycleStatus.TRANSIT

    # Verification pipeline
    verification_status: VerificationStatus = VerificationStatus.PENDING_REGIONAL_REVIEW
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    turnaround_deadline: datetime | None = None
    overdue_notified_at: datetime | None = None
    regional_reviewed_by: UUID | None = None
    regional_reviewed_at: datetime | None = None
    forwarded_at: datetime | None = None
    regional_denial_reason: str | None = None
    verified_by: UUID | None = None
    verified_at: datetime | None = None
    rejection_reason: str | None = None

    archived_at: datetime | None = None
    archived_by: UUID | None = None

    transfer_history: list[UUID] = field(default_factory=list)
    identification_history: list[IdentificationEntry] = field(default_factory=list)

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    @classmethod
    def register(
        cls,
        owner_id: UUID,
        location: Location,
        breed: str,
        age: int,
        images: Mapping[ImageCategory, list[ImageFile]],
        tag_no: str | None = None,
        color: str | None = None,
        type: str | None = None,
        medical_history: str | None = None,
        turnaround_hours: int = DEFAULT_TURNAROUND_HOURS,
        now: datetime | None = None,
    ) -> Cattle:
        now = now or datetime.now(timezone.utc)
        code = generate_cattle_code()
        image_set = empty_image_set()
        for category, files in images.items():
            image_set[ImageCategory(category)] = list(files)
        return cls(
            id=uuid4(),
            cattle_id=code,
            owner_id=owner_id,
            breed=breed,
            age=age,
            location=location,
            tag_no=tag_no,
            temporary_id=f"TEMP-{code}",
            color=color,
            type=type,
            medical_history=medical_history or "",
            images=image_set,
            status=LifecycleStatus.TRANSIT,
            verification_status=VerificationStatus.PENDING_REGIONAL_REVIEW,
            submitted_at=now,
            turnaround_deadline=now + timedelta(hours=turnaround_hours),
            created_at=now,
            updated_at=now,
            version=1,
        )

    @property
    def region(self) -> str:
        return self.location.state

    @property
    def total_images(self) -> int:
        return sum(len(files) for files in self.images.values())

    def image_counts(self) -> dict[ImageCategory, int]:
        return {category: len(self.images.get(category, [])) for category in ImageCategory}

    def image_set_problems(self, *, exact: bool = True) -> dict[str, str]:
        """Per-category problems with the photo set; empty when acceptable.

        With ``exact`` every category must hold its required count; otherwise
        only the upper bound is enforced.
        """
        problems: dict[str, str] = {}
        for category, count in self.image_counts().items():
            required = REQUIRED_IMAGE_COUNTS[category]
            if exact and count != required:
                problems[category.value] = f"Exactly {required} image(s) required, got {count}"
            elif not exact and count > required:
                problems[category.value] = f"At most {required} image(s) allowed, got {count}"
        return problems

    def all_image_paths(self) -> list[str]:
        return [image.path for files in self.images.values() for image in files]

    # Verification transitions

    def _advance(self, event: VerificationEvent) -> None:
        self.verification_status = VERIFICATION_TRANSITIONS.next_state(
            self.verification_status, event
        )

    def forward_to_m_admin(self, reviewer_id: UUID, now: datetime | None = None) -> None:
        now = now or datetime.now(timezone.utc)
        self._advance(VerificationEvent.FORWARD)
        self.regional_reviewed_by = reviewer_id
        self.regional_reviewed_at = now
        self.forwarded_at = now
        self.bump_version(now)

    def deny_by_regional_admin(
        self, reviewer_id: UUID, reason: str, now: datetime | None = None
    ) -> None:
        now = now or datetime.now(timezone.utc)
        self._advance(VerificationEvent.DENY)
        self.regional_reviewed_by = reviewer_id
        self.regional_reviewed_at = now
        self.regional_denial_reason = reason
        self.bump_version(now)

    def approve(self, admin_id: UUID, now: datetime | None = None) -> None:
        now = now or datetime.now(timezone.utc)
        self._advance(VerificationEvent.APPROVE)
        self.verified_by = admin_id
        self.verified_at = now
        self.status = LifecycleStatus.ACTIVE
        self.temporary_id = None
        self.identification_history.append(
            IdentificationEntry(identified_at=now, identified_by=admin_id, method="admin_approval")
        )
        self.bump_version(now)

    def reject(self, admin_id: UUID, reason: str, now: datetime | None = None) -> None:
        now = now or datetime.now(timezone.utc)
        self._advance(VerificationEvent.REJECT)
        self.verified_by = admin_id
        self.verified_at = now
        self.rejection_reason = reason
        self.bump_version(now)

    def is_overdue(self, now: datetime | None = None) -> bool:
        if self.verification_status != VerificationStatus.PENDING_REGIONAL_REVIEW:
            return False
        if self.turnaround_deadline is None:
            return False
        return (now or datetime.now(timezone.utc)) > self.turnaround_deadline

    # Lifecycle transitions

    def archive(self, user_id: UUID, now: datetime | None = None) -> None:
        if self.status == LifecycleStatus.ARCHIVE:
            raise InvalidTransition("cattle", self.status, LifecycleEvent.ARCHIVE)
        now = now or datetime.now(timezone.utc)
        self.status = LifecycleStatus.ARCHIVE
        self.archived_at = now
        self.archived_by = user_id
        self.bump_version(now)

    def restore(self, now: datetime | None = None) -> None:
        if self.status != LifecycleStatus.ARCHIVE:
            raise InvalidTransition("cattle", self.status, LifecycleEvent.RESTORE)
        if self.verification_status == VerificationStatus.APPROVED:
            self.status = LifecycleStatus.ACTIVE
        else:
            self.status = LifecycleStatus.TRANSIT
        self.archived_at = None
        self.archived_by = None
        self.bump_version(now)

    # Ownership

    def record_identification(
        self, admin_id: UUID, method: str = "image_scan", now: datetime | None = None
    ) -> None:
        now = now or datetime.now(timezone.utc)
        self.identification_history.append(
            IdentificationEntry(identified_at=now, identified_by=admin_id, method=method)
        )
        self.bump_version(now)

    def transfer_to(
        self, new_owner_id: UUID, transfer_id: UUID, now: datetime | None = None
    ) -> None:
        self.transfer_history.append(transfer_id)
        self.owner_id = new_owner_id
        self.bump_version(now)

    def bump_version(self, now: datetime | None = None) -> None:
        self.version += 1
        self.updated_at = now or datetime.now(timezone.utc)
