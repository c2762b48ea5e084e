from __future__ import annotations

from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from src.application.errors import ConflictError
from src.domain.models.transfer_request import TransferRequest
from src.infrastructure.repos.transfer_requests_sqlalchemy import (
    TransferRequestsSQLAlchemyRepository,
)


class FailingFlushSession:
    def __init__(self, message: str) -> None:
        self.message = message
        self.added: list = []

    def add(self, obj) -> None:
        self.added.append(obj)

    async def flush(self) -> None:
        raise IntegrityError("INSERT INTO transfer_requests", {}, Exception(self.message))


def _transfer() -> TransferRequest:
    return TransferRequest.initiate(cattle_ref=uuid4(), from_owner_id=uuid4(), to_owner_id=uuid4())


@pytest.mark.parametrize(
    "message",
    [
        'duplicate key value violates unique constraint "ux_transfer_requests_pending_cattle"',
        "UNIQUE constraint failed: transfer_requests.cattle_ref",
    ],
)
async def test_pending_unique_violation_reports_duplicate_request(message):
    repo = TransferRequestsSQLAlchemyRepository(FailingFlushSession(message))
    with pytest.raises(ConflictError) as excinfo:
        await repo.add(_transfer())
    assert "pending transfer request already exists" in excinfo.value.message


async def test_other_constraint_violation_is_not_reported_as_duplicate():
    session = FailingFlushSession(
        'insert or update on table "transfer_requests" violates foreign key constraint '
        '"fk_transfer_requests_to_owner_id_accounts"'
    )
    repo = TransferRequestsSQLAlchemyRepository(session)
    with pytest.raises(ConflictError) as excinfo:
        await repo.add(_transfer())
    assert "pending" not in excinfo.value.message
    assert excinfo.value.message == "Transfer request violates a database constraint"
