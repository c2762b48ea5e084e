from __future__ import annotations

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request

from src.application.authorization import Actor
from src.application.use_cases.transfers import (
    accept_transfer,
    cancel_transfer,
    get_transfer,
    list_transfers,
    reject_transfer,
)
from src.domain.models.transfer_request import TransferStatus
from src.interfaces.http.deps import get_actor, get_uow, schedule_dispatch
from src.interfaces.http.schemas.transfers import (
    TransferCancel,
    TransferListResponse,
    TransferRespond,
    TransferResponse,
)

router = APIRouter(prefix="/transfers", tags=["transfers"])


@router.get("", response_model=TransferListResponse)
async def list_my_transfers(
    direction: Literal["sent", "received", "all"] = Query("all"),
    status: TransferStatus | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> TransferListResponse:
    result = await list_transfers.execute(
        uow, actor, direction=direction, status=status, limit=limit, offset=offset
    )
    return TransferListResponse(
        items=[TransferResponse.model_validate(t) for t in result.items],
        total=result.total,
        limit=result.limit,
        offset=result.offset,
    )


@router.get("/{transfer_id}", response_model=TransferResponse)
async def get_transfer_endpoint(
    transfer_id: UUID,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> TransferResponse:
    return TransferResponse.model_validate(await get_transfer.execute(uow, actor, transfer_id))


@router.put("/{transfer_id}/accept", response_model=TransferResponse)
async def accept_transfer_endpoint(
    transfer_id: UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> TransferResponse:
    transfer = await accept_transfer.execute(uow, actor, transfer_id)
    schedule_dispatch(request, background_tasks, uow)
    return TransferResponse.model_validate(transfer)


@router.put("/{transfer_id}/reject", response_model=TransferResponse)
async def reject_transfer_endpoint(
    transfer_id: UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    payload: TransferRespond | None = None,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> TransferResponse:
    message = payload.message if payload else None
    transfer = await reject_transfer.execute(uow, actor, transfer_id, message)
    schedule_dispatch(request, background_tasks, uow)
    return TransferResponse.model_validate(transfer)


@router.put("/{transfer_id}/cancel", response_model=TransferResponse)
async def cancel_transfer_endpoint(
    transfer_id: UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    payload: TransferCancel | None = None,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> TransferResponse:
    reason = payload.reason if payload else None
    transfer = await cancel_transfer.execute(uow, actor, transfer_id, reason)
    schedule_dispatch(request, background_tasks, uow)
    return TransferResponse.model_validate(transfer)
