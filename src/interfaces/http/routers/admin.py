from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request

from src.application.authorization import Actor
from src.application.use_cases.cattle import (
    approve_cattle,
    deny_cattle,
    forward_cattle,
    list_overdue_cattle,
    list_pending_cattle,
    reject_cattle,
)
from src.domain.value_objects.cattle_status import VerificationStatus
from src.infrastructure.scheduler.workflow_tasks import (
    expire_stale_requests,
    notify_overdue_verifications,
)
from src.interfaces.http.deps import get_actor, get_uow, require_maintenance_key, schedule_dispatch
from src.interfaces.http.schemas.cattle import CattleListResponse, CattleResponse, ReasonRequest

router = APIRouter(prefix="/admin", tags=["admin"])


def _page(result) -> CattleListResponse:
    return CattleListResponse(
        items=[CattleResponse.from_domain(c) for c in result.items],
        total=result.total,
        limit=result.limit,
        offset=result.offset,
    )


# Regional review


@router.get("/regional/cattle/pending", response_model=CattleListResponse)
async def regional_pending_queue(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> CattleListResponse:
    """Registrations awaiting regional review, oldest submission first."""
    result = await list_pending_cattle.execute(
        uow, actor, VerificationStatus.PENDING_REGIONAL_REVIEW, limit=limit, offset=offset
    )
    return _page(result)


@router.put("/regional/cattle/{cattle_id}/forward", response_model=CattleResponse)
async def forward_to_m_admin(
    cattle_id: UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> CattleResponse:
    cattle = await forward_cattle.execute(uow, actor, cattle_id)
    schedule_dispatch(request, background_tasks, uow)
    return CattleResponse.from_domain(cattle)


@router.put("/regional/cattle/{cattle_id}/deny", response_model=CattleResponse)
async def deny_registration(
    cattle_id: UUID,
    payload: ReasonRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> CattleResponse:
    cattle = await deny_cattle.execute(uow, actor, cattle_id, payload.reason)
    schedule_dispatch(request, background_tasks, uow)
    return CattleResponse.from_domain(cattle)


# Identifier (M-admin) review


@router.get("/m-admin/cattle/pending", response_model=CattleListResponse)
async def m_admin_pending_queue(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> CattleListResponse:
    """Forwarded registrations, in the order they were forwarded."""
    result = await list_pending_cattle.execute(
        uow, actor, VerificationStatus.FORWARDED_TO_M_ADMIN, limit=limit, offset=offset
    )
    return _page(result)


@router.put("/m-admin/cattle/{cattle_id}/approve", response_model=CattleResponse)
async def approve_registration(
    cattle_id: UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> CattleResponse:
    cattle = await approve_cattle.execute(uow, actor, cattle_id)
    schedule_dispatch(request, background_tasks, uow)
    return CattleResponse.from_domain(cattle)


@router.put("/m-admin/cattle/{cattle_id}/reject", response_model=CattleResponse)
async def reject_registration(
    cattle_id: UUID,
    payload: ReasonRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> CattleResponse:
    cattle = await reject_cattle.execute(uow, actor, cattle_id, payload.reason)
    schedule_dispatch(request, background_tasks, uow)
    return CattleResponse.from_domain(cattle)


@router.get("/cattle/overdue", response_model=list[CattleResponse])
async def overdue_registrations(
    limit: int = Query(100, ge=1, le=500),
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> list[CattleResponse]:
    """Registrations still awaiting regional review past their turnaround deadline."""
    cattle = await list_overdue_cattle.execute(uow, actor, limit=limit)
    return [CattleResponse.from_domain(c) for c in cattle]


# Maintenance (cron)


@router.post("/maintenance/expire-stale", dependencies=[Depends(require_maintenance_key)])
async def run_maintenance(request: Request, notify_overdue: bool = True) -> dict[str, int]:
    session_factory = request.app.state.session_factory
    counts = await expire_stale_requests(session_factory)
    if notify_overdue:
        counts["overdue_verifications"] = await notify_overdue_verifications(session_factory)
    return counts
