from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status

from src.application.authorization import Actor
from src.application.use_cases.identification import (
    cancel_request,
    complete_request,
    create_request,
    fail_request,
    get_request,
    list_requests,
    start_processing,
    statistics,
)
from src.config.settings import Settings
from src.domain.models.identification_request import IdentificationStatus
from src.interfaces.http.deps import get_actor, get_app_settings, get_uow, schedule_dispatch
from src.interfaces.http.schemas.identification import (
    IdentificationCancel,
    IdentificationComplete,
    IdentificationCreate,
    IdentificationFail,
    IdentificationListResponse,
    IdentificationResponse,
    IdentificationStatsResponse,
)

# Farmer-facing and admin-facing routes live under different prefixes
router = APIRouter(tags=["identification"])


def _page(result: list_requests.ListIdentificationResult) -> IdentificationListResponse:
    return IdentificationListResponse(
        items=[IdentificationResponse.from_domain(r) for r in result.items],
        total=result.total,
        limit=result.limit,
        offset=result.offset,
    )


@router.post(
    "/identification", response_model=IdentificationResponse, status_code=status.HTTP_201_CREATED
)
async def create_identification_request(
    payload: IdentificationCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    settings: Settings = Depends(get_app_settings),
    uow=Depends(get_uow),
) -> IdentificationResponse:
    created = await create_request.execute(
        uow,
        actor,
        create_request.CreateIdentificationInput(
            image=payload.image.to_domain(),
            latitude=payload.latitude,
            longitude=payload.longitude,
            address=payload.address,
            device_info=payload.device_info,
            priority=payload.priority,
        ),
        expiry_days=settings.identification_request_expiry_days,
    )
    schedule_dispatch(request, background_tasks, uow)
    return IdentificationResponse.from_domain(created)


@router.get("/identification/mine", response_model=IdentificationListResponse)
async def list_my_identification_requests(
    status_filter: IdentificationStatus | None = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> IdentificationListResponse:
    result = await list_requests.list_mine(
        uow, actor, status=status_filter, limit=limit, offset=offset
    )
    return _page(result)


@router.get("/identification/statistics", response_model=IdentificationStatsResponse)
async def identification_statistics(
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> IdentificationStatsResponse:
    """Own requests for farmers; the admin's region (or everything) for admins."""
    return IdentificationStatsResponse.from_domain(await statistics.execute(uow, actor))


@router.get("/identification/{request_id}", response_model=IdentificationResponse)
async def get_identification_request(
    request_id: UUID,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> IdentificationResponse:
    return IdentificationResponse.from_domain(await get_request.execute(uow, actor, request_id))


@router.put("/identification/{request_id}/cancel", response_model=IdentificationResponse)
async def cancel_identification_request(
    request_id: UUID,
    payload: IdentificationCancel | None = None,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> IdentificationResponse:
    reason = payload.reason if payload else None
    cancelled = await cancel_request.execute(uow, actor, request_id, reason)
    return IdentificationResponse.from_domain(cancelled)


@router.get("/admin/identification/pending", response_model=IdentificationListResponse)
async def identification_queue(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> IdentificationListResponse:
    return _page(await list_requests.list_queue(uow, actor, limit=limit, offset=offset))


@router.put("/admin/identification/{request_id}/start", response_model=IdentificationResponse)
async def start_identification(
    request_id: UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> IdentificationResponse:
    started = await start_processing.execute(uow, actor, request_id)
    schedule_dispatch(request, background_tasks, uow)
    return IdentificationResponse.from_domain(started)


@router.put("/admin/identification/{request_id}/complete", response_model=IdentificationResponse)
async def complete_identification(
    request_id: UUID,
    payload: IdentificationComplete,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> IdentificationResponse:
    completed = await complete_request.execute(
        uow,
        actor,
        request_id,
        complete_request.CompleteIdentificationInput(
            found=payload.found,
            cattle_ref=payload.cattle_ref,
            cattle_code=payload.cattle_code,
            confidence=payload.confidence,
            message=payload.message,
            admin_notes=payload.admin_notes,
        ),
    )
    schedule_dispatch(request, background_tasks, uow)
    return IdentificationResponse.from_domain(completed)


@router.put("/admin/identification/{request_id}/fail", response_model=IdentificationResponse)
async def fail_identification(
    request_id: UUID,
    payload: IdentificationFail,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> IdentificationResponse:
    failed = await fail_request.execute(
        uow, actor, request_id, payload.message, reason=payload.reason
    )
    schedule_dispatch(request, background_tasks, uow)
    return IdentificationResponse.from_domain(failed)
