from __future__ import annotations

from uuid import UUID, uuid4

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, Response, status

from src.application.authorization import Actor, ensure_role
from src.application.use_cases.cattle import (
    archive_cattle,
    cattle_statistics,
    delete_cattle,
    get_cattle,
    list_cattle,
    register_cattle,
    restore_cattle,
    transfer_history,
)
from src.application.use_cases.transfers import initiate_transfer
from src.config.settings import Settings
from src.domain.value_objects.cattle_status import LifecycleStatus, VerificationStatus
from src.domain.value_objects.role import Role
from src.infrastructure.storage.ports import StorageService
from src.interfaces.http.deps import (
    get_actor,
    get_app_settings,
    get_storage,
    get_uow,
    require_storage,
    schedule_dispatch,
)
from src.interfaces.http.schemas.cattle import (
    CattleCreate,
    CattleListResponse,
    CattleResponse,
    CattleStatisticsResponse,
    PresignImageRequest,
    PresignImageResponse,
    TransferCreate,
)
from src.interfaces.http.schemas.transfers import TransferResponse

router = APIRouter(prefix="/cattle", tags=["cattle"])


@router.post("", response_model=CattleResponse, status_code=status.HTTP_201_CREATED)
async def register_cattle_endpoint(
    payload: CattleCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    settings: Settings = Depends(get_app_settings),
    uow=Depends(get_uow),
) -> CattleResponse:
    cattle = await register_cattle.execute(
        uow,
        actor,
        register_cattle.RegisterCattleInput(
            breed=payload.breed,
            age=payload.age,
            images={
                category: [image.to_domain() for image in files]
                for category, files in payload.images.items()
            },
            tag_no=payload.tag_no,
            color=payload.color,
            type=payload.type,
            medical_history=payload.medical_history,
        ),
        turnaround_hours=settings.verification_turnaround_hours,
        allow_partial_images=settings.allow_partial_image_sets,
    )
    schedule_dispatch(request, background_tasks, uow)
    return CattleResponse.from_domain(cattle)


@router.post("/uploads/presign", response_model=PresignImageResponse)
async def presign_image_upload(
    payload: PresignImageRequest,
    actor: Actor = Depends(get_actor),
    storage: StorageService = Depends(require_storage),
) -> PresignImageResponse:
    """Presigned S3 POST for one cattle photo; the returned key goes into the registration."""
    ensure_role(actor, {Role.FARMER}, "Only farmers upload cattle photos")
    ext = payload.filename.rsplit(".", 1)[-1].lower() if "." in payload.filename else "jpg"
    key = f"cattle/{actor.account_id}/{payload.category.value}/{uuid4()}.{ext}"
    presigned = await storage.get_presigned_upload(key, payload.content_type)
    return PresignImageResponse(
        upload_url=presigned.upload_url,
        storage_key=presigned.storage_key,
        fields=presigned.fields,
        public_url=await storage.get_public_url(presigned.storage_key),
    )


@router.get("", response_model=CattleListResponse)
async def list_cattle_endpoint(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status_filter: LifecycleStatus | None = Query(None, alias="status"),
    verification_status: VerificationStatus | None = Query(None),
    breed: str | None = Query(None),
    search: str | None = Query(None, description="Text search on cattle id, tag and breed"),
    owner_id: UUID | None = Query(None, description="Admins only"),
    sort_by: str = Query("created_at"),
    sort_dir: str = Query("desc", pattern="^(asc|desc)$"),
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> CattleListResponse:
    result = await list_cattle.execute(
        uow,
        actor,
        limit=limit,
        offset=offset,
        status=status_filter,
        verification_status=verification_status,
        breed=breed,
        search=search,
        owner_id=owner_id,
        order_by=sort_by,
        descending=sort_dir == "desc",
    )
    return CattleListResponse(
        items=[CattleResponse.from_domain(c) for c in result.items],
        total=result.total,
        limit=result.limit,
        offset=result.offset,
    )


@router.get("/statistics", response_model=CattleStatisticsResponse)
async def cattle_statistics_endpoint(
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> CattleStatisticsResponse:
    stats = await cattle_statistics.execute(uow, actor)
    return CattleStatisticsResponse.from_domain(stats)


@router.get("/{cattle_id}", response_model=CattleResponse)
async def get_cattle_endpoint(
    cattle_id: UUID,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> CattleResponse:
    return CattleResponse.from_domain(await get_cattle.execute(uow, actor, cattle_id))


@router.put("/{cattle_id}/archive", response_model=CattleResponse)
async def archive_cattle_endpoint(
    cattle_id: UUID,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> CattleResponse:
    return CattleResponse.from_domain(await archive_cattle.execute(uow, actor, cattle_id))


@router.put("/{cattle_id}/restore", response_model=CattleResponse)
async def restore_cattle_endpoint(
    cattle_id: UUID,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> CattleResponse:
    return CattleResponse.from_domain(await restore_cattle.execute(uow, actor, cattle_id))


@router.delete("/{cattle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cattle_endpoint(
    cattle_id: UUID,
    actor: Actor = Depends(get_actor),
    storage: StorageService | None = Depends(get_storage),
    uow=Depends(get_uow),
) -> Response:
    await delete_cattle.execute(uow, actor, cattle_id, storage=storage)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{cattle_id}/transfer-history", response_model=list[TransferResponse])
async def transfer_history_endpoint(
    cattle_id: UUID,
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> list[TransferResponse]:
    transfers = await transfer_history.execute(uow, actor, cattle_id)
    return [TransferResponse.model_validate(t) for t in transfers]


@router.post(
    "/{cattle_id}/transfer", response_model=TransferResponse, status_code=status.HTTP_201_CREATED
)
async def initiate_transfer_endpoint(
    cattle_id: UUID,
    payload: TransferCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    settings: Settings = Depends(get_app_settings),
    uow=Depends(get_uow),
) -> TransferResponse:
    transfer = await initiate_transfer.execute(
        uow,
        actor,
        cattle_id,
        initiate_transfer.InitiateTransferInput(
            to_owner_id=payload.to_owner_id,
            transfer_type=payload.transfer_type,
            price=payload.price,
            notes=payload.notes,
        ),
        expiry_days=settings.transfer_request_expiry_days,
    )
    schedule_dispatch(request, background_tasks, uow)
    return TransferResponse.model_validate(transfer)
