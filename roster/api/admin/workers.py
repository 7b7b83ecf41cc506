"""관리자 근무자 라우터 — 근무자 명단 및 휴가 신청 API.

Admin Worker Router — Store roster (workers) and time-off requests.
Only approved time off affects draft generation.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db
from roster.schemas.roster import (
    TimeOffCreate,
    TimeOffResponse,
    TimeOffStatusUpdate,
    WorkerCreate,
    WorkerResponse,
    WorkerUpdate,
)
from roster.services.worker_service import worker_service

router: APIRouter = APIRouter()


@router.post("/stores/{store_id}/workers", response_model=WorkerResponse, status_code=201)
async def create_worker(
    store_id: UUID,
    data: WorkerCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """근무자를 등록합니다.

    Register a worker at a store.

    Args:
        store_id: 매장 UUID (Store UUID)
        data: 근무자 데이터 (Worker data)
        db: 비동기 데이터베이스 세션 (Async database session)

    Returns:
        dict: 등록된 근무자 (Created worker)
    """
    worker = await worker_service.create_worker(db, store_id, data)
    await db.commit()
    return worker_service.build_worker_response(worker)


@router.get("/stores/{store_id}/workers", response_model=list[WorkerResponse])
async def list_workers(
    store_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    include_inactive: bool = False,
) -> list[dict]:
    workers = await worker_service.list_workers(db, store_id, active_only=not include_inactive)
    return [worker_service.build_worker_response(w) for w in workers]


@router.patch("/workers/{worker_id}", response_model=WorkerResponse)
async def update_worker(
    worker_id: UUID,
    data: WorkerUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """근무자 정보를 수정합니다 — Partial update; set is_active=false to deactivate."""
    worker = await worker_service.update_worker(db, worker_id, data)
    await db.commit()
    return worker_service.build_worker_response(worker)


@router.post("/stores/{store_id}/time-off", response_model=TimeOffResponse, status_code=201)
async def create_time_off(
    store_id: UUID,
    data: TimeOffCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    request = await worker_service.create_time_off(db, store_id, data)
    await db.commit()
    return worker_service.build_time_off_response(request)


@router.get("/stores/{store_id}/time-off", response_model=list[TimeOffResponse])
async def list_time_off(
    store_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
    status: Annotated[str | None, Query()] = None,
) -> list[dict]:
    """휴가 신청 목록 — Time-off requests filtered by date range and status."""
    requests = await worker_service.list_time_off(db, store_id, date_from, date_to, status)
    return [worker_service.build_time_off_response(r) for r in requests]


@router.patch("/time-off/{request_id}", response_model=TimeOffResponse)
async def update_time_off_status(
    request_id: UUID,
    data: TimeOffStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """휴가 신청 상태 변경 — Approve or reject a time-off request."""
    request = await worker_service.set_time_off_status(db, request_id, data.status)
    await db.commit()
    return worker_service.build_time_off_response(request)
