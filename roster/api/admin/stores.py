"""관리자 매장 라우터 — 매장, 노동 정책, 알림 API.

Admin Store Router — Store creation and lookup, per-store labor policy,
and the store's notification feed.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db
from roster.schemas.common import PaginatedResponse
from roster.schemas.roster import StoreCreate, StoreResponse
from roster.schemas.rules import LaborPolicyResponse, LaborPolicyUpdate
from roster.services.labor_policy_service import labor_policy_service
from roster.services.notification_service import notification_service
from roster.services.store_service import store_service

router: APIRouter = APIRouter()


@router.post("", response_model=StoreResponse, status_code=201)
async def create_store(
    data: StoreCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """매장을 생성합니다 — Create a store."""
    store = await store_service.create_store(db, data)
    await db.commit()
    return store_service.build_response(store)


@router.get("/{store_id}", response_model=StoreResponse)
async def get_store(
    store_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    store = await store_service.get_store(db, store_id)
    return store_service.build_response(store)


@router.get("/{store_id}/labor-policy", response_model=LaborPolicyResponse)
async def get_labor_policy(
    store_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """매장 노동 정책을 조회합니다.

    Get the store's labor policy. Stores without a saved policy return
    the defaults with ``id`` set to null.
    """
    return await labor_policy_service.get_policy(db, store_id)


@router.put("/{store_id}/labor-policy", response_model=LaborPolicyResponse)
async def update_labor_policy(
    store_id: UUID,
    data: LaborPolicyUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """매장 노동 정책을 저장합니다 (upsert).

    Save the store's labor policy. Applies to subsequent drafts and
    validations.

    Args:
        store_id: 매장 UUID (Store UUID)
        data: 정책 값 (Policy values)
        db: 비동기 데이터베이스 세션 (Async database session)

    Returns:
        dict: 저장된 정책 (Saved policy)
    """
    result = await labor_policy_service.update_policy(db, store_id, data)
    await db.commit()
    return result


@router.get("/{store_id}/notifications", response_model=PaginatedResponse)
async def list_notifications(
    store_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """매장 알림 목록 — Store notifications, newest first."""
    await store_service.get_store(db, store_id)
    notifications, total = await notification_service.list_for_store(db, store_id, page, per_page)
    return {
        "items": [notification_service.build_response(n) for n in notifications],
        "total": total,
        "page": page,
        "per_page": per_page,
    }
