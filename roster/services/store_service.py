"""매장 서비스 — 매장 생성/조회.

Store Service — Store creation and lookup.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from roster.models.store import Store
from roster.repositories.store_repository import store_repository
from roster.schemas.roster import StoreCreate
from roster.utils.exceptions import NotFoundError


class StoreService:
    """매장 서비스 — Store service."""

    async def create_store(self, db: AsyncSession, data: StoreCreate) -> Store:
        return await store_repository.create(db, data.model_dump())

    async def get_store(self, db: AsyncSession, store_id: UUID) -> Store:
        """매장 조회 — Raises NotFoundError when missing."""
        store = await store_repository.get_by_id(db, store_id)
        if store is None:
            raise NotFoundError("매장을 찾을 수 없습니다 (Store not found)")
        return store

    def build_response(self, store: Store) -> dict:
        return {
            "id": str(store.id),
            "name": store.name,
            "business_hours": store.business_hours,
            "is_active": store.is_active,
            "created_at": store.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
store_service: StoreService = StoreService()
