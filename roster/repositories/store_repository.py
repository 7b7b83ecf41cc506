"""매장/노동 정책 레포지토리.

Store and per-store labor policy repositories.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roster.models.store import LaborPolicy, Store
from roster.repositories.base import BaseRepository


class StoreRepository(BaseRepository[Store]):
    """매장 레포지토리 — Store repository."""

    def __init__(self) -> None:
        super().__init__(Store)


class LaborPolicyRepository(BaseRepository[LaborPolicy]):
    """노동 정책 레포지토리.

    Labor policy repository. A store has at most one policy row; stores
    without one use the built-in defaults.
    """

    def __init__(self) -> None:
        super().__init__(LaborPolicy)

    async def get_by_store(self, db: AsyncSession, store_id: UUID) -> LaborPolicy | None:
        """매장 정책 조회 — Fetch the store's policy row, if any."""
        result = await db.execute(select(LaborPolicy).where(LaborPolicy.store_id == store_id))
        return result.scalar_one_or_none()

    async def upsert(self, db: AsyncSession, store_id: UUID, data: dict) -> LaborPolicy:
        """매장 정책 저장 — Create or overwrite the store's policy row.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 UUID (Store UUID)
            data: 정책 필드 딕셔너리 (Policy field values)

        Returns:
            LaborPolicy: 저장된 정책 (Saved policy row)
        """
        policy = await self.get_by_store(db, store_id)
        if policy is None:
            return await self.create(db, {"store_id": store_id, **data})

        for field, value in data.items():
            setattr(policy, field, value)
        await db.flush()
        await db.refresh(policy)
        return policy


# 싱글턴 인스턴스 — Singleton instances
store_repository: StoreRepository = StoreRepository()
labor_policy_repository: LaborPolicyRepository = LaborPolicyRepository()
