"""노동 정책 서비스 — 매장별 정책 조회/저장, RulesConfig 스냅샷 생성.

Labor Policy Service — Per-store policy read/write and the RulesConfig
snapshot every validation call runs against.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from roster.constants import FULL_TIME, PART_TIME
from roster.models.store import LaborPolicy
from roster.repositories.store_repository import labor_policy_repository, store_repository
from roster.schemas.rules import LaborPolicyUpdate, RulesConfig, WorkLimit
from roster.utils.exceptions import NotFoundError


class LaborPolicyService:
    """노동 정책 서비스.

    Stores without a policy row run on the RulesConfig defaults.
    """

    async def _ensure_store(self, db: AsyncSession, store_id: UUID) -> None:
        if await store_repository.get_by_id(db, store_id) is None:
            raise NotFoundError("매장을 찾을 수 없습니다 (Store not found)")

    @staticmethod
    def to_config(policy: LaborPolicy | None) -> RulesConfig:
        """정책 행 → RulesConfig 스냅샷.

        Build an immutable RulesConfig from a policy row. Values the row
        does not hold (part-time shift types, meal windows, default period
        hours) keep their defaults. An empty min_staffing keeps the default
        one-per-role table.
        """
        if policy is None:
            return RulesConfig()

        overrides: dict = {
            "work_limits": {
                FULL_TIME: WorkLimit(
                    max_daily_hours=policy.ft_max_daily_hours,
                    max_consecutive_days=policy.ft_max_consecutive_days,
                    regular_hours=policy.regular_hours_threshold,
                ),
                PART_TIME: WorkLimit(
                    max_daily_hours=policy.pt_max_daily_hours,
                    max_consecutive_days=policy.pt_max_consecutive_days,
                    regular_hours=policy.regular_hours_threshold,
                ),
            },
            "min_break_minutes": policy.min_break_minutes,
            "standard_break_minutes": policy.standard_break_minutes,
            "weekly_day_factor": policy.weekly_day_factor,
            "fairness_spread_threshold": policy.fairness_spread_threshold,
        }
        if policy.min_staffing:
            overrides["min_staffing"] = dict(policy.min_staffing)
        return RulesConfig(**overrides)

    async def get_config(self, db: AsyncSession, store_id: UUID) -> RulesConfig:
        """매장 규칙 스냅샷 — RulesConfig for one store."""
        policy = await labor_policy_repository.get_by_store(db, store_id)
        return self.to_config(policy)

    async def get_policy(self, db: AsyncSession, store_id: UUID) -> dict:
        """매장 정책 응답 구성 — Policy response; defaults when unset (id is None)."""
        await self._ensure_store(db, store_id)
        policy = await labor_policy_repository.get_by_store(db, store_id)
        if policy is None:
            return {"id": None, "store_id": str(store_id), **LaborPolicyUpdate().model_dump()}
        return self.build_response(policy)

    async def update_policy(self, db: AsyncSession, store_id: UUID, data: LaborPolicyUpdate) -> dict:
        """매장 정책 저장 (upsert).

        Save the store's policy. Takes effect for the next validation or
        draft; stored drafts are not recomputed.

        Raises:
            NotFoundError: 매장이 없을 때 (When store not found)
        """
        await self._ensure_store(db, store_id)
        policy = await labor_policy_repository.upsert(db, store_id, data.model_dump())
        return self.build_response(policy)

    def build_response(self, policy: LaborPolicy) -> dict:
        return {
            "id": str(policy.id),
            "store_id": str(policy.store_id),
            "ft_max_daily_hours": policy.ft_max_daily_hours,
            "pt_max_daily_hours": policy.pt_max_daily_hours,
            "ft_max_consecutive_days": policy.ft_max_consecutive_days,
            "pt_max_consecutive_days": policy.pt_max_consecutive_days,
            "regular_hours_threshold": policy.regular_hours_threshold,
            "min_break_minutes": policy.min_break_minutes,
            "standard_break_minutes": policy.standard_break_minutes,
            "weekly_day_factor": policy.weekly_day_factor,
            "fairness_spread_threshold": policy.fairness_spread_threshold,
            "min_staffing": dict(policy.min_staffing or {}),
        }


# 싱글턴 인스턴스 — Singleton instance
labor_policy_service: LaborPolicyService = LaborPolicyService()
