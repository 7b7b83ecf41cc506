"""근무자/휴가 서비스 — 근무자 명단과 휴가 신청 관리.

Worker Service — Roster management (workers and time-off requests) and
conversion of worker rows into the WorkerProfile snapshots the rules
engine reads.
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from roster.constants import PART_TIME
from roster.models.worker import TimeOffRequest, Worker
from roster.repositories.worker_repository import time_off_repository, worker_repository
from roster.schemas.roster import TimeOffCreate, WorkerCreate, WorkerProfile, WorkerUpdate
from roster.services.store_service import store_service
from roster.utils.exceptions import BadRequestError, DuplicateError, NotFoundError


def to_profile(worker: Worker) -> WorkerProfile:
    """근무자 행 → 규칙 엔진 스냅샷 — Worker row to WorkerProfile."""
    return WorkerProfile(
        id=str(worker.id),
        name=worker.name,
        category=worker.category,
        primary_role=worker.primary_role,
        skills=list(worker.skills or []),
        pt_shift_type=worker.pt_shift_type,
    )


class WorkerService:
    """근무자 서비스.

    Worker and time-off service. Only approved time off affects
    availability.
    """

    # --- 근무자 (Workers) ---

    async def list_workers(self, db: AsyncSession, store_id: UUID, active_only: bool = True) -> Sequence[Worker]:
        await store_service.get_store(db, store_id)
        return await worker_repository.list_by_store(db, store_id, active_only)

    async def get_worker(self, db: AsyncSession, worker_id: UUID) -> Worker:
        worker = await worker_repository.get_by_id(db, worker_id)
        if worker is None:
            raise NotFoundError("근무자를 찾을 수 없습니다 (Worker not found)")
        return worker

    async def list_profiles(self, db: AsyncSession, store_id: UUID) -> list[WorkerProfile]:
        """활성 근무자 스냅샷 목록 — Active workers as WorkerProfile snapshots."""
        return [to_profile(w) for w in await worker_repository.list_by_store(db, store_id)]

    async def create_worker(self, db: AsyncSession, store_id: UUID, data: WorkerCreate) -> Worker:
        """근무자를 등록합니다.

        Register a worker. The primary role is always part of the skills
        list; the part-time shift type is dropped for full-time workers.

        Raises:
            NotFoundError: 매장이 없을 때 (When store not found)
            DuplicateError: 사번 중복 시 (When emp_no is already used)
        """
        await store_service.get_store(db, store_id)
        if data.emp_no and await worker_repository.emp_no_taken(db, data.emp_no):
            raise DuplicateError("이미 사용 중인 사번입니다 (Employee number already exists)")

        values = data.model_dump()
        if values["primary_role"] not in values["skills"]:
            values["skills"] = [values["primary_role"], *values["skills"]]
        if values["category"] != PART_TIME:
            values["pt_shift_type"] = None
        return await worker_repository.create(db, {"store_id": store_id, **values})

    async def update_worker(self, db: AsyncSession, worker_id: UUID, data: WorkerUpdate) -> Worker:
        """근무자 정보를 수정합니다 — Partial update (exclude_unset).

        Raises:
            NotFoundError: 근무자가 없을 때 (When worker not found)
            DuplicateError: 사번 중복 시 (When emp_no is already used)
        """
        worker = await self.get_worker(db, worker_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("emp_no") and await worker_repository.emp_no_taken(db, values["emp_no"], worker.id):
            raise DuplicateError("이미 사용 중인 사번입니다 (Employee number already exists)")

        primary_role = values.get("primary_role") or worker.primary_role
        skills = values.get("skills", worker.skills) or []
        if primary_role not in skills:
            values["skills"] = [primary_role, *skills]
        if values.get("category", worker.category) != PART_TIME:
            values["pt_shift_type"] = None

        return await worker_repository.update(db, worker.id, values)

    def build_worker_response(self, worker: Worker) -> dict:
        return {
            "id": str(worker.id),
            "store_id": str(worker.store_id),
            "name": worker.name,
            "emp_no": worker.emp_no,
            "category": worker.category,
            "primary_role": worker.primary_role,
            "skills": list(worker.skills or []),
            "pt_shift_type": worker.pt_shift_type,
            "is_active": worker.is_active,
        }

    # --- 휴가 (Time off) ---

    async def create_time_off(self, db: AsyncSession, store_id: UUID, data: TimeOffCreate) -> TimeOffRequest:
        """휴가 신청 등록.

        Raises:
            NotFoundError: 매장/근무자가 없을 때 (When store or worker not found)
            BadRequestError: 다른 매장 근무자일 때 (When the worker belongs to another store)
        """
        await store_service.get_store(db, store_id)
        worker = await self.get_worker(db, data.worker_id)
        if worker.store_id != store_id:
            raise BadRequestError("다른 매장의 근무자입니다 (Worker belongs to another store)")
        return await time_off_repository.create(db, {"store_id": store_id, **data.model_dump()})

    async def list_time_off(
        self,
        db: AsyncSession,
        store_id: UUID,
        date_from: date | None = None,
        date_to: date | None = None,
        status: str | None = None,
    ) -> Sequence[TimeOffRequest]:
        await store_service.get_store(db, store_id)
        return await time_off_repository.list_by_store(db, store_id, date_from, date_to, status)

    async def set_time_off_status(self, db: AsyncSession, request_id: UUID, status: str) -> TimeOffRequest:
        request = await time_off_repository.update(db, request_id, {"status": status})
        if request is None:
            raise NotFoundError("휴가 신청을 찾을 수 없습니다 (Time-off request not found)")
        return request

    def build_time_off_response(self, request: TimeOffRequest) -> dict:
        return {
            "id": str(request.id),
            "store_id": str(request.store_id),
            "worker_id": str(request.worker_id),
            "off_date": request.off_date,
            "type": request.type,
            "status": request.status,
            "notes": request.notes,
            "created_at": request.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
worker_service: WorkerService = WorkerService()
