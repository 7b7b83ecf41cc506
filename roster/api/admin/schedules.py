"""관리자 스케줄 라우터 — 주간 스케줄, 자동 배정, 검증, 승인 제출 API.

Admin Schedule Router — Weekly schedules: creation and listing, draft
generation, validation, and the submit/withdraw side of the approval
workflow.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db
from roster.schemas.common import PaginatedResponse
from roster.schemas.rules import ValidationResult
from roster.schemas.schedule import (
    DraftResult,
    ProposedAssignment,
    ReviewResponse,
    ScheduleCreate,
    ScheduleDetailResponse,
    ScheduleResponse,
    SubmitRequest,
    WithdrawRequest,
)
from roster.services.approval_service import approval_service
from roster.services.draft_service import draft_service
from roster.services.schedule_service import schedule_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_schedules(
    db: Annotated[AsyncSession, Depends(get_db)],
    store_id: Annotated[UUID | None, Query()] = None,
    status: Annotated[str | None, Query()] = None,
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """스케줄 목록을 필터링하여 조회합니다.

    List schedules, newest week first.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        store_id: 매장 UUID 필터, 선택 (Optional store filter)
        status: 상태 필터, 선택 (Optional status filter)
        page: 페이지 번호 (Page number)
        per_page: 페이지당 항목 수 (Items per page)

    Returns:
        dict: 페이지네이션된 스케줄 목록 (Paginated schedule list)
    """
    schedules, total = await schedule_service.list_schedules(db, store_id, status, page, per_page)
    return {
        "items": [schedule_service.build_response(s) for s in schedules],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.post("", response_model=ScheduleResponse, status_code=201)
async def create_schedule(
    data: ScheduleCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """빈 주간 스케줄을 생성합니다 — Create an empty draft for a store-week (Monday start)."""
    schedule = await schedule_service.create_schedule(db, data)
    await db.commit()
    return schedule_service.build_response(schedule)


@router.get("/{schedule_id}", response_model=ScheduleDetailResponse)
async def get_schedule(
    schedule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """스케줄 상세를 조회합니다.

    Get a schedule with its slots, assignments (derived hours and peak
    flag), and weekly hours per worker.
    """
    schedule = await schedule_service.get_schedule(db, schedule_id)
    return await schedule_service.build_detail(db, schedule)


@router.post("/{schedule_id}/generate", response_model=DraftResult)
async def generate_draft(
    schedule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """자동 배정으로 초안을 생성합니다.

    Generate the draft with the auto-assignment heuristic. Replaces the
    week's slots and assignments. Returned with its validation result even
    when staffing gaps remain.
    """
    result = await draft_service.generate(db, schedule_id)
    await db.commit()
    return result


@router.get("/{schedule_id}/validation", response_model=ValidationResult)
async def validate_schedule(
    schedule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ValidationResult:
    """주간 검증 — Run the week validation over the stored schedule."""
    schedule = await schedule_service.get_schedule(db, schedule_id)
    return await schedule_service.validate_schedule(db, schedule)


@router.post("/{schedule_id}/assignments/validate", response_model=ValidationResult)
async def validate_assignment(
    schedule_id: UUID,
    data: ProposedAssignment,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ValidationResult:
    """배정 1건 검증 — Check a proposed assignment before placing it."""
    return await schedule_service.validate_proposed(db, schedule_id, data)


@router.post("/{schedule_id}/submit", response_model=ScheduleResponse)
async def submit_schedule(
    schedule_id: UUID,
    data: SubmitRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """스케줄을 검토 단계로 제출합니다.

    Submit for review. ``supervisor`` moves draft → review_stage_1 after
    the validation gate; ``area_manager`` moves review_stage_1 →
    review_stage_2.

    Args:
        schedule_id: 스케줄 UUID (Schedule UUID)
        data: 제출 단계와 제출자 (Stage and submitter)
        db: 비동기 데이터베이스 세션 (Async database session)

    Returns:
        dict: 전이된 스케줄 (Schedule after the transition)
    """
    schedule = await approval_service.submit(db, schedule_id, data.stage, data.submitted_by)
    await db.commit()
    return schedule_service.build_response(schedule)


@router.post("/{schedule_id}/withdraw", response_model=ScheduleResponse)
async def withdraw_schedule(
    schedule_id: UUID,
    data: WithdrawRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """검토 중 스케줄을 초안으로 회수합니다 — Return a schedule under review to draft."""
    schedule = await approval_service.withdraw(db, schedule_id, data.withdrawn_by, data.reason)
    await db.commit()
    return schedule_service.build_response(schedule)


@router.get("/{schedule_id}/reviews", response_model=list[ReviewResponse])
async def list_reviews(
    schedule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[dict]:
    reviews = await approval_service.list_reviews(db, schedule_id)
    return [approval_service.build_review_response(r) for r in reviews]
