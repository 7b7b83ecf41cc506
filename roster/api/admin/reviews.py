"""관리자 검토 라우터 — 검토 결정 API.

Admin Review Router — Decisions on pending review records.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db
from roster.schemas.schedule import ReviewDecisionRequest, ReviewResponse
from roster.services.approval_service import approval_service

router: APIRouter = APIRouter()


@router.post("/{review_id}/decision", response_model=ReviewResponse)
async def decide_review(
    review_id: UUID,
    data: ReviewDecisionRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """검토 결정을 기록합니다.

    Approve or reject a pending review. Approval advances the schedule;
    rejection is recorded only.

    Args:
        review_id: 검토 기록 UUID (Review UUID)
        data: 결정 값, 코멘트, 결정자 (Outcome, comment, decider)
        db: 비동기 데이터베이스 세션 (Async database session)

    Returns:
        dict: 결정된 검토 기록 (Decided review record)
    """
    review = await approval_service.decide(db, review_id, data.outcome, data.decider_id, data.comment)
    await db.commit()
    return approval_service.build_review_response(review)
