"""승인 서비스 — 2단계 검토 상태 머신.

Approval Service — Two-stage, SLA-bounded review workflow.

Status Flow:
    draft ──submit(supervisor)──▶ review_stage_1 ──approve──▶ review_stage_2 ──approve──▶ published
    review_stage_1 ──submit(area_manager)──▶ review_stage_2
    review_stage_N ──withdraw──▶ draft

Every schedule transition is a conditional update on the expected source
status. When it matches no row, another request or the SLA sweep moved
the schedule first and ConflictError (409) is raised. Conflicts are an
expected outcome and are logged at info level.
"""

import logging
from datetime import datetime, timedelta
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from roster.config import settings
from roster.constants import (
    REVIEW_APPROVED,
    REVIEW_PENDING,
    REVIEW_REJECTED,
    REVIEW_STATUSES,
    STAGE_AREA_MANAGER,
    STAGE_STATUS,
    STAGE_SUPERVISOR,
    STATUS_DRAFT,
    STATUS_PUBLISHED,
    STATUS_REVIEW_1,
    STATUS_REVIEW_2,
)
from roster.database import utc_now
from roster.models.schedule import ReviewRecord, Schedule
from roster.repositories.schedule_repository import schedule_repository
from roster.services.notification_service import notification_service
from roster.services.schedule_service import schedule_service
from roster.utils.event_log import log_event
from roster.utils.exceptions import BadRequestError, ConflictError, NotFoundError, ScheduleInvalidError

logger = logging.getLogger(__name__)

# 제출 단계별 기대 원 상태 — Source status each submit stage requires
SUBMIT_SOURCE: dict[str, str] = {
    STAGE_SUPERVISOR: STATUS_DRAFT,
    STAGE_AREA_MANAGER: STATUS_REVIEW_1,
}

# 승인 시 전이 (원 상태, 대상 상태) — Transition applied when a stage is approved
APPROVAL_TRANSITION: dict[str, tuple[str, str]] = {
    STAGE_SUPERVISOR: (STATUS_REVIEW_1, STATUS_REVIEW_2),
    STAGE_AREA_MANAGER: (STATUS_REVIEW_2, STATUS_PUBLISHED),
}

DECISION_OUTCOMES: tuple[str, ...] = (REVIEW_APPROVED, REVIEW_REJECTED)


def sla_deadline(now: datetime) -> datetime:
    """검토 단계 SLA 마감 — now + SLA_HOURS."""
    return now + timedelta(hours=settings.SLA_HOURS)


def next_deadline(status: str, now: datetime) -> datetime | None:
    """대상 상태의 마감 — review statuses get a fresh deadline, others none."""
    return sla_deadline(now) if status in REVIEW_STATUSES else None


class ApprovalService:
    """승인 서비스.

    Submit, decide, and withdraw operations of the approval state machine.
    """

    def _conflict(self, schedule_id: UUID, action: str) -> ConflictError:
        logger.info("Schedule %s: %s lost a concurrent transition", schedule_id, action)
        log_event("schedule.transition_conflict", schedule_id=schedule_id, action=action)
        return ConflictError(
            "스케줄 상태가 동시에 변경되었습니다. 다시 조회 후 시도하세요 "
            "(Schedule status changed concurrently; reload and retry)"
        )

    async def submit(
        self,
        db: AsyncSession,
        schedule_id: UUID,
        stage: str,
        submitted_by: str | None = None,
        now: datetime | None = None,
    ) -> Schedule:
        """스케줄을 검토 단계로 제출합니다.

        Submit a schedule into a review stage.

        - supervisor: draft → review_stage_1. validate_week runs first as the
          gate; any violation rejects the submission.
        - area_manager: review_stage_1 → review_stage_2.

        Both set the SLA deadline to now + SLA_HOURS and create a pending
        review record for the stage.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            schedule_id: 스케줄 UUID (Schedule UUID)
            stage: 검토 단계 (supervisor | area_manager)
            submitted_by: 제출자 식별자 (Submitter identity, free-form)
            now: 기준 시각, 기본값 현재 (Reference time; defaults to now)

        Returns:
            Schedule: 전이된 스케줄 (Schedule after the transition)

        Raises:
            BadRequestError: 알 수 없는 단계 또는 잘못된 원 상태 (Unknown stage or wrong source status)
            ScheduleInvalidError: 검증 위반 존재 (Week has rule violations)
            ConflictError: 동시 전이 충돌 (Concurrent transition)
        """
        if stage not in SUBMIT_SOURCE:
            raise BadRequestError(f"알 수 없는 검토 단계입니다 (Unknown review stage '{stage}')")

        schedule = await schedule_service.get_schedule(db, schedule_id)
        source = SUBMIT_SOURCE[stage]
        if schedule.status != source:
            raise BadRequestError(
                f"{source} 상태에서만 {stage} 검토로 제출할 수 있습니다 "
                f"(Schedule must be {source} to submit for {stage} review, not {schedule.status})"
            )

        if stage == STAGE_SUPERVISOR:
            result = await schedule_service.validate_schedule(db, schedule)
            if not result.valid:
                log_event(
                    "schedule.submit_blocked",
                    schedule_id=schedule.id,
                    violations=len(result.violations),
                )
                raise ScheduleInvalidError([v.model_dump(mode="json") for v in result.violations])

        now = now or utc_now()
        target = STAGE_STATUS[stage]
        if not await schedule_repository.set_status_and_deadline(
            db, schedule.id, source, target, sla_deadline(now)
        ):
            raise self._conflict(schedule.id, f"submit:{stage}")

        await schedule_repository.create_review(db, {
            "schedule_id": schedule.id,
            "stage": stage,
            "status": REVIEW_PENDING,
        })
        await notification_service.create_for_submit(db, schedule, stage)

        log_event(
            "schedule.transition",
            schedule_id=schedule.id,
            from_status=source,
            to_status=target,
            actor=submitted_by,
            deadline=schedule.sla_deadline_at,
        )
        return schedule

    async def decide(
        self,
        db: AsyncSession,
        review_id: UUID,
        outcome: str,
        decider_id: str,
        comment: str | None = None,
        now: datetime | None = None,
    ) -> ReviewRecord:
        """검토 결정을 기록합니다.

        Record a decision on a pending review.

        ``approved`` advances the schedule: supervisor approval moves it to
        review_stage_2 with a new deadline and a pending area_manager
        review; area_manager approval publishes it and clears the deadline.
        ``rejected`` records the decision only; the schedule stays where it
        is until it is withdrawn.

        Raises:
            BadRequestError: 잘못된 결과값, 이미 결정된 검토, 상태 불일치
                             (Invalid outcome, decided review, or status mismatch)
            NotFoundError: 검토 기록이 없을 때 (When review not found)
            ConflictError: 동시 전이 충돌 (Concurrent transition)
        """
        if outcome not in DECISION_OUTCOMES:
            raise BadRequestError(f"잘못된 결정 값입니다 (Invalid outcome '{outcome}')")

        review = await schedule_repository.get_review(db, review_id)
        if review is None:
            raise NotFoundError("검토 기록을 찾을 수 없습니다 (Review not found)")
        if review.status != REVIEW_PENDING:
            raise BadRequestError("이미 결정된 검토입니다 (Review has already been decided)")

        schedule = await schedule_service.get_schedule(db, review.schedule_id)
        source, target = APPROVAL_TRANSITION[review.stage]
        if outcome == REVIEW_APPROVED and schedule.status != source:
            raise BadRequestError(
                f"스케줄이 {source} 상태가 아닙니다 "
                f"(Schedule is {schedule.status}; {review.stage} approval needs {source})"
            )

        now = now or utc_now()
        if not await schedule_repository.decide_review(db, review.id, outcome, decider_id, now, comment):
            raise self._conflict(schedule.id, f"decide:{review.stage}")

        if outcome == REVIEW_APPROVED:
            if not await schedule_repository.set_status_and_deadline(
                db, schedule.id, source, target, next_deadline(target, now)
            ):
                conflict = self._conflict(schedule.id, f"approve:{review.stage}")
                # 검토 결정까지 되돌림 — undo the review decision as well
                await db.rollback()
                raise conflict
            await self._after_advance(db, schedule, target)

        await notification_service.create_for_decision(db, schedule, review)
        log_event(
            "schedule.review_decided",
            schedule_id=schedule.id,
            review_id=review.id,
            stage=review.stage,
            outcome=outcome,
            actor=decider_id,
            status=schedule.status,
        )
        return review

    async def _after_advance(self, db: AsyncSession, schedule: Schedule, target: str) -> None:
        """전이 후속 처리 — open the next review or announce publication."""
        if target == STATUS_REVIEW_2:
            await schedule_repository.create_review(db, {
                "schedule_id": schedule.id,
                "stage": STAGE_AREA_MANAGER,
                "status": REVIEW_PENDING,
            })
            await notification_service.create_for_submit(db, schedule, STAGE_AREA_MANAGER)
        elif target == STATUS_PUBLISHED:
            await notification_service.create_for_publish(db, schedule)

    async def withdraw(
        self,
        db: AsyncSession,
        schedule_id: UUID,
        withdrawn_by: str | None = None,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> Schedule:
        """검토 중인 스케줄을 초안으로 되돌립니다.

        Return a schedule in a review stage to draft so it can be edited and
        resubmitted. The deadline is cleared and pending reviews are closed
        as rejected.

        Raises:
            BadRequestError: 검토 중이 아닐 때 (When not in a review status)
            ConflictError: 동시 전이 충돌 (Concurrent transition)
        """
        schedule = await schedule_service.get_schedule(db, schedule_id)
        if schedule.status not in REVIEW_STATUSES:
            raise BadRequestError(
                "검토 중인 스케줄만 회수할 수 있습니다 (Only schedules under review can be withdrawn)"
            )

        source = schedule.status
        if not await schedule_repository.set_status_and_deadline(db, schedule.id, source, STATUS_DRAFT, None):
            raise self._conflict(schedule.id, "withdraw")

        await schedule_repository.close_pending_reviews(
            db,
            schedule.id,
            REVIEW_REJECTED,
            decided_by=withdrawn_by or "withdrawn",
            decided_at=now or utc_now(),
            comment=reason or "Withdrawn to draft",
        )
        log_event(
            "schedule.transition",
            schedule_id=schedule.id,
            from_status=source,
            to_status=STATUS_DRAFT,
            actor=withdrawn_by,
        )
        return schedule

    async def list_reviews(self, db: AsyncSession, schedule_id: UUID) -> Sequence[ReviewRecord]:
        await schedule_service.get_schedule(db, schedule_id)
        return await schedule_repository.list_reviews(db, schedule_id)

    def build_review_response(self, review: ReviewRecord) -> dict:
        return {
            "id": str(review.id),
            "schedule_id": str(review.schedule_id),
            "stage": review.stage,
            "status": review.status,
            "comment": review.comment,
            "decided_by": review.decided_by,
            "decided_at": review.decided_at,
            "created_at": review.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
approval_service: ApprovalService = ApprovalService()
