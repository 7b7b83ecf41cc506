"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Pre-configured HTTPException subclasses raised by services and rendered
by FastAPI. Validation violations are data, not exceptions; only the
submit gate turns them into ScheduleInvalidError.

Usage:
    from roster.utils.exceptions import NotFoundError, ConflictError
    raise NotFoundError("Schedule not found")
    raise ConflictError("Schedule status changed concurrently")
"""

from typing import Any

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a store, worker, schedule, or review does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    409 Conflict exception.
    Raised when creating a resource that violates a uniqueness constraint
    (e.g. a second schedule for the same store and week, a reused emp_no).

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised for invalid transition requests: unknown stage or outcome,
    wrong source status, or a review that was already decided.

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictError(HTTPException):
    """409 동시 상태 전이 충돌.

    Concurrent-transition conflict. A conditional status update matched
    zero rows because another request or the SLA sweep moved the record
    first. The caller may reload and retry.

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "Record was modified concurrently") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ScheduleInvalidError(HTTPException):
    """422 검증 실패 — 제출 게이트에서 위반 사항이 있을 때.

    Raised when a schedule with rule violations is submitted for review.
    The response detail carries the violation list.

    Args:
        violations: 직렬화된 위반 목록 (Serialized ValidationIssue dicts)
    """

    def __init__(self, violations: list[dict[str, Any]]) -> None:
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail={
                "message": "Schedule has rule violations",
                "violations": violations,
            },
        )
        self.violations = violations
