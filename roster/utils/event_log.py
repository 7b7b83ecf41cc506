"""도메인 이벤트 로깅 — 스케줄 상태 전이, SLA 자동 승인, 초안 재생성.

Domain event logging. Every event goes to the stdlib logger; when Axiom is
configured it is also shipped to the same dataset the request middleware
uses. Shipping failures are logged and never propagate.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from axiom_py import Client as AxiomClient

from roster.config import settings

logger = logging.getLogger(__name__)

_client: AxiomClient | None = None


def _get_client() -> AxiomClient | None:
    """Axiom 클라이언트 지연 생성 — Lazily build the Axiom client when configured."""
    global _client
    if _client is None and settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
        _client = AxiomClient(token=settings.AXIOM_API_TOKEN)
    return _client


def _plain(value: Any) -> Any:
    """JSON 직렬화 가능한 값으로 변환 — UUIDs, dates, and the like become strings."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    return str(value)


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """도메인 이벤트 기록.

    Record one domain event.

    Args:
        event: 이벤트 이름 (e.g. "schedule.transition", "sla.auto_approved")
        level: stdlib 로그 레벨 (Level used for the local log line)
        **fields: 이벤트 속성 (Event attributes; values should be JSON-friendly)
    """
    attrs: dict[str, Any] = {key: _plain(value) for key, value in fields.items()}
    logger.log(level, "%s %s", event, attrs)

    payload: dict[str, Any] = {"event": event, "_time": datetime.now(timezone.utc).isoformat(), **attrs}

    client = _get_client()
    if client is None:
        return
    try:
        client.ingest_events(settings.AXIOM_DATASET, [payload])
    except Exception:
        logger.warning("Axiom ingest failed for event %s", event, exc_info=True)
