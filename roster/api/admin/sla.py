"""관리자 SLA 라우터 — 수동 SLA 스윕 실행.

Admin SLA Router — Manual trigger for the SLA sweep that otherwise runs
in the background.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db
from roster.schemas.schedule import SlaSweepRequest, SlaSweepResponse
from roster.services.sla_sweep_service import run_sla_sweep

router: APIRouter = APIRouter()


@router.post("/sla-sweep", response_model=SlaSweepResponse)
async def trigger_sla_sweep(
    data: SlaSweepRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """SLA 스윕을 즉시 실행합니다 — ``now`` is optional and defaults to the current time."""
    advanced = await run_sla_sweep(db, data.now)
    return {"advanced": advanced, "count": len(advanced)}
