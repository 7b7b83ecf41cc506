"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin endpoints into a single
router mounted at /api/v1/admin.

Included routers:
    - stores: 매장, 노동 정책, 알림 (Stores, labor policy, notifications)
    - workers: 근무자 명단, 휴가 (Roster and time off)
    - schedules: 주간 스케줄, 자동 배정, 검증, 제출 (Schedules, drafts, validation, submit)
    - reviews: 검토 결정 (Review decisions)
    - sla: 수동 SLA 스윕 (Manual SLA sweep)
"""

from fastapi import APIRouter

from roster.api.admin.reviews import router as reviews_router
from roster.api.admin.schedules import router as schedules_router
from roster.api.admin.sla import router as sla_router
from roster.api.admin.stores import router as stores_router
from roster.api.admin.workers import router as workers_router

admin_router: APIRouter = APIRouter()

# 매장: /stores 하위 (Stores, labor policy, notifications)
admin_router.include_router(stores_router, prefix="/stores", tags=["Stores"])
# 근무자/휴가: /stores/{store_id}/workers, /workers, /time-off (nested and flat)
admin_router.include_router(workers_router, tags=["Roster"])
# 스케줄: /schedules 하위 (Schedules and approval submission)
admin_router.include_router(schedules_router, prefix="/schedules", tags=["Schedules"])
# 검토: /reviews 하위 (Review decisions)
admin_router.include_router(reviews_router, prefix="/reviews", tags=["Reviews"])
# SLA: /sla-sweep
admin_router.include_router(sla_router, tags=["SLA"])
