"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 라우터, SLA 스윕 등록.

FastAPI application entry point — Middleware and router registration.
Configures logging, CORS, health check, the admin router, and the
background SLA sweep started from the lifespan.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roster.config import settings
from roster.database import async_session
from roster.middleware.axiom_logging import AxiomLoggingMiddleware
from roster.services.sla_sweep_service import SlaSweepRunner

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """앱 수명 주기 — SLA 스윕 백그라운드 작업 시작/종료.

    Start the SLA sweep runner on startup (when enabled) and cancel it on shutdown.
    """
    runner: SlaSweepRunner | None = None
    if settings.SLA_SWEEP_ENABLED:
        runner = SlaSweepRunner(async_session, settings.SLA_SWEEP_INTERVAL_SECONDS)
        runner.start()
    try:
        yield
    finally:
        if runner is not None:
            await runner.stop()


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — 관리자 엔드포인트 (Stores, roster, schedules, reviews, SLA)
# ---------------------------------------------------------------------------
from roster.api.admin import admin_router  # noqa: E402

app.include_router(admin_router, prefix="/api/v1/admin")
