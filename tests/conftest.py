"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite) database, session, and
httpx client fixtures. Each test gets a fresh schema on a single shared
connection (StaticPool), so the API and the test body see the same data.
"""

import os

# 앱 임포트 전에 설정 — Configure before the app modules read settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SLA_SWEEP_ENABLED"] = "false"
os.environ["AXIOM_API_TOKEN"] = ""
os.environ["AXIOM_DATASET"] = ""

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import date  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from roster.constants import FULL_DAY, FULL_TIME, PART_TIME, WEEKDAY_EVENING_ONLY, WEEKEND_EVENING_ONLY  # noqa: E402
from roster.database import Base, get_db  # noqa: E402
from roster.main import app  # noqa: E402
from roster.models import *  # noqa: F401,F403,E402 — register all models with metadata

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# 2025-01-13 은 월요일 (Monday)
WEEK_START = date(2025, 1, 13)

# (이름, 구분, 주 역할, 스킬, 파트 유형) — Six-worker demo roster; nobody covers beverage in the morning
SIX_WORKERS: list[tuple[str, str, str, list[str], str | None]] = [
    ("Kim Minji", FULL_TIME, "cashier", ["cashier", "reception"], None),
    ("Lee Junho", FULL_TIME, "reception", ["reception", "cashier"], None),
    ("Choi Yuna", PART_TIME, "plating", ["plating", "runner"], FULL_DAY),
    ("Jung Hoon", PART_TIME, "clearing", ["clearing", "beverage"], WEEKDAY_EVENING_ONLY),
    ("Park Sora", FULL_TIME, "control", ["control", "tea_service"], None),
    ("Han Jiwoo", PART_TIME, "runner", ["runner", "beverage"], WEEKEND_EVENING_ONLY),
]


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — fresh in-memory schema per test."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def store(db: AsyncSession):
    """테스트 매장을 생성합니다."""
    from roster.models.store import Store
    s = Store(name="Test Store", business_hours="10:00-22:00")
    db.add(s)
    await db.flush()
    await db.refresh(s)
    return s


@pytest_asyncio.fixture
async def workers(db: AsyncSession, store):
    """매장 근무자 6명을 생성합니다 — 정규 3, 파트 3."""
    from roster.models.worker import Worker
    result = []
    for index, (name, category, role, skills, pt_type) in enumerate(SIX_WORKERS, start=1):
        w = Worker(
            store_id=store.id,
            name=name,
            emp_no=f"E{index:03d}",
            category=category,
            primary_role=role,
            skills=skills,
            pt_shift_type=pt_type,
        )
        db.add(w)
        result.append(w)
    await db.flush()
    return result


@pytest_asyncio.fixture
async def schedule(db: AsyncSession, store):
    """빈 draft 스케줄을 생성합니다 (week of 2025-01-13)."""
    from roster.models.schedule import Schedule
    s = Schedule(store_id=store.id, week_start=WEEK_START, status="draft", created_by="tester")
    db.add(s)
    await db.flush()
    await db.refresh(s)
    return s
