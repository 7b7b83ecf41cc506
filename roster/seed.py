"""초기 데이터 시드 스크립트 — 데모 매장, 노동 정책, 근무자 6명 생성.

Seed script — Creates a demo store with its labor policy and six workers.
Run this script once to bootstrap a local database.

Usage:
    python -m roster.seed

Creates:
    - 1개 매장: "Demo Store" (1 store, 10:00-22:00)
    - 기본 노동 정책 1건 (Default labor policy row)
    - 근무자 6명: 정규 3명, 파트 3명 (3 full-time, 3 part-time workers)
"""

import asyncio

from sqlalchemy import select

from roster.constants import FULL_DAY, FULL_TIME, PART_TIME, WEEKDAY_EVENING_ONLY, WEEKEND_EVENING_ONLY
from roster.database import Base, async_session, engine
from roster.models import LaborPolicy, Store, Worker
from roster.schemas.rules import LaborPolicyUpdate

# (이름, 사번, 구분, 주 역할, 스킬, 파트 유형) — (name, emp_no, category, primary role, skills, pt type)
DEMO_WORKERS: list[tuple[str, str, str, str, list[str], str | None]] = [
    ("Kim Minji", "E001", FULL_TIME, "cashier", ["cashier", "reception", "control"], None),
    ("Lee Junho", "E002", FULL_TIME, "plating", ["plating", "runner", "clearing"], None),
    ("Park Sora", "E003", FULL_TIME, "control", ["all"], None),
    ("Choi Yuna", "E004", PART_TIME, "tea_service", ["tea_service", "beverage"], FULL_DAY),
    ("Jung Hoon", "E005", PART_TIME, "runner", ["runner", "clearing"], WEEKDAY_EVENING_ONLY),
    ("Han Jiwoo", "E006", PART_TIME, "beverage", ["beverage", "reception"], WEEKEND_EVENING_ONLY),
]


async def seed() -> None:
    """데이터베이스를 데모 데이터로 시드합니다.

    Seed the database with demo data.
    Creates tables if they don't exist, then inserts the demo store,
    its labor policy (built-in defaults), and six workers.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if already seeded).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(Store).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        store: Store = Store(name="Demo Store", business_hours="10:00-22:00")
        db.add(store)
        await db.flush()  # flush로 store.id 생성 (Flush to generate store.id)

        db.add(LaborPolicy(store_id=store.id, **LaborPolicyUpdate().model_dump()))

        for name, emp_no, category, primary_role, skills, pt_shift_type in DEMO_WORKERS:
            db.add(Worker(
                store_id=store.id,
                name=name,
                emp_no=emp_no,
                category=category,
                primary_role=primary_role,
                skills=skills,
                pt_shift_type=pt_shift_type,
            ))

        await db.commit()
        print(f"Seeded: store={store.id}, workers={len(DEMO_WORKERS)}")


if __name__ == "__main__":
    asyncio.run(seed())
