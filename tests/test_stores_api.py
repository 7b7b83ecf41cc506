"""매장/노동 정책/근무자/휴가 API 테스트.

Store, labor policy, roster, and time-off API tests.
"""

import uuid

from httpx import AsyncClient

URL = "/api/v1/admin/stores"


class TestStore:
    """매장 API 테스트."""

    async def test_create_store(self, client: AsyncClient):
        """매장 생성 성공."""
        res = await client.post(URL, json={"name": "New Store", "business_hours": "11:00-23:00"})
        assert res.status_code == 201
        data = res.json()
        assert data["name"] == "New Store"
        assert data["business_hours"] == "11:00-23:00"
        assert data["is_active"] is True

    async def test_create_store_requires_name(self, client: AsyncClient):
        res = await client.post(URL, json={"name": ""})
        assert res.status_code == 422

    async def test_get_store(self, client: AsyncClient, store):
        res = await client.get(f"{URL}/{store.id}")
        assert res.status_code == 200
        assert res.json()["name"] == "Test Store"

    async def test_get_nonexistent_store(self, client: AsyncClient):
        """존재하지 않는 매장 조회 시 404."""
        res = await client.get(f"{URL}/{uuid.uuid4()}")
        assert res.status_code == 404

    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.json() == {"status": "ok"}


class TestLaborPolicy:
    """노동 정책 API 테스트."""

    async def test_defaults_when_unset(self, client: AsyncClient, store):
        """저장된 정책이 없으면 기본값, id는 null."""
        res = await client.get(f"{URL}/{store.id}/labor-policy")
        assert res.status_code == 200
        data = res.json()
        assert data["id"] is None
        assert data["ft_max_daily_hours"] == 12
        assert data["pt_max_consecutive_days"] == 6
        assert data["min_staffing"]["beverage"] == 1

    async def test_upsert(self, client: AsyncClient, store):
        body = {"ft_max_daily_hours": 10, "min_staffing": {"cashier": 2}}
        res = await client.put(f"{URL}/{store.id}/labor-policy", json=body)
        assert res.status_code == 200
        first_id = res.json()["id"]
        assert first_id is not None
        assert res.json()["ft_max_daily_hours"] == 10

        res2 = await client.put(f"{URL}/{store.id}/labor-policy", json={"ft_max_daily_hours": 11})
        assert res2.json()["id"] == first_id
        assert res2.json()["ft_max_daily_hours"] == 11

    async def test_invalid_factor(self, client: AsyncClient, store):
        res = await client.put(f"{URL}/{store.id}/labor-policy", json={"weekly_day_factor": 9})
        assert res.status_code == 422

    async def test_policy_for_missing_store(self, client: AsyncClient):
        res = await client.get(f"{URL}/{uuid.uuid4()}/labor-policy")
        assert res.status_code == 404


class TestWorkers:
    """근무자 API 테스트."""

    async def test_create_worker_adds_primary_role_to_skills(self, client: AsyncClient, store):
        res = await client.post(f"{URL}/{store.id}/workers", json={
            "name": "Kim",
            "emp_no": "X100",
            "category": "full_time",
            "primary_role": "cashier",
            "skills": ["reception"],
            "pt_shift_type": "full_day",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["skills"] == ["cashier", "reception"]
        # 정규직은 파트 유형 없음
        assert data["pt_shift_type"] is None

    async def test_unknown_role_rejected(self, client: AsyncClient, store):
        res = await client.post(f"{URL}/{store.id}/workers", json={
            "name": "Lee", "category": "part_time", "primary_role": "dishwasher",
        })
        assert res.status_code == 422

    async def test_duplicate_emp_no(self, client: AsyncClient, store, workers):
        res = await client.post(f"{URL}/{store.id}/workers", json={
            "name": "Dup", "emp_no": "E001", "category": "full_time", "primary_role": "runner",
        })
        assert res.status_code == 409

    async def test_list_and_deactivate(self, client: AsyncClient, store, workers):
        res = await client.get(f"{URL}/{store.id}/workers")
        assert res.status_code == 200
        assert len(res.json()) == 6

        patch = await client.patch(f"/api/v1/admin/workers/{workers[0].id}", json={"is_active": False})
        assert patch.status_code == 200
        assert patch.json()["is_active"] is False

        active = await client.get(f"{URL}/{store.id}/workers")
        assert len(active.json()) == 5
        everyone = await client.get(f"{URL}/{store.id}/workers", params={"include_inactive": True})
        assert len(everyone.json()) == 6

    async def test_update_missing_worker(self, client: AsyncClient):
        res = await client.patch(f"/api/v1/admin/workers/{uuid.uuid4()}", json={"name": "X"})
        assert res.status_code == 404


class TestTimeOff:
    """휴가 API 테스트."""

    async def test_create_and_approve(self, client: AsyncClient, store, workers):
        res = await client.post(f"{URL}/{store.id}/time-off", json={
            "worker_id": str(workers[0].id),
            "off_date": "2025-01-14",
            "type": "vacation",
        })
        assert res.status_code == 201
        assert res.json()["status"] == "pending"

        request_id = res.json()["id"]
        res2 = await client.patch(f"/api/v1/admin/time-off/{request_id}", json={"status": "approved"})
        assert res2.status_code == 200
        assert res2.json()["status"] == "approved"

        listed = await client.get(f"{URL}/{store.id}/time-off", params={"status": "approved"})
        assert [r["id"] for r in listed.json()] == [request_id]

    async def test_invalid_type(self, client: AsyncClient, store, workers):
        res = await client.post(f"{URL}/{store.id}/time-off", json={
            "worker_id": str(workers[0].id), "off_date": "2025-01-14", "type": "holiday",
        })
        assert res.status_code == 422

    async def test_worker_from_other_store(self, client: AsyncClient, db, store, workers):
        from roster.models.store import Store
        other = Store(name="Other")
        db.add(other)
        await db.flush()

        res = await client.post(f"{URL}/{other.id}/time-off", json={
            "worker_id": str(workers[0].id), "off_date": "2025-01-14", "type": "sick",
        })
        assert res.status_code == 400
