import pytest
from datetime import date, timedelta
from httpx import AsyncClient
from fastapi import status

pytestmark = pytest.mark.asyncio


@pytest.fixture
async def visa_records(client: AsyncClient, admin_headers: dict, created_client: dict) -> list:
    records = []
    for payload in (
        {"wished_visa": "retirement_visa"},
        {"wished_visa": "student_visa_language_school"},
        {"wished_visa": "retirement_visa", "existing_visa": "tourist_visa_60_day", "is_active": False},
    ):
        response = await client.post(
            "/api/v1/visas",
            json={"client_id": created_client["id"], **payload},
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_201_CREATED, response.text
        records.append(response.json()["data"])
    return records


class TestVisas:
    async def test_create_visa(self, client: AsyncClient, admin_headers: dict, created_client: dict, admin_user):
        response = await client.post(
            "/api/v1/visas",
            json={
                "client_id": created_client["id"],
                "existing_visa": "entry_stamp_30_day",
                "wished_visa": "dtv",
                "latest_entry_date": "2024-03-01",
                "existing_visa_expiry": "2024-03-31",
            },
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["wished_visa"] == "dtv"
        assert data["client"]["email"] == created_client["email"]
        assert data["creator"]["id"] == admin_user.id
        assert data["is_active"] is True

    async def test_create_for_missing_client(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(
            "/api/v1/visas",
            json={"client_id": 9999, "wished_visa": "dtv"},
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_invalid_visa_type(self, client: AsyncClient, admin_headers: dict, created_client: dict):
        response = await client.post(
            "/api/v1/visas",
            json={"client_id": created_client["id"], "wished_visa": "golden_ticket"},
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "wished_visa" in response.json()["error"]

    async def test_expiry_before_entry(self, client: AsyncClient, admin_headers: dict, created_client: dict):
        response = await client.post(
            "/api/v1/visas",
            json={
                "client_id": created_client["id"],
                "wished_visa": "dtv",
                "latest_entry_date": "2024-03-01",
                "existing_visa_expiry": "2024-02-01",
            },
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_update_checks_stored_dates(self, client: AsyncClient, admin_headers: dict, created_client: dict):
        created = await client.post(
            "/api/v1/visas",
            json={"client_id": created_client["id"], "wished_visa": "dtv", "latest_entry_date": "2024-03-01"},
            headers=admin_headers,
        )
        url = f"/api/v1/visas/{created.json()['data']['id']}"

        response = await client.patch(url, json={"existing_visa_expiry": "2024-01-01"}, headers=admin_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = await client.patch(url, json={"existing_visa_expiry": "2024-06-01"}, headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["existing_visa_expiry"] == "2024-06-01"
        assert data["wished_visa"] == "dtv"

        response = await client.patch(url, json={"wished_visa": None}, headers=admin_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = await client.patch(url, json={"is_active": None}, headers=admin_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == {"is_active": "is_active cannot be empty"}

    async def test_toggle_and_delete(self, client: AsyncClient, admin_headers: dict, visa_records: list):
        visa_id = visa_records[0]["id"]
        response = await client.patch(f"/api/v1/visas/{visa_id}/toggle-status", headers=admin_headers)
        assert response.json()["data"]["is_active"] is False

        response = await client.delete(f"/api/v1/visas/{visa_id}", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK

        response = await client.get(f"/api/v1/visas/{visa_id}", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestVisaSearch:
    async def test_search_by_value_substring(self, client: AsyncClient, admin_headers: dict, visa_records: list):
        response = await client.get("/api/v1/visas", params={"search": "retiremen"}, headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        result = response.json()["data"]["result"]
        assert len(result) == 2
        assert {v["wished_visa"] for v in result} == {"retirement_visa"}

    async def test_search_by_label(self, client: AsyncClient, admin_headers: dict, visa_records: list):
        response = await client.get("/api/v1/visas", params={"search": "Tourist Visa (60"}, headers=admin_headers)
        result = response.json()["data"]["result"]
        assert [v["existing_visa"] for v in result] == ["tourist_visa_60_day"]

    async def test_search_without_match(self, client: AsyncClient, admin_headers: dict, visa_records: list):
        response = await client.get("/api/v1/visas", params={"search": "zzz-no-match"}, headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["result"] == []
        assert data["pagination"]["totalItems"] == 0
        assert data["pagination"]["totalPages"] == 0

    async def test_filters(self, client: AsyncClient, admin_headers: dict, visa_records: list):
        response = await client.get(
            "/api/v1/visas",
            params={"wished_visa": "retirement_visa", "is_active": "false"},
            headers=admin_headers,
        )
        result = response.json()["data"]["result"]
        assert [v["id"] for v in result] == [visa_records[2]["id"]]

    async def test_default_order_is_newest_first(self, client: AsyncClient, admin_headers: dict, visa_records: list):
        response = await client.get("/api/v1/visas", headers=admin_headers)
        ids = [v["id"] for v in response.json()["data"]["result"]]
        assert ids == sorted((v["id"] for v in visa_records), reverse=True)


class TestVisaStats:
    async def test_stats(self, client: AsyncClient, admin_headers: dict, created_client: dict, visa_records: list):
        today = date.today()
        for expiry, is_active in ((10, True), (60, True), (5, False)):
            response = await client.post(
                "/api/v1/visas",
                json={
                    "client_id": created_client["id"],
                    "existing_visa": "entry_stamp_30_day",
                    "wished_visa": "dtv",
                    "existing_visa_expiry": (today + timedelta(days=expiry)).isoformat(),
                    "is_active": is_active,
                },
                headers=admin_headers,
            )
            assert response.status_code == status.HTTP_201_CREATED

        response = await client.get("/api/v1/visas/stats", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        stats = response.json()["data"]
        assert stats["totalVisas"] == 6
        assert stats["activeVisas"] == 4
        assert stats["inactiveVisas"] == 2
        assert stats["recentVisas"] == 6
        # Only active visas count as expiring
        assert stats["expiringVisas"] == 1
        assert stats["visasByWishedType"] == [
            {"type": "dtv", "count": 3},
            {"type": "retirement_visa", "count": 2},
            {"type": "student_visa_language_school", "count": 1},
        ]
        assert {"type": "entry_stamp_30_day", "count": 3} in stats["visasByExistingType"]
        assert {"type": "tourist_visa_60_day", "count": 1} in stats["visasByExistingType"]

    async def test_stats_requires_admin(self, client: AsyncClient, user_headers: dict):
        response = await client.get("/api/v1/visas/stats", headers=user_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN
