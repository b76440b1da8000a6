"""
Health Diary Backend — Diary Entry Endpoint Tests
==================================================

What we test:
    ✅ Create with date-only normalization of ISO datetimes
    ✅ Field validation (weight, sleep, mood, missing date) → 400 with field
    ✅ Listing is scoped to the caller and ordered newest date first
    ✅ Ownership: foreign entry → 403, missing entry → 404
    ✅ Partial update and delete
"""

import pytest


async def _create(client, headers, **fields):
    body = {"entry_date": "2025-03-01"}
    body.update(fields)
    response = await client.post("/api/entries", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["entry_id"]


class TestCreateEntry:

    @pytest.mark.asyncio
    async def test_create_entry(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/entries",
            json={
                "entry_date": "2025-03-01",
                "mood": "Happy",
                "weight": 72.5,
                "sleep_hours": 7.5,
                "notes": "  Felt great  ",
            },
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Entry created successfully"

        entry = (await test_client.get(f"/api/entries/{body['entry_id']}", headers=auth_headers)).json()
        assert entry["entry_date"] == "2025-03-01"
        assert entry["mood"] == "Happy"
        assert entry["weight"] == 72.5
        assert entry["sleep_hours"] == 7.5
        assert entry["notes"] == "Felt great"
        assert entry["created_at"]

    @pytest.mark.asyncio
    async def test_datetime_is_stored_as_date(self, test_client, auth_headers):
        entry_id = await _create(test_client, auth_headers, entry_date="2025-03-01T23:30:00Z")

        entry = (await test_client.get(f"/api/entries/{entry_id}", headers=auth_headers)).json()
        assert entry["entry_date"] == "2025-03-01"

    @pytest.mark.asyncio
    async def test_optional_fields_may_be_omitted(self, test_client, auth_headers):
        entry_id = await _create(test_client, auth_headers)

        entry = (await test_client.get(f"/api/entries/{entry_id}", headers=auth_headers)).json()
        assert entry["mood"] is None
        assert entry["weight"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields, bad_field",
        [
            ({"weight": 1}, "weight"),
            ({"weight": 250}, "weight"),
            ({"sleep_hours": 25}, "sleep_hours"),
            ({"sleep_hours": -1}, "sleep_hours"),
            ({"mood": "Angry"}, "mood"),
            ({"entry_date": "not-a-date"}, "entry_date"),
        ],
    )
    async def test_invalid_fields(self, test_client, auth_headers, fields, bad_field):
        body = {"entry_date": "2025-03-01"}
        body.update(fields)

        response = await test_client.post("/api/entries", json=body, headers=auth_headers)

        assert response.status_code == 400
        assert bad_field in [e["field"] for e in response.json()["errors"]]

    @pytest.mark.asyncio
    async def test_missing_entry_date(self, test_client, auth_headers):
        response = await test_client.post("/api/entries", json={"mood": "Sad"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "entry_date"


class TestListEntries:

    @pytest.mark.asyncio
    async def test_list_ordered_by_date_then_newest(self, test_client, auth_headers):
        first = await _create(test_client, auth_headers, entry_date="2025-03-01", mood="Sad")
        second = await _create(test_client, auth_headers, entry_date="2025-03-01", mood="Happy")
        later = await _create(test_client, auth_headers, entry_date="2025-03-05")

        response = await test_client.get("/api/entries", headers=auth_headers)

        assert response.status_code == 200
        assert [e["entry_id"] for e in response.json()] == [later, second, first]

    @pytest.mark.asyncio
    async def test_list_only_own_entries(self, test_client, auth_headers, register_user, login):
        await _create(test_client, auth_headers)
        await register_user("bob")
        bob_headers = {"Authorization": f"Bearer {await login('bob')}"}

        response = await test_client.get("/api/entries", headers=bob_headers)

        assert response.status_code == 200
        assert response.json() == []


class TestOwnership:

    @pytest.mark.asyncio
    async def test_foreign_entry_forbidden(self, test_client, auth_headers, register_user, login):
        entry_id = await _create(test_client, auth_headers)
        await register_user("bob")
        bob_headers = {"Authorization": f"Bearer {await login('bob')}"}

        for method in ("get", "delete"):
            response = await getattr(test_client, method)(f"/api/entries/{entry_id}", headers=bob_headers)
            assert response.status_code == 403
            assert response.json()["message"] == "Not authorized"

        response = await test_client.put(
            f"/api/entries/{entry_id}", json={"mood": "Sad"}, headers=bob_headers
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_entry(self, test_client, auth_headers):
        response = await test_client.get("/api/entries/9999", headers=auth_headers)

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["message"] == "Entry not found"


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client, auth_headers):
        entry_id = await _create(test_client, auth_headers, mood="Happy", weight=70)

        response = await test_client.put(
            f"/api/entries/{entry_id}", json={"mood": "Tired"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Entry updated successfully"
        entry = (await test_client.get(f"/api/entries/{entry_id}", headers=auth_headers)).json()
        assert entry["mood"] == "Tired"
        assert entry["weight"] == 70
        assert entry["entry_date"] == "2025-03-01"

    @pytest.mark.asyncio
    async def test_update_validates_fields(self, test_client, auth_headers):
        entry_id = await _create(test_client, auth_headers)

        response = await test_client.put(
            f"/api/entries/{entry_id}", json={"sleep_hours": 30}, headers=auth_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete(self, test_client, auth_headers):
        entry_id = await _create(test_client, auth_headers)

        response = await test_client.delete(f"/api/entries/{entry_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Entry deleted successfully"
        gone = await test_client.get(f"/api/entries/{entry_id}", headers=auth_headers)
        assert gone.status_code == 404
