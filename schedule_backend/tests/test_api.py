from __future__ import annotations

import pytest

from schedule_backend.app.security import create_access_token

GANGNAM = {
    "name": " 강남 ",
    "rates": {
        "weekday": {"private": {"amount": 50000}},
        "weekend": {"private": {"amount": 60000}},
    },
}


@pytest.fixture
def profile_id(client) -> str:
    response = client.post("/rate-profiles", json=GANGNAM)
    assert response.status_code == 201
    return response.json()["id"]


def test_health_check(anonymous_client):
    response = anonymous_client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_anonymous_reads_are_empty(anonymous_client):
    assert anonymous_client.get("/rate-profiles").json() == {"items": [], "total": 0}
    assert anonymous_client.get("/revenues/2025-01-18").json() == {
        "date_key": "2025-01-18",
        "entries": [],
        "total": 0,
    }
    assert anonymous_client.get("/notes/2025-01-18").json() == {
        "date_key": "2025-01-18",
        "items": [],
    }

    month = anonymous_client.get("/calendar/2025/1")
    assert month.status_code == 200
    assert month.json()["total"] == 0
    assert len(month.json()["days"]) == 31


def test_anonymous_writes_are_rejected(anonymous_client):
    assert anonymous_client.post("/rate-profiles", json=GANGNAM).status_code == 401
    assert (
        anonymous_client.put("/revenues/2025-01-18/p1", json={"counts": {}}).status_code
        == 401
    )
    assert anonymous_client.post("/notes/2025-01-18", json={"memo": "x"}).status_code == 401


def test_create_and_update_rate_profile(client, profile_id):
    detail = client.get(f"/rate-profiles/{profile_id}")
    assert detail.status_code == 200
    payload = detail.json()
    assert payload["name"] == "강남"
    assert payload["rates"]["weekday"]["private"]["amount"] == 50000
    assert payload["rates"]["weekday"]["duet"]["amount"] == 0

    update = client.put(
        f"/rate-profiles/{profile_id}",
        json={"name": "강남 본점", "rates": {"weekday": {"duet": {"amount": 30000}}}},
    )
    assert update.status_code == 200
    assert update.json()["name"] == "강남 본점"

    listing = client.get("/rate-profiles").json()
    assert listing["total"] == 1
    assert listing["items"][0]["rates"]["weekday"]["duet"]["amount"] == 30000


def test_rate_profile_validation(client):
    assert client.post("/rate-profiles", json={"name": "   "}).status_code == 400
    negative = {"name": "잠실", "rates": {"weekday": {"private": {"amount": -1}}}}
    assert client.post("/rate-profiles", json=negative).status_code == 422
    assert client.get("/rate-profiles/missing").status_code == 404
    assert client.put("/rate-profiles/missing", json={"name": "잠실"}).status_code == 404
    assert client.delete("/rate-profiles/missing").status_code == 404


def test_revenue_total_is_computed_by_the_server(client, profile_id):
    response = client.put(
        f"/revenues/2025-01-18/{profile_id}",
        json={"counts": {"private": 2}, "duration": 30},
    )

    assert response.status_code == 200
    body = response.json()
    # Saturday: 2 lessons * 30 min at 60000 per hour
    assert body["total"] == 60000
    entry = body["entries"][0]
    assert entry["location_name"] == "강남"
    assert entry["counts"] == {"private": 2, "duet": 0, "magic": 0, "group": 0, "other": 0}

    client.put(f"/revenues/2025-01-15/{profile_id}", json={"counts": {"private": 1}})

    summary = client.get("/revenues/summary/2025/1").json()
    assert summary == {
        "month_key": "2025-01",
        "daily_totals": {"2025-01-15": 50000, "2025-01-18": 60000},
        "total": 110000,
    }

    month = client.get("/calendar/2025/1").json()
    days = {day["day"]: day for day in month["days"]}
    assert days[18]["revenue"] == 60000
    assert days[18]["tone"] == "saturday"
    assert days[1]["tone"] == "holiday"
    assert month["leading_blanks"] == 3
    assert month["total"] == 110000


def test_revenue_validation(client, profile_id):
    assert client.get("/revenues/2025-1-18").status_code == 400
    assert (
        client.put(f"/revenues/2025-02-30/{profile_id}", json={"counts": {}}).status_code
        == 400
    )
    assert (
        client.put(
            f"/revenues/2025-01-18/{profile_id}", json={"counts": {}, "duration": 45}
        ).status_code
        == 422
    )
    assert (
        client.put(
            f"/revenues/2025-01-18/{profile_id}", json={"counts": {"private": -1}}
        ).status_code
        == 422
    )
    assert client.put("/revenues/2025-01-18/unknown", json={"counts": {}}).status_code == 404
    assert client.get("/calendar/2025/13").status_code == 422


def test_deleting_profile_keeps_revenue_history(client, profile_id):
    client.put(f"/revenues/2025-01-15/{profile_id}", json={"counts": {"private": 1}})

    assert client.delete(f"/rate-profiles/{profile_id}").status_code == 204

    day = client.get("/revenues/2025-01-15").json()
    assert day["total"] == 50000
    assert day["entries"][0]["location_name"] == "강남"

    assert client.delete(f"/revenues/2025-01-15/{profile_id}").status_code == 204
    assert client.get("/revenues/2025-01-15").json()["entries"] == []


def test_note_endpoints(client):
    created = client.post("/notes/2025-01-18", json={"type": "noShow", "memo": "결석"})
    assert created.status_code == 201
    note = created.json()["items"][0]
    assert note["type"] == "noShow"
    assert note["id"].startswith("note-")

    updated = client.put(f"/notes/2025-01-18/{note['id']}", json={"memo": "보강 예정"})
    assert updated.status_code == 200
    assert updated.json()["items"][0] == {"id": note["id"], "type": "noShow", "memo": "보강 예정"}

    month = client.get("/calendar/2025/1").json()
    assert {day["day"]: day for day in month["days"]}[18]["has_note"] is True

    assert client.delete(f"/notes/2025-01-18/{note['id']}").status_code == 204
    assert client.get("/notes/2025-01-18").json()["items"] == []
    assert client.delete(f"/notes/2025-01-18/{note['id']}").status_code == 404


def test_note_validation(client):
    blank = client.post("/notes/2025-01-18", json={"memo": "  "})
    assert blank.status_code == 400
    assert blank.json()["detail"] == "메모 내용을 입력해주세요."

    assert client.post("/notes/2025-01-18", json={"type": "lunch", "memo": "x"}).status_code == 422


def test_users_only_see_their_own_documents(client, profile_id):
    other_token = create_access_token("coach-2")

    response = client.get(
        "/rate-profiles", headers={"Authorization": f"Bearer {other_token}"}
    )

    assert response.status_code == 200
    assert response.json()["total"] == 0
