"""Completed activities and the Dedication Master badge."""

import pytest
from httpx import AsyncClient


async def _complete(client: AsyncClient, headers: dict, n: int, start: int = 0) -> list[dict]:
    out = []
    for i in range(start, start + n):
        resp = await client.post(
            "/api/v1/activities/complete",
            json={"activity": f"Breathing exercise {i}", "sentiment": "positive"},
            headers=headers,
        )
        assert resp.status_code == 200
        out.append(resp.json())
    return out


@pytest.mark.asyncio
async def test_complete_activity_appends(client: AsyncClient, auth_headers: dict, onboarded: dict):
    (result,) = await _complete(client, auth_headers, 1)
    assert result["message"] == "Activity completed successfully"
    assert len(result["completedActivities"]) == 1
    assert result["completedActivities"][0]["activity"] == "Breathing exercise 0"
    assert result["completedActivities"][0]["sentiment"] == "positive"
    assert result["newBadges"] == []


@pytest.mark.asyncio
async def test_dedication_badge_awarded_on_fifth_activity_only(
    client: AsyncClient, auth_headers: dict, onboarded: dict
):
    results = await _complete(client, auth_headers, 4)
    assert all(r["newBadges"] == [] for r in results)
    dash = (await client.get("/api/v1/dashboard/data", headers=auth_headers)).json()
    assert dash["profile"]["badges"] == []

    (fifth,) = await _complete(client, auth_headers, 1, start=4)
    assert len(fifth["newBadges"]) == 1
    badge = fifth["newBadges"][0]
    assert badge["name"] == "Dedication Master"
    assert badge["description"] == "Completed 5 recommended activities"
    assert badge["imageUrl"] == "/badges/dedication.png"
    assert badge["shared"] == {"twitter": False, "linkedin": False}

    (sixth,) = await _complete(client, auth_headers, 1, start=5)
    assert sixth["newBadges"] == []
    dash = (await client.get("/api/v1/dashboard/data", headers=auth_headers)).json()
    assert [b["name"] for b in dash["profile"]["badges"]] == ["Dedication Master"]


@pytest.mark.asyncio
async def test_activity_history(client: AsyncClient, auth_headers: dict, onboarded: dict):
    await _complete(client, auth_headers, 2)
    resp = await client.get("/api/v1/activities/history", headers=auth_headers)
    assert resp.status_code == 200
    names = [a["activity"] for a in resp.json()["completedActivities"]]
    assert names == ["Breathing exercise 0", "Breathing exercise 1"]


@pytest.mark.asyncio
async def test_complete_activity_without_profile(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/activities/complete",
        json={"activity": "Walk", "sentiment": "neutral"},
        headers=auth_headers,
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_complete_activity_requires_fields(client: AsyncClient, auth_headers: dict, onboarded: dict):
    resp = await client.post("/api/v1/activities/complete", json={"sentiment": "neutral"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["details"][0]["field"] == "activity"
