"""Subjects, study time and notes over HTTP."""

import pytest
from httpx import AsyncClient


async def _subject(client: AsyncClient, user_id: int, name: str) -> dict:
    response = await client.get(f"/api/users/{user_id}/subjects")
    return next(s for s in response.json() if s["name"] == name)


class TestSubjectsAPI:
    """Default and custom subjects."""

    @pytest.mark.asyncio
    async def test_default_subjects(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        response = await client.get(f"/api/users/{user['id']}/subjects")
        assert response.status_code == 200
        subjects = response.json()
        assert [s["name"] for s in subjects] == ["Mathematics", "Science", "Language Arts", "History"]
        assert all(s["isDefault"] for s in subjects)
        assert subjects[0]["level"] == 1
        assert subjects[0]["nextLevelXp"] == 5

    @pytest.mark.asyncio
    async def test_create_and_delete_custom(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        created = await client.post(
            f"/api/users/{user['id']}/subjects",
            json={"name": "Music", "description": "Scales", "color": "#AA00FF", "icon": "note"},
        )
        assert created.status_code == 201
        assert created.json()["isDefault"] is False

        deleted = await client.delete(f"/api/users/{user['id']}/subjects/{created.json()['id']}")
        assert deleted.status_code == 204
        names = [s["name"] for s in (await client.get(f"/api/users/{user['id']}/subjects")).json()]
        assert "Music" not in names

    @pytest.mark.asyncio
    async def test_default_subject_cannot_be_deleted(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        history = await _subject(client, user["id"], "History")
        response = await client.delete(f"/api/users/{user['id']}/subjects/{history['id']}")
        assert response.status_code == 403
        assert response.json() == {"message": "Default subjects cannot be removed"}

    @pytest.mark.asyncio
    async def test_duplicate_name(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        response = await client.post(
            f"/api/users/{user['id']}/subjects",
            json={"name": "Science", "description": "", "color": "#000000", "icon": "atom"},
        )
        assert response.status_code == 409


class TestStudyAPI:
    """POST /api/subjects/{id}/study."""

    @pytest.mark.asyncio
    async def test_thirty_minutes(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        maths = await _subject(client, user["id"], "Mathematics")

        response = await client.post(f"/api/subjects/{maths['id']}/study", json={"duration": 30})
        assert response.status_code == 200
        data = response.json()
        assert data["subject"]["xp"] == 60
        assert data["subject"]["level"] == 3
        assert data["subject"]["totalStudyTime"] == 30
        assert data["userStats"]["xp"] == 105
        assert data["userStats"]["studySessions"] == 1

    @pytest.mark.asyncio
    async def test_non_positive_duration(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        maths = await _subject(client, user["id"], "Mathematics")
        response = await client.post(f"/api/subjects/{maths['id']}/study", json={"duration": 0})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_subject(self, client: AsyncClient):
        response = await client.post("/api/subjects/999/study", json={"duration": 10})
        assert response.status_code == 404
        assert response.json() == {"message": "Subject not found"}


class TestNotesAPI:
    """Subject notes."""

    @pytest.mark.asyncio
    async def test_note_lifecycle(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        science = await _subject(client, user["id"], "Science")
        base = f"/api/subjects/{science['id']}/notes"

        created = await client.post(base, json={"text": "Mitochondria"})
        assert created.status_code == 201
        note = created.json()
        assert note["subjectId"] == science["id"]

        listed = await client.get(base)
        assert [n["text"] for n in listed.json()] == ["Mitochondria"]

        deleted = await client.delete(f"{base}/{note['id']}")
        assert deleted.status_code == 204
        assert (await client.get(base)).json() == []

    @pytest.mark.asyncio
    async def test_note_completes_daily_quest(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        science = await _subject(client, user["id"], "Science")
        await client.post(f"/api/subjects/{science['id']}/notes", json={"text": "Osmosis"})

        quests = (await client.get(f"/api/users/{user['id']}/quests", params={"type": "daily"})).json()
        note_quest = next(q for q in quests if q["title"] == "Note Taking")
        assert note_quest["isCompleted"] is True

    @pytest.mark.asyncio
    async def test_empty_note_rejected(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        science = await _subject(client, user["id"], "Science")
        response = await client.post(f"/api/subjects/{science['id']}/notes", json={"text": ""})
        assert response.status_code == 400
