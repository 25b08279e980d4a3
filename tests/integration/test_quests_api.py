"""Quest listing, progress and completion over HTTP."""

import pytest
from httpx import AsyncClient


async def _quest_by_title(client: AsyncClient, user_id: int, title: str) -> dict:
    response = await client.get(f"/api/users/{user_id}/quests")
    return next(q for q in response.json() if q["title"] == title)


class TestQuestListAPI:
    """GET /api/users/{id}/quests."""

    @pytest.mark.asyncio
    async def test_starter_quests(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        response = await client.get(f"/api/users/{user['id']}/quests")
        assert response.status_code == 200
        quests = response.json()
        assert len(quests) == 6
        assert {q["type"] for q in quests} == {"daily", "epic"}
        assert all(q["isCompleted"] is False for q in quests)

    @pytest.mark.asyncio
    async def test_filter_by_type(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        response = await client.get(f"/api/users/{user['id']}/quests", params={"type": "epic"})
        titles = {q["title"] for q in response.json()}
        assert titles == {"Knowledge Seeker", "Subject Master", "Consistent Scholar"}

    @pytest.mark.asyncio
    async def test_invalid_type_filter(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        response = await client.get(f"/api/users/{user['id']}/quests", params={"type": "weekly"})
        assert response.status_code == 400


class TestQuestCompletionAPI:
    """Progress updates and explicit completion."""

    @pytest.mark.asyncio
    async def test_progress_to_max_completes(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        quest = await _quest_by_title(client, user["id"], "Vocabulary Builder")

        partial = await client.post(f"/api/quests/{quest['id']}/progress", json={"userId": user["id"], "progress": 3})
        assert partial.json()["progress"] == 3
        assert partial.json()["isCompleted"] is False

        done = await client.post(f"/api/quests/{quest['id']}/progress", json={"userId": user["id"], "progress": 9})
        assert done.json()["progress"] == 5
        assert done.json()["isCompleted"] is True

        stats = (await client.get(f"/api/users/{user['id']}/stats")).json()
        assert stats["xp"] == 35
        assert stats["questsCompleted"] == 1

    @pytest.mark.asyncio
    async def test_complete_returns_stats(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        quest = await _quest_by_title(client, user["id"], "Study Session")

        response = await client.post(f"/api/quests/{quest['id']}/complete", json={"userId": user["id"]})
        assert response.status_code == 200
        data = response.json()
        assert data["quest"]["isCompleted"] is True
        assert data["userStats"]["xp"] == 25
        assert data["userStats"]["level"] == 2
        assert data["userStats"]["coins"] == 65

    @pytest.mark.asyncio
    async def test_complete_twice_conflicts(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        quest = await _quest_by_title(client, user["id"], "Note Taking")
        url = f"/api/quests/{quest['id']}/complete"

        await client.post(url, json={"userId": user["id"]})
        response = await client.post(url, json={"userId": user["id"]})
        assert response.status_code == 409
        assert response.json() == {"message": "Quest already completed"}

    @pytest.mark.asyncio
    async def test_other_users_quest_is_hidden(self, client: AsyncClient, api_register):
        alice = await api_register("alice")
        bob = await api_register("bob")
        quest = await _quest_by_title(client, alice["id"], "Note Taking")

        response = await client.post(f"/api/quests/{quest['id']}/complete", json={"userId": bob["id"]})
        assert response.status_code == 404


class TestCustomQuestAPI:
    """User-defined quests and manual refresh."""

    @pytest.mark.asyncio
    async def test_create_custom_quest(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        response = await client.post(
            f"/api/users/{user['id']}/quests",
            json={"title": "Read a chapter", "xpReward": 40, "maxProgress": 3},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "epic"
        assert data["xpReward"] == 40
        assert data["maxProgress"] == 3
        assert data["trigger"] is None

    @pytest.mark.asyncio
    async def test_same_day_refresh_keeps_completed_dailies(self, client: AsyncClient, api_register):
        user = await api_register("alice")
        xp_after_each_round = []
        for _ in range(3):
            quest = await _quest_by_title(client, user["id"], "Study Session")
            await client.post(f"/api/quests/{quest['id']}/complete", json={"userId": user["id"]})
            response = await client.post(f"/api/users/{user['id']}/quests/refresh")
            assert response.status_code == 200
            assert len(response.json()) == 3
            stats = (await client.get(f"/api/users/{user['id']}/stats")).json()
            xp_after_each_round.append(stats["xp"])

        assert xp_after_each_round == [25, 25, 25]
        scholar = await _quest_by_title(client, user["id"], "Consistent Scholar")
        assert scholar["progress"] == 1
