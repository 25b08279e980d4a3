"""Achievement catalog: 12 achievements across study, quest, level and streak."""

from __future__ import annotations

# Condition types understood by the achievement engine.
STUDY_SESSIONS = "study_sessions"
QUESTS_COMPLETED = "quests_completed"
EPIC_QUESTS_COMPLETED = "epic_quests_completed"
LEVEL = "level"
STREAK = "streak"

CONDITION_TYPES = frozenset({STUDY_SESSIONS, QUESTS_COMPLETED, EPIC_QUESTS_COMPLETED, LEVEL, STREAK})

ACHIEVEMENTS: list[dict] = [
    # Study
    {
        "id": "study-1",
        "title": "First Steps",
        "description": "Complete your first study session",
        "category": "study",
        "icon": "timer",
        "condition_type": STUDY_SESSIONS,
        "condition_value": 1,
        "xp_reward": 50,
        "coin_reward": 30,
        "gem_reward": 1,
    },
    {
        "id": "study-2",
        "title": "Focus Warrior",
        "description": "Complete 10 study sessions",
        "category": "study",
        "icon": "brain",
        "condition_type": STUDY_SESSIONS,
        "condition_value": 10,
        "xp_reward": 150,
        "coin_reward": 100,
        "gem_reward": 3,
    },
    {
        "id": "study-3",
        "title": "Concentration Master",
        "description": "Complete 50 study sessions",
        "category": "study",
        "icon": "meditation",
        "condition_type": STUDY_SESSIONS,
        "condition_value": 50,
        "xp_reward": 500,
        "coin_reward": 300,
        "gem_reward": 10,
    },
    # Quests
    {
        "id": "quest-1",
        "title": "Quester",
        "description": "Complete 5 quests",
        "category": "quest",
        "icon": "scroll",
        "condition_type": QUESTS_COMPLETED,
        "condition_value": 5,
        "xp_reward": 100,
        "coin_reward": 50,
        "gem_reward": 2,
    },
    {
        "id": "quest-2",
        "title": "Quest Expert",
        "description": "Complete 25 quests",
        "category": "quest",
        "icon": "map",
        "condition_type": QUESTS_COMPLETED,
        "condition_value": 25,
        "xp_reward": 300,
        "coin_reward": 200,
        "gem_reward": 5,
    },
    {
        "id": "quest-3",
        "title": "Epic Adventurer",
        "description": "Complete 5 epic quests",
        "category": "quest",
        "icon": "treasure",
        "condition_type": EPIC_QUESTS_COMPLETED,
        "condition_value": 5,
        "xp_reward": 400,
        "coin_reward": 250,
        "gem_reward": 8,
    },
    # Levels
    {
        "id": "level-1",
        "title": "Level Up",
        "description": "Reach level 5",
        "category": "level",
        "icon": "star",
        "condition_type": LEVEL,
        "condition_value": 5,
        "xp_reward": 0,
        "coin_reward": 100,
        "gem_reward": 5,
    },
    {
        "id": "level-2",
        "title": "Dedicated Scholar",
        "description": "Reach level 10",
        "category": "level",
        "icon": "crown",
        "condition_type": LEVEL,
        "condition_value": 10,
        "xp_reward": 0,
        "coin_reward": 250,
        "gem_reward": 10,
    },
    {
        "id": "level-3",
        "title": "Educational Champion",
        "description": "Reach level 20",
        "category": "level",
        "icon": "trophy",
        "condition_type": LEVEL,
        "condition_value": 20,
        "xp_reward": 0,
        "coin_reward": 1000,
        "gem_reward": 25,
    },
    # Streaks
    {
        "id": "streak-1",
        "title": "Consistency",
        "description": "Maintain a 3-day study streak",
        "category": "streak",
        "icon": "calendar",
        "condition_type": STREAK,
        "condition_value": 3,
        "xp_reward": 75,
        "coin_reward": 40,
        "gem_reward": 1,
    },
    {
        "id": "streak-2",
        "title": "Dedication",
        "description": "Maintain a 7-day study streak",
        "category": "streak",
        "icon": "fire",
        "condition_type": STREAK,
        "condition_value": 7,
        "xp_reward": 200,
        "coin_reward": 100,
        "gem_reward": 3,
    },
    {
        "id": "streak-3",
        "title": "Unbreakable",
        "description": "Maintain a 30-day study streak",
        "category": "streak",
        "icon": "diamond",
        "condition_type": STREAK,
        "condition_value": 30,
        "xp_reward": 1000,
        "coin_reward": 500,
        "gem_reward": 15,
    },
]

ACHIEVEMENTS_BY_ID: dict[str, dict] = {a["id"]: a for a in ACHIEVEMENTS}
