"""Quest templates and the trigger tags that advance them."""

from __future__ import annotations

DAILY = "daily"
EPIC = "epic"
QUEST_TYPES = frozenset({DAILY, EPIC})

DIFFICULTIES = frozenset({"easy", "medium", "hard", "very_hard"})

# --- Triggers ---

STUDY_SESSION = "study_session"
NOTE_TAKEN = "note_taken"
DAILY_QUEST_COMPLETED = "daily_quest_completed"
SUBJECT_LEVEL = "subject_level"

# Triggers whose progress mirrors an absolute value instead of counting events.
ABSOLUTE_TRIGGERS = frozenset({SUBJECT_LEVEL})

DAILY_QUESTS: list[dict] = [
    {
        "title": "Study Session",
        "description": "Complete a 25-minute study session",
        "difficulty": "easy",
        "xp_reward": 25,
        "coin_reward": 15,
        "gem_reward": 0,
        "max_progress": 1,
        "trigger": STUDY_SESSION,
    },
    {
        "title": "Note Taking",
        "description": "Take notes for any subject",
        "difficulty": "easy",
        "xp_reward": 20,
        "coin_reward": 10,
        "gem_reward": 0,
        "max_progress": 1,
        "trigger": NOTE_TAKEN,
    },
    {
        "title": "Vocabulary Builder",
        "description": "Learn 5 new vocabulary words",
        "difficulty": "medium",
        "xp_reward": 35,
        "coin_reward": 20,
        "gem_reward": 1,
        "max_progress": 5,
        "trigger": None,
    },
]

EPIC_QUESTS: list[dict] = [
    {
        "title": "Knowledge Seeker",
        "description": "Complete 10 study sessions",
        "difficulty": "hard",
        "xp_reward": 150,
        "coin_reward": 100,
        "gem_reward": 5,
        "max_progress": 10,
        "trigger": STUDY_SESSION,
    },
    {
        "title": "Subject Master",
        "description": "Reach level 5 in any subject",
        "difficulty": "very_hard",
        "xp_reward": 300,
        "coin_reward": 200,
        "gem_reward": 10,
        "max_progress": 5,
        "trigger": SUBJECT_LEVEL,
    },
    {
        "title": "Consistent Scholar",
        "description": "Complete 5 daily quests",
        "difficulty": "medium",
        "xp_reward": 100,
        "coin_reward": 75,
        "gem_reward": 3,
        "max_progress": 5,
        "trigger": DAILY_QUEST_COMPLETED,
    },
]
