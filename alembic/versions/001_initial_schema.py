"""Initial EduQuest schema.

Creates users, progression (user_stats, xp_ledger), subjects and notes,
study sessions, quests, achievement unlocks and the social tables.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id SERIAL PRIMARY KEY,
            username VARCHAR(64) UNIQUE NOT NULL,
            password_hash VARCHAR(256) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- User Stats ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_stats (
            user_id INTEGER PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
            level INTEGER NOT NULL DEFAULT 1,
            xp INTEGER NOT NULL DEFAULT 0,
            coins INTEGER NOT NULL DEFAULT 0,
            gems INTEGER NOT NULL DEFAULT 0,
            streak INTEGER NOT NULL DEFAULT 0,
            selected_avatar VARCHAR(64) NOT NULL DEFAULT 'default',
            selected_title VARCHAR(64) NOT NULL DEFAULT 'Novice',
            unlocked_avatars JSON NOT NULL DEFAULT '["default"]',
            unlocked_titles JSON NOT NULL DEFAULT '["Novice"]',
            last_login TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            study_sessions INTEGER NOT NULL DEFAULT 0,
            quests_completed INTEGER NOT NULL DEFAULT 0,
            epic_quests_completed INTEGER NOT NULL DEFAULT 0,
            last_quest_refresh TIMESTAMPTZ
        )
    """)

    # --- XP Ledger ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS xp_ledger (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            amount INTEGER NOT NULL,
            source VARCHAR(32) NOT NULL,
            source_id VARCHAR(128),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_xp_ledger_user ON xp_ledger(user_id)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_xp_ledger_created ON xp_ledger(created_at)")

    # --- Subjects ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS subjects (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name VARCHAR(64) NOT NULL,
            description VARCHAR(256) NOT NULL DEFAULT '',
            color VARCHAR(16) NOT NULL,
            icon VARCHAR(32) NOT NULL,
            level INTEGER NOT NULL DEFAULT 1,
            xp INTEGER NOT NULL DEFAULT 0,
            total_study_time INTEGER NOT NULL DEFAULT 0,
            last_studied TIMESTAMPTZ,
            is_default BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_subjects_user ON subjects(user_id)")

    op.execute("""
        CREATE TABLE IF NOT EXISTS subject_notes (
            id SERIAL PRIMARY KEY,
            subject_id INTEGER NOT NULL REFERENCES subjects(id) ON DELETE CASCADE,
            text TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_subject_notes_subject ON subject_notes(subject_id)")

    op.execute("""
        CREATE TABLE IF NOT EXISTS study_sessions (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            subject_id INTEGER REFERENCES subjects(id) ON DELETE SET NULL,
            duration INTEGER NOT NULL,
            xp_earned INTEGER NOT NULL,
            completed_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_study_sessions_user ON study_sessions(user_id)")

    # --- Quests ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS quests (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title VARCHAR(128) NOT NULL,
            description VARCHAR(256) NOT NULL DEFAULT '',
            type VARCHAR(16) NOT NULL,
            difficulty VARCHAR(16) NOT NULL,
            xp_reward INTEGER NOT NULL DEFAULT 0,
            coin_reward INTEGER NOT NULL DEFAULT 0,
            gem_reward INTEGER NOT NULL DEFAULT 0,
            is_completed BOOLEAN NOT NULL DEFAULT false,
            progress INTEGER NOT NULL DEFAULT 0,
            max_progress INTEGER NOT NULL DEFAULT 1,
            "trigger" VARCHAR(32),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            completed_at TIMESTAMPTZ
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_quests_user ON quests(user_id)")

    # --- Achievement Unlocks ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS achievement_unlocks (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            achievement_id VARCHAR(32) NOT NULL,
            unlocked_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT achievement_unlocks_user_achievement_key UNIQUE (user_id, achievement_id)
        )
    """)

    # --- Friendships ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS friendships (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            friend_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            status VARCHAR(16) NOT NULL DEFAULT 'pending',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_friendships_user ON friendships(user_id)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_friendships_friend ON friendships(friend_id)")

    # --- Study Groups ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS study_groups (
            id SERIAL PRIMARY KEY,
            name VARCHAR(64) NOT NULL,
            description VARCHAR(256),
            owner_id INTEGER NOT NULL REFERENCES users(id),
            is_private BOOLEAN NOT NULL DEFAULT false,
            invite_code VARCHAR(8) UNIQUE NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS group_members (
            id SERIAL PRIMARY KEY,
            group_id INTEGER NOT NULL REFERENCES study_groups(id) ON DELETE CASCADE,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            role VARCHAR(16) NOT NULL DEFAULT 'member',
            joined_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT group_members_group_user_key UNIQUE (group_id, user_id)
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS group_messages (
            id SERIAL PRIMARY KEY,
            group_id INTEGER NOT NULL REFERENCES study_groups(id) ON DELETE CASCADE,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            message TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_group_messages_group ON group_messages(group_id)")

    # --- Group Study Sessions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS group_study_sessions (
            id SERIAL PRIMARY KEY,
            group_id INTEGER NOT NULL REFERENCES study_groups(id) ON DELETE CASCADE,
            creator_id INTEGER NOT NULL REFERENCES users(id),
            title VARCHAR(128) NOT NULL,
            description VARCHAR(256),
            scheduled_start TIMESTAMPTZ NOT NULL,
            scheduled_end TIMESTAMPTZ NOT NULL,
            actual_start TIMESTAMPTZ,
            actual_end TIMESTAMPTZ,
            status VARCHAR(16) NOT NULL DEFAULT 'scheduled',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_group_sessions_group ON group_study_sessions(group_id)")

    op.execute("""
        CREATE TABLE IF NOT EXISTS session_participants (
            id SERIAL PRIMARY KEY,
            session_id INTEGER NOT NULL REFERENCES group_study_sessions(id) ON DELETE CASCADE,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            joined_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            status VARCHAR(16) NOT NULL DEFAULT 'joined',
            total_time INTEGER NOT NULL DEFAULT 0,
            CONSTRAINT session_participants_session_user_key UNIQUE (session_id, user_id)
        )
    """)

    # --- Challenges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS challenges (
            id SERIAL PRIMARY KEY,
            creator_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            challenged_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title VARCHAR(128) NOT NULL,
            description VARCHAR(256),
            type VARCHAR(32) NOT NULL,
            target INTEGER NOT NULL,
            creator_progress INTEGER NOT NULL DEFAULT 0,
            challenged_progress INTEGER NOT NULL DEFAULT 0,
            status VARCHAR(16) NOT NULL DEFAULT 'active',
            winner_id INTEGER REFERENCES users(id),
            start_date TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            end_date TIMESTAMPTZ NOT NULL
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_challenges_creator ON challenges(creator_id)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_challenges_challenged ON challenges(challenged_id)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS challenges CASCADE")
    op.execute("DROP TABLE IF EXISTS session_participants CASCADE")
    op.execute("DROP TABLE IF EXISTS group_study_sessions CASCADE")
    op.execute("DROP TABLE IF EXISTS group_messages CASCADE")
    op.execute("DROP TABLE IF EXISTS group_members CASCADE")
    op.execute("DROP TABLE IF EXISTS study_groups CASCADE")
    op.execute("DROP TABLE IF EXISTS friendships CASCADE")
    op.execute("DROP TABLE IF EXISTS achievement_unlocks CASCADE")
    op.execute("DROP TABLE IF EXISTS quests CASCADE")
    op.execute("DROP TABLE IF EXISTS study_sessions CASCADE")
    op.execute("DROP TABLE IF EXISTS subject_notes CASCADE")
    op.execute("DROP TABLE IF EXISTS subjects CASCADE")
    op.execute("DROP TABLE IF EXISTS xp_ledger CASCADE")
    op.execute("DROP TABLE IF EXISTS user_stats CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
