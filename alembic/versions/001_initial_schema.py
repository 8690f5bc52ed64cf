"""Initial schema: users, profiles, activity_logs, user_skills, badges.

Revision ID: 001_initial_schema
Revises: None
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
            id BIGSERIAL PRIMARY KEY,
            email VARCHAR(320) NOT NULL,
            password_hash VARCHAR(256) NOT NULL,
            full_name VARCHAR(128),
            profile_picture_url TEXT,
            xp BIGINT NOT NULL DEFAULT 0,
            level INTEGER NOT NULL DEFAULT 1,
            streak INTEGER DEFAULT 0,
            join_date TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            last_active TIMESTAMPTZ,
            CONSTRAINT users_email_key UNIQUE (email)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_users_email_lower
        ON users(LOWER(email))
    """)

    # --- Profiles ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS profiles (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            role VARCHAR(128),
            experience_level VARCHAR(64),
            career_goal VARCHAR(256),
            bio VARCHAR(1000),
            learning_style VARCHAR(128),
            current_project VARCHAR(256),
            aspiration VARCHAR(256),
            preferred_tech JSON,
            CONSTRAINT profiles_user_id_key UNIQUE (user_id)
        )
    """)

    # --- Activity ledger ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS activity_logs (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            activity_type VARCHAR(32) NOT NULL,
            title VARCHAR(256) NOT NULL,
            xp_earned INTEGER NOT NULL DEFAULT 0,
            skill_tag VARCHAR(128),
            duration_minutes INTEGER DEFAULT 0,
            timestamp TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_activity_logs_user_id_timestamp
        ON activity_logs(user_id, timestamp DESC)
    """)

    # --- Skills ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_skills (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            skill_name VARCHAR(128) NOT NULL,
            name_key VARCHAR(128) NOT NULL,
            category VARCHAR(64) NOT NULL,
            score INTEGER NOT NULL DEFAULT 0,
            CONSTRAINT user_skills_user_id_name_key_key UNIQUE (user_id, name_key),
            CONSTRAINT user_skills_score_check CHECK (score BETWEEN 0 AND 100)
        )
    """)

    # --- Badges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS badges (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name VARCHAR(128) NOT NULL,
            description TEXT,
            icon VARCHAR(256),
            awarded_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_badges_user_id
        ON badges(user_id)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS badges CASCADE")
    op.execute("DROP TABLE IF EXISTS user_skills CASCADE")
    op.execute("DROP TABLE IF EXISTS activity_logs CASCADE")
    op.execute("DROP TABLE IF EXISTS profiles CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
