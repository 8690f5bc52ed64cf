"""Schema tests: constraints and indexes shared by the ORM and the migration."""

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.auth.service import register_user
from skillpath.db.models import ActivityLog, User, UserSkill


class TestSchemaConstraints:
    async def test_skill_score_above_100_rejected(self, db_session: AsyncSession):
        user = await register_user(db_session, "score@example.com", None, "SecureP@ss1")
        db_session.add(UserSkill(user_id=user.id, skill_name="Go", name_key="go", category="Backend", score=150))
        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_negative_skill_score_rejected(self, db_session: AsyncSession):
        user = await register_user(db_session, "neg@example.com", None, "SecureP@ss1")
        db_session.add(UserSkill(user_id=user.id, skill_name="Go", name_key="go", category="Backend", score=-1))
        with pytest.raises(IntegrityError):
            await db_session.flush()

    def test_model_indexes_match_migration(self):
        assert {i.name for i in ActivityLog.__table__.indexes} == {"ix_activity_logs_user_id_timestamp"}
        assert "idx_users_email_lower" in {i.name for i in User.__table__.indexes}

    async def test_activity_index_created(self, db_session: AsyncSession):
        conn = await db_session.connection()
        index = await conn.run_sync(
            lambda sync_conn: {i["name"]: i["column_names"] for i in inspect(sync_conn).get_indexes("activity_logs")}
        )
        assert index["ix_activity_logs_user_id_timestamp"][0] == "user_id"
