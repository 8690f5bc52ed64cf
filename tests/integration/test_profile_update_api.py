"""Profile update tests: PUT /api/v1/users/profile and skill sync."""

from httpx import AsyncClient
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.auth.jwt import create_access_token
from skillpath.auth.service import register_user
from skillpath.db.models import Profile, User, UserSkill
from skillpath.skills.service import sync_skills_from_profile
from skillpath.users.service import ProfileChanges, get_or_create_profile, update_profile


async def _profile(db: AsyncSession) -> Profile:
    return (await db.execute(select(Profile))).scalar_one()


class TestUpdateProfileEndpoint:
    async def test_update_returns_success(self, authed_client: AsyncClient):
        response = await authed_client.put("/api/v1/users/profile", json={"role": "Student"})
        assert response.status_code == 200
        assert response.json() == {"status": "success"}

    async def test_camel_case_fields(self, authed_client: AsyncClient, db_session: AsyncSession):
        await authed_client.put("/api/v1/users/profile", json={
            "name": "Renamed",
            "profilePictureUrl": "https://img.example.com/me.png",
            "experienceLevel": "Junior",
            "careerGoal": "Data Engineer",
            "learningStyle": "Visual",
            "currentProject": "ETL pipeline",
            "aspiration": "Lead a data team",
            "bio": "Learning every day",
        })
        user = (await db_session.execute(select(User))).scalar_one()
        assert user.full_name == "Renamed"
        assert user.profile_picture_url == "https://img.example.com/me.png"

        profile = await _profile(db_session)
        assert profile.experience_level == "Junior"
        assert profile.career_goal == "Data Engineer"
        assert profile.learning_style == "Visual"
        assert profile.current_project == "ETL pipeline"
        assert profile.aspiration == "Lead a data team"
        assert profile.bio == "Learning every day"

    async def test_omitted_fields_untouched(self, authed_client: AsyncClient, db_session: AsyncSession):
        await authed_client.put("/api/v1/users/profile", json={"role": "Student"})
        profile = await _profile(db_session)
        assert profile.role == "Student"
        assert profile.bio == "Ready to accelerate my career!"
        assert profile.career_goal == "Software Engineer"

    async def test_blank_name_ignored(self, authed_client: AsyncClient, registered_user: dict, db_session: AsyncSession):
        await authed_client.put("/api/v1/users/profile", json={"name": "   "})
        user = (await db_session.execute(select(User))).scalar_one()
        assert user.full_name == registered_user["full_name"]

    async def test_empty_string_overwrites(self, authed_client: AsyncClient, db_session: AsyncSession):
        await authed_client.put("/api/v1/users/profile", json={"bio": ""})
        assert (await _profile(db_session)).bio == ""

    async def test_preferred_tech_adds_skills(self, authed_client: AsyncClient):
        await authed_client.put("/api/v1/users/profile", json={"preferredTech": ["python", "SQL"]})
        data = (await authed_client.get("/api/v1/profile/me")).json()
        assert [s["skill_name"] for s in data["skills"]] == ["Python", "SQL"]

    async def test_preferred_tech_update_is_additive(self, authed_client: AsyncClient, db_session: AsyncSession):
        await authed_client.put("/api/v1/users/profile", json={"preferredTech": ["python"]})
        await authed_client.put("/api/v1/users/profile", json={"preferredTech": ["Python", "docker"]})
        names = (await db_session.execute(select(UserSkill.skill_name).order_by(UserSkill.id))).scalars().all()
        assert names == ["Python", "Docker"]

    async def test_overlong_tech_name_rejected(self, authed_client: AsyncClient, db_session: AsyncSession):
        response = await authed_client.put("/api/v1/users/profile", json={"preferredTech": ["k" * 300], "role": "Student"})
        assert response.status_code == 422

        assert (await db_session.execute(select(UserSkill))).first() is None
        assert (await _profile(db_session)).role is None

    async def test_tech_name_at_column_width_accepted(self, authed_client: AsyncClient, db_session: AsyncSession):
        name = "k" * 128
        response = await authed_client.put("/api/v1/users/profile", json={"preferredTech": [name]})
        assert response.status_code == 200

        skill = (await db_session.execute(select(UserSkill))).scalar_one()
        assert skill.name_key == name
        assert len(skill.skill_name) == 128

    async def test_validation_error(self, authed_client: AsyncClient):
        response = await authed_client.put("/api/v1/users/profile", json={"preferredTech": "python"})
        assert response.status_code == 422

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.put("/api/v1/users/profile", json={"role": "Student"})
        assert response.status_code in (401, 403)

    async def test_unknown_user_is_404(self, client: AsyncClient):
        token = create_access_token("ghost@example.com")
        response = await client.put(
            "/api/v1/users/profile",
            json={"role": "Student"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 404


class TestProfileService:
    async def test_profile_created_when_missing(self, db_session: AsyncSession):
        user = await register_user(db_session, "noprof@example.com", None, "SecureP@ss1")
        await db_session.execute(delete(Profile).where(Profile.user_id == user.id))
        db_session.expunge_all()
        user = (await db_session.execute(select(User))).scalar_one()

        await update_profile(db_session, "noprof@example.com", ProfileChanges(role="Mentor"))
        profile = (await db_session.execute(select(Profile).where(Profile.user_id == user.id))).scalar_one()
        assert profile.role == "Mentor"
        assert profile.bio is None

    async def test_get_or_create_returns_existing(self, db_session: AsyncSession):
        user = await register_user(db_session, "same@example.com", None, "SecureP@ss1")
        first = await get_or_create_profile(db_session, user)
        second = await get_or_create_profile(db_session, user)
        assert first.id == second.id

    async def test_empty_preferred_list_stored(self, db_session: AsyncSession):
        await register_user(db_session, "empty@example.com", None, "SecureP@ss1")
        await update_profile(db_session, "empty@example.com", ProfileChanges(preferred_tech=[]))
        assert (await _profile(db_session)).preferred_tech == []


class TestSkillSync:
    async def test_sync_is_idempotent(self, db_session: AsyncSession):
        user = await register_user(db_session, "idem@example.com", None, "SecureP@ss1")
        profile = await _profile(db_session)
        profile.preferred_tech = ["Go", "go", " GO "]
        await db_session.flush()

        assert await sync_skills_from_profile(db_session, user) == ["Go"]
        assert await sync_skills_from_profile(db_session, user) == []
        rows = (await db_session.execute(select(UserSkill))).scalars().all()
        assert len(rows) == 1

    async def test_defaults_when_no_preferences(self, db_session: AsyncSession):
        user = await register_user(db_session, "defaults@example.com", None, "SecureP@ss1")
        assert await sync_skills_from_profile(db_session, user) == ["Communication", "Problem Solving"]

    async def test_existing_skill_untouched(self, db_session: AsyncSession):
        user = await register_user(db_session, "keep@example.com", None, "SecureP@ss1")
        db_session.add(UserSkill(user_id=user.id, skill_name="Python", name_key="python", category="Backend", score=75))
        profile = await _profile(db_session)
        profile.preferred_tech = ["PYTHON", "rust"]
        await db_session.flush()

        assert await sync_skills_from_profile(db_session, user) == ["Rust"]
        python = (await db_session.execute(select(UserSkill).where(UserSkill.name_key == "python"))).scalar_one()
        assert python.score == 75
        assert python.category == "Backend"

    async def test_overlong_names_skipped(self, db_session: AsyncSession):
        user = await register_user(db_session, "long@example.com", None, "SecureP@ss1")
        profile = await _profile(db_session)
        profile.preferred_tech = ["x" * 129, "Kotlin"]
        await db_session.flush()

        assert await sync_skills_from_profile(db_session, user) == ["Kotlin"]

    async def test_no_profile_is_noop(self, db_session: AsyncSession):
        user = await register_user(db_session, "bare@example.com", None, "SecureP@ss1")
        await db_session.execute(delete(Profile).where(Profile.user_id == user.id))
        assert await sync_skills_from_profile(db_session, user) == []
