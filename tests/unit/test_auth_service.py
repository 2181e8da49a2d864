# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for AuthService against an in-memory database."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from coursesched.core.exceptions import StoreFailureError
from coursesched.domains.auth.jwt import TokenService
from coursesched.domains.auth.service import AuthService
from coursesched.infrastructure.database.models import InstructorProfile, StudentProfile, User
from coursesched.models.auth import (
    AdminRegistration,
    InstructorRegistration,
    StudentRegistration,
    TimeRange,
)
from coursesched.models.common import ErrorCode, Role


def student_registration(**overrides: object) -> StudentRegistration:
    data: dict[str, object] = {
        "email": "maria@example.edu",
        "password": "maria-password",
        "role": "student",
        "name": "Maria Santos",
        "department": "Computer Science",
        "year": "2",
        "section": "A",
    }
    data.update(overrides)
    return StudentRegistration(**data)


async def count(db: AsyncSession, model: type) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class TestAuthenticate:
    """Tests for AuthService.authenticate."""

    @pytest.mark.asyncio
    async def test_valid_credentials_return_token(
        self,
        auth_service: AuthService,
        token_service: TokenService,
        make_user,
    ) -> None:
        user = await make_user(email="admin@example.edu", role="admin", password="pw-123")

        result = await auth_service.authenticate("admin@example.edu", "pw-123")

        assert result.success is True
        assert result.user is not None
        assert result.user.id == user.id
        assert result.user.role is Role.ADMIN
        claims = token_service.verify(result.token)
        assert claims is not None
        assert claims.id == user.id
        assert claims.email == "admin@example.edu"

    @pytest.mark.asyncio
    async def test_principal_never_carries_password_hash(
        self,
        auth_service: AuthService,
        make_user,
    ) -> None:
        await make_user(email="a@example.edu", password="pw")

        result = await auth_service.authenticate("a@example.edu", "pw")

        assert "password_hash" not in result.model_dump()["user"]

    @pytest.mark.asyncio
    async def test_unknown_email(self, auth_service: AuthService) -> None:
        result = await auth_service.authenticate("ghost@example.edu", "pw")

        assert result.success is False
        assert result.reason is ErrorCode.NOT_FOUND
        assert result.message == "User not found"
        assert result.token is None

    @pytest.mark.asyncio
    async def test_wrong_password(self, auth_service: AuthService, make_user) -> None:
        await make_user(email="a@example.edu", password="right")

        result = await auth_service.authenticate("a@example.edu", "wrong")

        assert result.success is False
        assert result.reason is ErrorCode.BAD_CREDENTIAL
        assert result.message == "Invalid password"

    @pytest.mark.asyncio
    async def test_email_match_is_case_sensitive(
        self,
        auth_service: AuthService,
        make_user,
    ) -> None:
        await make_user(email="a@example.edu", password="pw")

        result = await auth_service.authenticate("A@example.edu", "pw")

        assert result.reason is ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("email", "password"), [("", "pw"), ("a@example.edu", "")])
    async def test_empty_input_is_invalid_argument(
        self,
        auth_service: AuthService,
        email: str,
        password: str,
    ) -> None:
        result = await auth_service.authenticate(email, password)

        assert result.reason is ErrorCode.INVALID_ARGUMENT

    @pytest.mark.asyncio
    async def test_store_failure_is_raised(
        self,
        token_service: TokenService,
        password_hasher,
    ) -> None:
        db = AsyncMock()
        db.execute.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        service = AuthService(db, token_service, password_hasher)

        with pytest.raises(StoreFailureError):
            await service.authenticate("a@example.edu", "pw")

        db.rollback.assert_awaited_once()


class TestRegister:
    """Tests for AuthService.register."""

    @pytest.mark.asyncio
    async def test_register_student_then_login(
        self,
        auth_service: AuthService,
        db_session: AsyncSession,
    ) -> None:
        """Registration creates user and profile, and the password works for login."""
        result = await auth_service.register(student_registration())

        assert result.success is True
        assert result.token
        assert result.user is not None
        assert result.user.role is Role.STUDENT
        assert "password" not in result.model_dump()["user"]

        profile = (
            await db_session.execute(
                select(StudentProfile).where(StudentProfile.user_id == result.user.id)
            )
        ).scalar_one()
        assert profile.year == "2"
        assert profile.section == "A"
        assert profile.department == "Computer Science"
        assert profile.student_id.startswith("STU")

        login = await auth_service.authenticate("maria@example.edu", "maria-password")
        assert login.success is True
        assert login.user is not None
        assert login.user.id == result.user.id

    @pytest.mark.asyncio
    async def test_register_stores_hash_not_password(
        self,
        auth_service: AuthService,
        db_session: AsyncSession,
    ) -> None:
        await auth_service.register(student_registration())

        user = (await db_session.execute(select(User))).scalar_one()
        assert user.password_hash != "maria-password"
        assert user.password_hash.startswith("$2b$")

    @pytest.mark.asyncio
    async def test_register_instructor_with_defaults(
        self,
        auth_service: AuthService,
        db_session: AsyncSession,
    ) -> None:
        request = InstructorRegistration(
            email="prof@example.edu",
            password="pw",
            role="instructor",
            specializations=["Databases", " Databases ", "Networks"],
            availability={"Monday": [TimeRange(start_time="08:00", end_time="12:00")]},
        )

        result = await auth_service.register(request)

        assert result.success is True
        profile = (await db_session.execute(select(InstructorProfile))).scalar_one()
        assert profile.max_hours_per_week == 20
        assert profile.specializations == ["Databases", "Networks"]
        assert profile.availability == {
            "Monday": [{"start_time": "08:00", "end_time": "12:00"}]
        }

    @pytest.mark.asyncio
    async def test_register_admin_creates_no_profile(
        self,
        auth_service: AuthService,
        db_session: AsyncSession,
    ) -> None:
        result = await auth_service.register(
            AdminRegistration(email="root@example.edu", password="pw", role="admin")
        )

        assert result.success is True
        assert await count(db_session, InstructorProfile) == 0
        assert await count(db_session, StudentProfile) == 0

    @pytest.mark.asyncio
    async def test_duplicate_email(
        self,
        auth_service: AuthService,
        db_session: AsyncSession,
    ) -> None:
        await auth_service.register(student_registration())

        result = await auth_service.register(student_registration(student_id="OTHER"))

        assert result.success is False
        assert result.reason is ErrorCode.DUPLICATE_EMAIL
        assert result.message == "Email already exists"
        assert await count(db_session, User) == 1

    @pytest.mark.asyncio
    async def test_taken_student_id_leaves_no_user(
        self,
        auth_service: AuthService,
        db_session: AsyncSession,
    ) -> None:
        """A profile insert that fails rolls back the user insert too."""
        first = await auth_service.register(student_registration(student_id="S-42"))
        assert first.success is True

        result = await auth_service.register(
            student_registration(email="other@example.edu", student_id="S-42")
        )

        assert result.success is False
        assert result.reason is ErrorCode.INVALID_ARGUMENT
        assert result.message == "Student ID already exists"

        emails = (await db_session.execute(select(User.email))).scalars().all()
        assert emails == ["maria@example.edu"]
        assert await count(db_session, StudentProfile) == 1

    def test_student_year_accepts_integer(self) -> None:
        assert student_registration(year=3).year == "3"

    @pytest.mark.parametrize("year", [0, 5, "first", True])
    def test_student_year_rejects_out_of_range(self, year: object) -> None:
        with pytest.raises(ValueError):
            student_registration(year=year)


class TestAccountMaintenance:
    """Tests for change_password, delete_user and get_user."""

    @pytest.mark.asyncio
    async def test_change_password(self, auth_service: AuthService, make_user) -> None:
        user = await make_user(email="a@example.edu", password="old")

        result = await auth_service.change_password(user.id, "new")

        assert result.success is True
        assert (await auth_service.authenticate("a@example.edu", "old")).success is False
        assert (await auth_service.authenticate("a@example.edu", "new")).success is True

    @pytest.mark.asyncio
    async def test_change_password_unknown_user(self, auth_service: AuthService) -> None:
        result = await auth_service.change_password("missing", "new")

        assert result.reason is ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_student_removes_profile(
        self,
        auth_service: AuthService,
        db_session: AsyncSession,
    ) -> None:
        registered = await auth_service.register(student_registration())
        assert registered.user is not None

        result = await auth_service.delete_user(registered.user.id)

        assert result.success is True
        assert await count(db_session, User) == 0
        assert await count(db_session, StudentProfile) == 0

    @pytest.mark.asyncio
    async def test_delete_unknown_user(self, auth_service: AuthService) -> None:
        result = await auth_service.delete_user("missing")

        assert result.success is False
        assert result.reason is ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_get_user(self, auth_service: AuthService, make_user) -> None:
        user = await make_user(email="a@example.edu", role="instructor")

        principal = await auth_service.get_user(user.id)

        assert principal is not None
        assert principal.email == "a@example.edu"
        assert principal.role is Role.INSTRUCTOR
        assert await auth_service.get_user("missing") is None
