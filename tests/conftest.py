# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- An in-memory SQLite database with the full schema
- Token service, password hasher and domain services wired to it
- Factories for users, students, courses and schedules
"""

import os

# Settings are read once at import time by the API modules, so the test
# environment must be in place before anything from coursesched is imported.
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

os.environ.update(
    {
        "ENVIRONMENT": "test",
        "DEBUG": "true",
        "LOG_LEVEL": "WARNING",
        "JWT_SECRET_KEY": TEST_JWT_SECRET,
        "DB_DSN": "sqlite+aiosqlite:///:memory:",
        "PASSWORD_BCRYPT_ROUNDS": "4",
        "RATE_LIMIT_ENABLED": "false",
    }
)

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from pydantic import SecretStr  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402

from coursesched.core.config import JWTSettings  # noqa: E402
from coursesched.domains.auth.jwt import TokenService  # noqa: E402
from coursesched.domains.auth.password import PasswordHasher  # noqa: E402
from coursesched.domains.auth.service import AuthService  # noqa: E402
from coursesched.infrastructure.database.connection import (  # noqa: E402
    create_engine_from_url,
    create_sessionmaker,
)
from coursesched.infrastructure.database.models import (  # noqa: E402
    Base,
    Course,
    Schedule,
    StudentProfile,
    User,
)


class FixedClock:
    """A settable clock for services that take ``clock=``."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory database with every table."""
    engine = create_engine_from_url("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session bound to the in-memory database."""
    sessionmaker = create_sessionmaker(engine)
    async with sessionmaker() as session:
        yield session


# =============================================================================
# Auth Fixtures
# =============================================================================


@pytest.fixture
def jwt_settings() -> JWTSettings:
    """JWT settings with a test secret and a 24 hour lifetime."""
    return JWTSettings(secret_key=SecretStr(TEST_JWT_SECRET), token_expiration="24")


@pytest.fixture
def clock() -> FixedClock:
    """A clock pinned to a known instant."""
    return FixedClock(datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def token_service(jwt_settings: JWTSettings) -> TokenService:
    """Token service using the real clock."""
    return TokenService(jwt_settings)


@pytest.fixture
def password_hasher() -> PasswordHasher:
    """Password hasher with the minimum cost factor to keep tests fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def auth_service(
    db_session: AsyncSession,
    token_service: TokenService,
    password_hasher: PasswordHasher,
) -> AuthService:
    """Authentication service on the test database."""
    return AuthService(db_session, token_service, password_hasher)


# =============================================================================
# Data Factories
# =============================================================================


@pytest.fixture
def make_user(
    db_session: AsyncSession,
    password_hasher: PasswordHasher,
) -> Callable[..., Awaitable[User]]:
    """Factory that inserts a user directly."""

    async def _make_user(
        email: str = "user@example.edu",
        role: str = "student",
        password: str = "secret-password",
    ) -> User:
        user = User(
            email=email,
            password_hash=password_hasher.hash(password),
            role=role,
            name=email.split("@")[0],
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_student(
    db_session: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
) -> Callable[..., Awaitable[StudentProfile]]:
    """Factory that inserts a student user with its profile."""

    async def _make_student(email: str = "student@example.edu", student_id: str = "S-001") -> StudentProfile:
        user = await make_user(email=email, role="student")
        profile = StudentProfile(user_id=user.id, student_id=student_id, year="2")
        db_session.add(profile)
        await db_session.commit()
        return profile

    return _make_student


@pytest.fixture
def make_course(db_session: AsyncSession) -> Callable[..., Awaitable[Course]]:
    """Factory that inserts a course."""

    async def _make_course(code: str = "CS101", credits: float | None = 3) -> Course:
        course = Course(code=code, name=f"Course {code}", credits=credits)
        db_session.add(course)
        await db_session.commit()
        return course

    return _make_course


@pytest.fixture
def make_schedule(db_session: AsyncSession) -> Callable[..., Awaitable[Schedule]]:
    """Factory that inserts a schedule slot for a course."""

    async def _make_schedule(
        course: Course,
        semester: str = "1st",
        academic_year: str = "2024-2025",
    ) -> Schedule:
        schedule = Schedule(
            course_id=course.id,
            semester=semester,
            academic_year=academic_year,
            day_of_week="Monday",
            start_time="08:00",
            end_time="11:00",
        )
        db_session.add(schedule)
        await db_session.commit()
        return schedule

    return _make_schedule
