# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication service for login, registration and account maintenance.

AuthService composes PasswordHasher, TokenService and the user tables.
Expected failures (unknown user, wrong password, duplicate email, bad input)
come back as an AuthResult with ``success=False`` and a reason code so the
HTTP layer can map them to status codes without exception handling. Store
failures are logged and raised as StoreFailureError.

Example:
    >>> auth_service = AuthService(db, TokenService(settings.jwt))
    >>> result = await auth_service.authenticate("a@u.edu", "pw")
    >>> result.token
"""

import logging
from typing import assert_never
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coursesched.core.exceptions import StoreFailureError
from coursesched.domains.auth.jwt import TokenService
from coursesched.domains.auth.password import PasswordHasher
from coursesched.infrastructure.database.models import (
    InstructorProfile,
    StudentProfile,
    User,
    new_id,
)
from coursesched.models.auth import (
    AdminRegistration,
    AuthResult,
    InstructorRegistration,
    PrincipalResponse,
    RegistrationVariant,
    StudentRegistration,
)
from coursesched.models.common import ErrorCode, Role

logger = logging.getLogger(__name__)


def generate_student_id() -> str:
    """Generate a student number for students registered without one."""
    return f"STU{uuid4().hex[:12].upper()}"


class AuthService:
    """Login, registration and account maintenance.

    Attributes:
        _db: Database session.
        _tokens: Token issuer.
        _password_hasher: Password hashing utility.
    """

    def __init__(
        self,
        db: AsyncSession,
        token_service: TokenService,
        password_hasher: PasswordHasher | None = None,
    ) -> None:
        """Initialize the authentication service.

        Args:
            db: Async database session.
            token_service: Issues tokens after login and registration.
            password_hasher: Password hasher (uses default if not provided).
        """
        self._db = db
        self._tokens = token_service
        self._password_hasher = password_hasher or PasswordHasher()

    async def authenticate(self, email: str, password: str) -> AuthResult:
        """Authenticate a principal by email and password.

        The email must match exactly, case included.

        Args:
            email: Principal email.
            password: Plain text password.

        Returns:
            AuthResult with the principal and a fresh token on success;
            NOT_FOUND or BAD_CREDENTIAL otherwise.

        Raises:
            StoreFailureError: If the user lookup fails.
        """
        if not email or not password:
            return AuthResult.failure(
                ErrorCode.INVALID_ARGUMENT, "Email and password are required"
            )

        try:
            user = await self._get_user_by_email(email)
        except SQLAlchemyError as e:
            raise await self._store_failure("look up user for login", e)

        if not user:
            logger.warning("Login failed: user not found for email %s", email)
            return AuthResult.failure(ErrorCode.NOT_FOUND, "User not found")

        if not self._password_hasher.verify(password, user.password_hash):
            logger.warning("Login failed: invalid password for user %s", user.id)
            return AuthResult.failure(ErrorCode.BAD_CREDENTIAL, "Invalid password")

        token = self._tokens.issue(user)
        logger.info("User logged in: %s", user.id)

        return AuthResult(
            success=True,
            message="Login successful",
            user=PrincipalResponse.model_validate(user),
            token=token,
        )

    async def register(self, request: RegistrationVariant) -> AuthResult:
        """Register a principal and its role profile, then log it in.

        The user row and the profile row are flushed in one transaction and
        committed together. If either write fails the whole unit is rolled
        back, so no user is left without its profile.

        Args:
            request: Role-tagged registration payload.

        Returns:
            AuthResult with the principal and a token on success;
            DUPLICATE_EMAIL if the email is taken; INVALID_ARGUMENT if a
            given student ID is taken.

        Raises:
            StoreFailureError: If the store fails for any other reason.
        """
        if not request.email or not request.password:
            return AuthResult.failure(
                ErrorCode.INVALID_ARGUMENT, "Email and password are required"
            )

        try:
            existing = await self._get_user_by_email(request.email)
        except SQLAlchemyError as e:
            raise await self._store_failure("check email availability", e)

        if existing:
            logger.info("Registration rejected: email already exists")
            return AuthResult.failure(ErrorCode.DUPLICATE_EMAIL, "Email already exists")

        user = User(
            id=new_id(),
            email=request.email,
            password_hash=self._password_hasher.hash(request.password),
            role=request.role,
            name=request.name,
            department=request.department,
        )

        try:
            self._db.add(user)
            await self._db.flush()

            profile = self._build_profile(user, request)
            if profile is not None:
                self._db.add(profile)
                await self._db.flush()

            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            try:
                taken = await self._get_user_by_email(request.email) is not None
                student_id_taken = await self._student_id_taken(request)
            except SQLAlchemyError as lookup_error:
                raise await self._store_failure("check email availability", lookup_error)
            if taken:
                logger.info("Registration lost a race for email; reporting duplicate")
                return AuthResult.failure(ErrorCode.DUPLICATE_EMAIL, "Email already exists")
            if student_id_taken:
                logger.info("Registration rejected: student ID already exists")
                return AuthResult.failure(ErrorCode.INVALID_ARGUMENT, "Student ID already exists")
            logger.error("Registration failed for role %s: %s", request.role, str(e))
            raise StoreFailureError("Failed to create user", e) from e
        except SQLAlchemyError as e:
            raise await self._store_failure("create user", e)

        logger.info("Registered %s user: %s", user.role, user.id)

        return AuthResult(
            success=True,
            message="User created successfully",
            user=PrincipalResponse.model_validate(user),
            token=self._tokens.issue(user),
        )

    async def change_password(self, user_id: str, new_password: str) -> AuthResult:
        """Re-hash and store a new password.

        Args:
            user_id: Principal ID.
            new_password: New plain text password.

        Returns:
            AuthResult; NOT_FOUND if the principal does not exist.

        Raises:
            StoreFailureError: If the update fails.
        """
        if not new_password:
            return AuthResult.failure(ErrorCode.INVALID_ARGUMENT, "Password is required")

        try:
            user = await self._get_user_by_id(user_id)
            if not user:
                return AuthResult.failure(ErrorCode.NOT_FOUND, "User not found")

            user.password_hash = self._password_hasher.hash(new_password)
            await self._db.commit()
        except SQLAlchemyError as e:
            raise await self._store_failure("update password", e)

        logger.info("Password updated for user %s", user_id)
        return AuthResult(success=True, message="Password updated successfully")

    async def delete_user(self, user_id: str) -> AuthResult:
        """Delete a principal and then its role profile.

        Deleting the user row is what decides the result. Removing the
        profile afterwards is best effort: a failure there is logged and the
        database-level ON DELETE CASCADE is relied upon.

        Args:
            user_id: Principal ID.

        Returns:
            AuthResult; NOT_FOUND if the principal does not exist.

        Raises:
            StoreFailureError: If deleting the user row fails.
        """
        try:
            user = await self._get_user_by_id(user_id)
            if not user:
                return AuthResult.failure(ErrorCode.NOT_FOUND, "User not found")

            role = Role(user.role)
            await self._db.delete(user)
            await self._db.commit()
        except SQLAlchemyError as e:
            raise await self._store_failure("delete user", e)

        await self._delete_profile(user_id, role)

        logger.info("Deleted %s user %s", role.value, user_id)
        return AuthResult(success=True, message="User deleted successfully")

    async def get_user(self, user_id: str) -> PrincipalResponse | None:
        """Get a principal without its password hash.

        Args:
            user_id: Principal ID.

        Returns:
            PrincipalResponse, or None if not found.

        Raises:
            StoreFailureError: If the lookup fails.
        """
        try:
            user = await self._get_user_by_id(user_id)
        except SQLAlchemyError as e:
            raise await self._store_failure("look up user", e)

        return PrincipalResponse.model_validate(user) if user else None

    def _build_profile(
        self,
        user: User,
        request: RegistrationVariant,
    ) -> InstructorProfile | StudentProfile | None:
        """Build the role profile that belongs to a new user."""
        if isinstance(request, AdminRegistration):
            return None
        elif isinstance(request, InstructorRegistration):
            return InstructorProfile(
                user_id=user.id,
                max_hours_per_week=request.max_hours_per_week,
                specializations=list(request.specializations),
                availability={
                    day: [slot.model_dump() for slot in slots]
                    for day, slots in request.availability.items()
                },
            )
        elif isinstance(request, StudentRegistration):
            return StudentProfile(
                user_id=user.id,
                student_id=request.student_id or generate_student_id(),
                department=user.department,
                year=request.year,
                section=request.section,
                enrolled_courses=list(request.enrolled_courses),
            )
        else:
            assert_never(request)

    async def _delete_profile(self, user_id: str, role: Role) -> None:
        """Remove the role profile of a deleted user, logging failures."""
        if role is Role.ADMIN:
            return
        elif role is Role.INSTRUCTOR:
            model: type[InstructorProfile] | type[StudentProfile] = InstructorProfile
        elif role is Role.STUDENT:
            model = StudentProfile
        else:
            assert_never(role)

        try:
            await self._db.execute(delete(model).where(model.user_id == user_id))
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.warning(
                "Profile cleanup failed for deleted user %s: %s",
                user_id,
                str(e),
                exc_info=True,
            )

    async def _student_id_taken(self, request: RegistrationVariant) -> bool:
        if not isinstance(request, StudentRegistration) or not request.student_id:
            return False
        result = await self._db.execute(
            select(StudentProfile.id).where(StudentProfile.student_id == request.student_id)
        )
        return result.first() is not None

    async def _get_user_by_email(self, email: str) -> User | None:
        result = await self._db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def _get_user_by_id(self, user_id: str) -> User | None:
        result = await self._db.execute(select(User).where(User.id == str(user_id)))
        return result.scalar_one_or_none()

    async def _store_failure(self, operation: str, error: SQLAlchemyError) -> StoreFailureError:
        """Roll back, log and wrap a store error."""
        await self._db.rollback()
        logger.error("Failed to %s: %s", operation, str(error), exc_info=True)
        return StoreFailureError(f"Failed to {operation}", error)
