# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT token issuance and verification using python-jose.

The signing key and lifetime come from an explicit JWTSettings value passed
to the constructor. Verification never raises: an invalid, tampered or
expired token yields None.

Example:
    >>> from coursesched.core.config import get_settings
    >>> tokens = TokenService(get_settings().jwt)
    >>> token = tokens.issue(user)
    >>> claims = tokens.verify(token)
"""

import logging
import math
import re
from datetime import timedelta

from jose import JWTError, jwt

from coursesched.core.config.settings import JWTSettings
from coursesched.infrastructure.database.models import User
from coursesched.models.auth import PrincipalResponse, TokenClaims
from coursesched.models.common import Role
from coursesched.utils.datetime import Clock, utc_from_timestamp, utc_now

logger = logging.getLogger(__name__)

_DURATION_PATTERN = re.compile(
    r"(?P<value>-?(?:\d+)?\.?\d+)(?: *"
    r"(?P<unit>milliseconds?|msecs?|ms|seconds?|secs?|s|minutes?|mins?|m"
    r"|hours?|hrs?|h|days?|d|weeks?|w|years?|yrs?|y))?",
    re.IGNORECASE,
)

_UNIT_MILLISECONDS = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
    "w": 7 * 24 * 60 * 60 * 1000,
    "y": 365.25 * 24 * 60 * 60 * 1000,
}


def _unit_key(unit: str | None) -> str:
    if unit is None:
        return "ms"
    unit = unit.lower()
    if unit.startswith("ms") or unit.startswith("milli"):
        return "ms"
    if unit in ("m", "min", "mins", "minute", "minutes"):
        return "m"
    return unit[0]


def parse_duration(literal: str) -> timedelta:
    """Parse a duration literal such as "7d", "20h", "60s" or "7 days".

    A number without a unit is milliseconds.

    Args:
        literal: Duration literal.

    Returns:
        The duration.

    Raises:
        ValueError: If the literal is not a valid duration.
    """
    match = _DURATION_PATTERN.fullmatch(literal)
    if not match:
        raise ValueError(f"Invalid token lifetime: {literal!r}")

    value = float(match.group("value"))
    millis = value * _UNIT_MILLISECONDS[_unit_key(match.group("unit"))]
    return timedelta(milliseconds=millis)


def parse_token_lifetime(raw: str | int) -> timedelta:
    """Resolve the configured token lifetime.

    A value made only of digits is a number of hours. Anything else is a
    duration literal used as-is, so "7d" means seven days and never
    "7d hours".

    Args:
        raw: Configured lifetime expression.

    Returns:
        The token lifetime.

    Raises:
        ValueError: If the expression cannot be parsed.
    """
    raw = str(raw)
    if raw.isdigit() and raw.isascii():
        return timedelta(hours=int(raw))
    return parse_duration(raw)


class TokenService:
    """Signed, time-bounded identity assertions.

    Attributes:
        _settings: JWT configuration (secret key, algorithm, lifetime).
        _lifetime: Parsed token lifetime.
        _clock: Source of the current time.
    """

    def __init__(self, settings: JWTSettings, clock: Clock = utc_now) -> None:
        """Initialize the token service.

        Args:
            settings: JWT configuration settings.
            clock: Returns the current UTC time. Injected by tests.

        Raises:
            ValueError: If the configured lifetime cannot be parsed.
        """
        self._settings = settings
        self._lifetime = parse_token_lifetime(settings.token_expiration)
        self._clock = clock

        if settings.uses_default_secret:
            logger.warning(
                "JWT secret key is the insecure development default; "
                "set JWT_SECRET_KEY before deploying"
            )

    @property
    def lifetime(self) -> timedelta:
        """Token lifetime."""
        return self._lifetime

    def issue(self, principal: "User | PrincipalResponse") -> str:
        """Issue a token for a principal.

        Args:
            principal: The principal the token asserts.

        Returns:
            Encoded JWT string.
        """
        now = self._clock()
        expires_at = now + self._lifetime
        role = principal.role
        payload = {
            "id": str(principal.id),
            "email": principal.email,
            "role": role.value if isinstance(role, Role) else str(role),
            "iat": math.floor(now.timestamp()),
            "exp": math.floor(expires_at.timestamp()),
        }

        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def verify(self, token: str | None) -> TokenClaims | None:
        """Verify a token and return its claims.

        Args:
            token: JWT string.

        Returns:
            TokenClaims if the signature is valid and the token has not
            expired, otherwise None.
        """
        if not token:
            return None

        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
                # Expiry is checked below against the injected clock
                options={"verify_exp": False},
            )
            claims = TokenClaims(
                id=payload["id"],
                email=payload["email"],
                role=payload["role"],
                issued_at=utc_from_timestamp(payload["iat"]),
                expires_at=utc_from_timestamp(payload["exp"]),
            )
        except (JWTError, KeyError, TypeError, ValueError) as e:
            logger.debug("Token verification failed: %s", str(e))
            return None

        if not self._clock() < claims.expires_at:
            logger.debug("Token expired for principal %s", claims.id)
            return None

        return claims

    def is_valid(self, token: str | None) -> bool:
        """Check whether a token verifies."""
        return self.verify(token) is not None
