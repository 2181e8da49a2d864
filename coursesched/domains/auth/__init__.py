# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain services.

This module provides authentication and authorization services:
- Password hashing with bcrypt
- Token issuance and verification
- Login, registration and account maintenance

Exports:
    PasswordHasher: Secure password hashing using bcrypt.
    TokenService: JWT token creation and validation.
    AuthService: Login, registration and account maintenance.
"""

from coursesched.domains.auth.jwt import TokenService, parse_token_lifetime
from coursesched.domains.auth.password import PasswordHasher
from coursesched.domains.auth.service import AuthService

__all__ = [
    "PasswordHasher",
    "TokenService",
    "AuthService",
    "parse_token_lifetime",
]
