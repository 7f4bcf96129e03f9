"""
Auth Service - Admin Login and Tokens
=====================================

One admin account. Passwords are bcrypt hashes; sessions are HS256 JWTs
valid for 24 hours.

FIRST LOGIN:
When no credential record exists yet, the default admin pair is accepted and
a hashed record for it is written (best effort: serverless deployments
without Firestore cannot persist it).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from ..errors import AuthError, ValidationError
from ..infrastructure.config.settings import AuthSettings
from ..infrastructure.persistence import AdminCredential

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


class AuthService:

    def __init__(self, credential_store, settings: AuthSettings):
        self._store = credential_store
        self._settings = settings

    def login(self, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """
        Check the admin credentials and issue a token.

        Raises:
            ValidationError: username or password missing.
            AuthError: credentials do not match.
        """
        if not username or not password:
            raise ValidationError("Username and password required")

        admin = self._store.load_admin()
        if admin is None:
            return self._first_login(username, password)

        if admin.username != username or not check_password(password, admin.password):
            logger.warning(f"Failed login attempt for '{username}'")
            raise AuthError(INVALID_CREDENTIALS)

        return {"token": self.issue_token(admin.username)}

    def _first_login(self, username: str, password: str) -> Dict[str, Any]:
        default_user = self._settings.default_username
        saved = self._store.save_admin(
            AdminCredential(username=default_user, password=hash_password(self._settings.default_password))
        )

        if username != default_user or password != self._settings.default_password:
            raise AuthError(INVALID_CREDENTIALS)

        logger.info("Default admin login")
        message = "Default admin created" if saved else "Logged in with default credentials (in-memory)"
        return {"token": self.issue_token(default_user), "message": message}

    def issue_token(self, username: str) -> str:
        expires = datetime.now(timezone.utc) + timedelta(hours=self._settings.token_ttl_hours)
        return jwt.encode(
            {"username": username, "exp": expires},
            self._settings.jwt_secret,
            algorithm=self._settings.jwt_algorithm,
        )

    def verify_token(self, token: Optional[str]) -> Dict[str, Any]:
        """
        Decode a bearer token.

        Raises:
            AuthError: 401 when the token is missing, 403 when it is
                invalid or expired.
        """
        if not token:
            raise AuthError("Access token required", status_code=401)
        try:
            return jwt.decode(token, self._settings.jwt_secret, algorithms=[self._settings.jwt_algorithm])
        except jwt.PyJWTError:
            raise AuthError("Invalid or expired token", status_code=403)
