"""User registration and credential checks."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

import bcrypt

from .common.validators import is_valid_email, is_valid_login, is_valid_password
from .database.base import URLShortenerDBBase
from .database.models import Principal, User
from .exceptions import ConflictError, UnauthorizedError, ValidationError

UNAUTHORIZED_MESSAGE = "Invalid login, email or password"


class AuthService:
    """Registers users and turns credentials into a Principal."""

    def __init__(
        self,
        db: URLShortenerDBBase,
        bcrypt_rounds: int = 12,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize auth service.

        Args:
            db: User store
            bcrypt_rounds: bcrypt cost factor (4-31)
            logger: Optional logger
        """
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds
        self.logger = logger or logging.getLogger(__name__)

    async def register(self, login: str, email: str, password: str) -> User:
        """Register a new user.

        Args:
            login: Unique login
            email: Unique email (stored lower-cased)
            password: Plain password, hashed with bcrypt before storage

        Returns:
            The created user

        Raises:
            ValidationError: If any field is malformed
            ConflictError: If login or email is already registered
        """
        for is_valid, error in (
            is_valid_login(login),
            is_valid_email(email),
            is_valid_password(password),
        ):
            if not is_valid:
                raise ValidationError(error)

        email = email.lower()

        if await self.db.get_user_by_login(login):
            raise ConflictError(f"User with login '{login}' already exists")
        if await self.db.get_user_by_email(email):
            raise ConflictError(f"User with email '{email}' already exists")

        password_hash = await asyncio.to_thread(self.hash_password, password)
        user = await self.db.create_user(
            login=login,
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )

        self.logger.info(f"Registered user {user.id}: {login}")
        return user

    async def authenticate(self, identifier: Optional[str], password: Optional[str]) -> Principal:
        """Check credentials.

        Args:
            identifier: Login, or email when it contains '@'
            password: Plain password

        Raises:
            UnauthorizedError: If the user is unknown or the password is wrong
        """
        if not identifier or not password:
            raise UnauthorizedError(UNAUTHORIZED_MESSAGE)

        if "@" in identifier:
            user = await self.db.get_user_by_email(identifier.lower())
        else:
            user = await self.db.get_user_by_login(identifier)

        if user is None:
            self.logger.info(f"Authentication failed: unknown user {identifier}")
            raise UnauthorizedError(UNAUTHORIZED_MESSAGE)

        matches = await asyncio.to_thread(self.check_password, password, user.password_hash)
        if not matches:
            self.logger.info(f"Authentication failed: bad password for {user.login}")
            raise UnauthorizedError(UNAUTHORIZED_MESSAGE)

        return Principal(id=user.id, login=user.login)

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(self.bcrypt_rounds)).decode("ascii")

    @staticmethod
    def check_password(password: str, password_hash: str) -> bool:
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > 72:
            return False
        return bcrypt.checkpw(password_bytes, password_hash.encode("ascii"))
