"""
MarkNotes Backend - User Service
================================

What:  Registration and login.
How:   Usernames are unique: checked up front for a clean 409, and backed by
       the database's unique constraint for concurrent registrations.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marknotes.exceptions import AuthenticationError, ConflictError, DatabaseError
from marknotes.models.user import User
from marknotes.schemas.user import Credentials, RegisterResponse, TokenResponse, UserResponse
from marknotes.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:

    async def get_by_username(self, db: AsyncSession, username: str):
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def register(self, db: AsyncSession, data: Credentials) -> RegisterResponse:
        """
        Create an account and issue its first token.

        Raises:
            ConflictError: username already taken (→ 409)
        """
        if await self.get_by_username(db, data.username) is not None:
            raise ConflictError(message="Username already registered", field="username")

        user = User(
            id=uuid.uuid4(),
            username=data.username,
            hashed_password=hash_password(data.password),
            created_at=datetime.now(timezone.utc),
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            await db.rollback()
            raise ConflictError(message="Username already registered", field="username")
        except SQLAlchemyError as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("User registered: %s", user.id)
        return RegisterResponse(
            user=UserResponse.model_validate(user),
            token=create_access_token(str(user.id)),
        )

    async def login(self, db: AsyncSession, data: Credentials) -> TokenResponse:
        """
        Exchange username + password for a token.

        Unknown user and wrong password produce the same error.
        """
        user = await self.get_by_username(db, data.username)
        if user is None or not verify_password(data.password, user.hashed_password):
            logger.warning("Failed login for username=%s", data.username)
            raise AuthenticationError(message="Invalid username or password")
        return TokenResponse(token=create_access_token(str(user.id)))


user_service = UserService()
