"""
MarkNotes Backend - Passwords, Tokens and the Auth Dependency
=============================================================

What:  Password hashing (passlib), access-token issue/verify (PyJWT) and the
       `get_current_user` FastAPI dependency that gates note ownership.
How:   Tokens are HS256 JWTs whose `sub` claim is the user's UUID. The
       dependency decodes the bearer token, loads the user and raises
       AuthenticationError (→ 401) on any failure.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from marknotes.config import settings
from marknotes.database import get_db_session
from marknotes.exceptions import AuthenticationError
from marknotes.models.user import User

logger = logging.getLogger(__name__)

# auto_error=False: a missing header reaches get_current_user as None and is
# reported through our own 401 body instead of FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


# ── Password Hashing ──────────────────────────────────────────────────────

def _build_password_context() -> CryptContext:
    """
    bcrypt when its backend works, pbkdf2_sha256 otherwise.

    Newer bcrypt releases break passlib's backend self-test; a trial hash at
    startup detects that before the first registration does.
    """
    context = CryptContext(schemes=["bcrypt"], deprecated="auto")
    try:
        context.hash("self-test")
        return context
    except Exception as e:
        logger.warning(
            "bcrypt backend unavailable (%s); hashing passwords with pbkdf2_sha256",
            type(e).__name__,
        )
        return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


pwd_context = _build_password_context()


def hash_password(plain: str) -> str:
    """Hash a plaintext password and return the encoded hash string."""
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """True if `plain` matches `hashed`. Malformed hashes count as a mismatch."""
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


# ── Access Tokens ─────────────────────────────────────────────────────────

def create_access_token(subject: str, expires_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expires_minutes or settings.jwt_exp_minutes)
    payload = {"sub": subject, "iat": int(now.timestamp()), "exp": int(exp.timestamp())}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> uuid.UUID:
    """
    Verify signature and expiry, return the user id from `sub`.

    Raises:
        AuthenticationError: expired, tampered, or missing/invalid `sub`
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError(message="Token has expired")
    except jwt.PyJWTError:
        raise AuthenticationError(message="Invalid token")

    try:
        return uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise AuthenticationError(message="Invalid token")


# ── FastAPI Dependency ────────────────────────────────────────────────────

async def get_current_user(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    Resolve the caller from `Authorization: Bearer <token>`.

    Usage:
        @router.get("/notes")
        async def list_notes(user: User = Depends(get_current_user)): ...
    """
    if creds is None or creds.scheme.lower() != "bearer":
        raise AuthenticationError(message="Missing bearer token")

    user_id = decode_access_token(creds.credentials)
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        # Token was signed by us but the account is gone
        raise AuthenticationError(message="Invalid token")
    # Read by the access log middleware
    request.state.user_id = str(user.id)
    return user
