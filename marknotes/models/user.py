"""
MarkNotes Backend - User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table.
How:   `username` carries a unique constraint; the plaintext password is never
       stored, only the passlib hash.
Who:   Used by UserService (registration, login) and the auth dependency.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from marknotes.database import Base


class User(Base):
    """
    A registered account.

    Lifecycle:
        Created by POST /register. No exposed operation updates or deletes it.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        comment="Login name, unique across all users",
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="passlib hash string (scheme prefix included)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
