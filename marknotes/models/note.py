"""
MarkNotes Backend - Note SQLAlchemy Model
=========================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key: ids can't be guessed or enumerated
    - user_id: owning user, fixed at creation; every query filters on it
    - title / content: trimmed, non-empty (enforced by the API schemas)
    - created_at / updated_at: UTC; updated_at stays NULL until the first edit

    Index on (user_id, created_at DESC):
        Serves the listing query "this user's notes, newest first" and the
        per-user COUNT without touching other users' rows.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from marknotes.database import Base


class Note(Base):
    """
    A user-owned markdown document.

    Lifecycle:
        1. Created by POST /notes or POST /upload
        2. Title/content replaced in place by PUT /notes/{id} (owner only)
        3. Hard-deleted by DELETE /notes/{id} (owner only)

    Query Patterns:
        - List: WHERE user_id = :uid ORDER BY created_at DESC OFFSET :skip LIMIT :limit
        - Fetch/update/delete: WHERE id = :id AND user_id = :uid
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # TEXT: no artificial length limit on markdown content
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning user; never changes after creation",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    __table_args__ = (
        Index("idx_notes_user_created_at", "user_id", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', user_id={self.user_id})>"
