"""
MarkNotes Backend - Note Service (Business Logic)
=================================================

What:  Every note operation: create, upload, paginated list, HTML render,
       update and delete.
How:   Each method receives the request's AsyncSession and the caller's user
       id. Every query on a single note filters on BOTH the note id and the
       owner, so a foreign note is indistinguishable from a missing one.
Who:   Called by the route handlers in routes/notes.py and routes/upload.py.

Error Handling:
    NotFoundError / ValidationError propagate unchanged. SQLAlchemy failures
    are logged with context and re-raised as DatabaseError (generic 500).
"""

import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy import delete, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marknotes.config import settings
from marknotes.exceptions import DatabaseError, NotFoundError
from marknotes.models.note import Note
from marknotes.schemas.common import MessageResponse
from marknotes.schemas.note import (
    NoteListItem,
    NoteListResponse,
    NoteResponse,
    NoteWrite,
    UploadResponse,
)
from marknotes.services.markdown_renderer import markdown_renderer
from marknotes.services.upload_service import upload_service

logger = logging.getLogger(__name__)

# Largest OFFSET a signed 64-bit database column accepts
MAX_OFFSET = 2 ** 63 - 1


def _positive_int(value, default: int) -> int:
    """
    Parse a query-string integer; anything non-numeric or below 1 means
    "use the default".
    """
    if value is None:
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    return parsed if parsed >= 1 else default


def resolve_page_params(
    page=None,
    limit=None,
    default_limit: Optional[int] = None,
    max_limit: Optional[int] = None,
) -> Tuple[int, int]:
    """
    Normalize raw ?page=&limit= values.

    Returns:
        (page, limit) with page >= 1 and 1 <= limit <= max_limit. A page
        whose offset would not fit in MAX_OFFSET falls back to 1.
    """
    default_limit = default_limit or settings.default_page_size
    max_limit = max_limit or settings.max_page_size
    page = _positive_int(page, 1)
    limit = min(_positive_int(limit, default_limit), max_limit)
    if (page - 1) * limit > MAX_OFFSET:
        page = 1
    return page, limit


def _parse_note_id(note_id) -> uuid.UUID:
    if isinstance(note_id, uuid.UUID):
        return note_id
    try:
        return uuid.UUID(str(note_id))
    except ValueError:
        # Malformed ids can't name any note
        raise NotFoundError(resource="note", resource_id=str(note_id))


class NoteService:
    """
    Stateless note operations.

    Responsibilities:
        - create_note() / import_upload(): persist a new note for the caller
        - list_notes(): offset pagination, newest first, content omitted
        - render_note_html(): markdown → sanitized HTML
        - update_note() / delete_note(): owner-scoped mutations
    """

    async def create_note(
        self,
        db: AsyncSession,
        owner_id: uuid.UUID,
        data: NoteWrite,
    ) -> NoteResponse:
        note = await self._insert(db, owner_id, data.title, data.content)
        logger.info("Note created: %s (owner=%s)", note.id, owner_id)
        return NoteResponse.model_validate(note)

    async def import_upload(
        self,
        db: AsyncSession,
        owner_id: uuid.UUID,
        filename: Optional[str],
        raw: Optional[bytes],
        content_length: Optional[int] = None,
    ) -> UploadResponse:
        """
        Store an uploaded markdown file as a note titled with the file name.

        Raises:
            ValidationError: missing file, wrong extension, too large, not UTF-8, empty
        """
        title, content = upload_service.prepare(filename, raw, content_length)
        note = await self._insert(db, owner_id, title, content)
        logger.info("Note imported from upload: %s (owner=%s)", note.id, owner_id)
        return UploadResponse(message="File uploaded successfully", note_id=note.id)

    async def list_notes(
        self,
        db: AsyncSession,
        owner_id: uuid.UUID,
        page=None,
        limit=None,
    ) -> NoteListResponse:
        """
        One page of the caller's notes, newest first.

        Query plan:
            SELECT id, title, created_at FROM notes WHERE user_id = :uid
            ORDER BY created_at DESC OFFSET (page-1)*limit LIMIT :limit
            → served by idx_notes_user_created_at

        Args:
            page, limit: raw query values; see resolve_page_params()
        """
        page, limit = resolve_page_params(page, limit)
        skip = (page - 1) * limit

        try:
            rows = await db.execute(
                select(Note.id, Note.title, Note.created_at)
                .where(Note.user_id == owner_id)
                .order_by(desc(Note.created_at), desc(Note.id))
                .offset(skip)
                .limit(limit)
            )
            items = [
                NoteListItem(id=row.id, title=row.title, created_at=row.created_at)
                for row in rows
            ]

            count_result = await db.execute(
                select(func.count(Note.id)).where(Note.user_id == owner_id)
            )
            total = count_result.scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"owner_id": str(owner_id), "error_type": type(e).__name__},
            )

        return NoteListResponse(
            notes=items,
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_notes=total,
        )

    async def render_note_html(
        self,
        db: AsyncSession,
        owner_id: uuid.UUID,
        note_id,
    ) -> str:
        note = await self._get_owned(db, owner_id, note_id)
        return markdown_renderer.render(note.content)

    async def update_note(
        self,
        db: AsyncSession,
        owner_id: uuid.UUID,
        note_id,
        data: NoteWrite,
    ) -> NoteResponse:
        """Replace title and content of one of the caller's notes."""
        note = await self._get_owned(db, owner_id, note_id)
        note.title = data.title
        note.content = data.content
        note.updated_at = datetime.now(timezone.utc)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note.id, str(e))
            raise DatabaseError(
                message="Could not update the note. Please try again.",
                context={"note_id": str(note.id)},
            )
        logger.info("Note updated: %s", note.id)
        return NoteResponse.model_validate(note)

    async def delete_note(
        self,
        db: AsyncSession,
        owner_id: uuid.UUID,
        note_id,
    ) -> MessageResponse:
        """
        Hard-delete one of the caller's notes.

        Raises:
            NotFoundError: no note with this id belongs to the caller
        """
        parsed_id = _parse_note_id(note_id)
        try:
            result = await db.execute(
                delete(Note).where(Note.id == parsed_id, Note.user_id == owner_id)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", parsed_id, str(e))
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": str(parsed_id)},
            )
        if result.rowcount == 0:
            raise NotFoundError(resource="note", resource_id=str(parsed_id))

        logger.info("Note deleted: %s (owner=%s)", parsed_id, owner_id)
        return MessageResponse(message="Note deleted successfully")

    # ── Internals ─────────────────────────────────────────────────────────

    async def _insert(
        self,
        db: AsyncSession,
        owner_id: uuid.UUID,
        title: str,
        content: str,
    ) -> Note:
        note = Note(
            id=uuid.uuid4(),
            title=title,
            content=content,
            user_id=owner_id,
            created_at=datetime.now(timezone.utc),
        )
        db.add(note)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"owner_id": str(owner_id), "error_type": type(e).__name__},
            )
        return note

    async def _get_owned(self, db: AsyncSession, owner_id: uuid.UUID, note_id) -> Note:
        """
        Fetch a note by id, scoped to its owner.

        Query plan:
            SELECT * FROM notes WHERE id = :id AND user_id = :uid
        """
        parsed_id = _parse_note_id(note_id)
        try:
            result = await db.execute(
                select(Note).where(Note.id == parsed_id, Note.user_id == owner_id)
            )
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", parsed_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(parsed_id)},
            )

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(parsed_id))
        return note


note_service = NoteService()
