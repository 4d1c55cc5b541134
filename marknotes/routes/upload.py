"""
MarkNotes Backend - Upload Route Handler
========================================

What:  POST /upload, import a markdown file as a new note.
How:   Reads the multipart field `markdown` into memory and hands it to
       NoteService.import_upload(), which validates and persists it.

Request Flow:
    1. Client sends multipart/form-data with a `markdown` file field
    2. The field is optional at the FastAPI level so a missing file gets
       our 400 `validation_error` rather than FastAPI's default error
    3. NoteService validates (extension, size, UTF-8) and stores the note
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from marknotes.database import get_db_session
from marknotes.models.user import User
from marknotes.schemas.common import ErrorResponse
from marknotes.schemas.note import UploadResponse
from marknotes.security import get_current_user
from marknotes.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"description": "No file, unsupported type, too large or not UTF-8", "model": ErrorResponse},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
    },
    summary="Upload a markdown file as a note",
)
async def upload_markdown(
    markdown: Optional[UploadFile] = File(
        default=None,
        description="Markdown file (.md, .markdown or .txt)",
    ),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UploadResponse:
    if markdown is None:
        return await note_service.import_upload(db=db, owner_id=user.id, filename=None, raw=None)

    try:
        raw = await markdown.read()
        logger.info(
            "Received upload: filename=%s, size=%d bytes",
            markdown.filename or "unknown",
            len(raw),
        )
        return await note_service.import_upload(
            db=db,
            owner_id=user.id,
            filename=markdown.filename,
            raw=raw,
            content_length=markdown.size,
        )
    finally:
        await markdown.close()
