"""
MarkNotes Backend - Notes Route Handlers
========================================

What:  POST/GET /notes, GET /notes/{id}/html, PUT/DELETE /notes/{id}.
How:   Every handler depends on get_current_user and passes the caller's id
       to NoteService, which scopes all queries to that owner.

Caching:
    - GET /notes/{id}/html: `Cache-Control: private, no-cache` since the
      note can change and belongs to one user
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from marknotes.database import get_db_session
from marknotes.models.user import User
from marknotes.schemas.common import ErrorResponse, MessageResponse
from marknotes.schemas.note import NoteListResponse, NoteResponse, NoteWrite
from marknotes.security import get_current_user
from marknotes.services.note_service import note_service

router = APIRouter(tags=["Notes"])

AUTH_ERRORS = {401: {"description": "Missing or invalid token", "model": ErrorResponse}}


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={
        400: {"description": "Empty title or content", "model": ErrorResponse},
        **AUTH_ERRORS,
    },
    summary="Create a note",
)
async def create_note(
    body: NoteWrite,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db=db, owner_id=user.id, data=body)


@router.get(
    "/notes",
    response_model=NoteListResponse,
    responses=AUTH_ERRORS,
    summary="List your notes, newest first",
    description=(
        "Offset pagination. `page` defaults to 1 and `limit` to 10; values that "
        "are not positive integers fall back to those defaults, and `limit` is "
        "capped at the server maximum. Content is not included in list items."
    ),
)
async def list_notes(
    # Raw strings: bad values fall back to defaults instead of failing validation
    page: Optional[str] = Query(default=None, description="Page number (1-based)"),
    limit: Optional[str] = Query(default=None, description="Items per page"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteListResponse:
    return await note_service.list_notes(db=db, owner_id=user.id, page=page, limit=limit)


@router.get(
    "/notes/{note_id}/html",
    response_class=HTMLResponse,
    responses={
        200: {"description": "Sanitized HTML rendering", "content": {"text/html": {}}},
        404: {"description": "Note not found", "model": ErrorResponse},
        **AUTH_ERRORS,
    },
    summary="Render a note as HTML",
)
async def get_note_html(
    note_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    html = await note_service.render_note_html(db=db, owner_id=user.id, note_id=note_id)
    return HTMLResponse(content=html, headers={"Cache-Control": "private, no-cache"})


@router.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Empty title or content", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        **AUTH_ERRORS,
    },
    summary="Replace a note's title and content",
)
async def update_note(
    note_id: str,
    body: NoteWrite,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db=db, owner_id=user.id, note_id=note_id, data=body)


@router.delete(
    "/notes/{note_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        **AUTH_ERRORS,
    },
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await note_service.delete_note(db=db, owner_id=user.id, note_id=note_id)
