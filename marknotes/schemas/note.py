"""
MarkNotes Backend - Note and Grammar Schemas
============================================

What:  Pydantic models defining the note and grammar-check API contracts.
How:   FastAPI validates request bodies against these models and serializes
       responses through them; the same models drive the /api-docs page.

Validation:
    Title and content are trimmed and must be non-empty afterwards. A failure
    surfaces as a 400 `validation_error` with one entry per offending field.
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from marknotes.schemas.common import ApiModel


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteWrite(ApiModel):
    """Body of POST /notes and PUT /notes/{id}."""

    title: str = Field(max_length=255, description="Note title (required)")
    content: str = Field(description="Markdown content (required)")

    @field_validator("title", "content")
    @classmethod
    def strip_and_require(cls, v: str, info) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError(f"{info.field_name.capitalize()} is required")
        return stripped


class GrammarCheckRequest(ApiModel):
    """
    Body of POST /check-grammar.

    `content` is optional at the schema level so that a missing value and an
    empty string get the same 400 from GrammarService.
    """

    content: Optional[str] = Field(default=None, description="Text to check (max 10000 chars)")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(ApiModel):
    """Full representation of a note, returned by create and update."""

    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str
    content: str = Field(description="Markdown source")
    user_id: uuid.UUID = Field(description="Owning user")
    created_at: datetime
    updated_at: Optional[datetime] = Field(default=None, description="Null until first update")


class NoteListItem(ApiModel):
    """
    Listing projection: content is deliberately absent so a page of notes
    stays small regardless of note size.
    """

    id: uuid.UUID
    title: str
    created_at: datetime


class NoteListResponse(ApiModel):
    """
    Offset pagination envelope for GET /notes.

        currentPage: page actually served (after defaulting)
        totalPages:  ceil(totalNotes / limit)
        totalNotes:  number of notes owned by the caller
    """

    notes: List[NoteListItem]
    current_page: int
    total_pages: int
    total_notes: int


class UploadResponse(ApiModel):
    """Returned by POST /upload."""

    message: str = Field(default="File uploaded successfully")
    note_id: uuid.UUID


class GrammarIssue(ApiModel):
    """One flagged problem, with offsets into the markdown-stripped text."""

    message: str
    offset: int
    length: int
    replacements: List[Any] = Field(
        default_factory=list,
        description="Suggested replacements as returned by the grammar service",
    )


class GrammarCheckResponse(ApiModel):
    issues: List[GrammarIssue]
