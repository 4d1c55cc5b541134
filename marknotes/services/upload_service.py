"""
MarkNotes Backend - Markdown Upload Validation
==============================================

What:  Turns an uploaded file into a (title, content) pair ready to persist.
How:   Checks run cheapest first: presence, extension, size, then decoding.
       The file is read from memory and never written to disk.
Who:   NoteService.import_upload() for POST /upload.

Checks:
    1. File present:  the multipart field `markdown` must carry a file
    2. Extension:     .md, .markdown or .txt (case-insensitive)
    3. Size:          Content-Length header first, then actual byte count
    4. Encoding:      UTF-8 (a leading BOM is dropped)
    5. Non-empty:     content must contain something besides whitespace
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

from marknotes.config import settings
from marknotes.exceptions import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".md", ".markdown", ".txt"}

# Width of notes.title
MAX_TITLE_LENGTH = 255


class UploadService:
    """Validation for markdown file uploads."""

    def __init__(self, max_size: Optional[int] = None):
        self.max_size = max_size or settings.max_upload_size

    def validate_extension(self, filename: str) -> str:
        """Return the normalized extension or raise ValidationError."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="markdown",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Args:
            content_length: size reported by the client (may be None or wrong)
            actual_size: byte count actually received
        """
        max_kb = self.max_size / 1024
        for reported in (content_length, actual_size):
            if reported and reported > self.max_size:
                raise ValidationError(
                    message=f"File size exceeds maximum of {max_kb:.0f}KB.",
                    field="markdown",
                    context={"max_size": self.max_size, "size": reported},
                )

    def decode(self, raw: bytes) -> str:
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise ValidationError(
                message="File must be UTF-8 encoded text",
                field="markdown",
            )
        if not text.strip():
            raise ValidationError(message="Uploaded file is empty", field="markdown")
        return text

    def prepare(
        self,
        filename: Optional[str],
        raw: Optional[bytes],
        content_length: Optional[int] = None,
    ) -> Tuple[str, str]:
        """
        Run every check and return (title, content).

        The title is the uploaded file's base name, as sent by the client,
        with the stem shortened when needed so it fits MAX_TITLE_LENGTH.
        """
        if raw is None or not filename:
            raise ValidationError(message="No file uploaded", field="markdown")

        name = Path(filename).name.strip()
        ext = self.validate_extension(name)
        title = self._fit_title(name, ext)
        self.validate_size(content_length, len(raw))
        content = self.decode(raw)

        logger.info("Upload accepted: %s (%d bytes)", title, len(raw))
        return title, content

    @staticmethod
    def _fit_title(name: str, ext: str) -> str:
        """Shorten the stem so the title fits notes.title, keeping the extension."""
        if len(name) <= MAX_TITLE_LENGTH:
            return name
        stem = name[: len(name) - len(ext)]
        return stem[: MAX_TITLE_LENGTH - len(ext)] + name[len(stem):]


upload_service = UploadService()
