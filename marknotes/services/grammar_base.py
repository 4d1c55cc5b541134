"""
MarkNotes Backend - Abstract Grammar Checker Interface
======================================================

What:  The contract every grammar-check provider implements.
How:   Concrete providers (GrammarBotService) subclass GrammarChecker and
       translate their own wire format into GrammarIssue objects. Routes
       and tests only depend on this interface.
"""

import re
from abc import ABC, abstractmethod
from typing import List

from marknotes.config import settings
from marknotes.exceptions import ValidationError
from marknotes.schemas.note import GrammarIssue

# Markdown punctuation removed before checking, to cut false positives
MARKDOWN_PUNCTUATION = re.compile(r"[#*_`~]")


def strip_markdown(text: str) -> str:
    return MARKDOWN_PUNCTUATION.sub("", text)


class GrammarChecker(ABC):
    """
    Abstract interface for grammar-checking providers.

    Contract:
        - check() validates input before any network traffic:
          missing/empty → ValidationError, over max_length → ValidationError
        - markdown punctuation is stripped; offsets in the returned issues
          refer to the stripped text
        - every provider failure is raised as GrammarServiceError
    """

    def __init__(self, max_length: int = None):
        self.max_length = max_length or settings.grammar_max_length

    def validate(self, content) -> str:
        if not content:
            raise ValidationError(message="No content provided", field="content")
        if len(content) > self.max_length:
            raise ValidationError(
                message=f"Content too long. Maximum {self.max_length} characters.",
                field="content",
                context={"max_length": self.max_length, "length": len(content)},
            )
        return content

    async def check(self, content) -> List[GrammarIssue]:
        """Validate, strip markdown, then ask the provider."""
        text = strip_markdown(self.validate(content))
        return await self.check_text(text)

    @abstractmethod
    async def check_text(self, text: str) -> List[GrammarIssue]:
        """
        Send already-validated plain text to the provider.

        Raises:
            GrammarServiceError: transport failure or error response
        """
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """True when the provider has the credentials it needs."""
        ...
