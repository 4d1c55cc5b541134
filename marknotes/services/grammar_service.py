"""
MarkNotes Backend - GrammarBot Service Implementation
=====================================================

What:  Grammar checker backed by the GrammarBot HTTP API (LanguageTool-style
       response format).
How:   POSTs `api_key`, `language` and `text` as form data, reshapes each
       entry of `matches` into a GrammarIssue.
Who:   Singleton used by POST /check-grammar.

Resilience:
    1. Every call is bounded by settings.grammar_timeout
    2. Transport failures (connect errors, timeouts) are retried by tenacity
       with exponential backoff + jitter, up to settings.retry_max_attempts
    3. HTTP error statuses are not retried; the service already answered
    4. Whatever is left becomes GrammarServiceError, returned to the client
       as a 500 carrying the upstream message
"""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from marknotes.config import settings
from marknotes.exceptions import GrammarServiceError
from marknotes.schemas.note import GrammarIssue
from marknotes.services.grammar_base import GrammarChecker

logger = logging.getLogger(__name__)


class GrammarBotService(GrammarChecker):
    """
    GrammarBot implementation of GrammarChecker.

    Args:
        http_client: injected AsyncClient (tests pass one built on
                     httpx.MockTransport). When None, a client is created
                     per call and closed afterwards.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        language: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        max_length: Optional[int] = None,
    ):
        super().__init__(max_length=max_length)
        self.api_key = api_key if api_key is not None else settings.grammar_api_key
        self.api_url = api_url or settings.grammar_api_url
        self.language = language or settings.grammar_language
        self.timeout = timeout or settings.grammar_timeout
        self._http_client = http_client

        logger.info(
            "GrammarBotService initialized with url=%s, language=%s, timeout=%.1fs",
            self.api_url,
            self.language,
            self.timeout,
        )

    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def check_text(self, text: str) -> List[GrammarIssue]:
        start_time = time.perf_counter()
        try:
            payload = await self._post_with_retry(text)
        except httpx.HTTPStatusError as e:
            logger.error(
                "Grammar service returned HTTP %d: %s",
                e.response.status_code,
                e.response.text[:200],
            )
            raise GrammarServiceError(
                message=f"Grammar check failed: {e}",
                context={"status_code": e.response.status_code},
            )
        except httpx.HTTPError as e:
            logger.error("Grammar service unreachable: %s: %s", type(e).__name__, e)
            raise GrammarServiceError(
                message=f"Grammar check failed: {str(e) or type(e).__name__}",
                context={"error_type": type(e).__name__},
            )
        except ValueError as e:
            # Response body was not JSON
            logger.error("Grammar service sent an unreadable response: %s", e)
            raise GrammarServiceError(message=f"Grammar check failed: {e}")

        try:
            issues = self._reshape(payload)
        except (ValueError, TypeError, AttributeError) as e:
            # Covers pydantic.ValidationError for matches of the wrong shape
            logger.error("Grammar service sent malformed matches: %s: %s", type(e).__name__, e)
            raise GrammarServiceError(
                message="Grammar check failed: malformed response from grammar service",
                context={"error_type": type(e).__name__},
            )

        logger.info(
            "Grammar check completed in %.0fms: %d chars, %d issues",
            (time.perf_counter() - start_time) * 1000,
            len(text),
            len(issues),
        )
        return issues

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _post_with_retry(self, text: str) -> Dict[str, Any]:
        data = {"api_key": self.api_key, "language": self.language, "text": text}
        if self._http_client is not None:
            response = await self._http_client.post(self.api_url, data=data, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.api_url, data=data)
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _reshape(payload: Dict[str, Any]) -> List[GrammarIssue]:
        """`matches[*]` → GrammarIssue(message, offset, length, replacements)."""
        matches = payload.get("matches") if isinstance(payload, dict) else None
        if not isinstance(matches, list):
            raise GrammarServiceError(
                message="Grammar check failed: response has no 'matches' list",
            )
        return [
            GrammarIssue(
                message=match.get("message", ""),
                offset=match.get("offset", 0),
                length=match.get("length", 0),
                replacements=match.get("replacements") or [],
            )
            for match in matches
        ]


grammar_service = GrammarBotService()
