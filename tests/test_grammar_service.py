"""
MarkNotes Backend - Grammar Service Tests (Mocked Upstream)
===========================================================

What:  GrammarBotService validation, request shape, response reshaping and
       failure mapping, plus the POST /check-grammar route.
How:   The upstream API is an httpx.MockTransport; no network calls.

What we test:
    ✅ Over-long / missing content rejected before any upstream call
    ✅ Markdown punctuation stripped from the text sent upstream
    ✅ `matches` reshaped to {message, offset, length, replacements}
    ✅ HTTP error statuses and transport failures → GrammarServiceError
    ❌ Real API calls
"""

from urllib.parse import parse_qs

import httpx
import pytest

from marknotes.exceptions import GrammarServiceError, ValidationError
from marknotes.services.grammar_base import strip_markdown
from marknotes.services.grammar_service import GrammarBotService

API_URL = "https://grammar.test/v2/check"

SAMPLE_RESPONSE = {
    "software": {"name": "GrammarBot"},
    "matches": [
        {
            "message": "Possible spelling mistake found.",
            "offset": 8,
            "length": 4,
            "replacements": [{"value": "test"}, {"value": "text"}],
            "rule": {"id": "MORFOLOGIK_RULE_EN_US"},
        }
    ],
}


class RecordingUpstream:
    """MockTransport handler that remembers every request it served."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return self.response

    def form(self, index=0):
        return {k: v[0] for k, v in parse_qs(self.requests[index].content.decode()).items()}


def make_service(upstream: RecordingUpstream, max_length=None) -> GrammarBotService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    return GrammarBotService(
        api_key="k-123",
        api_url=API_URL,
        language="en-US",
        http_client=client,
        max_length=max_length,
    )


class TestStripMarkdown:

    def test_removes_markdown_punctuation(self):
        assert strip_markdown("# Title with **bold** and `code` ~~x~~ _i_") == (
            " Title with bold and code x i"
        )

    def test_plain_text_unchanged(self):
        assert strip_markdown("Nothing to strip here.") == "Nothing to strip here."


class TestValidation:

    @pytest.mark.asyncio
    async def test_too_long_is_rejected_without_upstream_call(self):
        upstream = RecordingUpstream(response=httpx.Response(200, json=SAMPLE_RESPONSE))
        service = make_service(upstream)

        with pytest.raises(ValidationError, match="Content too long. Maximum 10000 characters."):
            await service.check("a" * 10001)

        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_exactly_max_length_is_accepted(self):
        upstream = RecordingUpstream(response=httpx.Response(200, json={"matches": []}))
        service = make_service(upstream)

        assert await service.check("a" * 10000) == []
        assert len(upstream.requests) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, ""])
    async def test_missing_content_is_rejected(self, content):
        upstream = RecordingUpstream(response=httpx.Response(200, json=SAMPLE_RESPONSE))
        service = make_service(upstream)

        with pytest.raises(ValidationError, match="No content provided"):
            await service.check(content)

        assert upstream.requests == []


class TestCheck:

    @pytest.mark.asyncio
    async def test_sends_stripped_text_as_form_data(self):
        upstream = RecordingUpstream(response=httpx.Response(200, json={"matches": []}))
        service = make_service(upstream)

        await service.check("# Heading\n\nSome *emphasis*")

        assert upstream.requests[0].method == "POST"
        assert str(upstream.requests[0].url) == API_URL
        form = upstream.form()
        assert form == {"api_key": "k-123", "language": "en-US", "text": " Heading\n\nSome emphasis"}

    @pytest.mark.asyncio
    async def test_matches_are_reshaped(self):
        upstream = RecordingUpstream(response=httpx.Response(200, json=SAMPLE_RESPONSE))
        service = make_service(upstream)

        issues = await service.check("This is a tset.")

        assert len(issues) == 1
        assert issues[0].model_dump(by_alias=True) == {
            "message": "Possible spelling mistake found.",
            "offset": 8,
            "length": 4,
            "replacements": [{"value": "test"}, {"value": "text"}],
        }

    @pytest.mark.asyncio
    async def test_upstream_error_status(self):
        upstream = RecordingUpstream(response=httpx.Response(403, json={"error": "bad key"}))
        service = make_service(upstream)

        with pytest.raises(GrammarServiceError, match="Grammar check failed"):
            await service.check("Some text")

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        upstream = RecordingUpstream(exc=httpx.ConnectError("connection refused"))
        service = make_service(upstream)

        with pytest.raises(GrammarServiceError, match="Grammar check failed: connection refused"):
            await service.check("Some text")

    @pytest.mark.asyncio
    async def test_response_without_matches(self):
        upstream = RecordingUpstream(response=httpx.Response(200, json={"unexpected": True}))
        service = make_service(upstream)

        with pytest.raises(GrammarServiceError):
            await service.check("Some text")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "matches",
        [
            [{"message": None, "offset": 1, "length": 2}],
            [{"message": "Bad", "offset": "start", "length": 2}],
            ["not a match object"],
        ],
    )
    async def test_malformed_matches(self, matches):
        upstream = RecordingUpstream(response=httpx.Response(200, json={"matches": matches}))
        service = make_service(upstream)

        with pytest.raises(GrammarServiceError, match="Grammar check failed"):
            await service.check("Some text")

    @pytest.mark.asyncio
    async def test_non_json_response(self):
        upstream = RecordingUpstream(response=httpx.Response(200, text="<html>oops</html>"))
        service = make_service(upstream)

        with pytest.raises(GrammarServiceError):
            await service.check("Some text")

    def test_is_configured(self):
        assert make_service(RecordingUpstream()).is_configured()
        assert not GrammarBotService(api_key="").is_configured()


class TestGrammarRoute:

    @pytest.mark.asyncio
    async def test_check_grammar_endpoint(self, test_client, monkeypatch):
        upstream = RecordingUpstream(response=httpx.Response(200, json=SAMPLE_RESPONSE))
        monkeypatch.setattr("marknotes.routes.grammar.grammar_service", make_service(upstream))

        response = await test_client.post("/check-grammar", json={"content": "This is a tset."})

        assert response.status_code == 200
        assert response.json()["issues"][0]["offset"] == 8

    @pytest.mark.asyncio
    async def test_too_long_is_400_without_upstream_call(self, test_client, monkeypatch):
        upstream = RecordingUpstream(response=httpx.Response(200, json=SAMPLE_RESPONSE))
        monkeypatch.setattr("marknotes.routes.grammar.grammar_service", make_service(upstream))

        response = await test_client.post("/check-grammar", json={"content": "x" * 10001})

        assert response.status_code == 400
        assert response.json()["message"] == "Content too long. Maximum 10000 characters."
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_missing_content_is_400(self, test_client):
        response = await test_client.post("/check-grammar", json={})

        assert response.status_code == 400
        assert response.json()["message"] == "No content provided"

    @pytest.mark.asyncio
    async def test_upstream_failure_is_500_with_message(self, test_client, monkeypatch):
        upstream = RecordingUpstream(exc=httpx.ReadTimeout("timed out"))
        monkeypatch.setattr("marknotes.routes.grammar.grammar_service", make_service(upstream))

        response = await test_client.post("/check-grammar", json={"content": "Hello"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "grammar_service_error"
        assert body["message"] == "Grammar check failed: timed out"

    @pytest.mark.asyncio
    async def test_malformed_upstream_match_is_500_grammar_error(self, test_client, monkeypatch):
        upstream = RecordingUpstream(
            response=httpx.Response(200, json={"matches": [{"message": None, "offset": 1, "length": 2}]})
        )
        monkeypatch.setattr("marknotes.routes.grammar.grammar_service", make_service(upstream))

        response = await test_client.post("/check-grammar", json={"content": "Hello"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "grammar_service_error"
        assert body["message"].startswith("Grammar check failed: ")
