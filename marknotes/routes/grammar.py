"""
MarkNotes Backend - Grammar Check Route
=======================================

What:  POST /check-grammar, proxy to the external grammar service.
How:   Validation, markdown stripping and reshaping live in the grammar
       service; this handler only wires the body through.
"""

from fastapi import APIRouter

from marknotes.schemas.common import ErrorResponse
from marknotes.schemas.note import GrammarCheckRequest, GrammarCheckResponse
from marknotes.services.grammar_service import grammar_service

router = APIRouter(tags=["Grammar"])


@router.post(
    "/check-grammar",
    response_model=GrammarCheckResponse,
    responses={
        400: {"description": "Missing content or over 10000 characters", "model": ErrorResponse},
        500: {"description": "Grammar service failed", "model": ErrorResponse},
    },
    summary="Check grammar of markdown text",
)
async def check_grammar(body: GrammarCheckRequest) -> GrammarCheckResponse:
    issues = await grammar_service.check(body.content)
    return GrammarCheckResponse(issues=issues)
