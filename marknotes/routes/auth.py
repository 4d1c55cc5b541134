"""
MarkNotes Backend - Auth Routes
===============================

What:  POST /register and POST /login.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marknotes.database import get_db_session
from marknotes.schemas.common import ErrorResponse
from marknotes.schemas.user import Credentials, RegisterResponse, TokenResponse
from marknotes.services.user_service import user_service

router = APIRouter(tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=RegisterResponse,
    responses={
        400: {"description": "Invalid username or password", "model": ErrorResponse},
        409: {"description": "Username already registered", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    body: Credentials,
    db: AsyncSession = Depends(get_db_session),
) -> RegisterResponse:
    return await user_service.register(db=db, data=body)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid username or password", "model": ErrorResponse}},
    summary="Exchange credentials for a bearer token",
)
async def login(
    body: Credentials,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await user_service.login(db=db, data=body)
