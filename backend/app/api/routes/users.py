"""Users Routes — HTTP contract for the user resource.

Invariants:
    - Bodies are validated by Pydantic before reaching the service (400 on failure)
    - Absence becomes 404 plain text here and nowhere else
    - A path id that cannot name a user (non-numeric, <= 0) is "not found", never a crash
    - DuplicateEmailError → 409 plain text (api/error_handlers.py)
    - Responses are built from UserView only — credentials cannot leak

Design Decisions:
    - Service built per request from the app-owned pool handle (ADR: no global pool)
    - DELETE is idempotent: 204 whether or not the user existed
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from app.core.users import parse_user_id
from app.infrastructure.database import DatabaseSessionManager, get_db_manager
from app.infrastructure.user_repository import SqlUserRepository
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])

USER_NOT_FOUND = "User not found"

_NOT_FOUND_RESPONSE = {
    status.HTTP_404_NOT_FOUND: {
        "description": USER_NOT_FOUND,
        "content": {"text/plain": {}},
    },
}


def get_user_service(
    db_manager: DatabaseSessionManager = Depends(get_db_manager),
) -> UserService:
    """FastAPI dependency wiring service → gateway → pool."""
    return UserService(SqlUserRepository(db_manager))


def _not_found() -> PlainTextResponse:
    return PlainTextResponse(
        USER_NOT_FOUND, status_code=status.HTTP_404_NOT_FOUND,
    )


@router.get("", response_model=list[UserResponse])
async def list_users(service: UserService = Depends(get_user_service)):
    """List all users ordered by id."""
    users = await service.list_users()
    return [UserResponse.model_validate(u) for u in users]


@router.get(
    "/{user_id}", response_model=UserResponse, responses=_NOT_FOUND_RESPONSE,
)
async def get_user(
    user_id: str, service: UserService = Depends(get_user_service),
):
    """Get a single user."""
    parsed = parse_user_id(user_id)
    user = await service.get_user(parsed) if parsed is not None else None
    if user is None:
        return _not_found()
    return UserResponse.model_validate(user)


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_409_CONFLICT: {
            "description": "Email already in use",
            "content": {"text/plain": {}},
        },
    },
)
async def create_user(
    body: UserCreate, service: UserService = Depends(get_user_service),
):
    """Create a user with a unique email."""
    user = await service.create_user(name=body.name, email=body.email)
    logger.info(f"User {user.id} created via API", extra={"user_id": user.id})
    return UserResponse.model_validate(user)


@router.patch(
    "/{user_id}", response_model=UserResponse, responses=_NOT_FOUND_RESPONSE,
)
async def update_user(
    user_id: str,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    """Update any subset of name and email."""
    parsed = parse_user_id(user_id)
    if parsed is None:
        return _not_found()
    user = await service.update_user(parsed, body.to_field_updates())
    if user is None:
        return _not_found()
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str, service: UserService = Depends(get_user_service),
):
    """Delete a user. Missing users are already deleted."""
    parsed = parse_user_id(user_id)
    if parsed is not None:
        await service.delete_user(parsed)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
