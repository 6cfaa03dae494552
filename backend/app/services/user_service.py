"""User Service — business rules between the HTTP handlers and the gateway.

Invariants:
    - Every returned user is a UserView (credential stripped)
    - create_user checks the email before writing; a match means no write at all
    - Lost check-then-insert races (unique constraint fired) → DuplicateEmailError,
      any other store failure propagates as PersistenceError
    - update/delete are passthroughs: partial-update and idempotent-delete
      semantics are the gateway's

Design Decisions:
    - Depends on the UserRepository protocol, not the SQL gateway (ADR: testable core)
    - No recovery or retries: PersistenceError is surfaced as-is
"""

import logging
from typing import Sequence

from app.core.domain_types import SetEmail, UserFieldUpdate, UserId
from app.core.errors import DuplicateEmailError, ErrorContext, PersistenceError
from app.core.repository_protocols import UserRepository
from app.core.users import (
    PLACEHOLDER_CREDENTIAL, NewUser, UserView, to_public_view,
)

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, repo: UserRepository):
        self.repo = repo

    async def list_users(self) -> list[UserView]:
        return [to_public_view(u) for u in await self.repo.find_all()]

    async def get_user(self, user_id: UserId) -> UserView | None:
        user = await self.repo.find_by_id(user_id)
        return to_public_view(user) if user else None

    async def create_user(self, name: str, email: str) -> UserView:
        """Create a user with a unique email."""
        if await self.repo.find_by_email(email):
            raise DuplicateEmailError(
                email, ErrorContext(operation="create_user"),
            )

        try:
            created = await self.repo.create(NewUser(
                name=name,
                email=email,
                password_credential=PLACEHOLDER_CREDENTIAL,
            ))
        except PersistenceError as e:
            # unique constraint won a concurrent check-then-insert race
            if e.integrity_violation and await self.repo.find_by_email(email):
                logger.warning(
                    "Duplicate email detected by store constraint",
                    extra={"operation": "create_user"},
                )
                raise DuplicateEmailError(
                    email, ErrorContext(operation="create_user"),
                ) from e
            raise
        return to_public_view(created)

    async def update_user(
        self, user_id: UserId, updates: Sequence[UserFieldUpdate],
    ) -> UserView | None:
        try:
            updated = await self.repo.update(user_id, updates)
        except PersistenceError as e:
            new_email = next(
                (u.value for u in updates if isinstance(u, SetEmail)), None,
            )
            if e.integrity_violation and new_email is not None:
                holder = await self.repo.find_by_email(new_email)
                if holder is not None and holder.id != user_id:
                    raise DuplicateEmailError(
                        new_email,
                        ErrorContext(user_id=user_id, operation="update_user"),
                    ) from e
            raise
        return to_public_view(updated) if updated else None

    async def delete_user(self, user_id: UserId) -> None:
        await self.repo.delete(user_id)
