"""User Gateway — SQL persistence for the users table.

Invariants:
    - Every operation holds a session only for its own duration; released on any exit
    - Writes commit before returning
    - Rows are mapped to UserEntity before leaving this module (ORM never escapes)
    - Any store failure → logged with operation context → PersistenceError
      with an operation-specific message; raw driver detail stays here
    - Partial update touches exactly the supplied fields; columns come from
      _UPDATE_COLUMNS, never from caller strings

Design Decisions:
    - Absence is None, never an exception
    - Integrity violations flagged on PersistenceError so the service can
      recognise a lost duplicate-email race
    - No retries: failures surface to the caller
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import SetEmail, SetName, UserFieldUpdate, UserId
from app.core.errors import ErrorContext, PersistenceError
from app.core.users import NewUser, UserEntity
from app.infrastructure.database import DatabaseSessionManager
from app.models.user import User

logger = logging.getLogger(__name__)

# ADR: every updatable field has exactly one static column
_UPDATE_COLUMNS = {
    SetName: User.name,
    SetEmail: User.email,
}


def _to_entity(row: User) -> UserEntity:
    return UserEntity(
        id=UserId(row.id),
        name=row.name,
        email=row.email,
        password_credential=row.password_credential,
    )


class SqlUserRepository:
    """Persistence gateway for users, backed by an injected pool handle."""

    def __init__(self, db_manager: DatabaseSessionManager):
        self._db = db_manager

    @asynccontextmanager
    async def _operation(
        self,
        operation: str,
        failure_message: str,
        user_id: int | None = None,
    ) -> AsyncGenerator[AsyncSession, None]:
        """Session scope that maps every store failure to PersistenceError."""
        try:
            async with self._db.session() as db:
                yield db
        except IntegrityError as e:
            logger.error(
                f"Integrity violation in UserRepository.{operation}: {e}",
                extra={"operation": operation, "user_id": user_id},
            )
            raise PersistenceError(
                failure_message, operation, integrity_violation=True,
                context=ErrorContext(user_id=user_id),
            ) from e
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                f"Error in UserRepository.{operation}: "
                f"{type(e).__name__}: {e}",
                extra={"operation": operation, "user_id": user_id},
            )
            raise PersistenceError(
                failure_message, operation,
                context=ErrorContext(user_id=user_id),
            ) from e

    async def find_all(self) -> list[UserEntity]:
        async with self._operation("find_all", "Failed to fetch users.") as db:
            result = await db.execute(select(User).order_by(User.id))
            return [_to_entity(row) for row in result.scalars().all()]

    async def find_by_id(self, user_id: UserId) -> UserEntity | None:
        async with self._operation(
            "find_by_id", "Failed to fetch user by ID.", user_id,
        ) as db:
            return await self._load(db, user_id)

    async def find_by_email(self, email: str) -> UserEntity | None:
        async with self._operation(
            "find_by_email", "Failed to fetch user by email.",
        ) as db:
            result = await db.execute(select(User).where(User.email == email))
            row = result.scalars().first()
            return _to_entity(row) if row else None

    async def create(self, new_user: NewUser) -> UserEntity:
        """Insert a user; the store assigns the id during flush."""
        async with self._operation("create", "Failed to create user.") as db:
            row = User(
                name=new_user.name,
                email=new_user.email,
                password_credential=new_user.password_credential,
            )
            db.add(row)
            await db.commit()
            logger.info(
                f"User {row.id} created",
                extra={"operation": "create", "user_id": row.id},
            )
            return _to_entity(row)

    async def update(
        self, user_id: UserId, updates: Sequence[UserFieldUpdate],
    ) -> UserEntity | None:
        """Apply a partial update, then re-read. Empty updates write nothing."""
        async with self._operation(
            "update", "Failed to update user.", user_id,
        ) as db:
            if updates:
                values = {
                    _UPDATE_COLUMNS[type(change)]: change.value
                    for change in updates
                }
                await db.execute(
                    update(User)
                    .where(User.id == user_id)
                    .values(values)
                    .execution_options(synchronize_session=False),
                )
                await db.commit()
            return await self._load(db, user_id)

    async def delete(self, user_id: UserId) -> None:
        """Delete a user. Deleting a missing user is not an error."""
        async with self._operation(
            "delete", "Failed to delete user.", user_id,
        ) as db:
            await db.execute(delete(User).where(User.id == user_id))
            await db.commit()

    @staticmethod
    async def _load(db: AsyncSession, user_id: UserId) -> UserEntity | None:
        result = await db.execute(select(User).where(User.id == user_id))
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None
