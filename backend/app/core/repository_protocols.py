"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - Absence is returned as None, never raised

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      the service orchestrates the awaits around pure transformations
"""

from typing import Protocol, Sequence

from app.core.domain_types import UserId, UserFieldUpdate
from app.core.users import NewUser, UserEntity


class UserRepository(Protocol):
    """Contract for user persistence — implemented by shell."""
    async def find_all(self) -> list[UserEntity]: ...
    async def find_by_id(self, user_id: UserId) -> UserEntity | None: ...
    async def find_by_email(self, email: str) -> UserEntity | None: ...
    async def create(self, new_user: NewUser) -> UserEntity: ...
    async def update(
        self, user_id: UserId, updates: Sequence[UserFieldUpdate],
    ) -> UserEntity | None: ...
    async def delete(self, user_id: UserId) -> None: ...
