"""User Domain — internal entity, public view and pure transformations.

Invariants:
    - UserEntity carries the credential; UserView never does
    - to_public_view() is the ONLY way an entity becomes caller-facing
    - parse_user_id() never raises: malformed ids become None (looks up nothing)

Design Decisions:
    - Plain dataclasses, DB-agnostic: the gateway maps ORM rows into these
    - Placeholder credential: password hashing is out of scope, the column is still populated
"""

from dataclasses import dataclass

from app.core.domain_types import UserId

PLACEHOLDER_CREDENTIAL = "a-real-app-would-hash-this"

# ids live in a 32-bit integer column
MAX_USER_ID = 2**31 - 1


@dataclass(frozen=True, slots=True)
class NewUser:
    """User about to be inserted — the store assigns the id."""
    name: str
    email: str
    password_credential: str


@dataclass(frozen=True, slots=True)
class UserEntity:
    """Full internal representation, including sensitive fields."""
    id: UserId
    name: str
    email: str
    password_credential: str


@dataclass(frozen=True, slots=True)
class UserView:
    """Externally safe projection of a user."""
    id: UserId
    name: str
    email: str


def to_public_view(user: UserEntity) -> UserView:
    return UserView(id=user.id, name=user.name, email=user.email)


def parse_user_id(raw: str) -> UserId | None:
    """Parse a path segment into a UserId, or None if it cannot name a user."""
    raw = raw.strip()
    if not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    if not 0 < value <= MAX_USER_ID:
        return None
    return UserId(value)
