"""User Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - UserCreate.name: 2-100 chars after whitespace stripping
    - UserCreate.email / UserUpdate.email: well-formed address (email-validator),
      kept exactly as submitted — uniqueness compares the client's string
    - UserUpdate rejects unknown keys; absent or null fields mean "do not change"
    - UserResponse has no credential field — it cannot leak what it cannot hold

Design Decisions:
    - str_strip_whitespace over a field_validator: length limits apply to the stripped value
    - ValidatedEmail over EmailStr: EmailStr returns the normalized address
      (lowercased domain), which would rewrite what the client stored
    - to_field_updates() converts the payload into tagged variants so no JSON key
      ever reaches the gateway as a column name
"""

from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from app.core.domain_types import SetEmail, SetName, UserFieldUpdate


def _check_email(value: str) -> str:
    """Reject malformed addresses; return the input unchanged."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"Not a valid email address: {e}") from e
    return value


ValidatedEmail = Annotated[
    str, Field(max_length=255), AfterValidator(_check_email),
]


class UserCreate(BaseModel):
    """User creation — validates name length and email format."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        min_length=2, max_length=100,
        description="Name must be at least 2 characters long",
    )
    email: ValidatedEmail


class UserUpdate(BaseModel):
    """Partial user update — any subset of name and email."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str | None = Field(None, min_length=2, max_length=100)
    email: ValidatedEmail | None = None

    def to_field_updates(self) -> list[UserFieldUpdate]:
        updates: list[UserFieldUpdate] = []
        if self.name is not None:
            updates.append(SetName(self.name))
        if self.email is not None:
            updates.append(SetEmail(self.email))
        return updates


class UserResponse(BaseModel):
    """User response — public-facing user data."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
