"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps a positive int assigned by the store — never reused
    - Updatable fields are a closed set of tagged variants (SetName | SetEmail)
    - No caller-supplied string ever names a column

Design Decisions:
    - NewType over dataclass wrappers for ids: zero runtime cost, full type-checker support
    - Frozen dataclasses for field updates: the variant type IS the field selector,
      the gateway maps each type to a statically known column (ADR: security)
"""

from dataclasses import dataclass
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)


# ─── Partial Update Variants ─────────────────────────────────────

@dataclass(frozen=True)
class SetName:
    """Replace the user's name."""
    value: str


@dataclass(frozen=True)
class SetEmail:
    """Replace the user's email."""
    value: str


UserFieldUpdate = SetName | SetEmail
