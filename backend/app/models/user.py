"""User ORM — the single `users` table.

Invariants:
    - id is an integer primary key generated by the store, never reused
    - email is unique (store-enforced; the service pre-check is not atomic)
    - password_credential attribute maps to the `password_hash` column

Design Decisions:
    - sqlite_autoincrement: SQLite otherwise reuses the highest deleted rowid
    - ORM model never leaves the gateway — rows are mapped to core/users.py dataclasses
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class User(Base):
    """Persisted user row."""
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    password_credential: Mapped[str] = mapped_column(
        "password_hash", String(255), nullable=False,
    )
