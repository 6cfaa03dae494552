"""Database Metadata — SQLAlchemy declarative Base.

Invariants:
    - One engine per process, owned by DatabaseSessionManager (infrastructure/database.py)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""
