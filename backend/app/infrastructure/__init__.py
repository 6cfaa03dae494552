"""Infrastructure Layer — database access and cross-cutting concerns.

Invariants:
    - Infrastructure implements core protocols; core never imports from here
    - All store calls wrapped with error mapping to PersistenceError

Design Decisions:
    - Pool handle, gateway and logging kept apart (ADR: single responsibility)
"""
