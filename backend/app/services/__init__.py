"""Services Layer — business rules orchestrating the persistence gateway.

Invariants:
    - Services speak in core types (UserView, UserFieldUpdate), never ORM rows
    - Services never build HTTP responses

Design Decisions:
    - One service per resource for locality (ADR: ExMA no god objects)
"""
