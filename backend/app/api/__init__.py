"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - JSON bodies for resources and structured errors; plain text for 404/409

Design Decisions:
    - Thin routes delegate to services (ADR: ExMA impureim sandwich)
"""
