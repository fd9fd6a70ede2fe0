"""API Layer — FastAPI routes, dependency container and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses

Design Decisions:
    - Thin routes delegate to controllers and pure core functions
"""
