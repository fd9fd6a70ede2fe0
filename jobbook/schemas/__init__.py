"""Pydantic Schemas — entity and API contract models.

Invariants:
    - Schemas validate at system boundary (user input, persisted JSON, API responses)
    - Serialized with camelCase keys so stored collections keep the app's JSON layout
    - Domain types from core/ used for enum fields

Design Decisions:
    - Entities are schemas, not ORM rows: each collection is stored as one JSON value
"""
