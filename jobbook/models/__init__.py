"""ORM Models — SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - Entities are NOT tables: each collection is one JSON value in storage_entries

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all runs
"""

from jobbook.models.storage_entry import StorageEntry  # noqa: F401
