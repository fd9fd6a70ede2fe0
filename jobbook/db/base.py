"""Declarative Base — metadata root for the storage tables.

Invariants:
    - Every ORM model subclasses Base, so create_all() sees the full schema
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
