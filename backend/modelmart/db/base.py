"""SQLAlchemy Declarative Bases — one metadata per store.

Invariants:
    - Record store models inherit from Base; ledger models inherit from LedgerBase
    - Each store's create_all only ever sees its own tables

Design Decisions:
    - Two bases because the stores live on separately configured engines
      (ADR: purchase history may sit in a different database than listings)
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for record store ORM models."""
    pass


class LedgerBase(DeclarativeBase):
    """Base class for ledger store ORM models."""
    pass
