"""ORM Models — SQLAlchemy declarative models for both stores.

Invariants:
    - AIModel belongs to the record store metadata (Base)
    - PurchaseRecord belongs to the ledger store metadata (LedgerBase)

Design Decisions:
    - One file per entity for locality
    - All models imported here so each metadata is populated before create_all runs
"""

from modelmart.models.ai_model import AIModel  # noqa: F401
from modelmart.models.purchase_record import PurchaseRecord  # noqa: F401
