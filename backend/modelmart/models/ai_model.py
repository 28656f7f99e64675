"""AIModel ORM — a listing in the primary record store.

Invariants:
    - id is UUID primary key (client default)
    - developer_uid is assigned server-side and never changed once set;
      NULL only on legacy listings created before uid tracking
    - purchased is a non-negative counter, only incremented by the purchase flow
    - created_at set once on insert

Design Decisions:
    - name/framework stored denormalized next to model_name/category: older
      frontends read the former pair (ADR: wire compatibility)
    - CheckConstraints on price and purchased: the store refuses negative values
      even if a caller bypasses the schemas
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint, DateTime, Float, Index, Integer, String, Text, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from modelmart.db.base import Base


class AIModel(Base):
    """Marketplace listing for one AI model."""
    __tablename__ = "ai_models"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_ai_models_price_non_negative"),
        CheckConstraint("purchased >= 0", name="ck_ai_models_purchased_non_negative"),
        Index("ix_ai_models_created_at", "created_at"),
        Index("ix_ai_models_developer_email", "developer_email"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    model_name: Mapped[str] = mapped_column(String(200), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    framework: Mapped[str] = mapped_column(String(100), nullable=False)
    use_case: Mapped[str] = mapped_column(
        String(200), nullable=False, default="General AI",
    )
    dataset: Mapped[str] = mapped_column(
        String(200), nullable=False, default="Proprietary Data",
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # Ownership
    developer_email: Mapped[str] = mapped_column(String(320), nullable=False)
    developer_uid: Mapped[str | None] = mapped_column(String(128), nullable=True)
    developer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    purchased: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
