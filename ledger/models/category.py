"""
Category database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from ledger.database import Base
from ledger.models.entry_type import EntryType


class Category(Base):
    """Category model, owned by a single user."""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)
    type = Column(Enum(EntryType, name="entry_type"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="categories")
    transactions = relationship("Transaction", back_populates="category", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("length(trim(name)) > 0", name="ck_category_name_not_empty"),
        Index("idx_category_user_name", "user_id", "name"),
    )
