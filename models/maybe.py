# models/maybe.py
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, UniqueConstraint

from .base import Base
from utils.clock import utcnow


class MaybeEntry(Base):
    __tablename__ = "maybe_entries"

    id = Column(BigInteger, primary_key=True, index=True)
    user_id = Column(BigInteger, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    target_id = Column(BigInteger, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "target_id", name="uq_maybe_entries_pair"),
    )

    def __repr__(self):
        return f"<MaybeEntry {self.user_id}?{self.target_id}>"
