# models/match.py
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base
from utils.clock import utcnow


class Match(Base):
    __tablename__ = "matches"

    id = Column(BigInteger, primary_key=True, index=True)
    # Пара хранится упорядоченной: user1_id < user2_id
    user1_id = Column(BigInteger, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    user2_id = Column(BigInteger, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user1 = relationship("Profile", foreign_keys=[user1_id])
    user2 = relationship("Profile", foreign_keys=[user2_id])

    __table_args__ = (
        UniqueConstraint("user1_id", "user2_id", name="uq_matches_pair"),
        CheckConstraint("user1_id < user2_id", name="ck_matches_ordered_pair"),
    )

    @property
    def pair(self) -> tuple[int, int]:
        return self.user1_id, self.user2_id

    def other(self, user_id: int) -> int:
        return self.user2_id if self.user1_id == user_id else self.user1_id

    def __repr__(self):
        return f"<Match {self.user1_id}↔{self.user2_id}>"
