# models/last_swipe.py
from sqlalchemy import Column, BigInteger, String, DateTime, ForeignKey

from .base import Base
from utils.clock import utcnow


class LastSwipeAction(Base):
    """Последний отменяемый свайп пользователя. Нет строки — нечего отменять."""

    __tablename__ = "last_swipe_actions"

    id = Column(BigInteger, primary_key=True, index=True)
    user_id = Column(BigInteger, ForeignKey("profiles.id", ondelete="CASCADE"), unique=True, nullable=False)
    direction = Column(String(8), nullable=False)
    target_id = Column(BigInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<LastSwipeAction user={self.user_id} {self.direction}→{self.target_id}>"
