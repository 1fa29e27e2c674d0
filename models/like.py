# models/like.py
from sqlalchemy import Column, BigInteger, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base
from utils.clock import utcnow


class Like(Base):
    """Запись леджера: свайп вправо liker → liked."""

    __tablename__ = "likes"

    id = Column(BigInteger, primary_key=True, index=True)
    liker_id = Column(BigInteger, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    liked_id = Column(BigInteger, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    is_super_like = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    liker = relationship("Profile", foreign_keys=[liker_id])
    liked = relationship("Profile", foreign_keys=[liked_id])

    __table_args__ = (
        UniqueConstraint("liker_id", "liked_id", name="uq_likes_pair"),
    )

    def __repr__(self):
        return f"<Like {self.liker_id}→{self.liked_id}>"
