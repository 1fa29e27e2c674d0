# models/profile.py
from sqlalchemy import (
    Column, Integer, BigInteger, String, Text, Float, Boolean, DateTime, JSON, Index,
)

from .base import Base
from utils.clock import utcnow


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(BigInteger, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    bio = Column(String(100), nullable=True)
    prompt = Column(String(50), nullable=True)
    photo_url = Column(Text, nullable=True)

    # Геопозиция
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    # Атрибуты для фильтров ленты
    age = Column(Integer, nullable=False)
    gender = Column(String(16), nullable=False)
    interests = Column(JSON, nullable=False, default=list)
    preference = Column(String(16), nullable=False, default="casual")
    ethnicity = Column(String(64), nullable=True)
    education = Column(String(64), nullable=True)
    smoking = Column(Boolean, nullable=False, default=False)

    # Видимость
    hiatus = Column(Boolean, nullable=False, default=False)
    boosted_until = Column(DateTime(timezone=True), nullable=True)

    # Счётчики
    views = Column(Integer, nullable=False, default=0)
    swipes_right = Column(Integer, nullable=False, default=0)
    swipes_left = Column(Integer, nullable=False, default=0)
    super_likes_received = Column(Integer, nullable=False, default=0)

    telegram_user_id = Column(BigInteger, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_profiles_lat_lng", "latitude", "longitude"),
    )

    def __repr__(self):
        return f"<Profile id={self.id} name={self.name}>"
