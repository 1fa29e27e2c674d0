# models/safety_report.py
from sqlalchemy import Column, BigInteger, String, DateTime, ForeignKey

from .base import Base
from utils.clock import utcnow


class SafetyReport(Base):
    __tablename__ = "safety_reports"

    id = Column(BigInteger, primary_key=True, index=True)
    reporter_id = Column(BigInteger, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    reported_id = Column(BigInteger, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    reason = Column(String(500), nullable=False)
    location = Column(String(128), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<SafetyReport {self.reporter_id}→{self.reported_id}>"
