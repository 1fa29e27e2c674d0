import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import SelfActionError
from models.safety_report import SafetyReport
from services.profiles import get_active_profile

logger = logging.getLogger(__name__)


async def report_profile(
    db: AsyncSession,
    reporter_id: int,
    reported_id: int,
    reason: str,
    location: Optional[str] = None,
) -> SafetyReport:
    """Сохраняет жалобу; после порога жалоб профиль уходит на паузу (hiatus)."""
    if reporter_id == reported_id:
        raise SelfActionError("You cannot report yourself")
    reported = await get_active_profile(db, reported_id)

    report = SafetyReport(
        reporter_id=reporter_id, reported_id=reported_id, reason=reason, location=location,
    )
    db.add(report)
    await db.flush()
    logger.warning("Suspicious activity reported by %s against %s", reporter_id, reported_id)

    # Считаем разных заявителей, а не жалобы
    reporters_count = await db.scalar(
        select(func.count(func.distinct(SafetyReport.reporter_id)))
        .where(SafetyReport.reported_id == reported_id)
    )
    if reporters_count >= settings.SAFETY_REPORT_HIATUS_THRESHOLD and not reported.hiatus:
        reported.hiatus = True
        logger.warning("User %s put on hiatus due to multiple reports", reported_id)

    await db.commit()
    await db.refresh(report)
    return report
