import asyncio
import datetime
import logging
import pytz

if __name__ == "__main__":
    import sys
    sys.path.append("./")

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from backoffice.core.config import (
    PAYROLL_RUN_DAY,
    PAYROLL_RUN_HOUR,
    PAYROLL_RUN_MINUTE,
    PAYROLL_TIMEZONE,
)
from backoffice.core.database import get_session
from backoffice.services.payroll_aggregator import PayrollAggregator
from backoffice.utils.date_utils import get_previous_week_range

logger = logging.getLogger(__name__)


async def run_weekly_payroll(today: datetime.date = None):
    """Summarises payroll of the previous ISO week and logs every outstanding balance"""
    today = today or datetime.datetime.now(pytz.timezone(PAYROLL_TIMEZONE)).date()
    period_start, period_end = get_previous_week_range(today)

    try:
        async with get_session() as session:
            summaries = await PayrollAggregator(session).run_payroll(
                period_start, period_end
            )
    except Exception as e:
        logger.error(f"Weekly payroll run {period_start}..{period_end} failed: {e}")
        return []

    for summary in summaries:
        level = logging.WARNING if summary.balance < 0 else logging.INFO
        logger.log(
            level,
            "Employee %s %s: earned=%s paid=%s balance=%s",
            summary.employee_id,
            summary.currency.value,
            summary.earned,
            summary.paid,
            summary.balance,
        )

    logger.info(
        f"Weekly payroll {period_start}..{period_end} done: {len(summaries)} summaries"
    )
    return summaries


def schedule_weekly_payroll(
    day_of_week: str = PAYROLL_RUN_DAY,
    hour: int = PAYROLL_RUN_HOUR,
    minute: int = PAYROLL_RUN_MINUTE,
) -> AsyncIOScheduler:
    """Schedules the payroll run for the previous week, Mondays 06:00 London time by default"""
    scheduler = AsyncIOScheduler()

    tz = pytz.timezone(PAYROLL_TIMEZONE)
    trigger = CronTrigger(day_of_week=day_of_week, hour=hour, minute=minute, timezone=tz)
    logger.info(
        f"Payroll run scheduled on {day_of_week} at {hour:02d}:{minute:02d} {PAYROLL_TIMEZONE}"
    )

    scheduler.add_job(run_weekly_payroll, trigger=trigger)
    try:
        scheduler.start()
        logger.info("Payroll scheduler started")
    except RuntimeError as e:
        logger.warning(f"Payroll scheduler already running: {e}")
    return scheduler


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger.info("Running payroll for the previous week")
    asyncio.run(run_weekly_payroll())
