import asyncio
import logging
import sys
from pathlib import Path

# project root on PYTHONPATH when started as a script
sys.path.append(str(Path(__file__).resolve().parent.parent))

from backoffice.core.config import LOG_LEVEL
from backoffice.core.database import engine, Base
from backoffice.utils.scheduler import schedule_weekly_payroll
import backoffice.models  # noqa: F401  registers every table on Base.metadata


async def on_startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def main():
    await on_startup()
    scheduler = schedule_weekly_payroll()
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown(wait=False)
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    asyncio.run(main())
