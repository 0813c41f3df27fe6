import os
from dotenv import load_dotenv

load_dotenv(override=True)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./backoffice.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


PAYROLL_TIMEZONE = os.getenv("PAYROLL_TIMEZONE", "Europe/London")
PAYROLL_RUN_DAY = os.getenv("PAYROLL_RUN_DAY", "mon")
PAYROLL_RUN_HOUR = int(os.getenv("PAYROLL_RUN_HOUR", "6"))
PAYROLL_RUN_MINUTE = int(os.getenv("PAYROLL_RUN_MINUTE", "0"))
