import os
from dotenv import load_dotenv

load_dotenv(override=True)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./shopledger.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


# Часовой пояс, в котором сравнивается время напоминания магазина (HH:mm)
REMINDER_TIMEZONE = os.getenv("REMINDER_TIMEZONE", "UTC")


GROWTH_WINDOW = int(os.getenv("GROWTH_WINDOW", "7"))
ANALYTICS_LOOKBACK_DAYS = int(os.getenv("ANALYTICS_LOOKBACK_DAYS", "30"))
