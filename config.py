import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # Booking rules
    BOOKING_LEAD_TIME_MINUTES = int(data.get("BOOKING_LEAD_TIME_MINUTES", 120))
    SLOT_LEAD_BUFFER_MINUTES = int(data.get("SLOT_LEAD_BUFFER_MINUTES", 30))
    SLOT_DURATION_MINUTES = int(data.get("SLOT_DURATION_MINUTES", 60))
    DEFAULT_HOURLY_RATE = float(data.get("DEFAULT_HOURLY_RATE", 50))
    DEFAULT_CURRENCY = data.get("DEFAULT_CURRENCY", "INR")

    # Session monitor
    MONITOR_ENABLED = bool(data.get("MONITOR_ENABLED", False))
    MONITOR_INTERVAL_SECONDS = int(data.get("MONITOR_INTERVAL_SECONDS", 300))
    MEETING_LINK_WARNING_MINUTES = int(data.get("MEETING_LINK_WARNING_MINUTES", 30))
    EXTERNAL_CALL_TIMEOUT_SECONDS = float(data.get("EXTERNAL_CALL_TIMEOUT_SECONDS", 10))
