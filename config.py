import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./invoicing.db")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Invoicing
    DEFAULT_CURRENCY = data.get("DEFAULT_CURRENCY", "COP")
    DEFAULT_LOCALE = data.get("DEFAULT_LOCALE", "es-CO")  # Display formatting only
    INVOICE_NUMBER_PREFIX = data.get("INVOICE_NUMBER_PREFIX", "FE")  # FE-YYYYMM-NNNNN

    # Overdue marking job
    OVERDUE_MARKING_ENABLED = bool(data.get("OVERDUE_MARKING_ENABLED", True))
    OVERDUE_CHECK_INTERVAL_SECONDS = data.get("OVERDUE_CHECK_INTERVAL_SECONDS", 3600)  # Hourly

    # Reports
    REPORT_MONTHS = data.get("REPORT_MONTHS", 6)  # Months shown on the invoicing summary
