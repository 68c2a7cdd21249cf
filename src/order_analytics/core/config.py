import os

# In a real deployment, override these through environment variables
SECRET_KEY: str = os.getenv("SECRET_KEY", "your-secret-key-for-jwt-!ChangeMe!")
ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://./order_analytics.sqlite3")

# Timezone used for "today" boundaries and for the day keys of the orders chart
REPORTING_TIMEZONE: str = os.getenv("REPORTING_TIMEZONE", "UTC")

# Query defaults for the analytics endpoints
DEFAULT_DATE_RANGE: str = "7days"
DEFAULT_STATUS: str = "all"
DEFAULT_PAGE: int = 1
DEFAULT_LIMIT: int = 10

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
# Comma separated logger namespaces, e.g. "order_analytics.features,order_analytics.main"
LOG_NAMESPACES: list[str] = [
    ns.strip() for ns in os.getenv("LOG_NAMESPACES", "").split(",") if ns.strip()
]
