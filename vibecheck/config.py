from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://vibecheck:vibecheck@db:5432/vibecheck"
    REDIS_URL: str = "redis://redis:6379/0"

    # Partner dashboard PIN; empty disables the insights endpoints
    INSIGHTS_DASHBOARD_PIN: str = ""
    STATS_CACHE_TTL: int = 60

    LIVE_WINDOW_MINUTES: int = 180
    NOTIFICATION_SESSION_HOURS: int = 4
    RECENT_CHECKINS_LIMIT: int = 10

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
