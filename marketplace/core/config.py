from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Procurement_Marketplace"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # --- Storage ---
    DATABASE_URL: str = "sqlite:///./marketplace.db"
    REDIS_URL: str | None = None
    DRAFT_TTL_SECONDS: int = 3600

    # --- Pricing (same currency unit as product prices) ---
    FREE_DELIVERY_THRESHOLD: int = 100000
    DELIVERY_FEE: int = 5000

    # --- Delivery lead times per urgency tier ---
    LEAD_TIME_HOURS_EMERGENCY: int = 24
    LEAD_TIME_HOURS_URGENT: int = 3 * 24
    LEAD_TIME_HOURS_STANDARD: int = 7 * 24

    TIMEZONE: str = "UTC"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
