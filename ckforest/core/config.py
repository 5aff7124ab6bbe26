from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "CK Forest Gardens API"
    LOG_LEVEL: str = "INFO"
    # Comma-separated origins for CORS (e.g. https://ckforestgardens.gy). If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""

    DATABASE_URL: str

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Render and others give postgres://; SQLAlchemy expects postgresql+psycopg2://."""
        if v and v.startswith("postgres://"):
            return "postgresql+psycopg2://" + v[11:]
        return v

    API_PUBLIC_URL: str = ""  # e.g. https://api.ckforestgardens.gy - prefix for locally stored receipt URLs
    CURRENCY: str = "GYD"

    # Receipt storage
    RECEIPT_LOCAL_DIR: str = "./data/receipts"
    GCS_BUCKET_NAME: str = ""
    GOOGLE_APPLICATION_CREDENTIALS: str = ""

    # Upload + create must finish within this many seconds per step
    SUBMIT_TIMEOUT_SECONDS: float = 30.0

    # Shared key sent by the management console in X-Management-Key. Empty disables the console.
    MANAGEMENT_API_KEY: str = ""


settings = Settings()
