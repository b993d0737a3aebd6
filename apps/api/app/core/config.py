"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    
    # Environment
    ENV: str = "dev"
    TESTING: bool = False
    LOG_LEVEL: str = "INFO"
    
    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"
    
    # Database
    DATABASE_URL: str
    
    # Session Token (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 4
    
    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"
    
    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""
    
    # Object storage (S3 or S3-compatible)
    S3_BUCKET: str = ""
    S3_REGION: str = ""
    S3_ENDPOINT_URL: str = ""
    S3_URL_STYLE: str = ""  # "path" or "virtual"
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    EXPORT_S3_BUCKET: str = ""  # Falls back to S3_BUCKET if empty
    EXPORT_CACHE_CONTROL: str = "max-age=2592000"  # 30 days
    
    # Stored values prefixed "placeholder:" resolve under this path
    PLACEHOLDER_ASSET_BASE_PATH: str = "/static/placeholders"
    
    # Batch get-or-create transaction bounds (seconds)
    BATCH_TX_MAX_WAIT_SECONDS: float = 5.0
    BATCH_TX_TIMEOUT_SECONDS: float = 10.0
    
    # Rate Limiting (Redis shared across workers; in-memory when unreachable)
    REDIS_URL: str = "redis://localhost:6379/0"
    RATE_LIMIT_API: int = 60  # General API (requests per minute)
    EXPORT_RATE_LIMIT: str = "10/hour"
    CARD_DELETE_RATE_LIMIT: str = "10/minute"
    
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
    
    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets
    
    @property
    def export_bucket(self) -> str:
        return self.EXPORT_S3_BUCKET or self.S3_BUCKET
    
    @property
    def cookie_secure(self) -> bool:
        """Secure cookies only in production."""
        return self.ENV != "dev"


settings = Settings()
