from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """PostgreSQL connection settings (``DB_*`` environment variables)."""

    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = Field(default=SecretStr("postgres"))
    database: str = "connexa"
    pool_size: int = Field(default=10, ge=1)
    max_overflow: int = Field(default=5, ge=0)
    pool_timeout_seconds: float = Field(default=2.0, gt=0)
    serverless: bool = Field(
        default=False,
        description="Disable pooling so a serverless database can pause between requests.",
    )

    @property
    def url(self) -> str:
        """SQLAlchemy URL for the asyncpg driver."""
        return (
            f"postgresql+asyncpg://{quote_plus(self.username)}"
            f":{quote_plus(self.password.get_secret_value())}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class SecurityConfig(BaseSettings):
    """JWT and application security configuration."""

    jwt_secret_key: SecretStr = Field(
        default=SecretStr("change-me"),
        validation_alias="JWT_SECRET",
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expires_minutes: int = Field(
        default=24 * 60,
        validation_alias="JWT_EXPIRATION_MINUTES",
        ge=1,
    )
    jwt_issuer: str = Field(default="connexa-api", validation_alias="JWT_ISSUER")
    jwt_audience: str = Field(default="connexa-app", validation_alias="JWT_AUDIENCE")

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Connexa API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000
    log_file: str = "logs/app.log"
    frontend_dir: Optional[str] = None

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # Security
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["GET", "POST", "PUT", "DELETE"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
