from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = Field(default=SecretStr("postgres"))
    database: str = "school_directory"
    dsn: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy URL; overrides the composed PostgreSQL URL.",
    )
    serverless: bool = Field(
        default=True,
        description="If true, disable connection pooling so serverless DBs can pause.",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        if self.dsn:
            return self.dsn
        username = quote_plus(self.username)
        password = quote_plus(self.password.get_secret_value())
        return (
            "postgresql+asyncpg://"
            f"{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class S3Config(BaseSettings):
    """S3 configuration for remote image hosting"""

    access_key: Optional[str] = None
    secret_key: Optional[SecretStr] = None
    region: str = "us-east-1"
    bucket_name: Optional[str] = None
    folder: str = "schools"
    public_base_url: Optional[str] = Field(
        default=None,
        description="CDN or website endpoint used instead of the bucket URL.",
    )
    timeout_seconds: float = Field(default=15.0, gt=0)

    def is_configured(self) -> bool:
        """Remote uploads need a bucket and both halves of the credentials."""

        return bool(
            self.bucket_name
            and self.access_key
            and self.secret_key is not None
            and self.secret_key.get_secret_value()
        )

    model_config = SettingsConfigDict(
        env_prefix="S3_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class ImageConfig(BaseSettings):
    """Image upload limits and local fallback storage."""

    local_dir: str = "public/schoolImages"
    url_prefix: str = "/schoolImages"
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1)
    max_width: int = Field(default=800, ge=1)
    max_height: int = Field(default=600, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="IMAGE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "School Directory"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # S3
    s3: S3Config = Field(default_factory=S3Config)

    # Images
    images: ImageConfig = Field(default_factory=ImageConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
