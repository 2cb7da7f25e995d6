from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import hashlib


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "Pageview Collector"
    app_version: str = "1.0.0"
    secret_key: str = "your-secret-key-here-change-in-production"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Database
    database_url: str = "sqlite:///./analytics.db"

    # Cache settings
    cache_backend: str = "null"  # Options: "redis", "memory", "null" (disabled)
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 86400  # Cache TTL in seconds (1 day)

    # Event storage settings
    event_storage_backend: str = "relational"  # Options: "relational", "clickhouse"
    clickhouse_url: str = "http://localhost:8123"  # ClickHouse HTTP endpoint
    clickhouse_database: str = "analytics"

    # Collect endpoint
    cache_token_header: str = "x-umami-cache"
    client_ip_header: Optional[str] = None  # e.g. "x-real-ip" behind a known proxy
    ignore_ips: str = ""  # Comma separated IPs or CIDR ranges
    disable_bot_check: bool = False

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def ignored_ip_list(self) -> list[str]:
        return [ip.strip() for ip in self.ignore_ips.split(",") if ip.strip()]


def secret(app_settings: Optional[Settings] = None) -> str:
    """Shared signing secret, derived from the application secret key."""
    key = (app_settings or settings).secret_key
    return hashlib.sha512(key.encode("utf-8")).hexdigest()


def salt(app_settings: Optional[Settings] = None) -> str:
    """Fixed salt mixed into derived session ids."""
    return hashlib.sha512(f"{secret(app_settings)}:session".encode("utf-8")).hexdigest()


class ResolverConfig(BaseModel):
    """
    Read-only configuration for session resolution.

    Built once at startup and handed to the resolver.
    """
    model_config = ConfigDict(frozen=True)

    cache_enabled: bool = False
    columnar_enabled: bool = False
    secret: str
    salt: str
    cache_token_header: str = "x-umami-cache"

    @classmethod
    def from_settings(cls, app_settings: Optional[Settings] = None) -> "ResolverConfig":
        app_settings = app_settings or settings
        return cls(
            cache_enabled=app_settings.cache_backend != "null",
            columnar_enabled=app_settings.event_storage_backend == "clickhouse",
            secret=secret(app_settings),
            salt=salt(app_settings),
            cache_token_header=app_settings.cache_token_header,
        )


# Create settings instance
settings = Settings()
