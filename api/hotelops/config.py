"""Configuration management for the Hotel Ops API."""

from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


DIRECT_MODE = "direct"
PROXY_MODE = "proxy"


class ConfigurationError(ValueError):
    """Raised when the settings cannot select a database backend."""


class Settings(BaseSettings):
    """Application settings with environment variable support.

    The database backend is chosen by which settings are present: a
    connection string selects the asyncpg pool, an RPC endpoint plus service
    key selects the literal-interpolating proxy.
    """

    # Application settings
    app_name: str = "Hotel Ops API"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8787

    # Direct database settings
    database_url: Optional[str] = None
    supabase_db_url: Optional[str] = None
    db_pool_min_size: int = 1
    db_pool_max_size: int = 20
    db_command_timeout: int = 60

    # Proxy (RPC) settings
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None
    rpc_function: str = "exec_sql"
    rpc_timeout_seconds: float = 30.0

    # Auth settings
    jwt_secret: str = "hotel-ops-dev-secret"

    # CORS settings
    cors_origins: List[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    cors_allow_headers: List[str] = ["*"]

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Pagination settings
    default_page_size: int = 20
    max_page_size: int = 100

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v):
        """Reject secrets too short to sign tokens with."""
        if len(v) < 8:
            raise ValueError("JWT secret must be at least 8 characters")
        return v

    @field_validator("supabase_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        """Normalize the RPC base URL."""
        if v:
            return v.rstrip("/")
        return v

    @property
    def direct_database_url(self) -> Optional[str]:
        """Connection string for direct mode, if one is configured."""
        return self.database_url or self.supabase_db_url

    @property
    def db_mode(self) -> str:
        """Backend selected by the present configuration.

        Raises:
            ConfigurationError: If neither backend is configured
        """
        if self.direct_database_url:
            return DIRECT_MODE
        if self.supabase_url and self.supabase_service_key:
            return PROXY_MODE
        raise ConfigurationError(
            "No database configured. Set DATABASE_URL (or SUPABASE_DB_URL) for direct mode, "
            "or SUPABASE_URL and SUPABASE_SERVICE_KEY for proxy mode."
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "env_parse_none_str": True,
        "frozen": True,
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
