"""Configuration management for Reelhub."""

from pydantic import PositiveInt, SecretStr, field_validator
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from urllib.parse import urlparse


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # TMDB
    tmdb_api_key: str
    tmdb_api_url: str = "https://api.themoviedb.org/3"
    tmdb_timeout: PositiveInt = 10  # Per-request timeout in seconds

    # Database (favorites and last search live here)
    database_url: str = "sqlite:///./reelhub.db"

    # Network settings
    # Proxy configuration in the format http://host:port or socks5://host:port
    proxy: str | None = None

    # Basic auth, enabled only when both are set
    auth_username: str | None = None
    auth_password: SecretStr | None = None

    @field_validator("tmdb_api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("TMDB API URL must be an absolute http/https URL")
        return v.rstrip("/")

    @field_validator("proxy")
    @classmethod
    def validate_proxy(cls, v: str | None) -> str | None:
        if v is None:
            return v

        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https", "socks4", "socks5", "socks5h"):
            raise ValueError(
                "Proxy must be a valid URL with scheme http/https/socks4/socks5/socks5h"
            )
        if not parsed.netloc:
            raise ValueError("Proxy must have a host and port")
        return v

    # App settings
    debug: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
