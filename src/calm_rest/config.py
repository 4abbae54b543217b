import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    redis_socket_timeout: float = float(os.getenv("REDIS_SOCKET_TIMEOUT", "0.5"))

    # Cache
    cache_expiration: int = int(os.getenv("CACHE_EXPIRATION", "0"))  # 0 disables caching
    cache_prefix: str = os.getenv("CACHE_PREFIX", "calm")
    cache_max_key_length: int = int(os.getenv("CACHE_MAX_KEY_LENGTH", "250"))
    cache_max_value_size: int = int(os.getenv("CACHE_MAX_VALUE_SIZE", "1000000"))

    # Resources
    primary_key: str = os.getenv("PRIMARY_KEY", "id")
    allow_delete_all: bool = os.getenv("ALLOW_DELETE_ALL", "false").lower() == "true"
    page_size: int = int(os.getenv("PAGE_SIZE", "0"))  # 0 disables pagination

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    @property
    def cache_enabled(self) -> bool:
        """Check if responses should be cached at all.

        Returns:
            True if a positive expiration is configured, False otherwise
        """
        return self.cache_expiration > 0

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_expiration < 0:
            raise ValueError("CACHE_EXPIRATION must be >= 0 (0 disables caching)")

        if self.cache_max_key_length <= 0 or self.cache_max_value_size <= 0:
            raise ValueError("CACHE_MAX_KEY_LENGTH and CACHE_MAX_VALUE_SIZE must be positive")

        if not self.primary_key:
            raise ValueError("PRIMARY_KEY must not be empty")

        if self.page_size < 0:
            raise ValueError(f"PAGE_SIZE must be >= 0, got {self.page_size}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create a Redis client instance."""
    config = config or settings
    return redis.from_url(
        config.redis_url,
        password=config.redis_password,
        decode_responses=False,
        socket_timeout=config.redis_socket_timeout,
        socket_connect_timeout=config.redis_socket_timeout,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
