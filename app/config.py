from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    SERVICE_NAME: str = "profile-stats-api"
    SERVICE_VERSION: str = "0.1.0"

    # Redis settings
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 20
    REDIS_SOCKET_TIMEOUT: float = 5.0

    # =================================================================
    # CACHE SETTINGS
    # =================================================================
    CACHE_KEY_PREFIX: str = "user"
    CACHE_TTL_SECONDS: int = 3600

    # =================================================================
    # UPSTREAM SETTINGS
    # =================================================================
    API_TIMEOUT_SECONDS: float = 10.0
    LEETCODE_GRAPHQL_URL: str = "https://leetcode.com/graphql"
    LEETCODE_BASE_URL: str = "https://leetcode.com"
    GITHUB_BASE_URL: str = "https://github.com"

    # Headless browser (scraper fallback)
    SCRAPER_HEADLESS: bool = True
    SCRAPER_NAVIGATION_TIMEOUT_SECONDS: float = 15.0
    SCRAPER_TOTAL_TIMEOUT_SECONDS: float = 30.0
    SCRAPER_MAX_CONCURRENCY: int = 3
    SCRAPER_USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    BATCH_MAX_USERNAMES: int = 20

    CORS_ALLOWED_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def is_development(self) -> bool:
        return self.environment == "development"

    def get_redis_pool_config(self) -> dict:
        """
        Get Redis connection pool configuration.
        Shorter socket timeouts in development so a missing local Redis
        degrades quickly to upstream fetches.
        """
        config = {
            "max_connections": self.REDIS_MAX_CONNECTIONS,
            "socket_connect_timeout": self.REDIS_SOCKET_TIMEOUT,
            "socket_timeout": self.REDIS_SOCKET_TIMEOUT,
        }

        if self.environment == "development":
            config.update({"socket_connect_timeout": 2.0, "socket_timeout": 2.0})

        return config


settings = Settings()
