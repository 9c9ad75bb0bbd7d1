"""Runtime configuration for ventboard.

Every option maps to an upper-case environment variable; a local ``.env``
file is read as well. Only ``SECRET_KEY`` has no default.
"""

from datetime import UTC, datetime

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed view over the process environment."""

    # Service
    app_name: str = Field(default="Ventboard", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Signing key for bearer tokens
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")

    # Storage
    database_url: str = Field(default="sqlite:///./ventboard.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Bearer tokens
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Content creation ceilings per rolling window
    rate_limit_window_seconds: int = Field(default=3600, alias="RATE_LIMIT_WINDOW_SECONDS")
    anonymous_post_limit: int = Field(default=5, alias="ANONYMOUS_POST_LIMIT")
    registered_post_limit: int = Field(default=20, alias="REGISTERED_POST_LIMIT")
    anonymous_comment_limit: int = Field(default=10, alias="ANONYMOUS_COMMENT_LIMIT")
    registered_comment_limit: int = Field(default=50, alias="REGISTERED_COMMENT_LIMIT")
    anonymous_vote_limit: int = Field(default=30, alias="ANONYMOUS_VOTE_LIMIT")
    registered_vote_limit: int = Field(default=100, alias="REGISTERED_VOTE_LIMIT")
    vote_rate_limit_enabled: bool = Field(default=False, alias="VOTE_RATE_LIMIT_ENABLED")

    # Feed pagination and ranking
    feed_default_limit: int = Field(default=20, alias="FEED_DEFAULT_LIMIT")
    feed_max_limit: int = Field(default=50, alias="FEED_MAX_LIMIT")
    hot_score_epoch: datetime = Field(
        default=datetime(2024, 1, 1, tzinfo=UTC),
        alias="HOT_SCORE_EPOCH",
    )
    hot_score_decay_seconds: float = Field(default=45_000.0, alias="HOT_SCORE_DECAY_SECONDS")

    # Comment threads
    max_comment_depth: int = Field(default=2, alias="MAX_COMMENT_DEPTH")

    # Browser clients
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def sqlalchemy_url(self) -> str:
        """Return the active database URL with a driver SQLAlchemy can load.

        ``USE_TEST_DATABASE`` swaps in ``TEST_DATABASE_URL``. Bare PostgreSQL
        URLs are pinned to psycopg 3, the only driver installed.
        """
        url = self.database_url
        if self.use_testing_database and self.test_database_url:
            url = self.test_database_url
        for prefix in ("postgres://", "postgresql://", "postgresql+asyncpg://"):
            if url.startswith(prefix):
                return "postgresql+psycopg://" + url[len(prefix):]
        return url


settings = Settings()  # type: ignore[call-arg]
