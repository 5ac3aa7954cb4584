# GoGoTime - Configuration
# Application settings loaded from environment variables

from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Create a .env file in the project root for local development:

        # .env
        GOGOTIME_DB_HOST=localhost
        GOGOTIME_DB_NAME=gogotime
        GOGOTIME_DB_USER=gogotime_app
        GOGOTIME_DB_PASSWORD=your_password_here
        GOGOTIME_JWT_SECRET=your-secret-key-change-in-production

    Set GOGOTIME_DATABASE_URL to bypass the individual connection parts
    (e.g. "sqlite://" for tests).
    """

    model_config = SettingsConfigDict(
        env_prefix="GOGOTIME_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "GoGoTime"
    debug: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Database - PostgreSQL connection
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "gogotime"
    db_user: str = "gogotime_app"
    db_password: str = "gogotime_password"

    # Full SQLAlchemy URL, overrides the parts above when set
    database_url: Optional[str] = None

    # Connection pool settings
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800  # Recycle connections after 30 min

    # JWT settings
    jwt_secret: str = "gogotime-dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # Password hashing cost (bcrypt log rounds, 4..31)
    bcrypt_rounds: int = 12

    @property
    def sqlalchemy_url(self) -> str:
        """
        Build the PostgreSQL connection URL for SQLAlchemy.

        Uses psycopg2 unless a full database_url was configured.
        """
        if self.database_url:
            return self.database_url

        return (
            f"postgresql+psycopg2://{quote_plus(self.db_user)}:{quote_plus(self.db_password)}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.sqlalchemy_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once.
    """
    return Settings()
