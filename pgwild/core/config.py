"""
Settings read from the environment (and ``.env`` when present).

    POSTGRES_SERVER, POSTGRES_PORT, POSTGRES_DB, POSTGRES_USER, POSTGRES_PASSWORD
    DB_POOL_MAX, DB_POOL_MAX_AGE_SEC, DB_CONNECT_TIMEOUT, DB_STATEMENT_TIMEOUT
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "postgres"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""

    # Max connections checked out at once
    DB_POOL_MAX: int = Field(default=48, ge=1)
    DB_POOL_MAX_AGE_SEC: float = 600.0
    DB_CONNECT_TIMEOUT: int = 10
    # Seconds; None or 0 disables
    DB_STATEMENT_TIMEOUT: float | None = None


settings = Settings()


class DatabaseAuth(BaseModel):
    """Connection parameters for one PostgreSQL database."""

    host: str
    port: int = 5432
    database: str
    user: str
    password: str = ""
    max: int = Field(default=48, ge=1)

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "DatabaseAuth":
        s = s or settings
        return cls(
            host=s.POSTGRES_SERVER,
            port=s.POSTGRES_PORT,
            database=s.POSTGRES_DB,
            user=s.POSTGRES_USER,
            password=s.POSTGRES_PASSWORD,
            max=s.DB_POOL_MAX,
        )
