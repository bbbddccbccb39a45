from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DEPOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="Depot", description="Application name")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment mode"
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log output format"
    )

    root_dir: Path = Field(
        default=Path("./depot"), description="Root directory of the repository"
    )
    database_url: Optional[str] = Field(
        default=None,
        description="Metadata database URL (defaults to SQLite under the root)",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")

    store_backend: Literal["file", "git"] = Field(
        default="file", description="Archive store implementation"
    )
    git_binary_path: str = Field(default="git", description="Path to git binary")
    git_timeout: int = Field(default=300, description="Git command timeout in seconds")
    git_author_name: str = Field(default="Depot", description="Committer name")
    git_author_email: str = Field(
        default="depot@localhost", description="Committer email"
    )

    sources: List[str] = Field(
        default=["https://cpan.metacpan.org"],
        description="Upstream repositories searched by remote lookups",
    )
    fetch_timeout: float = Field(
        default=60.0, description="Network fetch timeout in seconds"
    )

    @field_validator("root_dir", mode="before")
    @classmethod
    def validate_root_dir(cls, v):
        return Path(v).expanduser().resolve()

    @field_validator("sources", mode="before")
    @classmethod
    def validate_sources(cls, v):
        if isinstance(v, str):
            v = [item for item in v.split(",") if item.strip()]
        return [item.strip().rstrip("/") for item in v]

    @model_validator(mode="after")
    def default_database_url(self):
        if self.is_production:
            self.log_format = "json"
        if not self.database_url:
            database_file = (self.metadata_dir / "depot.db").resolve()
            self.database_url = f"sqlite:///{database_file}"
        return self

    @property
    def metadata_dir(self) -> Path:
        return self.root_dir / ".depot"

    @property
    def cache_dir(self) -> Path:
        return self.metadata_dir / "cache"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
