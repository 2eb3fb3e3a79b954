"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notion_tools.errors import ConfigError


class Settings(BaseSettings):
    """Tool settings loaded from environment variables and .env file.

    Command-line flags take precedence; these are the fallbacks.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Credentials
    notion_token: str = ""

    # Source data source (or the database that holds it)
    notion_database_id: str = ""
    notion_data_source_id: str = ""

    # People database for the link-people flow
    people_database_id: str = Field(default="", validation_alias="notion_people_database_id")
    people_data_source_id: str = Field(default="", validation_alias="notion_people_data_source_id")

    # Property names
    who_property: str = Field(default="Who", validation_alias="notion_who_property")
    relation_property: str = Field(default="People", validation_alias="notion_relation_property")
    people_title_property: str = Field(default="Name", validation_alias="notion_people_title_property")

    page_size: int = Field(default=100, ge=1, le=100, validation_alias="notion_page_size")
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return cached settings. Lazy initialization to avoid import-time errors.

    Raises a single-line ConfigError naming every invalid variable instead of
    pydantic's multi-line report.
    """
    try:
        return Settings()
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ConfigError(f"invalid configuration: {problems}") from exc
