"""i18n-stringer configuration settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.stdlib.get_logger().bind(component="config")


class StringerSettings(BaseSettings):
    """Generation run configuration settings.

    Every field can be overridden through the environment (or a ``.env``
    file) using its alias.
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    CATALOG_PATH: str = Field(default="i18n", alias="STRINGER_CATALOG_PATH")
    CATALOG_EXTENSION: str = Field(default="toml", alias="STRINGER_CATALOG_EXTENSION")
    DEFAULT_LOCALE: str = Field(default="", alias="STRINGER_DEFAULT_LOCALE")
    CARRIER_KEY: str = Field(default="i18nLocale", alias="STRINGER_CTX_KEY")
    PARSE_WORKERS: int = Field(default=4, alias="STRINGER_PARSE_WORKERS")

    @field_validator("CATALOG_EXTENSION", mode="before")
    @classmethod
    def normalize_extension(cls, v: str) -> str:
        """Strip a leading dot so ``.toml`` and ``toml`` are equivalent.

        Args:
            cls: The class itself.
            v: The raw extension value.

        Returns:
            The extension without a leading dot.
        """
        if isinstance(v, str):
            return v.strip().lstrip(".")
        return v

    @field_validator("PARSE_WORKERS")
    @classmethod
    def validate_parse_workers(cls, v: int) -> int:
        """Reject worker counts that cannot run a thread pool."""
        if v < 1:
            logger.error("invalid_parse_workers", parse_workers=v)
            raise ValueError(f"STRINGER_PARSE_WORKERS must be positive, got {v}")
        return v

    @property
    def is_production(self) -> bool:
        """Check if the tool is running in production mode."""
        return not bool(self.PREFIX)

    @property
    def default_locale_override(self) -> str | None:
        """Configured default locale, or None to use the first discovered one."""
        return self.DEFAULT_LOCALE or None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )


# Create the settings instance
settings = StringerSettings()
