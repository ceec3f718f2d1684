"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = (
    "image/jpeg",
    "image/png",
    "image/jpg",
    "image/gif",
    "image/webp",
)


class UploadConfig(BaseModel):
    """Image upload limits."""

    folder: str = "DevEvent"
    max_bytes: int = 5 * 1024 * 1024  # 5MB
    allowed_types: list[str] = Field(default_factory=lambda: list(ALLOWED_IMAGE_TYPES))


class Settings(BaseSettings):
    """Main configuration class."""

    # Paths
    data_dir: Path = Path("data")

    # Application
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    # Database
    mongodb_uri: str = Field(..., description="MongoDB connection string")
    mongodb_database: str = "devevent"
    mongodb_server_selection_timeout_ms: int = 5000

    # Server-side self-calls
    public_base_url: str = Field(..., description="Public base URL of this API")

    # Media host
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""

    # Observability
    logfire_token: str = ""

    uploads: UploadConfig = Field(default_factory=UploadConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("mongodb_uri", "public_base_url")
    @classmethod
    def require_non_blank(cls, v: str) -> str:
        """Reject empty connection settings."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("public_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("allowed_origins")
    @classmethod
    def parse_origins(cls, v: str) -> list[str]:
        """Parse comma-separated origins into a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("data_dir", mode="after")
    @classmethod
    def resolve_data_dir(cls, v: Path) -> Path:
        """Resolve data directory to absolute path."""
        return v.resolve()

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def load_yaml_config(self) -> None:
        """Load and merge the optional YAML configuration."""
        config_path = self.data_dir / "config.yaml"

        if not config_path.exists():
            logger.debug(f"Config file not found: {config_path}. Using defaults.")
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)

            if not yaml_config:
                logger.warning(f"Empty config file: {config_path}")
                return

            if "uploads" in yaml_config:
                section_dict = self.uploads.model_dump()
                section_dict.update(yaml_config["uploads"])
                self.uploads = UploadConfig(**section_dict)

            logger.info(f"Loaded configuration from {config_path}")

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance.

    Raises pydantic.ValidationError when MONGODB_URI or PUBLIC_BASE_URL is
    missing, which stops the process at startup.
    """
    settings = Settings()
    settings.load_yaml_config()
    return settings
