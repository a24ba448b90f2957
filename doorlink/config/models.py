"""
Pydantic-based configuration models for doorlink.

Each section is a BaseSettings model with its own environment prefix;
AppConfig aggregates them. Obtain the configuration through
doorlink.config.get_config().
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from ..structured_logging.enhanced_logging_config import VALID_ENVIRONMENTS, get_logger

logger = get_logger(__name__)


class ProjectConfig(BaseSettings):
    """Location of the project and the file patterns of its assets."""

    root: Path = Field(default=Path("."), description="Project root directory")
    document_glob: str = Field(default="*.level.json", description="Glob for level documents")
    template_glob: str = Field(default="*.template.json", description="Glob for door templates")

    @field_validator("document_glob", "template_glob")
    @classmethod
    def validate_glob(cls, v: str) -> str:
        """Validate glob patterns are non-empty."""
        if not v.strip():
            raise ValueError("Glob pattern cannot be empty")
        return v.strip()

    model_config = {"env_prefix": "DOORLINK_PROJECT_", "case_sensitive": False, "extra": "ignore"}


class DoorIndexConfig(BaseSettings):
    """Door index (authoring dropdown cache) configuration."""

    ttl_seconds: float = Field(default=2.0, description="Lifetime of a cached per-document door list")

    @field_validator("ttl_seconds")
    @classmethod
    def validate_ttl(cls, v: float) -> float:
        """Validate TTL is positive."""
        if v <= 0:
            logger.error("Invalid door index TTL", ttl_seconds=v)
            raise ValueError("ttl_seconds must be greater than 0")
        return v

    model_config = {"env_prefix": "DOORLINK_INDEX_", "case_sensitive": False, "extra": "ignore"}


class IdentityConfig(BaseSettings):
    """Door id generation settings."""

    generated_length: int = Field(default=5, description="Length of the random part of generated ids")
    generated_prefix: str = Field(default="Door_", description="Prefix of ids assigned on the authoring pass")

    @field_validator("generated_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """Validate the prefix only uses door id characters."""
        if any(not (c.isascii() and (c.isalnum() or c in "_-")) for c in v):
            raise ValueError("generated_prefix may only contain [0-9a-zA-Z_-]")
        return v

    model_config = {"env_prefix": "DOORLINK_IDENTITY_", "case_sensitive": False, "extra": "ignore"}


class TravelConfig(BaseSettings):
    """Timings of the travel presentation bracket."""

    fade_out_seconds: float = Field(default=0.35, description="Fade to opaque duration")
    fade_in_seconds: float = Field(default=0.35, description="Fade back duration")
    settle_seconds: float = Field(default=0.1, description="Delay after teleport before fading back")

    @field_validator("fade_out_seconds", "fade_in_seconds", "settle_seconds")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Validate durations are not negative."""
        if v < 0:
            raise ValueError("Durations cannot be negative")
        return v

    model_config = {"env_prefix": "DOORLINK_TRAVEL_", "case_sensitive": False, "extra": "ignore"}


class PreferencesConfig(BaseSettings):
    """Location of the per-user preferences file."""

    path: Path = Field(
        default_factory=lambda: Path.home() / ".doorlink" / "preferences.json",
        description="User preferences JSON file",
    )

    model_config = {"env_prefix": "DOORLINK_PREFERENCES_", "case_sensitive": False, "extra": "ignore"}


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    environment: str = Field(default="", description="Logging environment (auto-detected if empty)")
    level: str = Field(default="INFO", description="Log level")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate logging environment."""
        if v and v not in VALID_ENVIRONMENTS:
            raise ValueError(f"Environment must be one of {list(VALID_ENVIRONMENTS)}, got '{v}'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}, got '{v}'")
        return v_upper

    model_config = {"env_prefix": "DOORLINK_LOGGING_", "case_sensitive": False, "extra": "ignore"}


class AppConfig(BaseSettings):
    """
    Composite application configuration.

    Aggregates all other configs. Access via get_config().
    """

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    index: DoorIndexConfig = Field(default_factory=DoorIndexConfig)
    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    travel: TravelConfig = Field(default_factory=TravelConfig)
    preferences: PreferencesConfig = Field(default_factory=PreferencesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "case_sensitive": False, "extra": "ignore"}
