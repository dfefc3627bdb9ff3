"""Session configuration."""
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from clickonce_fetch.core.errors import ConfigError

DEFAULT_USER_AGENT = "clickonce-fetch/0.1.0"


class SessionConfig(BaseModel):
    """Settings of a deployment session."""

    output_dir: Optional[Path] = Field(
        default=None, description="Directory where deployed files are saved, if any"
    )
    timeout: float = Field(default=30.0, gt=0, description="Network timeout in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="HTTP User-Agent header")

    @field_validator("output_dir", mode="before")
    @classmethod
    def validate_output_dir(cls, v: Any) -> Any:
        """An empty path means no output directory."""
        if v == "":
            return None
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "output_dir": "downloads/app",
                "timeout": 30.0,
                "user_agent": DEFAULT_USER_AGENT,
            }
        }
    )

    @classmethod
    def build(cls, **values: Any) -> "SessionConfig":
        """Create a config, reporting invalid values as ConfigError."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid session configuration: {e}") from e
