"""Configuration data models."""

import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BackendConfig(BaseModel):
    """Movie backend transport configuration.

    Built once at startup and handed to the backend client; the client never
    consults global state for these settings.
    """

    base_url: str = Field(..., description="Movie backend base URL")
    timeout: int = Field(default=15, gt=0, description="Request timeout in seconds")
    with_credentials: bool = Field(
        default=True, description="Send and keep cookies on every request"
    )
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    list_path: str = Field(default="/paginate", description="Paginated listing endpoint")
    create_path: str = Field(default="/createMovie", description="Create endpoint")
    update_path: str = Field(default="/updateMovie", description="Update endpoint prefix")
    delete_path: str = Field(default="/deleteMovie", description="Delete endpoint prefix")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Expand environment variables and strip the trailing slash."""
        v = os.path.expandvars(v).strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("Backend base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("list_path", "create_path", "update_path", "delete_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Normalize endpoint paths to a single leading slash."""
        return "/" + v.strip().strip("/")


class ViewConfig(BaseModel):
    """List view defaults."""

    default_sort: str = Field(default="", description="Initial sort key")
    genres: List[str] = Field(
        default_factory=list, description="Genres offered when the page has none"
    )

    @field_validator("default_sort")
    @classmethod
    def validate_default_sort(cls, v: str) -> str:
        """Validate the initial sort key."""
        allowed = {"", "title", "rating"}
        if v not in allowed:
            raise ValueError(f"Default sort must be one of: {allowed}")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    file: Optional[str] = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, gt=0, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, ge=0, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Logging level must be one of: {allowed}")
        return v.upper()


class Config(BaseModel):
    """Main configuration model."""

    backend: BackendConfig = Field(..., description="Backend configuration")
    view: ViewConfig = Field(default_factory=ViewConfig, description="View configuration")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
    )
