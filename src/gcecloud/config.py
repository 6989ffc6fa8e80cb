from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .core import (
    METADATA_TIMEOUT,
    METADATA_ZONE_URL,
    OPERATION_POLL_INTERVAL,
    OPERATION_TIMEOUT,
)
from .exceptions import ConfigError


class GCEConfig(BaseModel):
    """Adapter settings. Every field has a working default on a GCE VM."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_id: str | None = Field(
        default=None, description="Overrides the project reported by the metadata server"
    )
    zone: str | None = Field(
        default=None, description="Overrides the zone reported by the metadata server"
    )
    metadata_url: str = METADATA_ZONE_URL
    metadata_timeout: float = Field(default=METADATA_TIMEOUT, gt=0)
    operation_poll_interval: float = Field(default=OPERATION_POLL_INTERVAL, ge=0)
    operation_timeout: float = Field(
        default=OPERATION_TIMEOUT, ge=0, description="Deadline for a single region operation"
    )
    wait_for_operations: bool = True

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> GCEConfig:
        """Builds a config from a plain dict, e.g. a section of the host's config file."""
        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise ConfigError(f"Invalid GCE cloud provider config: {e}") from e
