from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Zone(BaseModel):
    model_config = ConfigDict(frozen=True)

    failure_domain: str = Field(description="Zone name, e.g. us-central1-b")
    region: str = Field(description="Containing region, e.g. us-central1")


class LoadBalancerPhase(str, Enum):
    ABSENT = "absent"
    # Target pool exists without its forwarding rule
    POOL_CREATED = "pool-created"
    READY = "ready"
