from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ComputeClients(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    target_pools: Any = Field(description="compute_v1.TargetPoolsClient")
    forwarding_rules: Any = Field(description="compute_v1.ForwardingRulesClient")
    instances: Any = Field(description="compute_v1.InstancesClient")
    region_operations: Any = Field(description="compute_v1.RegionOperationsClient")


class AdapterIdentity(BaseModel):
    """Project, zone and API clients fixed when the adapter is built."""

    model_config = ConfigDict(frozen=True)

    project_id: str
    zone: str
    clients: ComputeClients
