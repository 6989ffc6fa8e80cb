from __future__ import annotations

from functools import lru_cache
from typing import Any

from google.cloud import compute_v1

from .schemas.identity import ComputeClients

# Shared Client Registry (Lazy-loaded and cached)
# Credentials come from Application Default Credentials.


@lru_cache(maxsize=1)
def get_target_pools_client() -> Any:
    return compute_v1.TargetPoolsClient()


@lru_cache(maxsize=1)
def get_forwarding_rules_client() -> Any:
    return compute_v1.ForwardingRulesClient()


@lru_cache(maxsize=1)
def get_instances_client() -> Any:
    return compute_v1.InstancesClient()


@lru_cache(maxsize=1)
def get_region_operations_client() -> Any:
    return compute_v1.RegionOperationsClient()


def get_compute_clients() -> ComputeClients:
    return ComputeClients(
        target_pools=get_target_pools_client(),
        forwarding_rules=get_forwarding_rules_client(),
        instances=get_instances_client(),
        region_operations=get_region_operations_client(),
    )
