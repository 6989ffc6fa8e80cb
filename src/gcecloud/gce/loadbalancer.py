"""
TCP load balancers on Compute Engine are a target pool holding the backend
instances plus a forwarding rule that routes a port to that pool.

The pool is always created before the rule and deleted after it. A failure
between the two steps is not rolled back; it is logged with its phase so a
reconciler can find it via get_load_balancer_phase.

Concurrent calls for the same name are not serialized here.
"""

from __future__ import annotations

import threading
from typing import Any

from google.api_core import exceptions
from google.cloud import compute_v1

from ..config import GCEConfig
from ..core import LOAD_BALANCER_PROTOCOL
from ..exceptions import (
    CloudProviderError,
    PoolCreationFailed,
    ProviderRequestFailed,
    RuleCreationFailed,
)
from ..logger import logger
from ..naming import make_host_link, make_target_pool_link
from ..operations import wait_for_region_operation
from ..schemas.cloud import LoadBalancerPhase
from ..schemas.identity import AdapterIdentity


def _wait(
    identity: AdapterIdentity,
    operation: Any,
    region: str,
    config: GCEConfig,
    timeout: float | None,
    cancel: threading.Event | None,
) -> None:
    if not config.wait_for_operations:
        logger.debug(f"Not waiting for operation {operation.name} in {region}")
        return
    wait_for_region_operation(
        identity,
        operation,
        region,
        timeout=config.operation_timeout if timeout is None else timeout,
        poll_interval=config.operation_poll_interval,
        cancel=cancel,
    )


def _log_orphaned_pool(name: str, region: str) -> None:
    logger.warning(
        f"Load balancer {name} in {region}: target pool deletion failed, pool orphaned"
    )


def _host_links(identity: AdapterIdentity, hosts: list[str]) -> list[str]:
    return [make_host_link(identity.project_id, identity.zone, h) for h in hosts]


def _forwarding_rule_found(identity: AdapterIdentity, name: str, region: str) -> bool:
    try:
        identity.clients.forwarding_rules.get(
            project=identity.project_id, region=region, forwarding_rule=name
        )
    except exceptions.NotFound:
        return False
    except exceptions.GoogleAPICallError as e:
        raise ProviderRequestFailed(
            f"Failed to look up forwarding rule {name} in {region}: {e}"
        ) from e
    return True


def _target_pool_found(identity: AdapterIdentity, name: str, region: str) -> bool:
    try:
        identity.clients.target_pools.get(
            project=identity.project_id, region=region, target_pool=name
        )
    except exceptions.NotFound:
        return False
    except exceptions.GoogleAPICallError as e:
        raise ProviderRequestFailed(
            f"Failed to look up target pool {name} in {region}: {e}"
        ) from e
    return True


def tcp_load_balancer_exists(identity: AdapterIdentity, name: str, region: str) -> bool:
    """
    A load balancer exists when its forwarding rule does.
    NotFound means False; any other lookup error is raised.
    """
    return _forwarding_rule_found(identity, name, region)


def get_load_balancer_phase(
    identity: AdapterIdentity, name: str, region: str
) -> LoadBalancerPhase:
    """
    Reports how far a load balancer got. POOL_CREATED is the orphan left by
    a failed rule create or a half-finished delete.
    """
    if _forwarding_rule_found(identity, name, region):
        return LoadBalancerPhase.READY
    if _target_pool_found(identity, name, region):
        return LoadBalancerPhase.POOL_CREATED
    return LoadBalancerPhase.ABSENT


def create_tcp_load_balancer(
    identity: AdapterIdentity,
    name: str,
    region: str,
    port: int,
    hosts: list[str],
    config: GCEConfig,
    *,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> None:
    """
    absent -> pool-created -> ready.
    Raises PoolCreationFailed or RuleCreationFailed; when either carries a
    pool_link, the target pool may have been left behind.
    """
    pool_link = make_target_pool_link(identity.project_id, region, name)

    # 1. Target Pool
    pool = compute_v1.TargetPool(name=name, instances=_host_links(identity, hosts))
    try:
        op = identity.clients.target_pools.insert(
            project=identity.project_id, region=region, target_pool_resource=pool
        )
    except exceptions.GoogleAPICallError as e:
        raise PoolCreationFailed(
            f"Failed to create target pool {name} in {region}: {e}"
        ) from e
    try:
        _wait(identity, op, region, config, timeout, cancel)
    except CloudProviderError as e:
        # Insert was accepted, so the pool may exist without its rule
        logger.warning(
            f"Load balancer {name} in {region}: target pool operation did not "
            f"complete, possibly orphaned target pool {pool_link}"
        )
        raise PoolCreationFailed(
            f"Target pool {name} in {region} did not complete: {e}",
            pool_link=pool_link,
        ) from e

    logger.info(
        f"Load balancer {name} in {region}: "
        f"{LoadBalancerPhase.POOL_CREATED.value} ({len(pool.instances)} instances)"
    )

    # 2. Forwarding Rule
    rule = compute_v1.ForwardingRule(
        name=name,
        I_p_protocol=LOAD_BALANCER_PROTOCOL,
        port_range=str(port),
        target=pool_link,
    )
    try:
        op = identity.clients.forwarding_rules.insert(
            project=identity.project_id, region=region, forwarding_rule_resource=rule
        )
        _wait(identity, op, region, config, timeout, cancel)
    except (exceptions.GoogleAPICallError, CloudProviderError) as e:
        logger.warning(
            f"Load balancer {name} in {region} stuck at "
            f"{LoadBalancerPhase.POOL_CREATED.value}: orphaned target pool {pool_link}"
        )
        raise RuleCreationFailed(
            f"Failed to create forwarding rule {name} in {region}: {e}",
            pool_link=pool_link,
        ) from e

    logger.info(
        f"Load balancer {name} in {region}: {LoadBalancerPhase.READY.value} "
        f"({LOAD_BALANCER_PROTOCOL}:{port})"
    )


def update_tcp_load_balancer(
    identity: AdapterIdentity,
    name: str,
    region: str,
    hosts: list[str],
    config: GCEConfig,
    *,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> None:
    """
    Adds hosts to the target pool. Additive only: instances missing from
    `hosts` stay in the pool.
    """
    request = compute_v1.TargetPoolsAddInstanceRequest(
        instances=[
            compute_v1.InstanceReference(instance=link)
            for link in _host_links(identity, hosts)
        ]
    )
    try:
        op = identity.clients.target_pools.add_instance(
            project=identity.project_id,
            region=region,
            target_pool=name,
            target_pools_add_instance_request_resource=request,
        )
    except exceptions.GoogleAPICallError as e:
        raise ProviderRequestFailed(
            f"Failed to add instances to target pool {name} in {region}: {e}"
        ) from e
    _wait(identity, op, region, config, timeout, cancel)
    logger.info(f"Load balancer {name} in {region}: added {len(hosts)} instances")


def delete_tcp_load_balancer(
    identity: AdapterIdentity,
    name: str,
    region: str,
    config: GCEConfig,
    *,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> None:
    """
    ready -> pool-created -> absent.
    The target pool is only deleted once the forwarding rule deletion has
    completed; if the rule step fails, the pool is left untouched.
    """
    try:
        op = identity.clients.forwarding_rules.delete(
            project=identity.project_id, region=region, forwarding_rule=name
        )
    except exceptions.GoogleAPICallError as e:
        raise ProviderRequestFailed(
            f"Failed to delete forwarding rule {name} in {region}: {e}"
        ) from e
    _wait(identity, op, region, config, timeout, cancel)
    logger.info(
        f"Load balancer {name} in {region}: forwarding rule deleted, "
        f"{LoadBalancerPhase.POOL_CREATED.value}"
    )

    try:
        op = identity.clients.target_pools.delete(
            project=identity.project_id, region=region, target_pool=name
        )
    except exceptions.GoogleAPICallError as e:
        _log_orphaned_pool(name, region)
        raise ProviderRequestFailed(
            f"Failed to delete target pool {name} in {region}: {e}"
        ) from e
    try:
        _wait(identity, op, region, config, timeout, cancel)
    except CloudProviderError:
        _log_orphaned_pool(name, region)
        raise
    logger.info(f"Load balancer {name} in {region}: {LoadBalancerPhase.ABSENT.value}")
