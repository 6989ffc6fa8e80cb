from __future__ import annotations

import ipaddress
import threading

from ..clients import get_compute_clients
from ..cloudprovider import CloudProvider, Instances, TCPLoadBalancer, Zones
from ..config import GCEConfig
from ..logger import logger
from ..metadata import get_project_and_zone
from ..naming import region_of_zone
from ..registry import register_cloud_provider
from ..schemas.cloud import LoadBalancerPhase, Zone
from ..schemas.identity import AdapterIdentity
from . import instances as gce_instances
from . import loadbalancer


class GCECloud(CloudProvider, TCPLoadBalancer, Instances, Zones):
    """
    Compute Engine implementation of all three capabilities.

    Holds nothing but its identity, so one instance can be shared between
    threads. Operations on the same load balancer name are not serialized.
    """

    provider_name = "gce"

    def __init__(
        self,
        identity: AdapterIdentity,
        config: GCEConfig | None = None,
        suffix_provider: gce_instances.SuffixProvider = gce_instances.hostname_suffix,
    ) -> None:
        self._identity = identity
        self._config = config or GCEConfig()
        self._suffix_provider = suffix_provider

    @property
    def identity(self) -> AdapterIdentity:
        return self._identity

    # -- Capabilities --------------------------------------------------------

    def tcp_load_balancer(self) -> tuple[TCPLoadBalancer, bool]:
        return self, True

    def instances(self) -> tuple[Instances, bool]:
        return self, True

    def zones(self) -> tuple[Zones, bool]:
        return self, True

    # -- TCPLoadBalancer -----------------------------------------------------

    def tcp_load_balancer_exists(self, name: str, region: str) -> bool:
        return loadbalancer.tcp_load_balancer_exists(self._identity, name, region)

    def load_balancer_phase(self, name: str, region: str) -> LoadBalancerPhase:
        return loadbalancer.get_load_balancer_phase(self._identity, name, region)

    def create_tcp_load_balancer(
        self,
        name: str,
        region: str,
        port: int,
        hosts: list[str],
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        loadbalancer.create_tcp_load_balancer(
            self._identity,
            name,
            region,
            port,
            hosts,
            self._config,
            timeout=timeout,
            cancel=cancel,
        )

    def update_tcp_load_balancer(
        self,
        name: str,
        region: str,
        hosts: list[str],
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        loadbalancer.update_tcp_load_balancer(
            self._identity,
            name,
            region,
            hosts,
            self._config,
            timeout=timeout,
            cancel=cancel,
        )

    def delete_tcp_load_balancer(
        self,
        name: str,
        region: str,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        loadbalancer.delete_tcp_load_balancer(
            self._identity,
            name,
            region,
            self._config,
            timeout=timeout,
            cancel=cancel,
        )

    # -- Instances -----------------------------------------------------------

    def ip_address(self, instance: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
        return gce_instances.get_ip_address(self._identity, instance)

    def list_instances(self, name_filter: str = "") -> list[str]:
        return gce_instances.list_instances(
            self._identity, name_filter, suffix_provider=self._suffix_provider
        )

    # -- Zones ---------------------------------------------------------------

    def get_zone(self) -> Zone:
        zone = self._identity.zone
        return Zone(failure_domain=zone, region=region_of_zone(zone))


def new_gce_cloud(config: GCEConfig | None = None) -> GCECloud:
    """
    Builds the adapter. The metadata server is asked for project and zone
    once, unless the config supplies both.
    """
    config = config or GCEConfig()
    if config.project_id and config.zone:
        project_id, zone = config.project_id, config.zone
    else:
        project_id, zone = get_project_and_zone(
            config.metadata_url, timeout=config.metadata_timeout
        )
        project_id = config.project_id or project_id
        zone = config.zone or zone

    # get_zone must be able to split the zone into a region
    region_of_zone(zone)

    identity = AdapterIdentity(
        project_id=project_id, zone=zone, clients=get_compute_clients()
    )
    logger.info(f"GCE cloud provider bound to project={project_id} zone={zone}")
    return GCECloud(identity, config)


register_cloud_provider(GCECloud.provider_name, new_gce_cloud)
