"""Capability interfaces a cloud provider exposes to its host orchestrator."""

from __future__ import annotations

import ipaddress
import threading
from abc import ABC, abstractmethod

from .schemas.cloud import Zone


class TCPLoadBalancer(ABC):
    """Lifecycle of a TCP load balancer keyed by name and region."""

    @abstractmethod
    def tcp_load_balancer_exists(self, name: str, region: str) -> bool: ...

    @abstractmethod
    def create_tcp_load_balancer(
        self,
        name: str,
        region: str,
        port: int,
        hosts: list[str],
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> None: ...

    @abstractmethod
    def update_tcp_load_balancer(
        self,
        name: str,
        region: str,
        hosts: list[str],
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> None: ...

    @abstractmethod
    def delete_tcp_load_balancer(
        self,
        name: str,
        region: str,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> None: ...


class Instances(ABC):
    @abstractmethod
    def ip_address(self, instance: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
        """Externally reachable address of an instance."""

    @abstractmethod
    def list_instances(self, name_filter: str = "") -> list[str]:
        """Fully qualified names of instances, optionally filtered by name."""


class Zones(ABC):
    @abstractmethod
    def get_zone(self) -> Zone: ...


class CloudProvider(ABC):
    """
    A provider implementation. Every capability is optional: each accessor
    returns the implementation paired with a flag saying whether it is
    supported, so hosts never need isinstance checks.
    """

    provider_name: str = ""

    def tcp_load_balancer(self) -> tuple[TCPLoadBalancer | None, bool]:
        return None, False

    def instances(self) -> tuple[Instances | None, bool]:
        return None, False

    def zones(self) -> tuple[Zones | None, bool]:
        return None, False
