from __future__ import annotations

import ipaddress
import subprocess
from typing import Callable

from google.api_core import exceptions
from google.cloud import compute_v1

from ..exceptions import (
    InstanceNotFound,
    InvalidAddress,
    NoAddressConfigured,
    ProviderRequestFailed,
    SuffixResolutionFailed,
)
from ..logger import logger
from ..naming import canonicalize_instance_name
from ..schemas.identity import AdapterIdentity

# Returns the caller's domain suffix without a leading dot, e.g. 'c.my-proj.internal'
SuffixProvider = Callable[[], str]


def hostname_suffix() -> str:
    """
    Domain part of this machine's FQDN: the delta between `hostname -f`
    and `hostname`.
    """
    try:
        full = subprocess.run(
            ["hostname", "-f"], capture_output=True, text=True, check=True
        ).stdout.strip()
        short = subprocess.run(
            ["hostname"], capture_output=True, text=True, check=True
        ).stdout.strip()
    except (OSError, subprocess.CalledProcessError) as e:
        raise SuffixResolutionFailed(f"Failed to query local hostname: {e}") from e

    return full[len(short) :].strip().lstrip(".")


def list_instances(
    identity: AdapterIdentity,
    name_filter: str = "",
    suffix_provider: SuffixProvider = hostname_suffix,
) -> list[str]:
    """
    Lists instances in the adapter's zone as fully qualified names.
    The API returns bare names, so the local domain suffix is appended.
    """
    # Providers may hand back '.example.internal' or 'example.internal'
    suffix = suffix_provider().strip().lstrip(".")
    if suffix:
        suffix = "." + suffix

    request = compute_v1.ListInstancesRequest(
        project=identity.project_id, zone=identity.zone
    )
    if name_filter:
        request.filter = f"name eq {name_filter}"

    # The client library handles pagination automatically when iterating
    try:
        names = [
            instance.name + suffix
            for instance in identity.clients.instances.list(request=request)
        ]
    except exceptions.GoogleAPICallError as e:
        raise ProviderRequestFailed(
            f"Failed to list instances in {identity.project_id}/{identity.zone}: {e}"
        ) from e

    logger.debug(f"Found {len(names)} instances in {identity.zone}")
    return names


def get_ip_address(
    identity: AdapterIdentity, instance: str
) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    """
    External (NAT) address from the first access config of the first NIC.
    """
    name = canonicalize_instance_name(instance)
    try:
        res = identity.clients.instances.get(
            project=identity.project_id, zone=identity.zone, instance=name
        )
    except exceptions.GoogleAPICallError as e:
        logger.error(f"Failed to retrieve instance {name}: {e}")
        raise InstanceNotFound(f"Instance {name} not found in {identity.zone}: {e}") from e

    if not res.network_interfaces or not res.network_interfaces[0].access_configs:
        raise NoAddressConfigured(f"Instance {name} has no external access config")

    nat_ip = res.network_interfaces[0].access_configs[0].nat_i_p
    try:
        return ipaddress.ip_address(nat_ip)
    except ValueError as e:
        raise InvalidAddress(f"Invalid network IP for {name}: {nat_ip!r}") from e
