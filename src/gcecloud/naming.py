from .core import COMPUTE_API_BASE
from .exceptions import MalformedZone


def canonicalize_instance_name(name: str) -> str:
    """
    Reduces a hostname to the bare instance name the API expects.
    e.g. 'kube-node-2.c.my-proj.internal' -> 'kube-node-2'
    """
    return name.split(".", 1)[0]


def region_of_zone(zone: str) -> str:
    """
    Zone names are '<region>-<suffix>', so 'us-central1-b' -> 'us-central1'.
    """
    region, sep, _ = zone.rpartition("-")
    if not sep:
        raise MalformedZone(f"Unexpected zone: {zone!r}")
    return region


def make_host_link(project_id: str, zone: str, host: str) -> str:
    host = canonicalize_instance_name(host)
    return f"{COMPUTE_API_BASE}/projects/{project_id}/zones/{zone}/instances/{host}"


def make_target_pool_link(project_id: str, region: str, name: str) -> str:
    return f"{COMPUTE_API_BASE}/projects/{project_id}/regions/{region}/targetPools/{name}"
