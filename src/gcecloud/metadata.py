"""Discovery of the adapter's own project and zone from the metadata server."""

from __future__ import annotations

import requests

from .core import METADATA_HEADERS, METADATA_TIMEOUT, METADATA_ZONE_URL
from .exceptions import MalformedMetadata, MetadataUnavailable
from .logger import logger


def get_project_and_zone(
    url: str = METADATA_ZONE_URL, timeout: float = METADATA_TIMEOUT
) -> tuple[str, str]:
    """
    Asks the metadata server which zone this VM runs in.
    The body looks like 'projects/123456789/zones/us-central1-b'.
    Makes exactly one request; there is no retry.
    """
    try:
        resp = requests.get(url, headers=METADATA_HEADERS, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise MetadataUnavailable(f"Metadata server request to {url} failed: {e}") from e

    body = resp.text.strip()
    parts = body.split("/")
    if len(parts) != 4:
        raise MalformedMetadata(f"Unexpected metadata response: {body!r}")

    logger.debug(f"Metadata server reports project={parts[1]} zone={parts[3]}")
    return parts[1], parts[3]
