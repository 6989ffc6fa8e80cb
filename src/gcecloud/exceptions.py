"""Exception hierarchy for the Compute Engine cloud provider."""

from __future__ import annotations


class CloudProviderError(Exception):
    """Base exception for all adapter errors."""


class ConfigError(CloudProviderError):
    """Invalid adapter configuration."""


class UnknownCloudProvider(CloudProviderError):
    """No factory registered under the requested provider name."""


class MetadataUnavailable(CloudProviderError):
    """The metadata server could not be reached or returned an error status."""


class MalformedMetadata(CloudProviderError):
    """The metadata server answered with an unexpected body."""


class MalformedZone(CloudProviderError):
    """A zone name without the `<region>-<suffix>` shape."""


class ProviderRequestFailed(CloudProviderError):
    """A Compute Engine API call failed."""


class PoolCreationFailed(ProviderRequestFailed):
    """Creating the target pool of a load balancer failed.

    When the insert was accepted but its operation timed out, was cancelled
    or failed, the pool may still exist; ``pool_link`` then names it.
    A rejected insert leaves ``pool_link`` as None.
    """

    def __init__(self, message: str, pool_link: str | None = None):
        super().__init__(message)
        self.pool_link = pool_link


class RuleCreationFailed(ProviderRequestFailed):
    """Creating the forwarding rule failed after the target pool was created.

    The pool is not rolled back; ``pool_link`` names the orphan.
    """

    def __init__(self, message: str, pool_link: str | None = None):
        super().__init__(message)
        self.pool_link = pool_link


class SuffixResolutionFailed(CloudProviderError):
    """The local hostname queries used to derive the domain suffix failed."""


class InstanceNotFound(CloudProviderError):
    """Instance lookup failed."""


class InvalidAddress(CloudProviderError):
    """The instance reported an address that is not a valid IP."""


class NoAddressConfigured(CloudProviderError):
    """The instance has no network interface or no access config."""


class OperationError(CloudProviderError):
    """A region operation did not complete successfully."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class OperationTimeout(OperationError):
    """The deadline passed before the operation reached DONE."""


class OperationCancelled(OperationError):
    """The caller cancelled the wait."""


class OperationFailed(OperationError):
    """The operation reached DONE carrying errors."""

    def __init__(self, message: str, operation: str | None = None, errors: list[str] | None = None):
        super().__init__(message, operation=operation)
        self.errors = errors or []
