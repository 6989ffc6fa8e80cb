"""Provider registry: maps a provider name to the factory that builds it."""

from __future__ import annotations

from typing import Callable

from .cloudprovider import CloudProvider
from .config import GCEConfig
from .exceptions import UnknownCloudProvider
from .logger import logger

ProviderFactory = Callable[[GCEConfig | None], CloudProvider]


class ProviderRegistry:
    def __init__(self) -> None:
        self._factories: dict[str, ProviderFactory] = {}

    def register(self, name: str, factory: ProviderFactory) -> None:
        """Register a factory under a provider name (e.g. 'gce')."""
        if name in self._factories:
            raise ValueError(f"Cloud provider {name!r} was registered twice")
        logger.debug(f"Registered cloud provider {name}")
        self._factories[name] = factory

    @property
    def supported_providers(self) -> list[str]:
        return sorted(self._factories)

    def get(self, name: str, config: GCEConfig | None = None) -> CloudProvider:
        """Build a provider by name. Each call constructs a new instance."""
        factory = self._factories.get(name)
        if factory is None:
            raise UnknownCloudProvider(
                f"Unknown cloud provider {name!r}. Supported: {self.supported_providers}"
            )
        return factory(config)


# -- Singleton ---------------------------------------------------------------

registry = ProviderRegistry()


def register_cloud_provider(name: str, factory: ProviderFactory) -> None:
    registry.register(name, factory)


def get_cloud_provider(name: str, config: GCEConfig | None = None) -> CloudProvider:
    return registry.get(name, config)
