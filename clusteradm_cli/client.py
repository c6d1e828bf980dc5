"""Clusteradm client - resolves the components to install in the management cluster."""

from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Iterable

from pydantic import BaseModel
from pydantic import Field

from .discovery import ComponentResources
from .discovery import lookup
from .discovery.errors import ResourceDiscoveryError

logger = logging.getLogger(__name__)

CAPI = "CAPI"
DEFAULT_BOOTSTRAP_PROVIDER = "kubeadm"

LookupFn = Callable[..., ComponentResources]


class ComponentResolutionError(Exception):
    """Raised when the resources for a component cannot be resolved."""

    def __init__(self, component: str, cause: ResourceDiscoveryError):
        self.component = component
        self.cause = cause
        super().__init__(f"failed to get resources for {component!r}: {cause}")


class ClusteradmConfig(BaseModel):
    """Configuration for initializing a management cluster."""

    providers: list[str] = Field(default_factory=list, description="Infrastructure providers to initialize")
    bootstrap: str | None = Field(None, description="Bootstrap provider")
    repositories: dict[str, str] = Field(
        default_factory=dict, description="Repository URL overrides by component name"
    )
    github_token: str | None = Field(None, description="GitHub personal access token")

    def components(self) -> list[str]:
        """Components to resolve, in installation order."""
        components = [CAPI]
        if self.bootstrap:
            components.append(self.bootstrap)
        components.extend(self.providers)
        return components


def parse_repository_overrides(entries: Iterable[str]) -> dict[str, str]:
    """Parse component=url entries into a repositories mapping.

    Raises:
        ValueError: An entry is not in component=url form
    """
    repositories: dict[str, str] = {}
    for entry in entries:
        component, sep, url = entry.partition("=")
        component, url = component.strip(), url.strip()
        if not sep or not component or not url:
            raise ValueError(f"invalid repository {entry!r}, expected component=url")
        repositories[component] = url
    return repositories


class ClusteradmClient:
    """Client for clusteradm operations."""

    def __init__(self, lookup_fn: LookupFn = lookup):
        self._lookup = lookup_fn

    def init(self, config: ClusteradmConfig) -> list[ComponentResources]:
        """Get the resources for cluster API, the bootstrap provider and the infrastructure providers.

        Components are resolved one at a time; the first failure aborts.

        Returns:
            ComponentResources for each component, in installation order

        Raises:
            ComponentResolutionError: Resources for a component cannot be resolved
        """
        logger.info("performing init...")

        results = []
        for component in config.components():
            logger.info(f"Getting resources for {component!r}")
            try:
                resources = self._lookup(component, config.repositories, config.github_token)
            except ResourceDiscoveryError as e:
                raise ComponentResolutionError(component, e) from e
            results.append(resources)

        # TODO: apply the resources once the management cluster client exists
        logger.info(f"applying {len(results)} component resources to the management cluster...")
        return results
