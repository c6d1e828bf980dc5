"""Lookup of the resources for installing a cluster API component."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from .errors import MissingRepositoryError
from .errors import UnsupportedLocationError
from .github import lookup_github_repository
from .local import lookup_local_repository
from .location import LocationKind
from .location import classify_location
from .models import ComponentResources
from .registry import get_default_repository

logger = logging.getLogger(__name__)


def get_repository_url(component: str, repositories: Mapping[str, str] | None = None) -> str:
    """Get the repository URL for a component.

    User provided repositories win over the default repositories.

    Raises:
        MissingRepositoryError: Neither an override nor a default exists
    """
    if repositories and component in repositories:
        return repositories[component]
    default = get_default_repository(component)
    if default is not None:
        return default
    raise MissingRepositoryError(component)


def lookup(
    component: str,
    repositories: Mapping[str, str] | None = None,
    github_token: str | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> ComponentResources:
    """Get the resources to be used for installing a component in the management cluster.

    Args:
        component: Component name (e.g. "CAPI", "kubeadm", "aws")
        repositories: Repository URL overrides by component name
        github_token: Optional GitHub personal access token
        transport: Optional httpx transport for GitHub requests

    Returns:
        ComponentResources with the resources and the apply hint from the URL fragment

    Raises:
        ResourceDiscoveryError: Any failure while reading the repository
    """
    url = get_repository_url(component, repositories)
    location = classify_location(component, url)
    logger.debug(f"[resources:lookup] {component} -> {location.kind.value} ({url})")

    if location.kind in (LocationKind.GITHUB_RELEASE, LocationKind.GITHUB_TREE):
        resources = lookup_github_repository(location.path, github_token, transport=transport)
    elif location.kind == LocationKind.LOCAL:
        resources = lookup_local_repository(location.path)
    elif location.kind == LocationKind.UNSUPPORTED_HTTP:
        raise UnsupportedLocationError("support for http/https repositories is not implemented yet")
    elif location.kind == LocationKind.UNSUPPORTED:
        raise UnsupportedLocationError(f"repository {url!r} for {component!r} is not supported")
    else:
        raise AssertionError(f"unhandled location kind {location.kind!r}")

    component_resources = ComponentResources(resources=resources, apply=location.fragment)
    if component_resources.apply and component_resources.entry_point() is None:
        logger.warning(
            f"apply path {component_resources.apply!r} for {component!r} does not match any resource: "
            f"{', '.join(component_resources.paths)}"
        )
    return component_resources
