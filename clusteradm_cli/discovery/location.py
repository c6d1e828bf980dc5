"""Repository location parsing and classification.

A repository location is a URL in one of these shapes:

    github:  https://github.com/{owner}/{repo}/{releases|tree}/{ref}/{resource-path}[#apply-path]
    local:   [file://]{filesystem path}[#apply-path]
    generic: http(s)://{anything else}   (recognised, not supported)

The location is classified once into a LocationKind, and the lookup
dispatcher matches on the kind.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from .errors import InvalidRepositoryPathError
from .errors import InvalidRepositoryURLError

GITHUB_HOST = "github.com"
RELEASES = "releases"
TREE = "tree"


class LocationKind(Enum):
    GITHUB_RELEASE = "github-release"
    GITHUB_TREE = "github-tree"
    LOCAL = "local"
    UNSUPPORTED_HTTP = "unsupported-http"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class GitHubPath:
    """A parsed {owner}/{repo}/{releases|tree}/{ref}/{resource-path} path."""

    owner: str
    repo: str
    mode: str
    ref: str
    resource_path: str

    @classmethod
    def parse(cls, path: str) -> GitHubPath:
        """Parse a GitHub repository path (with or without leading slash).

        For releases, the resource path is the asset name (the fifth segment).
        For trees, everything after the ref is the path inside the repository.

        Raises:
            InvalidRepositoryPathError: The path does not have the expected shape
        """
        parts = path.removeprefix("/").split("/")
        if len(parts) < 5:
            raise InvalidRepositoryPathError(path, f"expected 5 parts, found {len(parts)}")
        if parts[2] not in (RELEASES, TREE):
            raise InvalidRepositoryPathError(path, f"{parts[2]!r} must be {RELEASES!r} or {TREE!r}")

        if parts[2] == RELEASES:
            resource_path = parts[4]
        else:
            resource_path = "/".join(parts[4:]).rstrip("/")

        return cls(owner=parts[0], repo=parts[1], mode=parts[2], ref=parts[3], resource_path=resource_path)

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def is_release(self) -> bool:
        return self.mode == RELEASES


@dataclass(frozen=True)
class Location:
    """A classified repository location."""

    kind: LocationKind
    url: str
    path: str = ""
    fragment: str = ""


def _join_local_path(host: str, path: str) -> str:
    # file://relative/dir puts "relative" in the host part, so host and path
    # are joined back together
    if not host:
        return posixpath.normpath(path) if path else path
    return posixpath.normpath(posixpath.join(host, path.lstrip("/")))


def classify_location(component: str, url: str) -> Location:
    """Parse a repository URL and classify it.

    Args:
        component: Component the location belongs to (for error messages)
        url: Raw repository URL

    Returns:
        Location with kind, the path to hand to the resolver, and the apply fragment

    Raises:
        InvalidRepositoryURLError: url cannot be parsed
        InvalidRepositoryPathError: github.com url with a malformed path
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise InvalidRepositoryURLError(component, url) from e

    scheme = parts.scheme
    fragment = parts.fragment

    # Only the bare host; "github.com:8443" or "GitHub.com" are plain https
    if scheme == "https" and parts.netloc == GITHUB_HOST:
        github_path = parts.path.removeprefix("/")
        parsed = GitHubPath.parse(github_path)
        kind = LocationKind.GITHUB_RELEASE if parsed.is_release else LocationKind.GITHUB_TREE
        return Location(kind=kind, url=url, path=github_path, fragment=fragment)

    if scheme in ("http", "https"):
        return Location(kind=LocationKind.UNSUPPORTED_HTTP, url=url, fragment=fragment)

    if scheme in ("", "file"):
        local_path = _join_local_path(parts.netloc, parts.path)
        if not local_path:
            raise InvalidRepositoryURLError(component, url)
        return Location(kind=LocationKind.LOCAL, url=url, path=local_path, fragment=fragment)

    return Location(kind=LocationKind.UNSUPPORTED, url=url, fragment=fragment)
