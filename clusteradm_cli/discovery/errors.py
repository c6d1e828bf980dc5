"""Errors raised while discovering component resources.

Every failure is terminal for the current resolution run; nothing here is
retried.
"""

from __future__ import annotations

TOKEN_HINT = (
    "Please get a personal API token and pass it with --github-token "
    "or assign it to the CLUSTERADM_GITHUB_TOKEN env var"
)


class ResourceDiscoveryError(Exception):
    """Base class for resource discovery failures."""


class MissingRepositoryError(ResourceDiscoveryError):
    """Raised when a component has neither a repository override nor a default repository."""

    def __init__(self, component: str):
        self.component = component
        super().__init__(f"missing repository for {component!r}")


class InvalidRepositoryURLError(ResourceDiscoveryError):
    """Raised when the repository for a component cannot be parsed as a URL."""

    def __init__(self, component: str, url: str):
        self.component = component
        self.url = url
        super().__init__(f"repository for {component!r} is not a valid url: {url!r}")


class InvalidRepositoryPathError(ResourceDiscoveryError):
    """Raised when a GitHub repository path does not have the expected shape."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = (
            f"repository path {path!r} is not valid. "
            "expected {owner}/{repo}/{releases|tree}/{ref}/{resource-path}"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnsupportedLocationError(ResourceDiscoveryError):
    """Raised for repository locations that cannot be read (e.g. generic http/https)."""


class RefNotFoundError(ResourceDiscoveryError):
    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"{ref!r} does not match any branch or tag")


class ReleaseNotFoundError(ResourceDiscoveryError):
    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"failed to get release {tag!r}")


class NoLatestReleaseError(ResourceDiscoveryError):
    def __init__(self, repository: str):
        self.repository = repository
        super().__init__(f"failed to get latest release for {repository!r}: no release is tagged with a semantic version")


class AssetNotFoundError(ResourceDiscoveryError):
    def __init__(self, asset: str, tag: str):
        self.asset = asset
        self.tag = tag
        super().__init__(f"the {tag!r} release does not contain the asset {asset!r}")


class UnsupportedEncodingError(ResourceDiscoveryError):
    def __init__(self, path: str, encoding: str | None):
        self.path = path
        self.encoding = encoding
        super().__init__(f"invalid encoding for {path!r}: {encoding or 'none'}")


class RateLimitExceededError(ResourceDiscoveryError):
    """Raised whenever the GitHub API reports that the rate limit has been hit."""

    def __init__(self, message: str | None = None):
        super().__init__(message or f"hitting rate limit for github api. {TOKEN_HINT}")


class GitHubAPIError(ResourceDiscoveryError):
    """Raised for GitHub API failures other than rate limiting."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class LocalRepositoryError(ResourceDiscoveryError):
    """Raised when walking or reading a local repository fails."""
