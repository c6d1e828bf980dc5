"""GitHub repository - resources stored as release assets or in a source tree.

Repository paths have the shape:

    {owner}/{repo}/{releases|tree}/{latest|version|branch|tag|sha}/{resource-path}

Release paths download a single asset from the selected release. Tree paths
read a file or a folder (recursively) from the repository contents at the
selected commit.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any
from urllib.parse import quote

import httpx
import semver

from .errors import AssetNotFoundError
from .errors import GitHubAPIError
from .errors import NoLatestReleaseError
from .errors import RateLimitExceededError
from .errors import RefNotFoundError
from .errors import ReleaseNotFoundError
from .errors import UnsupportedEncodingError
from .location import GitHubPath
from .models import Resource

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0
PER_PAGE = 100
SHA_LENGTH = 40


def parse_semantic_version(tag: str) -> semver.Version | None:
    """Parse a release tag as a semantic version, with an optional leading "v".

    Returns None for tags that are not semantic versions (e.g. "nightly",
    "v1.2"), so callers can skip them. Build metadata is kept but does not
    take part in comparisons.
    """
    try:
        return semver.Version.parse(tag.strip().removeprefix("v"))
    except ValueError:
        return None


def is_rate_limited(response: httpx.Response) -> bool:
    """Check if a GitHub API response is a rate limit failure."""
    if response.status_code not in (403, 429):
        return False
    remaining = response.headers.get("x-ratelimit-remaining")
    if remaining is not None:
        return remaining == "0"
    return response.status_code == 429


class GitHubRepository:
    """A GitHub repository where resources for a component are stored.

    An auth token is optional; it raises the GitHub API rate limit, which
    might be required when doing multiple discovery requests during
    development iterations or when spinning up several management clusters.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str | None = None,
        api_url: str = GITHUB_API_URL,
        transport: httpx.BaseTransport | None = None,
    ):
        self.owner = owner
        self.repo = repo
        self._transport = transport
        self.client = httpx.Client(
            base_url=api_url,
            timeout=DEFAULT_TIMEOUT,
            headers={"Accept": "application/vnd.github.v3+json"},
            transport=transport,
        )
        if token:
            self.authenticate(token)

    def authenticate(self, token: str) -> None:
        """Attach a bearer token to every API request."""
        self.client.headers["Authorization"] = f"Bearer {token}"

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> GitHubRepository:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __repr__(self) -> str:
        return f"GitHubRepository({self})"

    # ----- Resolution -----

    def resolve(self, path: GitHubPath) -> list[Resource]:
        """Get the resources identified by a parsed repository path."""
        if path.is_release:
            if path.ref == "latest":
                release = self.get_latest_release()
            else:
                release = self.get_release_by_tag(path.ref)
            logger.info(f"downloading resources from {release['tag_name']!r} release assets in {str(self)!r} github repository...")
            return self.download_resource_from_release_assets(release, path.resource_path)

        if len(path.ref) == SHA_LENGTH:
            sha = path.ref
        else:
            sha = self.get_sha(path.ref)
        logger.info(f"downloading resources from tree content in {str(self)!r} github repository (might take few seconds)...")
        return self.download_resources_from_tree(sha, path.resource_path)

    # ----- Release assets -----

    def get_latest_release(self) -> dict[str, Any]:
        """Get the latest release according to semantic version order of the release tag name.

        Releases whose tag name is not a semantic version are ignored.

        Raises:
            NoLatestReleaseError: No release is tagged with a semantic version
        """
        logger.debug("Reading latest release")
        releases = self._list(f"{self._repo_url}/releases", "failed to read releases")

        latest_release = None
        latest_version = None
        for release in releases:
            tag = release.get("tag_name")
            if not tag:
                continue
            version = parse_semantic_version(tag)
            if version is None:
                continue
            if latest_version is None or latest_version < version:
                latest_release = release
                latest_version = version

        if latest_release is None:
            raise NoLatestReleaseError(str(self))

        logger.debug(f"> release {latest_release['tag_name']!r}")
        return latest_release

    def get_release_by_tag(self, tag: str) -> dict[str, Any]:
        """Get the release with a specific tag name.

        Raises:
            ReleaseNotFoundError: No release has this tag
        """
        logger.debug(f"Reading {tag!r} release")
        try:
            response = self._get(f"{self._repo_url}/releases/tags/{quote(tag, safe='')}", f"failed to read release {tag!r}")
        except GitHubAPIError as e:
            if e.status_code == 404:
                raise ReleaseNotFoundError(tag) from e
            raise
        return response.json()

    def download_resource_from_release_assets(self, release: dict[str, Any], asset_name: str) -> list[Resource]:
        """Download a single asset from a release.

        The assets endpoint either streams the content back or redirects to
        a download location; both end up as one resource named after the asset.

        Raises:
            AssetNotFoundError: The release has no asset with this name
        """
        tag = release.get("tag_name", "")
        logger.debug(f"Downloading {asset_name!r}")

        asset_id = None
        for asset in release.get("assets") or []:
            if asset.get("name") == asset_name:
                asset_id = asset.get("id")
                break
        if asset_id is None:
            raise AssetNotFoundError(asset_name, tag)

        message = f"failed to download asset {asset_name!r} from {tag!r} release"
        request = self.client.build_request(
            "GET",
            f"{self._repo_url}/releases/assets/{asset_id}",
            headers={"Accept": "application/octet-stream"},
        )
        try:
            response = self.client.send(request, stream=True, follow_redirects=False)
        except httpx.TransportError as e:
            raise GitHubAPIError(f"{message}: {e}") from e

        try:
            if httpx.codes.is_redirect(response.status_code):
                redirect = response.headers.get("location")
                if not redirect:
                    raise GitHubAPIError(f"{message}: redirect without a location", status_code=response.status_code)
            else:
                self._check(response, message)
                return [Resource(path=asset_name, content=response.read())]
        except httpx.TransportError as e:
            raise GitHubAPIError(f"failed to read downloaded asset {asset_name!r} from {tag!r} release: {e}") from e
        finally:
            response.close()

        return [Resource(path=asset_name, content=self._download_redirect(redirect, message))]

    def _download_redirect(self, location: str, message: str) -> bytes:
        # Plain unauthenticated GET, the redirect location is already signed
        try:
            with httpx.Client(timeout=DEFAULT_TIMEOUT, follow_redirects=True, transport=self._transport) as client:
                response = client.get(location)
                if is_rate_limited(response):
                    raise RateLimitExceededError()
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"{message} from redirect location {location!r}: {e}") from e

    # ----- Source tree -----

    def get_sha(self, branch_or_tag: str) -> str:
        """Get the commit SHA for a branch or a tag (branches win).

        Raises:
            RefNotFoundError: No branch or tag has this name
        """
        logger.debug(f"Reading SHA for {branch_or_tag!r}")

        for branch in self._list(f"{self._repo_url}/branches", "error reading branches"):
            if branch.get("name") == branch_or_tag:
                return branch["commit"]["sha"]

        for tag in self._list(f"{self._repo_url}/tags", "failed to list tags"):
            if tag.get("name") == branch_or_tag:
                return tag["commit"]["sha"]

        raise RefNotFoundError(branch_or_tag)

    def download_resources_from_tree(self, sha: str, path: str) -> list[Resource]:
        """Download resources from a file or a folder in the repository tree.

        Folders are read recursively; every call returns its own list.

        Raises:
            UnsupportedEncodingError: A file is not base64 encoded
        """
        logger.debug(f"Downloading {path!r}")

        response = self._get(
            f"{self._repo_url}/contents/{path}",
            f"failed to get content for {path!r}",
            params={"ref": sha},
        )
        content = response.json()

        if isinstance(content, dict):
            return [self._decode_file(content, path)]

        resources: list[Resource] = []
        for item in content:
            resources.extend(self.download_resources_from_tree(sha, item["path"]))
        return resources

    def _decode_file(self, content: dict[str, Any], path: str) -> Resource:
        encoding = content.get("encoding")
        if encoding != "base64":
            raise UnsupportedEncodingError(path, encoding)
        try:
            data = base64.b64decode(content.get("content") or "")
        except (binascii.Error, ValueError) as e:
            raise UnsupportedEncodingError(path, encoding) from e
        return Resource(path=content.get("path", path), content=data)

    # ----- API helpers -----

    @property
    def _repo_url(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _get(self, url: str, message: str, params: dict[str, Any] | None = None) -> httpx.Response:
        try:
            response = self.client.get(url, params=params)
        except httpx.TransportError as e:
            raise GitHubAPIError(f"{message}: {e}") from e
        self._check(response, message)
        return response

    def _list(self, url: str, message: str) -> list[dict[str, Any]]:
        """Get all the items of a paginated list endpoint."""
        items: list[dict[str, Any]] = []
        next_url: str | None = url
        params: dict[str, Any] | None = {"per_page": PER_PAGE}
        while next_url:
            response = self._get(next_url, message, params=params)
            items.extend(response.json())
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            params = None
        return items

    def _check(self, response: httpx.Response, message: str) -> None:
        """Map an error response to a discovery error."""
        if response.is_success:
            return
        if is_rate_limited(response):
            raise RateLimitExceededError()
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise GitHubAPIError(f"{message}: {e}", status_code=response.status_code) from e


def lookup_github_repository(
    path: str,
    token: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> list[Resource]:
    """Get the resources stored in a GitHub repository.

    Args:
        path: {owner}/{repo}/{releases|tree}/{ref}/{resource-path}
        token: Optional personal access token
        transport: Optional httpx transport used for every request

    Raises:
        InvalidRepositoryPathError: path does not have the expected shape
        RateLimitExceededError: GitHub API rate limit hit
    """
    github_path = GitHubPath.parse(path)
    with GitHubRepository(github_path.owner, github_path.repo, token=token, transport=transport) as repository:
        return repository.resolve(github_path)
