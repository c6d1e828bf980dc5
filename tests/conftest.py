"""Pytest configuration for clusteradm tests.

Provides an in-memory GitHub API served through httpx.MockTransport.
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from dataclasses import field

import httpx
import pytest

DOWNLOAD_HOST = "objects.githubusercontent.com"

_PAGINATED = re.compile(r"^/repos/(?P<owner>[^/]+)/(?P<repo>[^/]+)/(?P<kind>releases|branches|tags)$")
_RELEASE_BY_TAG = re.compile(r"^/repos/[^/]+/[^/]+/releases/tags/(?P<tag>.+)$")
_ASSET = re.compile(r"^/repos/[^/]+/[^/]+/releases/assets/(?P<id>\d+)$")
_CONTENTS = re.compile(r"^/repos/[^/]+/[^/]+/contents/?(?P<path>.*)$")


@dataclass
class FakeGitHub:
    """A tiny GitHub API: releases with assets, branches, tags and a source tree."""

    releases: list[dict] = field(default_factory=list)
    branches: dict[str, str] = field(default_factory=dict)
    tags: dict[str, str] = field(default_factory=dict)
    # path -> bytes for files, path -> list of child paths for folders
    tree: dict[str, bytes | list[str]] = field(default_factory=dict)
    asset_content: dict[int, bytes] = field(default_factory=dict)
    redirect_assets: bool = False
    redirect_without_location: bool = False
    page_size: int = 100
    rate_limited: set[str] = field(default_factory=set)
    encodings: dict[str, str | None] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def add_release(self, tag: str, assets: dict[str, bytes] | None = None) -> dict:
        release = {"tag_name": tag, "assets": []}
        for name, content in (assets or {}).items():
            asset_id = len(self.asset_content) + 1
            self.asset_content[asset_id] = content
            release["assets"].append({"id": asset_id, "name": name})
        self.releases.append(release)
        return release

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.url.host == DOWNLOAD_HOST:
            asset_id = int(path.rsplit("/", 1)[-1])
            return httpx.Response(200, content=self.asset_content[asset_id])

        for prefix in self.rate_limited:
            if path.startswith(prefix):
                return httpx.Response(
                    403,
                    headers={"X-RateLimit-Remaining": "0"},
                    json={"message": "API rate limit exceeded"},
                )

        if match := _PAGINATED.match(path):
            kind = match["kind"]
            if kind == "releases":
                items = self.releases
            else:
                source = self.branches if kind == "branches" else self.tags
                items = [{"name": name, "commit": {"sha": sha}} for name, sha in source.items()]
            return self._page(request, items)

        if match := _RELEASE_BY_TAG.match(path):
            for release in self.releases:
                if release["tag_name"] == match["tag"]:
                    return httpx.Response(200, json=release)
            return httpx.Response(404, json={"message": "Not Found"})

        if match := _ASSET.match(path):
            asset_id = int(match["id"])
            assert request.headers["accept"] == "application/octet-stream"
            if self.redirect_without_location:
                return httpx.Response(302)
            if self.redirect_assets:
                return httpx.Response(302, headers={"Location": f"https://{DOWNLOAD_HOST}/asset/{asset_id}"})
            return httpx.Response(200, content=self.asset_content[asset_id])

        if match := _CONTENTS.match(path):
            return self._contents(match["path"])

        return httpx.Response(404, json={"message": "Not Found"})

    def _page(self, request: httpx.Request, items: list[dict]) -> httpx.Response:
        page = int(request.url.params.get("page", "1"))
        start = (page - 1) * self.page_size
        chunk = items[start : start + self.page_size]
        headers = {}
        if start + self.page_size < len(items):
            next_url = request.url.copy_set_param("page", str(page + 1))
            headers["Link"] = f'<{next_url}>; rel="next"'
        return httpx.Response(200, json=chunk, headers=headers)

    def _contents(self, path: str) -> httpx.Response:
        if path not in self.tree:
            return httpx.Response(404, json={"message": "Not Found"})
        entry = self.tree[path]
        if isinstance(entry, list):
            return httpx.Response(
                200,
                json=[{"path": child, "type": "dir" if isinstance(self.tree[child], list) else "file"} for child in entry],
            )
        encoding = self.encodings.get(path, "base64")
        body = {"type": "file", "path": path, "encoding": encoding}
        if encoding == "base64":
            body["content"] = base64.b64encode(entry).decode()
        elif encoding is not None:
            body["content"] = entry.decode()
        return httpx.Response(200, json=body)


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()
