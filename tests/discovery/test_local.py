"""Tests for the local repository resolver."""

from pathlib import Path

import pytest

from clusteradm_cli.discovery.errors import LocalRepositoryError
from clusteradm_cli.discovery.local import LocalRepository
from clusteradm_cli.discovery.local import lookup_local_repository


@pytest.fixture
def repository(tmp_path: Path) -> Path:
    """
    Create a local repository:

    - components/x.yaml
    - components/y.yml
    - components/z.txt
    - components/nested/w.yaml
    """
    root = tmp_path / "components"
    (root / "nested").mkdir(parents=True)
    (root / "x.yaml").write_bytes(b"x: 1\n")
    (root / "y.yml").write_bytes(b"y: 2\n")
    (root / "z.txt").write_bytes(b"not a manifest")
    (root / "nested" / "w.yaml").write_bytes(b"w: 3\n")
    return root


def test_only_yaml_files_are_returned(repository):
    resources = lookup_local_repository(repository)

    paths = [r.path for r in resources]
    assert "/components/z.txt" not in paths
    assert sorted(paths) == ["/components/nested/w.yaml", "/components/x.yaml", "/components/y.yml"]


def test_paths_are_relative_to_parent_of_root(repository):
    resources = {r.path: r.content for r in lookup_local_repository(str(repository))}

    assert resources["/components/x.yaml"] == b"x: 1\n"
    assert resources["/components/nested/w.yaml"] == b"w: 3\n"


def test_walk_is_lexical(repository):
    resources = lookup_local_repository(repository)

    assert [r.path for r in resources] == [
        "/components/nested/w.yaml",
        "/components/x.yaml",
        "/components/y.yml",
    ]


def test_single_file(repository):
    resources = lookup_local_repository(repository / "x.yaml")

    assert len(resources) == 1
    assert resources[0].path == "/x.yaml"
    assert resources[0].content == b"x: 1\n"


def test_relative_path(repository, monkeypatch):
    monkeypatch.chdir(repository.parent)

    resources = lookup_local_repository("components")

    assert len(resources) == 3
    assert all(r.path.startswith("/components/") for r in resources)


def test_file_prefix(repository):
    resources = LocalRepository(f"file://{repository}").get_resources()

    assert len(resources) == 3


def test_empty_folder(tmp_path):
    (tmp_path / "empty").mkdir()

    assert lookup_local_repository(tmp_path / "empty") == []


def test_missing_path(tmp_path):
    with pytest.raises(LocalRepositoryError, match="error reading local repository"):
        lookup_local_repository(tmp_path / "missing")


def test_unreadable_file_aborts(repository, monkeypatch):
    original = Path.read_bytes

    def read_bytes(self):
        if self.name == "y.yml":
            raise PermissionError("permission denied")
        return original(self)

    monkeypatch.setattr(Path, "read_bytes", read_bytes)

    with pytest.raises(LocalRepositoryError, match="y.yml"):
        lookup_local_repository(repository)
