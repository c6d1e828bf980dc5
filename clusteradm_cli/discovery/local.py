"""Local repository - resources stored in a local folder or file."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from .errors import LocalRepositoryError
from .models import Resource

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


class LocalRepository:
    """A local folder/file where resources for a component are stored.

    If the path is a folder, sub-folders are read recursively.
    """

    def __init__(self, path: str | Path):
        if isinstance(path, str) and path.startswith("file://"):
            path = path[7:]
        self.path = Path(path).absolute()

    def get_resources(self) -> list[Resource]:
        """Read every YAML file under the repository path.

        Resource paths are relative to the parent of the repository path, so
        a repository at /tmp/capi yields paths like /capi/components.yaml.

        Raises:
            LocalRepositoryError: The path cannot be walked or a file cannot be read
        """
        try:
            resource_paths = list(self._walk(self.path, is_root=True))
        except OSError as e:
            raise LocalRepositoryError(f"error reading local repository {str(self.path)!r}: {e}") from e

        prefix = str(self.path.parent)
        resources = []
        for path in resource_paths:
            logger.debug(f"Reading {path}")
            try:
                content = path.read_bytes()
            except OSError as e:
                raise LocalRepositoryError(f"error reading resource content for {str(path)!r}: {e}") from e

            resources.append(Resource(path=str(path).removeprefix(prefix), content=content))

        return resources

    def _walk(self, path: Path, is_root: bool = False) -> Iterator[Path]:
        # Lexical order; symlinked sub-folders are not followed
        if path.is_dir() and (is_root or not path.is_symlink()):
            for child in sorted(path.iterdir(), key=lambda p: p.name):
                yield from self._walk(child)
            return

        if not path.exists() and not path.is_symlink():
            raise FileNotFoundError(f"no such file or directory: {path}")

        if path.suffix in YAML_SUFFIXES:
            yield path

    def __repr__(self) -> str:
        return f"LocalRepository({self.path})"


def lookup_local_repository(path: str | Path) -> list[Resource]:
    """Get the resources stored in a local folder or file."""
    repository = LocalRepository(path)
    logger.info(f"reading resources from {str(repository.path)!r} local repository...")
    return repository.get_resources()
