"""Settings management for clusteradm.

Simple scope-aware YAML settings:

    ~/.clusteradm/settings.yaml      user defaults
    .clusteradm/settings.yaml        project (wins over user)

Recognised keys:

    repositories:
      CAPI: https://github.com/kubernetes-sigs/cluster-api/tree/main/config
      aws: ./providers/aws
    github_token: ghp_...
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    user_settings: Path
    project_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        return cls(
            user_settings=Path.home() / ".clusteradm" / "settings.yaml",
            project_settings=Path.cwd() / ".clusteradm" / "settings.yaml",
        )


class ClusteradmSettings:
    """Settings manager merging user and project settings files."""

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes (project wins)."""
        result: dict[str, Any] = {}
        for path in [self.paths.user_settings, self.paths.project_settings]:
            if not path.exists():
                continue
            try:
                with open(path) as f:
                    content = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to read {path}: {e}")
                continue
            if not isinstance(content, dict):
                logger.warning(f"Ignoring {path}: expected a mapping at top level")
                continue
            result = self._merge(result, content)
        return result

    def get_repositories(self) -> dict[str, str]:
        """Get repository overrides by component name."""
        repositories = self.get_merged_settings().get("repositories") or {}
        if not isinstance(repositories, dict):
            logger.warning("Ignoring 'repositories' setting: expected a mapping")
            return {}
        return {str(k): str(v) for k, v in repositories.items()}

    def get_github_token(self) -> str | None:
        token = self.get_merged_settings().get("github_token")
        return str(token) if token else None

    def resolve_github_token(self, explicit: str | None = None) -> str | None:
        """Get the effective GitHub token.

        Precedence: explicit value (flag or CLUSTERADM_GITHUB_TOKEN), settings
        files, then the GITHUB_TOKEN env var.
        """
        if explicit:
            return explicit
        if token := os.getenv("CLUSTERADM_GITHUB_TOKEN"):
            return token
        if token := self.get_github_token():
            return token
        return os.getenv("GITHUB_TOKEN") or None

    def _merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result
