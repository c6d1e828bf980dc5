"""
JSONL logging bootstrap.

One JSON object per line, appended to a single file sink installed early in
CLI startup. Extras passed with ``extra={...}`` become top-level fields.
"""

import logging
import os
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

DEFAULT_PATH = os.environ.get("CLUSTERADM_LOG_PATH", str(Path.home() / ".clusteradm" / "clusteradm.log.jsonl"))
DEFAULT_LEVEL = os.environ.get("CLUSTERADM_LOG_LEVEL", "INFO").upper()

LOG_SCHEMA = {"name": "clusteradm.log", "ver": "1.0.0"}


def jsonl_formatter() -> JsonFormatter:
    return JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"asctime": "ts", "levelname": "lvl", "name": "logger"},
        static_fields={"schema": LOG_SCHEMA},
        json_ensure_ascii=False,
    )


class JsonlHandler(logging.FileHandler):
    """Append-only file handler writing JSONL records."""

    def __init__(self, path: str):
        resolved = Path(path).expanduser()
        resolved.parent.mkdir(parents=True, exist_ok=True)
        # The file is only created once the first record is emitted
        super().__init__(resolved, mode="a", encoding="utf-8", delay=True)
        self.setFormatter(jsonl_formatter())

    @property
    def path(self) -> Path:
        return Path(self.baseFilename)


def init_json_logging(path: str | None = None, level: str | None = None) -> None:
    level_name = (level or DEFAULT_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(logging.getLevelNamesMapping().get(level_name, logging.INFO))

    # A second init switches the sink instead of adding another one
    for handler in list(root.handlers):
        if isinstance(handler, JsonlHandler):
            root.removeHandler(handler)
            handler.close()
    root.addHandler(JsonlHandler(path or DEFAULT_PATH))
