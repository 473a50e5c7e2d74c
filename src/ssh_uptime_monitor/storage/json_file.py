"""Directory-of-JSON-files key-value store."""

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

from ssh_uptime_monitor.storage.base import BaseStore, StorageError

logger = logging.getLogger(__name__)


class JsonFileStore(BaseStore):
    """Store each key as its own JSON file under a directory.

    Writes go to a temporary sibling file that is then renamed over the
    target, so a crash mid-write leaves the previous value intact.
    """

    SUFFIX = ".json"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def _file_for(self, key: str) -> Path:
        return self.path / f"{quote(key, safe='')}{self.SUFFIX}"

    def get(self, key: str) -> Any | None:
        file_path = self._file_for(key)
        try:
            text = file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt value for {key}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        file_path = self._file_for(key)
        tmp = file_path.with_name(f"{file_path.name}.tmp")
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(value, ensure_ascii=False), encoding="utf-8")
            tmp.replace(file_path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write {key}: {e}") from e
        logger.debug(f"Wrote {key} to {file_path}")

    def delete(self, key: str) -> None:
        try:
            self._file_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {key}: {e}") from e

    def keys(self, prefix: str = "") -> list[str]:
        if not self.path.exists():
            return []
        try:
            names = [
                unquote(p.name[: -len(self.SUFFIX)])
                for p in self.path.iterdir()
                if p.is_file() and p.name.endswith(self.SUFFIX)
            ]
        except OSError as e:
            raise StorageError(f"Failed to list {self.path}: {e}") from e
        return sorted(k for k in names if k.startswith(prefix))
