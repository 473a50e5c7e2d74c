"""In-process key-value store."""

import copy
from typing import Any

from ssh_uptime_monitor.storage.base import BaseStore


class MemoryStore(BaseStore):
    """Keep values in a dict. Used for tests and dry runs."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        # Hand out copies so callers can't mutate stored state
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))
