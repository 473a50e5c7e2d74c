"""Key-value persistence backends."""

from ssh_uptime_monitor.storage.base import BaseStore, StorageError
from ssh_uptime_monitor.storage.json_file import JsonFileStore
from ssh_uptime_monitor.storage.memory import MemoryStore

__all__ = ["BaseStore", "StorageError", "JsonFileStore", "MemoryStore"]
