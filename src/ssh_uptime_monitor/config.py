"""Configuration management for SSH Uptime Monitor."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ssh_uptime_monitor.models import Target


class ConfigError(ValueError):
    """Raised for invalid configuration files."""


@dataclass
class TargetConfig:
    """A monitored host and where its credentials come from."""

    id: str
    host: str
    username: str
    port: int = 22
    name: str | None = None
    auth_method: str = "password"  # "password" or "key"
    key_file: str | None = None
    password: str | None = None
    password_env: str | None = None  # Read the password from this variable
    passphrase: str | None = None
    timeout_ms: int | None = None

    @classmethod
    def from_dict(cls, target_id: str, data: dict[str, Any]) -> "TargetConfig":
        if not isinstance(data, dict):
            raise ConfigError(f"Target '{target_id}' must be a mapping")
        missing = [k for k in ("host", "username") if not data.get(k)]
        if missing:
            raise ConfigError(f"Target '{target_id}' is missing {', '.join(missing)}")

        auth_method = data.get("auth_method", "key" if data.get("key_file") else "password")
        if auth_method not in ("password", "key"):
            raise ConfigError(f"Target '{target_id}' has unknown auth_method: {auth_method}")

        timeout_ms = data.get("timeout_ms")
        if timeout_ms is not None:
            try:
                timeout_ms = int(timeout_ms)
            except (TypeError, ValueError):
                raise ConfigError(f"Target '{target_id}' has invalid timeout_ms: {timeout_ms!r}")
            if timeout_ms < 1:
                raise ConfigError(f"Target '{target_id}' timeout_ms must be positive")

        return cls(
            id=target_id,
            host=data["host"],
            username=data["username"],
            port=int(data.get("port", 22)),
            name=data.get("name"),
            auth_method=auth_method,
            key_file=data.get("key_file"),
            password=data.get("password"),
            password_env=data.get("password_env"),
            passphrase=data.get("passphrase"),
            timeout_ms=timeout_ms,
        )

    def to_target(self) -> Target:
        return Target(
            id=self.id,
            host=self.host,
            username=self.username,
            port=self.port,
            name=self.name,
            auth_method=self.auth_method,
            timeout_ms=self.timeout_ms,
        )


@dataclass
class StorageConfig:
    """Where monitoring state is persisted."""

    path: str = "~/.local/share/sshmon"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StorageConfig":
        return cls(path=data.get("path", "~/.local/share/sshmon"))


@dataclass
class NotifierConfig:
    """Configuration for alert notifiers."""

    telegram: dict[str, Any] | None = None
    slack: dict[str, Any] | None = None
    webhook: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NotifierConfig":
        return cls(
            telegram=data.get("telegram"),
            slack=data.get("slack"),
            webhook=data.get("webhook"),
        )


@dataclass
class Config:
    """Main configuration for SSH Uptime Monitor."""

    targets: list[TargetConfig] = field(default_factory=list)
    storage: StorageConfig = field(default_factory=StorageConfig)
    notifiers: NotifierConfig = field(default_factory=NotifierConfig)
    probe_timeout_ms: int = 5000
    history_limit: int = 1000
    history_page_size: int = 100
    check_interval: int = 15  # minutes
    known_hosts: str | None = None
    strict_host_keys: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create configuration from dictionary."""
        targets = []
        for target_id, target_data in (data.get("targets") or {}).items():
            targets.append(TargetConfig.from_dict(str(target_id), target_data))

        return cls(
            targets=targets,
            storage=StorageConfig.from_dict(data.get("storage") or {}),
            notifiers=NotifierConfig.from_dict(data.get("notifiers") or {}),
            probe_timeout_ms=int(data.get("probe_timeout_ms", 5000)),
            history_limit=int(data.get("history_limit", 1000)),
            history_page_size=int(data.get("history_page_size", 100)),
            check_interval=int(data.get("check_interval", 15)),
            known_hosts=data.get("known_hosts"),
            strict_host_keys=bool(data.get("strict_host_keys", False)),
            log_level=data.get("log_level", "INFO"),
        )

    def get_target(self, target_id: str) -> TargetConfig | None:
        """Get target by id."""
        for target in self.targets:
            if target.id == target_id:
                return target
        return None

    def resolve_target(self, target_id: str) -> Target | None:
        target = self.get_target(target_id)
        return target.to_target() if target else None

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self._to_dict()
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def _to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        targets_dict = {}
        for target in self.targets:
            target_data: dict[str, Any] = {
                "host": target.host,
                "port": target.port,
                "username": target.username,
                "auth_method": target.auth_method,
            }
            if target.name:
                target_data["name"] = target.name
            if target.key_file:
                target_data["key_file"] = target.key_file
            if target.password_env:
                target_data["password_env"] = target.password_env
            if target.timeout_ms is not None:
                target_data["timeout_ms"] = target.timeout_ms
            # Inline passwords are never written back out
            targets_dict[target.id] = target_data

        data: dict[str, Any] = {
            "targets": targets_dict,
            "storage": {"path": self.storage.path},
            "probe_timeout_ms": self.probe_timeout_ms,
            "history_limit": self.history_limit,
            "history_page_size": self.history_page_size,
            "check_interval": self.check_interval,
            "strict_host_keys": self.strict_host_keys,
            "log_level": self.log_level,
        }
        if self.known_hosts:
            data["known_hosts"] = self.known_hosts
        return data


def create_example_config() -> Config:
    """Create an example configuration for documentation."""
    return Config(
        targets=[
            TargetConfig(
                id="web-1",
                name="Web Server 1",
                host="192.168.1.10",
                username="admin",
                auth_method="key",
                key_file="~/.ssh/id_ed25519",
            ),
            TargetConfig(
                id="db-1",
                name="Database",
                host="192.168.1.20",
                port=2222,
                username="admin",
                auth_method="password",
                password_env="SSHMON_DB1_PASSWORD",
            ),
            TargetConfig(
                id="nas",
                host="nas.local",
                username="backup",
                auth_method="key",
                key_file="~/.ssh/nas_key",
            ),
        ],
        check_interval=15,
    )
