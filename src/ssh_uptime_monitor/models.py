"""Data models for uptime monitoring."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _parse_time(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_time(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class TargetState(str, Enum):
    """Derived availability of a target."""

    ONLINE = "online"
    OFFLINE = "offline"
    ERROR = "error"
    UNKNOWN = "unknown"


class ProbeOutcome(str, Enum):
    """Result of a single probe attempt."""

    SUCCESS = "success"
    FAILURE = "failure"


class ErrorKind(str, Enum):
    """Classification of a failed probe."""

    TIMEOUT = "timeout"
    AUTH_FAILED = "auth_failed"
    HOST_KEY_MISMATCH = "host_key_mismatch"
    CONNECTION_REFUSED = "connection_refused"
    HOST_UNREACHABLE = "host_unreachable"
    NETWORK_UNREACHABLE = "network_unreachable"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    UNCLASSIFIED = "unclassified"

    @property
    def is_connectivity(self) -> bool:
        """Whether this failure means the host could not be reached at all."""
        return self in (
            ErrorKind.TIMEOUT,
            ErrorKind.CONNECTION_REFUSED,
            ErrorKind.HOST_UNREACHABLE,
            ErrorKind.NETWORK_UNREACHABLE,
        )


class TransitionKind(str, Enum):
    """Kind of status transition a notification reports."""

    FAILURE = "failure"
    RECOVERY = "recovery"


@dataclass
class Target:
    """A remote host reachable over SSH."""

    id: str
    host: str
    username: str
    port: int = 22
    name: str | None = None
    auth_method: str = "password"  # "password" or "key"
    timeout_ms: int | None = None  # Overrides the probe deadline

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass
class Credentials:
    """Resolved secrets for a target."""

    password: str | None = None
    private_key: str | None = None
    key_file: str | None = None
    passphrase: str | None = None

    def __repr__(self) -> str:
        # Never leak secrets into logs
        return (
            f"Credentials(password={'***' if self.password else None}, "
            f"private_key={'***' if self.private_key else None}, "
            f"key_file={self.key_file!r})"
        )


@dataclass
class HealthCheckConfig:
    """Monitoring settings for one target."""

    target_id: str
    interval_minutes: int = 15
    enabled: bool = True
    notify_on_failure: bool = True
    notify_on_recovery: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_id": self.target_id,
            "interval_minutes": self.interval_minutes,
            "enabled": self.enabled,
            "notify_on_failure": self.notify_on_failure,
            "notify_on_recovery": self.notify_on_recovery,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HealthCheckConfig":
        return cls(
            target_id=data["target_id"],
            interval_minutes=int(data.get("interval_minutes", 15)),
            enabled=bool(data.get("enabled", True)),
            notify_on_failure=bool(data.get("notify_on_failure", True)),
            notify_on_recovery=bool(data.get("notify_on_recovery", True)),
        )


@dataclass(frozen=True)
class ProbeRecord:
    """One executed probe, as kept in a target's history."""

    timestamp: datetime
    outcome: ProbeOutcome
    response_time_ms: int | None = None
    error_detail: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == ProbeOutcome.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "outcome": self.outcome.value,
            "response_time_ms": self.response_time_ms,
            "error_detail": self.error_detail,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProbeRecord":
        return cls(
            timestamp=_parse_time(data["timestamp"]),
            outcome=ProbeOutcome(data["outcome"]),
            response_time_ms=data.get("response_time_ms"),
            error_detail=data.get("error_detail"),
        )


@dataclass
class ProbeResult:
    """What the probe executor reports back for a single attempt."""

    outcome: ProbeOutcome
    response_time_ms: int | None = None
    error_kind: ErrorKind | None = None
    error_detail: str | None = None
    timestamp: datetime = field(default_factory=utcnow)

    @property
    def succeeded(self) -> bool:
        return self.outcome == ProbeOutcome.SUCCESS

    @property
    def state(self) -> TargetState:
        """Status a target takes on after this probe."""
        if self.succeeded:
            return TargetState.ONLINE
        if self.error_kind is not None and self.error_kind.is_connectivity:
            return TargetState.OFFLINE
        return TargetState.ERROR

    def to_record(self) -> ProbeRecord:
        if self.succeeded:
            return ProbeRecord(
                timestamp=self.timestamp,
                outcome=self.outcome,
                response_time_ms=self.response_time_ms,
            )
        return ProbeRecord(
            timestamp=self.timestamp,
            outcome=self.outcome,
            error_detail=self.error_detail,
        )


@dataclass
class HealthStatus:
    """Current derived status of a target, replaced on every pass."""

    target_id: str
    status: TargetState = TargetState.UNKNOWN
    last_checked_at: datetime | None = None
    last_online_at: datetime | None = None
    consecutive_failures: int = 0
    uptime_percentage: int = 100
    response_time_ms: int | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_id": self.target_id,
            "status": self.status.value,
            "last_checked_at": _format_time(self.last_checked_at),
            "last_online_at": _format_time(self.last_online_at),
            "consecutive_failures": self.consecutive_failures,
            "uptime_percentage": self.uptime_percentage,
            "response_time_ms": self.response_time_ms,
            "error_message": self.error_message,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HealthStatus":
        return cls(
            target_id=data["target_id"],
            status=TargetState(data.get("status", "unknown")),
            last_checked_at=_parse_time(data.get("last_checked_at")),
            last_online_at=_parse_time(data.get("last_online_at")),
            consecutive_failures=int(data.get("consecutive_failures", 0)),
            uptime_percentage=int(data.get("uptime_percentage", 100)),
            response_time_ms=data.get("response_time_ms"),
            error_message=data.get("error_message"),
        )


@dataclass
class Notification:
    """A user-facing alert the monitor has decided to emit."""

    title: str
    body: str
    kind: TransitionKind
    target_id: str
    status: TargetState

    @property
    def data(self) -> dict[str, Any]:
        """Opaque metadata handed to notification sinks."""
        return {
            "target_id": self.target_id,
            "type": self.kind.value,
            "status": self.status.value,
        }
