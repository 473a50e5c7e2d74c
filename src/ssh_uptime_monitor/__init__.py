"""
SSH Uptime Monitor - Reachability tracking for hosts behind SSH.

Periodically opens an SSH session to each monitored host, keeps a bounded
history of probe outcomes, derives rolling 24h uptime and alerts when a host
goes down or comes back.
"""

__version__ = "1.0.0"

from ssh_uptime_monitor.config import Config, TargetConfig
from ssh_uptime_monitor.models import (
    HealthCheckConfig,
    HealthStatus,
    ProbeRecord,
    Target,
    TargetState,
)
from ssh_uptime_monitor.monitor import HealthMonitor

__all__ = [
    "Config",
    "TargetConfig",
    "HealthCheckConfig",
    "HealthMonitor",
    "HealthStatus",
    "ProbeRecord",
    "Target",
    "TargetState",
]
