"""Liveness probes for monitored targets."""

from ssh_uptime_monitor.probes.base import BaseProber
from ssh_uptime_monitor.probes.executor import ProbeExecutor, classify_error
from ssh_uptime_monitor.probes.ssh import SSHProber

__all__ = ["BaseProber", "ProbeExecutor", "SSHProber", "classify_error"]
