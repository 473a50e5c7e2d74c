"""Bounded probe execution and failure classification."""

import errno
import logging
import socket
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime
from typing import Callable

import paramiko
from paramiko.ssh_exception import NoValidConnectionsError

from ssh_uptime_monitor.models import (
    Credentials,
    ErrorKind,
    ProbeOutcome,
    ProbeResult,
    Target,
    utcnow,
)
from ssh_uptime_monitor.probes.base import BaseProber

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000

# First match wins
ERROR_PATTERNS: list[tuple[ErrorKind, tuple[str, ...]]] = [
    (ErrorKind.TIMEOUT, ("timeout", "timed out")),
    (ErrorKind.AUTH_FAILED, ("authentication", "auth fail")),
    (ErrorKind.HOST_KEY_MISMATCH, ("host key", "hostkey")),
    (ErrorKind.CONNECTION_REFUSED, ("refused", "econnrefused")),
    (ErrorKind.HOST_UNREACHABLE, ("unreachable", "ehostunreach")),
    (ErrorKind.NETWORK_UNREACHABLE, ("network", "enetunreach")),
    (ErrorKind.PERMISSION_DENIED, ("permission denied",)),
    (ErrorKind.NOT_FOUND, ("no such file",)),
]

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.TIMEOUT: "Connection timed out. Please check your network and server address.",
    ErrorKind.AUTH_FAILED: "Authentication failed. Please check your username and password/key.",
    ErrorKind.HOST_KEY_MISMATCH: "Host key verification failed. The server identity could not be verified.",
    ErrorKind.CONNECTION_REFUSED: "Connection refused. The server may be down or SSH is not enabled.",
    ErrorKind.HOST_UNREACHABLE: "Host unreachable. Please check the server address and your network.",
    ErrorKind.NETWORK_UNREACHABLE: "Network error. Please check your internet connection.",
    ErrorKind.PERMISSION_DENIED: "Permission denied. Check file/directory permissions on the server.",
    ErrorKind.NOT_FOUND: "File or directory not found on the server.",
}

ERRNO_KINDS: dict[int, ErrorKind] = {
    errno.ETIMEDOUT: ErrorKind.TIMEOUT,
    errno.ECONNREFUSED: ErrorKind.CONNECTION_REFUSED,
    errno.EHOSTUNREACH: ErrorKind.HOST_UNREACHABLE,
    errno.ENETUNREACH: ErrorKind.NETWORK_UNREACHABLE,
}


def _kind_from_type(error: BaseException) -> ErrorKind | None:
    if isinstance(error, paramiko.BadHostKeyException):
        return ErrorKind.HOST_KEY_MISMATCH
    if isinstance(error, paramiko.AuthenticationException):
        return ErrorKind.AUTH_FAILED
    if isinstance(error, (socket.timeout, TimeoutError, FutureTimeoutError)):
        return ErrorKind.TIMEOUT
    if isinstance(error, ConnectionRefusedError):
        return ErrorKind.CONNECTION_REFUSED
    if isinstance(error, NoValidConnectionsError):
        # paramiko wraps one socket error per resolved address; errno is None
        for inner in error.errors.values():
            kind = _kind_from_type(inner)
            if kind is not None:
                return kind
        return None
    if isinstance(error, OSError):
        return ERRNO_KINDS.get(error.errno)
    return None


def classify_message(message: str) -> tuple[ErrorKind, str]:
    """Map a raw error message to a kind and a user-facing explanation."""
    lowered = message.lower()
    for kind, needles in ERROR_PATTERNS:
        if any(needle in lowered for needle in needles):
            return kind, ERROR_MESSAGES[kind]
    return ErrorKind.UNCLASSIFIED, message


def classify_error(error: BaseException | str) -> tuple[ErrorKind, str]:
    """Classify an exception (or bare message) raised while probing.

    Returns:
        Tuple of (kind, human-readable detail).
    """
    if isinstance(error, str):
        return classify_message(error)

    kind = _kind_from_type(error)
    if kind is not None:
        return kind, ERROR_MESSAGES[kind]

    message = str(error) or type(error).__name__
    return classify_message(message)


class ProbeExecutor:
    """Run a prober with a hard deadline and report the outcome as data.

    check() never raises: timeouts, exceptions and negative answers all come
    back as a failed ProbeResult.
    """

    def __init__(
        self,
        prober: BaseProber,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self.prober = prober
        self.timeout_ms = timeout_ms
        self._clock = clock
        self._now = now

    def check(
        self,
        target: Target,
        credentials: Credentials,
        timeout_ms: int | None = None,
    ) -> ProbeResult:
        """Probe a target once.

        Args:
            target: Target to probe.
            credentials: Resolved secrets for the target.
            timeout_ms: Deadline override in milliseconds.

        Returns:
            ProbeResult; response_time_ms is set only on success.
        """
        timeout_ms = self.timeout_ms if timeout_ms is None else timeout_ms
        timeout_s = timeout_ms / 1000
        started_at = self._now()
        start = self._clock()

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"probe-{target.id}")
        try:
            future = executor.submit(
                self.prober.check_connection, target, credentials, timeout_s
            )
            connected = future.result(timeout=timeout_s)
        except FutureTimeoutError:
            logger.info(f"Probe of {target.id} exceeded {timeout_ms}ms")
            return self._failure(started_at, ErrorKind.TIMEOUT, ERROR_MESSAGES[ErrorKind.TIMEOUT])
        except Exception as e:
            kind, detail = classify_error(e)
            logger.info(f"Probe of {target.id} failed ({kind.value}): {e}")
            return self._failure(started_at, kind, detail)
        finally:
            # Don't block on a hung connect; the worker thread is abandoned
            executor.shutdown(wait=False)

        if not connected:
            logger.info(f"Probe of {target.id} could not establish a session")
            return self._failure(started_at, ErrorKind.HOST_UNREACHABLE, "Connection failed")

        elapsed_ms = max(0, int(round((self._clock() - start) * 1000)))
        logger.debug(f"Probe of {target.id} succeeded in {elapsed_ms}ms")
        return ProbeResult(
            outcome=ProbeOutcome.SUCCESS,
            response_time_ms=elapsed_ms,
            timestamp=started_at,
        )

    @staticmethod
    def _failure(started_at: datetime, kind: ErrorKind, detail: str) -> ProbeResult:
        return ProbeResult(
            outcome=ProbeOutcome.FAILURE,
            error_kind=kind,
            error_detail=detail,
            timestamp=started_at,
        )
