"""SSH connectivity prober."""

import io
import logging
from pathlib import Path

import paramiko

from ssh_uptime_monitor.models import Credentials, Target
from ssh_uptime_monitor.probes.base import BaseProber

logger = logging.getLogger(__name__)

_KEY_CLASSES = (paramiko.RSAKey, paramiko.ECDSAKey, paramiko.Ed25519Key)


def load_private_key(key_data: str, passphrase: str | None = None) -> paramiko.PKey:
    """Parse PEM/OpenSSH private key text into a paramiko key."""
    last_error: Exception | None = None
    for key_class in _KEY_CLASSES:
        try:
            return key_class.from_private_key(io.StringIO(key_data), password=passphrase or None)
        except paramiko.PasswordRequiredException:
            raise
        except paramiko.SSHException as e:
            last_error = e
    raise paramiko.SSHException(f"Unsupported private key format: {last_error}")


class SSHProber(BaseProber):
    """Check that an SSH session can be opened and authenticated."""

    def __init__(self, known_hosts: str | None = None, strict_host_keys: bool = False) -> None:
        """Initialize SSH prober.

        Args:
            known_hosts: Optional known_hosts file to load host keys from.
            strict_host_keys: Reject hosts missing from known_hosts instead of
                accepting them on first sight.
        """
        self.known_hosts = known_hosts
        self.strict_host_keys = strict_host_keys

    def _build_client(self) -> paramiko.SSHClient:
        client = paramiko.SSHClient()
        client.load_system_host_keys()
        if self.known_hosts:
            client.load_host_keys(str(Path(self.known_hosts).expanduser()))
        if self.strict_host_keys:
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        return client

    def _connect_kwargs(self, target: Target, credentials: Credentials, timeout: float) -> dict:
        connect_kwargs = {
            "hostname": target.host,
            "port": target.port,
            "username": target.username,
            "timeout": timeout,
            "banner_timeout": timeout,
            "auth_timeout": timeout,
            "allow_agent": False,
            "look_for_keys": False,
        }

        if target.auth_method == "key":
            if credentials.private_key:
                connect_kwargs["pkey"] = load_private_key(
                    credentials.private_key, credentials.passphrase
                )
            elif credentials.key_file:
                connect_kwargs["key_filename"] = str(Path(credentials.key_file).expanduser())
                if credentials.passphrase:
                    connect_kwargs["passphrase"] = credentials.passphrase
            else:
                raise paramiko.AuthenticationException(
                    "Private key is required for key authentication"
                )
        else:
            if not credentials.password:
                raise paramiko.AuthenticationException(
                    "Password is required for password authentication"
                )
            connect_kwargs["password"] = credentials.password

        return connect_kwargs

    def check_connection(self, target: Target, credentials: Credentials, timeout: float) -> bool:
        client = self._build_client()
        try:
            client.connect(**self._connect_kwargs(target, credentials, timeout))
            transport = client.get_transport()
            active = bool(transport and transport.is_active())
            logger.debug(f"SSH session to {target.host}:{target.port} active={active}")
            return active
        finally:
            client.close()
