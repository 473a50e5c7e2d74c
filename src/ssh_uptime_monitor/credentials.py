"""Credential resolution for monitored targets."""

import logging
import os
from abc import ABC, abstractmethod

from ssh_uptime_monitor.config import Config
from ssh_uptime_monitor.models import Credentials

logger = logging.getLogger(__name__)


class CredentialsError(ValueError):
    """Raised when a credential set cannot be used to authenticate."""


def validate_credentials(credentials: Credentials) -> None:
    """Check that credentials carry something to authenticate with.

    Raises:
        CredentialsError: If neither a password nor a key is present, or an
            inline key does not look like a private key.
    """
    if not credentials.password and not credentials.private_key and not credentials.key_file:
        raise CredentialsError("Either a password or a private key is required")

    if credentials.private_key:
        key = credentials.private_key
        if "BEGIN" not in key or "PRIVATE KEY" not in key:
            raise CredentialsError("Private key is not in PEM/OpenSSH format")


class BaseCredentialStore(ABC):
    """Abstract source of per-target secrets."""

    @abstractmethod
    def get_credentials(self, target_id: str) -> Credentials | None:
        """Return usable credentials for target_id, or None."""
        ...


class ConfigCredentialStore(BaseCredentialStore):
    """Resolve credentials from the YAML config and environment variables."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def get_credentials(self, target_id: str) -> Credentials | None:
        target = self.config.get_target(target_id)
        if target is None:
            return None

        password = target.password
        if target.password_env:
            password = os.environ.get(target.password_env, password)

        credentials = Credentials(
            password=password,
            key_file=target.key_file,
            passphrase=target.passphrase,
        )
        try:
            validate_credentials(credentials)
        except CredentialsError as e:
            logger.warning(f"Unusable credentials for {target_id}: {e}")
            return None
        return credentials


class StaticCredentialStore(BaseCredentialStore):
    """Credentials held in memory, keyed by target id."""

    def __init__(self, credentials: dict[str, Credentials] | None = None) -> None:
        self._credentials = dict(credentials or {})

    def set_credentials(self, target_id: str, credentials: Credentials) -> None:
        validate_credentials(credentials)
        self._credentials[target_id] = credentials

    def delete_credentials(self, target_id: str) -> None:
        self._credentials.pop(target_id, None)

    def get_credentials(self, target_id: str) -> Credentials | None:
        return self._credentials.get(target_id)
