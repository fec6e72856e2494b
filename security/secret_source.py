"""
Secret lookup.

Credentials, keys and connection strings come only from the environment,
an optional .env file, or a caller-supplied mapping (e.g. a secret store
client). There is no literal fallback for a required secret.
"""

import logging
import os
from typing import Mapping, Optional

from dotenv import dotenv_values

from app.exceptions import MissingConfigError

logger = logging.getLogger("mealplanner.security.secrets")


class SecretSource:
    """Read-only key -> value lookup over an injected provider."""

    def __init__(self, provider: Mapping[str, str]):
        self._provider = provider

    @classmethod
    def from_environment(cls, env_file: Optional[str] = None) -> "SecretSource":
        """
        Build a source from os.environ, layered over an optional .env file.

        Process environment wins over the file. The values are copied, so later
        changes to os.environ are not observed by this instance.
        """
        values: dict[str, str] = {}
        if env_file and os.path.isfile(env_file):
            values.update(
                {k: v for k, v in dotenv_values(env_file).items() if v is not None}
            )
        values.update(os.environ)
        return cls(values)

    def get(
        self, name: str, required: bool = True, default: Optional[str] = None
    ) -> Optional[str]:
        """
        Resolve a secret by name.

        Args:
            name: Key to look up
            required: Fail fast with MissingConfigError when the key is unset or blank
            default: Returned for an optional key that is unset

        Raises:
            MissingConfigError: required key is absent
        """
        value = self._provider.get(name)
        if value is None or not str(value).strip():
            if required:
                logger.error("Required secret %s is not configured", name)
                raise MissingConfigError(name)
            return default
        return value

    def __contains__(self, name: str) -> bool:
        value = self._provider.get(name)
        return value is not None and bool(str(value).strip())
