"""Export of parsed entries into the process environment.

The process environment is process-wide mutable state: variables set here are visible to all later code in the
process and are inherited by child processes, until the process exits. Nothing unsets them. All access goes through
an EnvironmentProvider so that tests can substitute InMemoryEnvironment for os.environ.
"""

import os
from collections.abc import Iterable
from typing import Protocol

from loguru import logger

from sopsenv.config import documents
from sopsenv.config.documents import RawEntry
from sopsenv.exceptions import EnvironmentWriteFailedError


class EnvironmentProvider(Protocol):
    def get(self, name: str) -> str | None:
        """Returns the current value of name, or None if unset."""

    def set(self, name: str, value: str) -> None:
        """Sets name to value, replacing any previous value.

        :raises ValueError or OSError: if the host rejects the name or value
        """


class OsEnvironment(EnvironmentProvider):
    """The real process environment."""

    def get(self, name: str) -> str | None:
        return os.environ.get(name)

    def set(self, name: str, value: str) -> None:
        os.environ[name] = value


class InMemoryEnvironment(EnvironmentProvider):
    """A private environment table, for tests and dry runs."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.table: dict[str, str] = dict(initial or {})

    def get(self, name: str) -> str | None:
        return self.table.get(name)

    def set(self, name: str, value: str) -> None:
        self.table[name] = value


def _apply(environment: EnvironmentProvider, key: str, value: str):
    try:
        environment.set(key, value)
    except (ValueError, OSError) as err:
        raise EnvironmentWriteFailedError(key, err) from None


def export_all(entries: Iterable[RawEntry], environment: EnvironmentProvider) -> int:
    """Sets one environment variable per entry, in order, and returns the number set.

    Keys and values are trimmed and entries with an empty key are skipped. This is not transactional: if the host
    rejects a variable, the ones already set remain set.

    :raises EnvironmentWriteFailedError: if the host rejects a variable
    """
    applied = 0
    for entry in entries:
        key = entry.key.strip()
        if not key:
            continue
        _apply(environment, key, entry.value.strip())
        applied += 1
    logger.debug("Exported {n} variables to the environment", n=applied)
    return applied


def export_lines(text: str, environment: EnvironmentProvider) -> int:
    """Sets environment variables from dotenv text and returns the number set.

    Lines are parsed exactly as for the typed record, so quoting and "export " prefixes agree on both paths. Lines
    that do not parse, and keys without "=", are skipped instead of failing the export.

    :raises EnvironmentWriteFailedError: if the host rejects a variable
    """
    return export_all(documents.parse_dotenv(text, strict=False), environment)
