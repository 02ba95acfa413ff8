"""Errors raised while loading secret configuration.

Every error carries the operation that failed and the path being loaded. Messages must never include decrypted
values; only key names, paths and the underlying cause.
"""

from pathlib import Path


class SecretConfigError(Exception):
    """Base class for failures of a load, export or decrypt operation."""

    operation = "load"

    def __init__(self, message: str, *, path: str | Path | None = None):
        self.path = str(path) if path is not None else None
        self.message = message
        where = f" ({self.path})" if self.path else ""
        super().__init__(f"{self.operation} failed{where}: {message}")


class InvalidDecryptorConfigurationError(SecretConfigError):
    operation = "configure"


class DecryptionFailedError(SecretConfigError):
    operation = "decrypt"


class ParseFailedError(SecretConfigError):
    operation = "parse"


class MalformedValueError(SecretConfigError):
    operation = "map"

    def __init__(self, key: str, expected: str, *, path: str | Path | None = None):
        self.key = key
        super().__init__(f"value of {key} is not a valid {expected}", path=path)


class EnvironmentWriteFailedError(SecretConfigError):
    operation = "export"

    def __init__(self, key: str, cause: Exception):
        self.key = key
        # The cause's text may echo the rejected value, so only its type is kept.
        super().__init__(f"environment rejected variable {key!r} ({type(cause).__name__})")
