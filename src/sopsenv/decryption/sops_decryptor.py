import os
import shutil
import subprocess
from pathlib import Path

from loguru import logger

from sopsenv import constants
from sopsenv.decryption.provider import Decryptor, Registry
from sopsenv.exceptions import DecryptionFailedError, InvalidDecryptorConfigurationError

NAME = "sops"


def _read_timeout() -> float | None:
    raw = os.environ.get(constants.ENV_SOPSENV_DECRYPT_TIMEOUT, "").strip()
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError as err:
        raise InvalidDecryptorConfigurationError(
            f"{constants.ENV_SOPSENV_DECRYPT_TIMEOUT} must be a number of seconds"
        ) from err
    if timeout <= 0:
        raise InvalidDecryptorConfigurationError(f"{constants.ENV_SOPSENV_DECRYPT_TIMEOUT} must be positive")
    return timeout


def initialize(registry: Registry):
    binary = os.environ.get(constants.ENV_SOPSENV_SOPS_BINARY) or constants.DEFAULT_SOPS_BINARY
    instance = SopsDecryptor(binary=binary, timeout=_read_timeout())
    registry.register(instance.name(), instance)


class SopsDecryptor(Decryptor):
    """Decrypts files by running `sops -d`.

    sops writes the plaintext to stdout. Its stderr only ever describes the failure (missing keys, MAC mismatch) and
    is safe to surface in error messages.
    """

    def __init__(self, binary: str = constants.DEFAULT_SOPS_BINARY, timeout: float | None = None):
        self.binary = binary
        self.timeout = timeout

    def name(self) -> str:
        return NAME

    def decrypt(self, path: Path) -> bytes:
        executable = shutil.which(self.binary)
        if executable is None:
            raise DecryptionFailedError(f"sops executable not found: {self.binary}", path=path)
        logger.debug("Running {binary} -d on {path}", binary=executable, path=path)
        try:
            proc = subprocess.run(
                [executable, "-d", str(path)],
                capture_output=True,
                check=False,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as err:
            raise DecryptionFailedError(f"sops did not finish within {self.timeout}s", path=path) from err
        except OSError as err:
            raise DecryptionFailedError(f"could not run {self.binary}: {err.strerror}", path=path) from err

        if proc.returncode != 0:
            stderr = (proc.stderr or b"").decode("utf-8", errors="replace").strip()
            raise DecryptionFailedError(f"sops exited with status {proc.returncode}: {stderr}", path=path)
        return proc.stdout
