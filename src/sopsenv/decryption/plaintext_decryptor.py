from pathlib import Path

from sopsenv.decryption.provider import Decryptor, Registry
from sopsenv.exceptions import DecryptionFailedError

NAME = "plaintext"


def initialize(registry: Registry):
    instance = PlaintextDecryptor()
    registry.register(instance.name(), instance)


class PlaintextDecryptor(Decryptor):
    """Implements a Decryptor that reads the file as-is. Only for unencrypted files in local development."""

    def name(self) -> str:
        return NAME

    def decrypt(self, path: Path) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as err:
            raise DecryptionFailedError(f"could not read file: {err.strerror}", path=path) from err
