from pathlib import Path
from typing import Protocol

from sopsenv.exceptions import InvalidDecryptorConfigurationError


class Decryptor(Protocol):
    """Decryptor turns an encrypted file into plaintext bytes.

    Implementations are trusted and opaque. The path is passed through unmodified.
    """

    def name(self) -> str:
        """Returns a short string identifying this backend."""

    def decrypt(self, path: Path) -> bytes:
        """Decrypts the file at path.

        :arg path: the encrypted document
        :raises DecryptionFailedError: if the backend cannot produce plaintext for any reason
        :returns: plaintext bytes
        """


class Registry:
    """Tracks registration of decryption backends."""

    def __init__(self):
        self.registry: dict[str, Decryptor] = {}

    def get_decryptors(self):
        return list(self.registry.keys())

    def get(self, name: str) -> Decryptor:
        decryptor = self.registry.get(name)
        if not decryptor:
            raise InvalidDecryptorConfigurationError(
                f"decryptor '{name}' is not registered (available: {', '.join(self.get_decryptors())})"
            )
        return decryptor

    def register(self, name: str, instance: Decryptor):
        self.registry[name] = instance
