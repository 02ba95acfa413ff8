import os
from typing import Optional

from loguru import logger

from sopsenv.constants import ENV_SOPSENV_DECRYPTOR
from sopsenv.decryption import plaintext_decryptor, sops_decryptor
from sopsenv.decryption.provider import Decryptor, Registry
from sopsenv.exceptions import InvalidDecryptorConfigurationError

_DECRYPTOR: Optional[Decryptor] = None


def setup():
    """Configures the process-wide decryptor according to environment variables."""
    global _DECRYPTOR

    registry = Registry()

    sops_decryptor.initialize(registry)
    plaintext_decryptor.initialize(registry)

    registered = registry.get_decryptors()

    backend = os.environ.get(ENV_SOPSENV_DECRYPTOR, sops_decryptor.NAME)
    if backend not in registered:
        raise InvalidDecryptorConfigurationError(
            f"Requested decryptor '{backend}' is not registered (available: {', '.join(registered)})"
        )
    if backend == plaintext_decryptor.NAME:
        logger.warning(
            f"Decryption is disabled because {ENV_SOPSENV_DECRYPTOR} is set to {plaintext_decryptor.NAME}; "
            "files are read as-is."
        )

    logger.debug(f"Using '{backend}' for decryption (available: {', '.join(registered)})")
    _DECRYPTOR = registry.get(backend)


def get_decryptor() -> Decryptor:
    if not _DECRYPTOR:
        raise InvalidDecryptorConfigurationError("setup() must be called before decryption operations")
    return _DECRYPTOR
