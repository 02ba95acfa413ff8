"""Loading of encrypted configuration documents.

Decrypted plaintext is only ever held in memory, in locals of the functions below; nothing is written to disk.
"""

from pathlib import Path

from loguru import logger

from sopsenv.config import documents, environment as env_export, mapper, schema
from sopsenv.config.documents import DocumentFormat, RawEntry
from sopsenv.config.environment import EnvironmentProvider, OsEnvironment
from sopsenv.config.schema import ConfigurationRecord
from sopsenv.decryption import service
from sopsenv.decryption.provider import Decryptor


def _decrypt(path: Path, decryptor: Decryptor | None) -> bytes:
    decryptor = decryptor or service.get_decryptor()
    logger.info("Decrypting {path} with {backend}", path=path, backend=decryptor.name())
    return decryptor.decrypt(path)


def load_entries(
    path: str | Path, *, decryptor: Decryptor | None = None, fmt: DocumentFormat | None = None
) -> list[RawEntry]:
    """Decrypts and parses the document at path.

    :raises DecryptionFailedError: if decryption fails
    :raises ParseFailedError: if the plaintext is not a valid document
    """
    path = Path(path)
    fmt = fmt or DocumentFormat.from_path(path)
    entries = documents.parse(_decrypt(path, decryptor), fmt, path=path)
    logger.info("Parsed {n} entries from {path} ({fmt})", n=len(entries), path=path, fmt=fmt.value)
    return entries


def load_config(
    path: str | Path, *, decryptor: Decryptor | None = None, fmt: DocumentFormat | None = None
) -> ConfigurationRecord:
    """Decrypts, parses and maps the document at path onto a ConfigurationRecord.

    :raises DecryptionFailedError, ParseFailedError, MalformedValueError: no record is produced
    """
    return mapper.map_entries(load_entries(path, decryptor=decryptor, fmt=fmt), path=path)


def load_into_environment(
    path: str | Path,
    *,
    decryptor: Decryptor | None = None,
    environment: EnvironmentProvider | None = None,
    fmt: DocumentFormat | None = None,
) -> int:
    """Decrypts the document at path and exports every entry to the environment. Returns the number exported.

    Every key in the document is exported, including keys that are not in the schema. Dotenv documents are read
    with the same parser as load_config, skipping lines that are not assignments. Nested documents are exported
    under their dotted keys, and schema fields also under their flat names (storage.psql.host is also DB_HOST).

    :raises DecryptionFailedError: if decryption fails
    :raises ParseFailedError: if a nested document or the plaintext encoding is invalid
    :raises EnvironmentWriteFailedError: if the host rejects a variable; earlier variables stay set
    """
    path = Path(path)
    fmt = fmt or DocumentFormat.from_path(path)
    environment = environment or OsEnvironment()
    plaintext = _decrypt(path, decryptor)
    match fmt:
        case DocumentFormat.DOTENV:
            count = env_export.export_lines(documents.decode(plaintext, path=path), environment)
        case DocumentFormat.YAML:
            entries = schema.with_flat_keys(documents.parse(plaintext, fmt, path=path))
            count = env_export.export_all(entries, environment)
    logger.info("Loaded {n} variables from {path} into the environment", n=count, path=path)
    return count
