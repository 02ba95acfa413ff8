from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from sopsenv.config.documents import RawEntry
from sopsenv.config.schema import SCHEMA, ConfigurationRecord, SchemaField
from sopsenv.exceptions import MalformedValueError


def _lookup(field: SchemaField, values: dict[str, str]) -> str | None:
    if field.key in values:
        return values[field.key]
    if field.path is not None and field.path in values:
        return values[field.path]
    return None


def _convert(field: SchemaField, raw: str, path: str | Path | None):
    if field.converter is str:
        return raw
    raw = raw.strip()
    if not raw:
        return field.zero
    # int() also accepts signs, underscores and non-ASCII digits; ports and counts are plain decimals.
    if field.converter is int and not (raw.isascii() and raw.isdigit()):
        raise MalformedValueError(field.key, field.converter.__name__, path=path)
    try:
        return field.converter(raw)
    except ValueError:
        # Not chained: the ValueError message quotes the value.
        raise MalformedValueError(field.key, field.converter.__name__, path=path) from None


def map_entries(entries: Iterable[RawEntry], *, path: str | Path | None = None) -> ConfigurationRecord:
    """Projects parsed entries onto SCHEMA.

    Each field is looked up by its flat key and then by its nested path. Missing keys leave the field at its zero
    value. Keys that are not in the schema are ignored.

    :raises MalformedValueError: if a numeric field holds a value that is not an integer
    """
    # Later duplicates win.
    values = {e.key: e.value for e in entries}
    fields = {}
    recognized: set[str] = set()
    for field in SCHEMA:
        raw = _lookup(field, values)
        if raw is None:
            continue
        recognized.update(k for k in (field.key, field.path) if k in values)
        fields[field.attr] = _convert(field, raw, path)

    ignored = sorted(values.keys() - recognized)
    if ignored:
        logger.debug("Ignoring {n} keys not in the schema: {keys}", n=len(ignored), keys=", ".join(ignored))
    return ConfigurationRecord(**fields)
