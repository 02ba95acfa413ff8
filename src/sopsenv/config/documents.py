"""Parsing of decrypted documents into ordered key/value entries.

Two syntaxes are supported: flat dotenv files (parsed by python-dotenv) and nested YAML or JSON documents (parsed by
PyYAML and flattened into dotted keys such as "storage.psql.host").
"""

import dataclasses
import enum
import io
from pathlib import Path

import yaml
from dotenv.parser import parse_stream
from loguru import logger

from sopsenv.exceptions import ParseFailedError

_NESTED_SUFFIXES = (".yaml", ".yml", ".json")


@dataclasses.dataclass(slots=True, frozen=True)
class RawEntry:
    key: str
    value: str


class DocumentFormat(enum.StrEnum):
    DOTENV = "env"
    YAML = "yaml"

    @classmethod
    def from_path(cls, path: str | Path) -> "DocumentFormat":
        """Infers the format from the file name; config.sops.yaml is YAML, config.sops.env and .env are dotenv."""
        if Path(path).suffix.lower() in _NESTED_SUFFIXES:
            return cls.YAML
        return cls.DOTENV


def decode(plaintext: bytes, *, path: str | Path | None = None) -> str:
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as err:
        raise ParseFailedError(f"document is not valid UTF-8 (byte offset {err.start})", path=path) from err


def parse_dotenv(text: str, *, path: str | Path | None = None, strict: bool = True) -> list[RawEntry]:
    """Parses KEY=VALUE lines. Blank lines and comments are skipped.

    With strict=True a line that is not a binding is an error. With strict=False such lines, and keys without "=",
    are skipped and counted in a warning. Variable interpolation is not performed; values are taken literally.
    """
    entries = []
    skipped = 0
    for binding in parse_stream(io.StringIO(text)):
        if not strict and (binding.error or (binding.key is not None and binding.value is None)):
            skipped += 1
            continue
        if binding.error:
            # original.string is the offending text and may contain a secret, so only the line is reported.
            raise ParseFailedError(f"invalid dotenv syntax on line {binding.original.line}", path=path)
        if binding.key is None:
            continue
        entries.append(RawEntry(binding.key, binding.value if binding.value is not None else ""))
    if skipped:
        logger.warning("Skipped {n} lines that are not KEY=VALUE assignments", n=skipped)
    return entries


def _scalar_to_str(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten(node, prefix: str, out: list[RawEntry], ancestors: frozenset[int], path: str | Path | None):
    if isinstance(node, dict | list):
        # A YAML alias can refer to one of its own ancestors.
        if id(node) in ancestors:
            raise ParseFailedError(f"recursive alias under {prefix or 'the root'}", path=path)
        ancestors = ancestors | {id(node)}
    if isinstance(node, dict):
        for k, v in node.items():
            _flatten(v, f"{prefix}.{k}" if prefix else str(k), out, ancestors, path)
    elif isinstance(node, list):
        for i, v in enumerate(node):
            _flatten(v, f"{prefix}.{i}", out, ancestors, path)
    else:
        out.append(RawEntry(prefix, _scalar_to_str(node)))


def parse_yaml(text: str, *, path: str | Path | None = None) -> list[RawEntry]:
    """Parses a YAML (or JSON) mapping and flattens it into dotted keys, in document order."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as err:
        # The problem snippet may quote document content; report only the position.
        mark = getattr(err, "problem_mark", None)
        where = f" at line {mark.line + 1}, column {mark.column + 1}" if mark is not None else ""
        raise ParseFailedError(f"invalid YAML{where}", path=path) from None
    if document is None:
        return []
    if not isinstance(document, dict):
        raise ParseFailedError(f"top level must be a mapping, not {type(document).__name__}", path=path)
    entries: list[RawEntry] = []
    _flatten(document, "", entries, frozenset(), path)
    return entries


def parse(plaintext: bytes, fmt: DocumentFormat, *, path: str | Path | None = None) -> list[RawEntry]:
    """Parses decrypted bytes in the given format into ordered entries."""
    text = decode(plaintext, path=path)
    match fmt:
        case DocumentFormat.DOTENV:
            return parse_dotenv(text, path=path)
        case DocumentFormat.YAML:
            return parse_yaml(text, path=path)
