"""Human-readable rendering of loaded configuration.

Every value passes through the classifier before it is written; sensitive values are masked unless the caller
explicitly asks for reveal=True. Rendering never mutates the record or the environment.
"""

from collections.abc import Callable, Mapping, Sequence

from rich.console import Console

from sopsenv.config.environment import EnvironmentProvider
from sopsenv.config.schema import (
    ENVIRONMENT_ALLOWLIST,
    SCHEMA,
    ConfigurationRecord,
    GroupLayout,
    default_layout,
    is_sensitive_field,
)
from sopsenv.masking.masker import mask

type Classifier = Callable[[str], bool]
type Masker = Callable[[str], str]


def _write(console: Console, text: str = ""):
    # Values are arbitrary text; keep rich from interpreting [brackets] or wrapping long secrets.
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


def display_value(name: str, value, *, classifier: Classifier, masker: Masker, reveal: bool = False) -> str:
    text = str(value)
    if reveal or not classifier(name):
        return text
    return masker(text)


def render_record(
    record: ConfigurationRecord,
    console: Console,
    *,
    classifier: Classifier = is_sensitive_field,
    masker: Masker = mask,
    layout: GroupLayout | None = None,
    reveal: bool = False,
):
    """Writes every field of record, grouped by layout. Empty fields are rendered too."""
    for i, (group, fields) in enumerate(layout or default_layout()):
        if i:
            _write(console)
        _write(console, f"{group}:")
        for field in fields:
            value = display_value(
                field.key, record.value_of(field), classifier=classifier, masker=masker, reveal=reveal
            )
            _write(console, f"  {field.key}: {value}")


def render_environment(
    environment: EnvironmentProvider,
    console: Console,
    *,
    names: Sequence[str] = ENVIRONMENT_ALLOWLIST,
    classifier: Classifier = is_sensitive_field,
    masker: Masker = mask,
    reveal: bool = False,
):
    """Writes the allowlisted variables from the live environment, skipping those that are unset or empty."""
    for name in names:
        value = environment.get(name)
        if not value:
            continue
        _write(console, f"  {name}={display_value(name, value, classifier=classifier, masker=masker, reveal=reveal)}")


def record_values(record: ConfigurationRecord) -> dict[str, str]:
    """Returns the record's fields keyed by their flat names, as strings."""
    return {f.key: str(record.value_of(f)) for f in SCHEMA}


def environment_values(environment: EnvironmentProvider) -> dict[str, str]:
    return {name: environment.get(name) or "" for name in ENVIRONMENT_ALLOWLIST}


def connection_strings(
    values: Mapping[str, str], *, masker: Masker = mask, reveal: bool = False
) -> list[tuple[str, str]]:
    """Builds example connection strings from flat values, with passwords masked.

    A PostgreSQL DSN is produced when DB_HOST is set, and a Redis URL when REDIS_ADDR is set.
    """
    def secret(name: str) -> str:
        value = values.get(name, "")
        return value if reveal else masker(value)

    out = []
    if values.get("DB_HOST"):
        out.append((
            "PostgreSQL DSN",
            f"postgresql://{values.get('DB_USER', '')}:{secret('DB_PASSWORD')}@{values['DB_HOST']}:"
            f"{values.get('DB_PORT', '')}/{values.get('DB_NAME', '')}",
        ))
    if values.get("REDIS_ADDR"):
        out.append((
            "Redis URL",
            f"redis://{values.get('REDIS_USERNAME', '')}:{secret('REDIS_PASSWORD')}@{values['REDIS_ADDR']}:"
            f"{values.get('REDIS_PORT', '')}/{values.get('REDIS_DB', '')}",
        ))
    return out


def render_connection_strings(values: Mapping[str, str], console: Console, *, reveal: bool = False):
    for label, url in connection_strings(values, reveal=reveal):
        _write(console, f"  {label}: {url}")
