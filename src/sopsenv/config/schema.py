"""The configuration schema: one ordered table of every recognised key.

The typed record, the environment allowlist and the presenter's grouping are all derived from SCHEMA, so adding a
configuration value means adding one SchemaField here.
"""

import dataclasses
import enum
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, create_model

from sopsenv.config.documents import RawEntry
from sopsenv.masking.classifier import is_sensitive


class Group(enum.StrEnum):
    """Presentation groups, in display order."""

    DATABASE = "Database Configuration"
    CACHE = "Redis Configuration"
    SECRETS = "API Keys & Secrets"
    OAUTH = "OAuth Credentials"
    SERVICES = "External Services"
    RUNTIME = "Environment Settings"
    KEYS = "Encryption Keys"


@dataclasses.dataclass(slots=True, kw_only=True, frozen=True)
class SchemaField:
    # Flat name, as used in dotenv documents and in the process environment.
    key: str
    # Attribute on ConfigurationRecord.
    attr: str
    group: Group
    converter: Callable[[str], Any] = str
    # Dotted location in nested documents, if the value can appear there.
    path: str | None = None
    # Masks the field even when its name carries no sensitive marker.
    always_mask: bool = False

    @property
    def sensitive(self) -> bool:
        return self.always_mask or is_sensitive(self.key)

    @property
    def zero(self):
        return self.converter()


SCHEMA: tuple[SchemaField, ...] = (
    SchemaField(key="DB_HOST", attr="db_host", group=Group.DATABASE, path="storage.psql.host"),
    SchemaField(key="DB_PORT", attr="db_port", group=Group.DATABASE, converter=int, path="storage.psql.port"),
    SchemaField(key="DB_NAME", attr="db_name", group=Group.DATABASE, path="storage.psql.database"),
    SchemaField(key="DB_USER", attr="db_user", group=Group.DATABASE, path="storage.psql.username"),
    SchemaField(key="DB_PASSWORD", attr="db_password", group=Group.DATABASE, path="storage.psql.password"),
    SchemaField(
        key="DB_MAX_CONNECTIONS",
        attr="db_max_connections",
        group=Group.DATABASE,
        converter=int,
        path="storage.psql.pg_pool_max_conn",
    ),
    # Redis URLs usually embed the password.
    SchemaField(key="REDIS_URL", attr="redis_url", group=Group.CACHE, always_mask=True),
    SchemaField(key="REDIS_ADDR", attr="redis_addr", group=Group.CACHE, path="storage.redis.addr"),
    SchemaField(key="REDIS_PORT", attr="redis_port", group=Group.CACHE, converter=int, path="storage.redis.port"),
    SchemaField(key="REDIS_USERNAME", attr="redis_username", group=Group.CACHE, path="storage.redis.username"),
    SchemaField(key="REDIS_PASSWORD", attr="redis_password", group=Group.CACHE, path="storage.redis.password"),
    SchemaField(key="REDIS_DB", attr="redis_db", group=Group.CACHE, converter=int, path="storage.redis.db"),
    SchemaField(key="JWT_SECRET", attr="jwt_secret", group=Group.SECRETS, path="jwt.auth"),
    SchemaField(key="API_KEY", attr="api_key", group=Group.SECRETS),
    SchemaField(key="STRIPE_SECRET_KEY", attr="stripe_secret_key", group=Group.SECRETS),
    SchemaField(key="SENDGRID_API_KEY", attr="sendgrid_api_key", group=Group.SECRETS),
    SchemaField(key="GOOGLE_CLIENT_ID", attr="google_client_id", group=Group.OAUTH),
    SchemaField(key="GOOGLE_CLIENT_SECRET", attr="google_client_secret", group=Group.OAUTH),
    SchemaField(key="GITHUB_CLIENT_ID", attr="github_client_id", group=Group.OAUTH),
    SchemaField(key="GITHUB_CLIENT_SECRET", attr="github_client_secret", group=Group.OAUTH),
    SchemaField(key="WEBHOOK_URL", attr="webhook_url", group=Group.SERVICES),
    SchemaField(key="NOTIFICATION_SERVICE_URL", attr="notification_service_url", group=Group.SERVICES),
    SchemaField(key="ENVIRONMENT", attr="environment", group=Group.RUNTIME),
    SchemaField(key="DEBUG", attr="debug", group=Group.RUNTIME),
    SchemaField(key="LOG_LEVEL", attr="log_level", group=Group.RUNTIME),
    SchemaField(key="ENCRYPTION_KEY", attr="encryption_key", group=Group.KEYS),
    SchemaField(key="SIGNING_KEY", attr="signing_key", group=Group.KEYS),
)

SCHEMA_BY_KEY: dict[str, SchemaField] = {f.key: f for f in SCHEMA}
SCHEMA_BY_PATH: dict[str, SchemaField] = {f.path: f for f in SCHEMA if f.path is not None}

# Names that are exported to, and displayed from, the process environment.
ENVIRONMENT_ALLOWLIST: tuple[str, ...] = tuple(f.key for f in SCHEMA)

type GroupLayout = tuple[tuple[Group, tuple[SchemaField, ...]], ...]


def default_layout() -> GroupLayout:
    """Returns the schema fields bucketed by Group, in Group order and then schema order."""
    return tuple((group, tuple(f for f in SCHEMA if f.group == group)) for group in Group)


def is_sensitive_field(name: str) -> bool:
    """Classifies a field by flat name or nested path, honoring always_mask for schema fields."""
    field = SCHEMA_BY_KEY.get(name) or SCHEMA_BY_PATH.get(name)
    if field is not None:
        return field.sensitive
    return is_sensitive(name)


def with_flat_keys(entries: Iterable[RawEntry]) -> Iterator[RawEntry]:
    """Yields each entry, plus a copy under the flat schema key when the entry's key is a nested schema path."""
    for entry in entries:
        yield entry
        field = SCHEMA_BY_PATH.get(entry.key)
        if field is not None:
            yield RawEntry(field.key, entry.value)


class RecordBaseModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def value_of(self, field: SchemaField):
        return getattr(self, field.attr)


# Sensitive fields are left out of repr() so a logged record does not leak them.
ConfigurationRecord = create_model(
    "ConfigurationRecord",
    __base__=RecordBaseModel,
    __doc__="Typed configuration produced from one decrypted document. Immutable.",
    **{
        f.attr: (f.converter, Field(default=f.zero, repr=not f.sensitive, description=f.key))
        for f in SCHEMA
    },
)
