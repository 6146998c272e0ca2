from __future__ import annotations

import logging
from abc import ABC, ABCMeta, abstractmethod
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, ClassVar, Dict, Mapping, Optional

import ciso8601


log = logging.getLogger(__name__)


class ModelMeta(ABCMeta):
    """
    A metaclass that enforces the presence of required class variables
    on any concrete (non-abstract) subclass of DisplayRow.
    """

    def __new__(mcs, name, bases, dct) -> ModelMeta:
        cls = super().__new__(mcs, name, bases, dct)

        # Abstract bases list abc.ABC directly in their bases.
        if any(b is ABC for b in bases):
            return cls

        required_attrs = [
            "kind",
            "plural",
            "display_name",
            "namespaced",
            "api_info",
        ]

        for attr in required_attrs:
            if not hasattr(cls, attr):
                raise TypeError(
                    f"Class '{name}' is missing required class variable '{attr}'. "
                    f"All KubeConsole row models must define these attributes."
                )
        return cls


@dataclass(frozen=True)
class ApiInfo:
    """A dataclass to hold API client information."""

    client_name: str
    group: str
    version: str


core_v1_api = ApiInfo(
    client_name="CoreV1Api",
    group="",
    version="v1",
)
apps_v1_api = ApiInfo(
    client_name="AppsV1Api",
    group="apps",
    version="v1",
)
rbac_authorization_v1_api = ApiInfo(
    client_name="RbacAuthorizationV1Api",
    group="rbac.authorization.k8s.io",
    version="v1",
)

ALL_APIS: Dict[str, ApiInfo] = {
    api.client_name: api
    for api in [
        core_v1_api,
        apps_v1_api,
        rbac_authorization_v1_api,
    ]
}


def column_field(
    *,
    label: str,
    width: int | None = None,
    index: int | None = None,
) -> Any:
    """Create a field with column metadata cleanly."""
    return field(  # pylint: disable=invalid-field-call
        metadata={
            "column": {
                "label": label,
                "width": width,
                "index": index,
            }
        },
        init=False,
    )


def section(raw: Any, key: str) -> Mapping[str, Any]:
    """Returns a top-level section of a raw resource, or an empty mapping."""
    value = raw.get(key) if isinstance(raw, Mapping) else None
    return value if isinstance(value, Mapping) else {}


def as_count(value: Any) -> int:
    """Coerces a status counter to an int; anything missing or malformed is 0."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@lru_cache(maxsize=1024)
def _parse_timestamp(timestamp: str) -> datetime | None:
    try:
        parsed = ciso8601.parse_datetime(timestamp)
    except ValueError:
        log.debug("Unparsable timestamp: %r", timestamp)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_datetime(timestamp: Any) -> datetime | None:
    """Parses an RFC 3339 timestamp into an aware datetime. Naive values are UTC."""
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=timezone.utc)
        return timestamp
    if not isinstance(timestamp, str) or not timestamp.strip():
        return None
    return _parse_timestamp(timestamp.strip())


def format_datetime_string(ts_str: Any) -> str:
    if not ts_str:
        return "N/A"
    dt_object = to_datetime(ts_str)
    if not dt_object:
        return str(ts_str)
    return dt_object.strftime("%Y-%m-%d %H:%M:%S")


@dataclass(frozen=True)
class DisplayRow(ABC, metaclass=ModelMeta):
    """
    The flat, table-ready projection of a raw Kubernetes resource.

    A row is recomputed from the raw resource on every fetch and is never
    mutated afterwards. Subclasses add kind-specific derived fields.
    """

    # --- Subclasses must define API Metadata (Class-level) ---
    api_info: ClassVar[ApiInfo]
    kind: ClassVar[str]
    plural: ClassVar[str]
    display_name: ClassVar[str]
    namespaced: ClassVar[bool]

    raw: Any = field(repr=False, compare=False)
    uid: Optional[str] = field(init=False)
    name: str = field(
        init=False,
        metadata={
            "column": {
                "label": "Name",
                "index": 0,
                "width": 25,
            }
        },
    )
    namespace: Optional[str] = field(
        default=None,
        init=False,
        metadata={
            "column": {
                "label": "Namespace",
                "index": 1,
                "width": 15,
            }
        },
    )
    creation_timestamp: Optional[str] = field(
        default=None,
        init=False,
        metadata={
            "column": {
                "label": "Creation time",
                "index": 999,
                "width": 19,
            }
        },
    )
    created_at: Optional[datetime] = field(
        default=None, init=False, repr=False, compare=False
    )

    @abstractmethod
    def __init__(self, raw: Any) -> None:
        """Copy the identity fields verbatim from the raw resource's metadata."""
        object.__setattr__(self, "raw", raw)

        metadata = section(raw, "metadata")
        object.__setattr__(self, "uid", metadata.get("uid"))
        object.__setattr__(self, "name", metadata.get("name") or "")
        object.__setattr__(self, "namespace", metadata.get("namespace"))

        creation_timestamp = metadata.get("creationTimestamp")
        object.__setattr__(self, "creation_timestamp", creation_timestamp)
        object.__setattr__(self, "created_at", to_datetime(creation_timestamp))

    @classmethod
    def project(cls, raw: Any) -> DisplayRow:
        """Projects a raw resource into a row of this kind."""
        return cls(raw)

    @classmethod
    @lru_cache(maxsize=32)
    def get_columns(cls) -> list[dict[str, Any]]:
        """
        Inspects the dataclass fields to find columns and their metadata.
        Explicitly indexed columns come first, unindexed ones follow, and an
        index >= 999 places the column at the very end. The namespace column
        is only shown for namespaced kinds.
        """
        start_columns = []
        middle_columns = []
        end_columns = []

        end_index_threshold = 999

        for f in fields(cls):
            if "column" not in f.metadata:
                continue
            if f.name == "namespace" and not cls.namespaced:
                continue
            column_meta = dict(f.metadata["column"])
            column_meta["key"] = f.name

            index = column_meta.get("index")
            if index is None:
                middle_columns.append(column_meta)
            elif index >= end_index_threshold:
                end_columns.append(column_meta)
            else:
                start_columns.append(column_meta)

        start_columns.sort(key=lambda c: c["index"])
        end_columns.sort(key=lambda c: c["index"])

        return start_columns + middle_columns + end_columns

    @classmethod
    def get_column_keys(cls) -> list[str]:
        return [c["key"] for c in cls.get_columns()]

    @property
    def identity(self) -> tuple[Optional[str], str]:
        """The namespace/name pair that addresses this resource in the API."""
        return self.namespace, self.name

    def render_cell(self, column_key: str) -> str:
        """Returns the display text for one column of this row."""
        if column_key == "creation_timestamp":
            return format_datetime_string(self.creation_timestamp)
        value = getattr(self, column_key, None)
        return "" if value is None else str(value)
