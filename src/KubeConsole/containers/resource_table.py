from __future__ import annotations
import logging
from typing import Sequence, Type

from rich.text import Text
from textual.widgets import DataTable

from KubeConsole.models.base import DisplayRow


log = logging.getLogger(__name__)


def row_key(row: DisplayRow) -> str:
    """The uid when the API reported one, otherwise the namespace/name pair."""
    return row.uid or f"{row.namespace or ''}/{row.name}"


class ResourceTable(DataTable):
    """A data table that displays projected rows of one resource kind."""

    DEFAULT_CSS = """
    ResourceTable {
        height: 1fr;
        width: 100%;
        background: transparent;
        color: $text;
        border: round $primary;
    }
    ResourceTable > .datatable--header {
        color: $primary;
        text-style: bold;
    }
    """

    def __init__(self, model_class: Type[DisplayRow], *, id: str | None = None) -> None:
        super().__init__(cursor_type="row", zebra_stripes=True, id=id)
        self._model_class = model_class
        self._rows_by_key: dict[str, DisplayRow] = {}
        self._columns_meta = model_class.get_columns()
        for column in self._columns_meta:
            self.add_column(column["label"], width=column.get("width"), key=column["key"])

    @property
    def model_class(self) -> Type[DisplayRow]:
        return self._model_class

    def row_for_key(self, key: str | None) -> DisplayRow | None:
        if key is None:
            return None
        return self._rows_by_key.get(key)

    def set_rows(self, rows: Sequence[DisplayRow]) -> None:
        """Replaces every displayed row with the given ones, keeping their order."""
        self.clear()
        self._rows_by_key = {}
        for row in rows:
            key = row_key(row)
            if key in self._rows_by_key:
                log.warning("Duplicate row key %s, skipping", key)
                continue
            self._rows_by_key[key] = row
            self.add_row(
                *(Text(row.render_cell(c["key"])) for c in self._columns_meta),
                key=key,
            )
        log.debug("Rendered %d %s rows", len(self._rows_by_key), self._model_class.kind)
