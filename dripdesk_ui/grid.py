# dripdesk_ui/grid.py
"""
Generic sortable data grid.

The grid borrows a caller-owned sequence of records and a list of column
descriptors, keeps its own sort state, and reports row actions back to the
caller through callbacks. It never mutates records and never does I/O.
"""

import datetime
import functools
import json
import locale
import math
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Mapping, Optional, Sequence, TypeVar, Union

import pandas as pd

T = TypeVar("T")

ACTION_NAMES = ("edit", "duplicate", "delete")


class GridConfigError(ValueError):
    """Raised when the grid is built or driven with an invalid configuration."""


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class SortState:
    key: Optional[str] = None
    direction: SortDirection = SortDirection.ASC


DEFAULT_SORT = SortState("updated_at", SortDirection.DESC)


@dataclass(frozen=True)
class Column(Generic[T]):
    """
    Describes one grid column.
    `accessor` reads the field from a record; without it the value is looked up by `key`.
    """
    key: str
    header: str
    sortable: bool = True
    render: Optional[Callable[[T], Any]] = None
    actions: bool = False
    accessor: Optional[Callable[[T], Any]] = None

    def value(self, record: T) -> Any:
        if self.accessor is not None:
            return self.accessor(record)
        return lookup_field(record, self.key)


@dataclass(frozen=True)
class GridLabels:
    yes: str = "Yes"
    no: str = "No"
    empty: str = "No data available."
    edit: str = "Edit"
    duplicate: str = "Duplicate"
    delete: str = "Delete"

    def action(self, name: str) -> str:
        return getattr(self, name)


@dataclass(frozen=True)
class HeaderView:
    key: str
    label: str
    sortable: bool
    indicator: str = ""


@dataclass(frozen=True)
class CellView:
    key: str
    content: Any
    actions: tuple = ()


@dataclass(frozen=True)
class RowView(Generic[T]):
    index: int
    record: T
    cells: tuple = ()

    def cell(self, key: str) -> CellView:
        return next(c for c in self.cells if c.key == key)


@dataclass(frozen=True)
class GridView:
    headers: tuple
    rows: tuple


@dataclass(frozen=True)
class EmptyGrid:
    message: str


# --- Value helpers ---

def lookup_field(record: Any, key: str) -> Any:
    """Reads `key` from a mapping or an attribute-bearing record. Missing fields read as None."""
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_date(value: str) -> Optional[datetime.datetime]:
    """Parses an ISO-8601 date or datetime string, returning None for anything else."""
    text = value.strip()
    if len(text) < 8 or not text[:4].isdigit():
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.datetime.combine(datetime.date.fromisoformat(text), datetime.time())
        except ValueError:
            return None
    return parsed


def _as_instant(value: Union[datetime.date, datetime.datetime]) -> datetime.datetime:
    if not isinstance(value, datetime.datetime):
        value = datetime.datetime.combine(value, datetime.time())
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def fold_text(text: str) -> str:
    """'Émile' -> 'emile': accents stripped after NFKD decomposition, then case-folded."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def collate(a: str, b: str) -> int:
    """
    Locale-aware string comparison.
    Accent- and case-insensitive first, so a C/POSIX collation locale still orders 'Émile' before 'Zoe';
    then case-insensitive with accents; raw text breaks the remaining ties.
    """
    for key in (fold_text, str.casefold):
        order = _cmp(locale.strxfrm(key(a)), locale.strxfrm(key(b)))
        if order:
            return order
    return _cmp(locale.strxfrm(a), locale.strxfrm(b))


def compare_values(a: Any, b: Any) -> int:
    """
    Ascending comparator used for every sort.
    Missing values come first, then numbers numerically, date strings as instants,
    and everything else by locale-aware collation of its text.
    """
    a_missing, b_missing = is_missing(a), is_missing(b)
    if a_missing or b_missing:
        return _cmp(not a_missing, not b_missing)

    if _is_number(a) and _is_number(b):
        return _cmp(a, b)

    if isinstance(a, str) and isinstance(b, str):
        date_a, date_b = parse_date(a), parse_date(b)
        if date_a is not None and date_b is not None:
            return _cmp(_as_instant(date_a), _as_instant(date_b))
        # Hyphenated identifiers fall through to plain collation.
        return collate(a, b)

    if isinstance(a, datetime.date) and isinstance(b, datetime.date):
        return _cmp(_as_instant(a), _as_instant(b))

    return collate(str(a), str(b))


def sort_records(records: Sequence[T], state: SortState,
                 accessor: Optional[Callable[[T], Any]] = None) -> list:
    """Returns a new, stably ordered list. The input sequence is left untouched."""
    if state.key is None:
        return list(records)
    read = accessor or (lambda record: lookup_field(record, state.key))
    key = functools.cmp_to_key(lambda x, y: compare_values(read(x), read(y)))
    return sorted(records, key=key, reverse=state.direction is SortDirection.DESC)


# --- The grid ---

class DataGrid(Generic[T]):
    """Sortable table over caller-owned records with an optional row-action cluster."""

    def __init__(
        self,
        data: Optional[Sequence[T]],
        columns: Sequence[Column],
        on_edit: Optional[Callable[[T], None]] = None,
        on_duplicate: Optional[Callable[[T], None]] = None,
        on_delete: Optional[Callable[[T], None]] = None,
        on_open: Optional[Callable[[T], None]] = None,
        sort: SortState = DEFAULT_SORT,
        labels: GridLabels = GridLabels(),
    ):
        if not columns:
            raise GridConfigError("A grid needs at least one column.")
        keys = [column.key for column in columns]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise GridConfigError(f"Duplicate column keys: {', '.join(duplicates)}")

        self._columns = tuple(columns)
        self._callbacks = {"edit": on_edit, "duplicate": on_duplicate, "delete": on_delete}
        self._on_open = on_open
        self.labels = labels
        self.sort_state = sort
        self._data: tuple = ()
        self.set_data(data)

    @property
    def columns(self) -> tuple:
        return self._columns

    @property
    def data(self) -> tuple:
        return self._data

    def set_data(self, data: Optional[Sequence[T]]) -> None:
        self._data = tuple(data or ())

    def column(self, key: str) -> Optional[Column]:
        return next((c for c in self._columns if c.key == key), None)

    @property
    def supplied_actions(self) -> tuple:
        return tuple(name for name in ACTION_NAMES if self._callbacks[name] is not None)

    def click_header(self, key: str) -> SortState:
        column = self.column(key)
        if column is None or not column.sortable:
            return self.sort_state
        if self.sort_state.key == key:
            self.sort_state = SortState(key, self.sort_state.direction.toggled())
        else:
            self.sort_state = SortState(key, SortDirection.ASC)
        return self.sort_state

    def rows(self) -> tuple:
        column = self.column(self.sort_state.key) if self.sort_state.key else None
        accessor = column.value if column is not None else None
        return tuple(sort_records(self._data, self.sort_state, accessor))

    def format_cell(self, column: Column, record: T) -> Any:
        if column.render is not None:
            return column.render(record)
        value = column.value(record)
        if isinstance(value, bool):
            return self.labels.yes if value else self.labels.no
        if is_missing(value):
            return ""
        if isinstance(value, (dict, list, tuple)):
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
        return str(value)

    def _indicator(self, column: Column) -> str:
        if self.sort_state.key != column.key:
            return ""
        return "▲" if self.sort_state.direction is SortDirection.ASC else "▼"

    def render(self) -> Union[GridView, EmptyGrid]:
        if not self._data:
            return EmptyGrid(self.labels.empty)

        headers = tuple(
            HeaderView(c.key, c.header, c.sortable, self._indicator(c)) for c in self._columns
        )
        actions = self.supplied_actions
        rows = []
        for index, record in enumerate(self.rows()):
            cells = tuple(
                CellView(c.key, self.format_cell(c, record), actions if c.actions else ())
                for c in self._columns
            )
            rows.append(RowView(index, record, cells))
        return GridView(headers, tuple(rows))

    def record_at(self, row_index: int) -> T:
        rows = self.rows()
        if not 0 <= row_index < len(rows):
            raise IndexError(f"Row {row_index} is out of range ({len(rows)} rows).")
        return rows[row_index]

    def trigger(self, action: str, row_index: int) -> T:
        """Runs one row action. Row navigation is never triggered from here."""
        callback = self._callbacks.get(action)
        if callback is None:
            raise GridConfigError(f"No '{action}' action is available on this grid.")
        record = self.record_at(row_index)
        callback(record)
        return record

    def click_cell(self, row_index: int, key: str) -> T:
        """Row navigation. A click landing on the action column selects the row but does not navigate."""
        record = self.record_at(row_index)
        column = self.column(key)
        if column is not None and column.actions and self.supplied_actions:
            return record
        if self._on_open is not None:
            self._on_open(record)
        return record


def to_dataframe(view: Union[GridView, EmptyGrid], labels: GridLabels = GridLabels()) -> pd.DataFrame:
    """Flattens a rendered grid into a DataFrame for display in `gr.DataFrame`."""
    if isinstance(view, EmptyGrid):
        return pd.DataFrame()

    columns = [f"{h.label} {h.indicator}".rstrip() for h in view.headers]
    rows = []
    for row in view.rows:
        values = []
        for cell in row.cells:
            text = "" if cell.content is None else str(cell.content)
            if cell.actions:
                cluster = " | ".join(labels.action(name) for name in cell.actions)
                text = f"{text} [{cluster}]" if text else f"[{cluster}]"
            values.append(text)
        rows.append(values)
    return pd.DataFrame(rows, columns=columns)
