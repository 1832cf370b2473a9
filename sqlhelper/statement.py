"""Statement handle and result shaping over a SQLAlchemy result."""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
import pandas as pd
from sqlalchemy import text
from sqlalchemy.engine import Connection, CursorResult
from sql_builder.adapt_sql import adapt_sql
from sql_builder.mappings import conflict_modes

def strip_numeric_keys(row: Optional[Mapping[Any, Any]]) -> Optional[Dict[Any, Any]]:
    """Drop positional (integer) keys from a row mapping, keeping named columns.

    SQLAlchemy mapping rows are already name-only, so on live results this is a no-op.
    """
    if not row:
        return row
    return {k: v for k, v in row.items() if not (isinstance(k, int) and not isinstance(k, bool))}

def key_by_first_column(rows: Iterable[Sequence[Any]], keys: Sequence[str],
                        on_conflict: str = 'overwrite') -> Dict[Any, Dict[str, Any]]:
    """Re-key rows by their first column value.

    With ``on_conflict='overwrite'`` a later row replaces an earlier one sharing
    its first value; ``'raise'`` raises ValueError instead.
    """
    if on_conflict not in conflict_modes:
        raise ValueError(f'Invalid on_conflict: {on_conflict}')
    out: Dict[Any, Dict[str, Any]] = {}
    for row in rows:
        first = row[0]
        if first in out and on_conflict == 'raise':
            raise ValueError(f'Duplicate first-column value: {first!r}')
        out[first] = strip_numeric_keys(dict(zip(keys, row)))
    return out

class Statement:
    """One prepared statement: SQL text, ordered bind values and, once run, its result."""

    def __init__(self, sql: str, params: Sequence[Any] = ()):
        self.sql = sql
        self.params = list(params)
        self.result: Optional[CursorResult] = None

    def bind_value(self, position: int, value: Any) -> None:
        """Bind a value at a 1-based position, growing the bind list as needed."""
        if position < 1:
            raise ValueError(f'Bind positions start at 1, got {position}')
        while len(self.params) < position:
            self.params.append(None)
        self.params[position - 1] = value

    def bind_values(self, values: Iterable[Any]) -> None:
        for i, value in enumerate(values, start=1):
            self.bind_value(i, value)

    def execute(self, conn: Connection) -> 'Statement':
        """Run the statement on a live connection; driver errors propagate."""
        sql, binds = adapt_sql(self.sql, self.params)
        self.result = conn.execute(text(sql), binds)
        return self

    @property
    def query_string(self) -> str:
        return self.sql

    @property
    def last_insert_id(self) -> Any:
        return self._require().lastrowid

    @property
    def row_count(self) -> int:
        return self._require().rowcount

    def _require(self) -> CursorResult:
        if self.result is None:
            raise RuntimeError(f'Statement has not been executed: {self.sql}')
        return self.result

    def _rows(self) -> Optional[CursorResult]:
        """The executed result, or None when the statement returns no rows (INSERT, UPDATE, ...)."""
        result = self._require()
        return result if result.returns_rows else None

    def fetch_assoc(self) -> Optional[Dict[str, Any]]:
        """Next row as a column-name dict, or None when exhausted."""
        result = self._rows()
        row = result.mappings().fetchone() if result is not None else None
        return strip_numeric_keys(dict(row)) if row is not None else None

    def fetch_all(self) -> List[Dict[str, Any]]:
        result = self._rows()
        if result is None:
            return []
        return [strip_numeric_keys(dict(r)) for r in result.mappings().all()]

    def fetch_all_name(self) -> List[Dict[str, Any]]:
        result = self._rows()
        return [dict(r) for r in result.mappings().all()] if result is not None else []

    def fetch_all_num(self) -> List[Tuple[Any, ...]]:
        result = self._rows()
        return [tuple(r) for r in result.all()] if result is not None else []

    def fetch_num(self) -> Optional[Tuple[Any, ...]]:
        result = self._rows()
        row = result.fetchone() if result is not None else None
        return tuple(row) if row is not None else None

    def fetch_all_assoc(self, on_conflict: str = 'overwrite') -> Dict[Any, Dict[str, Any]]:
        """All rows keyed by the value of their first column."""
        result = self._rows()
        if result is None:
            return {}
        return key_by_first_column(result.all(), list(result.keys()), on_conflict)

    def fetch_all_value(self) -> List[Any]:
        result = self._rows()
        return list(result.scalars().all()) if result is not None else []

    def fetch_value(self) -> Any:
        """First column of the next row, or None when exhausted."""
        result = self._rows()
        row = result.fetchone() if result is not None else None
        return row[0] if row is not None else None

    def fetch_df(self) -> pd.DataFrame:
        """Remaining rows as a DataFrame."""
        result = self._rows()
        if result is None:
            return pd.DataFrame()
        return pd.DataFrame([tuple(r) for r in result.all()], columns=list(result.keys()))

    def __repr__(self) -> str:
        return f'Statement({self.sql!r}, params={self.params!r})'
