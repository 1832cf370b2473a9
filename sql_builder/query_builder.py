"""SQL query builder for SELECT, INSERT, UPDATE, DELETE and UPSERT statements."""

import re
from typing import Any, List, Mapping, Optional, Tuple, Union
import logging
from .clauses import (
    to_comma_string, to_where_clause, to_set_clause,
    to_on_duplicate_update_clause, values_to_question_mark
)
from .mappings import identifier_pattern

logger = logging.getLogger(__name__)

class SQLBuilder:
    """Builds positional-parameter SQL text and its ordered bind values."""

    def _check_identifiers(self, kind: str, names) -> None:
        """Reject table or column names that are not plain identifiers."""
        bad = [n for n in names if not isinstance(n, str) or not re.match(identifier_pattern, n)]
        if bad:
            raise ValueError(f'Invalid {kind} name(s): {bad}')

    def select(self, table: str, columns: Union[str, List[str]] = '*', where: Optional[Mapping[str, Any]] = None,
               group_by: Optional[str] = None, having: Optional[str] = None, order_by: Optional[str] = None,
               limit: Optional[Union[int, str]] = None, distinct: bool = False) -> Tuple[str, List[Any]]:
        """Generate SELECT query; only the predicate map is bound."""
        where = where or {}
        self._check_identifiers('table', [table])
        self._check_identifiers('column', where)
        cols = columns if isinstance(columns, str) else to_comma_string(columns)
        sql = 'SELECT '
        if distinct:
            sql += 'DISTINCT '
        sql += f'{cols} FROM {table}'
        where_sql = to_where_clause(where)
        if where_sql:
            sql += f' {where_sql}'
        if group_by is not None:
            sql += f' GROUP BY {group_by}'
        if having is not None:
            sql += f' HAVING {having}'
        if order_by is not None:
            sql += f' ORDER BY {order_by}'
        if limit is not None:
            sql += f' LIMIT {limit}'
        return sql, list(where.values())

    def insert(self, table: str, values: Mapping[str, Any]) -> Tuple[str, List[Any]]:
        """Generate INSERT query for a single row."""
        self._check_values(table, values)
        sql = f'INSERT INTO {table} ({to_comma_string(values)}) VALUES ({to_comma_string(values_to_question_mark(values))})'
        return sql, list(values.values())

    def update(self, table: str, values: Mapping[str, Any], where: Optional[Mapping[str, Any]] = None,
               allow_full: bool = False) -> Tuple[str, List[Any]]:
        """Generate UPDATE query; binds SET values then WHERE values."""
        where = where or {}
        self._check_values(table, values)
        self._check_identifiers('column', where)
        if not where and not allow_full:
            raise ValueError('UPDATE without WHERE refused; use allow_full=True if intended')
        sql = f'UPDATE {table} {to_set_clause(values)}'
        where_sql = to_where_clause(where)
        if where_sql:
            sql += f' {where_sql}'
        return sql, list(values.values()) + list(where.values())

    def delete(self, table: str, where: Optional[Mapping[str, Any]] = None,
               allow_full: bool = False) -> Tuple[str, List[Any]]:
        """Generate DELETE query."""
        where = where or {}
        self._check_identifiers('table', [table])
        self._check_identifiers('column', where)
        if not where and not allow_full:
            raise ValueError('DELETE without WHERE refused; use allow_full=True if intended')
        sql = f'DELETE FROM {table}'
        where_sql = to_where_clause(where)
        if where_sql:
            sql += f' {where_sql}'
        return sql, list(where.values())

    def insert_on_duplicate_update(self, table: str, values: Mapping[str, Any]) -> Tuple[str, List[Any]]:
        """Generate INSERT ... ON DUPLICATE KEY UPDATE; the values are bound twice."""
        sql, params = self.insert(table, values)
        sql += f' {to_on_duplicate_update_clause(values)}'
        logger.debug('Upsert on %s relies on a unique key covering %s', table, list(values))
        return sql, params + list(values.values())

    def _check_values(self, table: str, values: Mapping[str, Any]) -> None:
        self._check_identifiers('table', [table])
        if not values:
            raise ValueError(f'No column values provided for {table}')
        self._check_identifiers('column', values)

