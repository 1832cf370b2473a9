"""Clause building helpers turning column maps into parameterized SQL fragments."""

from typing import Any, Iterable, List, Mapping
import logging
from .mappings import clause_dividers, placeholder

logger = logging.getLogger(__name__)

def to_comma_string(values: Iterable[Any]) -> str:
    """Join values with a single comma, no spacing."""
    return ','.join(str(v) for v in values)

def create_query_clause(mapping: Mapping[str, Any], clause_kind: str) -> str:
    """Build a clause like 'WHERE a = ? AND b = ?' from a column map.

    Returns an empty string for an empty map or an unknown clause kind.
    """
    if not mapping:
        return ''
    divider = clause_dividers.get(clause_kind)
    if divider is None:
        logger.warning('Unknown clause kind %r, emitting empty clause', clause_kind)
        return ''
    return f'{clause_kind} ' + divider.join(f'{col} = {placeholder}' for col in mapping)

def to_where_clause(where: Mapping[str, Any]) -> str:
    return create_query_clause(where, 'WHERE')

def to_set_clause(values: Mapping[str, Any]) -> str:
    return create_query_clause(values, 'SET')

def to_on_duplicate_update_clause(values: Mapping[str, Any]) -> str:
    return create_query_clause(values, 'ON DUPLICATE KEY UPDATE')

def values_to_question_mark(values: Iterable[Any]) -> List[str]:
    """Replace every value with a placeholder marker."""
    return [placeholder for _ in values]
