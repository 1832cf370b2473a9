"""SQL Builder subpackage for generating SQL text and positional parameters."""

from .query_builder import SQLBuilder
from .clauses import (
    to_comma_string, create_query_clause, to_where_clause, to_set_clause,
    to_on_duplicate_update_clause, values_to_question_mark
)
from .adapt_sql import adapt_sql

__all__ = [
    'SQLBuilder',
    'to_comma_string',
    'create_query_clause',
    'to_where_clause',
    'to_set_clause',
    'to_on_duplicate_update_clause',
    'values_to_question_mark',
    'adapt_sql'
]
