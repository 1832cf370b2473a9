"""Positional to named bind parameter adaptation for SQLAlchemy text()."""

import re
from typing import Any, Dict, Sequence, Tuple

# Quoted literals/identifiers are copied untouched (doubled or backslash-escaped
# quotes stay inside them); bare '?' becomes a named bind
_rx_qmark = re.compile(r"'(?:[^'\\]|\\.|'')*'|\"(?:[^\"\\]|\\.|\"\")*\"|`[^`]*`|\?", re.S)

def adapt_sql(sql: str, params: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """Convert '?' placeholders into :p0, :p1, ... and build the bind dict.

    Literal colons are escaped so text() does not read them as bind names.
    """
    sql = sql.replace(':', r'\:')
    names = []

    def repl(m: re.Match) -> str:
        if m.group(0) != '?':
            return m.group(0)
        names.append(f'p{len(names)}')
        return f':{names[-1]}'

    sql = _rx_qmark.sub(repl, sql)
    if len(names) != len(params):
        raise ValueError(f'Statement has {len(names)} placeholders but {len(params)} values were given')
    return sql, dict(zip(names, params))
