"""Clause keywords, placeholder markers and driver option mappings."""

# Positional placeholder used in generated SQL text
placeholder = '?'

# Clause keyword -> divider placed between "col = ?" fragments
clause_dividers = {
    'WHERE': ' AND ',
    'SET': ', ',
    'ON DUPLICATE KEY UPDATE': ', ',
}

# Table and column names accepted by the builder: plain, `backtick` or "double" quoted,
# optionally schema-qualified
_ident_part = r'(?:\w+|`[^`]+`|"[^"]+")'
identifier_pattern = rf'^{_ident_part}(\.{_ident_part})?$'

# Connection timeout in seconds, applied to pool checkout and driver connect
default_timeout = 30

# DB-API driver -> name of the connect() keyword carrying the timeout
driver_timeout_args = {
    'pysqlite': 'timeout',
    'psycopg2': 'connect_timeout',
    'psycopg': 'connect_timeout',
    'pg8000': 'timeout',
    'asyncpg': 'timeout',
    'mysqldb': 'connect_timeout',
    'pymysql': 'connect_timeout',
    'mysqlconnector': 'connect_timeout',
    'mariadbconnector': 'connect_timeout',
    'pyodbc': 'timeout',
    'pymssql': 'login_timeout',
}

# Dialect -> timeout keyword, used when the driver is not listed above
timeout_args = {
    'sqlite': 'timeout',
    'postgresql': 'connect_timeout',
    'mysql': 'connect_timeout',
    'mariadb': 'connect_timeout',
    'mssql': 'timeout',
}

# Result shaping behaviour on duplicate first-column values
conflict_modes = ('overwrite', 'raise')
