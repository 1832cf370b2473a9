"""Query helper: lazy connection, statement building/execution and result fetching."""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
import pandas as pd
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sql_builder import SQLBuilder
from .descriptor import ConnectionDescriptor
from .statement import Statement
import logging

logger = logging.getLogger(__name__)

class QueryHelper:
    """Builds and runs SQL over a single, lazily opened connection.

    One statement is current at a time; each query-issuing call replaces it and
    the fetch_* methods read from it. Not safe for concurrent use.
    """
    def __init__(
        self, driver: str, host: Optional[str] = None, db_name: Optional[str] = None,
        username: Optional[str] = None, password: Optional[str] = None,
        port: Optional[int] = None, echo: bool = False, debug: bool = False
    ):
        self.descriptor = ConnectionDescriptor(
            driver=driver, host=host, database=db_name,
            username=username, password=password, port=port
        )
        self.echo = echo
        self.debug = debug
        self.builder = SQLBuilder()
        self.engine: Optional[Engine] = None
        self.conn: Optional[Connection] = None
        self.statement: Optional[Statement] = None

    @classmethod
    def from_descriptor(cls, descriptor: ConnectionDescriptor, echo: bool = False, debug: bool = False) -> 'QueryHelper':
        """Create a helper from an existing descriptor."""
        helper = cls(descriptor.driver, echo=echo, debug=debug)
        helper.descriptor = descriptor
        return helper

    @classmethod
    def from_url(cls, conn: str, **kwargs) -> 'QueryHelper':
        return cls.from_descriptor(ConnectionDescriptor.from_url(conn), **kwargs)

    @property
    def dialect(self) -> str:
        return self.descriptor.dialect

    def _log(self, sql: str, params: Any):
        """Log SQL and params if debug enabled."""
        if self.debug:
            logger.debug(f'SQL: {sql} | Params: {params}')

    def connect(self) -> Connection:
        """Return the live connection, opening it on first use."""
        if self.conn is not None:
            return self.conn
        if self.engine is None:
            self.engine = create_engine(self.descriptor.url, echo=self.echo, **self.descriptor.engine_options())
        self.conn = self.engine.connect().execution_options(isolation_level='AUTOCOMMIT')
        logger.debug('Connected to %r', self.descriptor)
        return self.conn

    def is_connected(self) -> bool:
        return self.conn is not None

    def disconnect(self):
        """Close and discard the live connection; the next call reconnects."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None
            logger.debug('Disconnected from %r', self.descriptor)
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

    def _run(self, sql: str, params: Sequence[Any]) -> Statement:
        """Prepare, bind positionally and execute; the result becomes current."""
        conn = self.connect()
        self._log(sql, params)
        stmt = Statement(sql)
        stmt.bind_values(params)
        self.statement = stmt
        return stmt.execute(conn)

    def exec(self, sql: str) -> 'QueryHelper':
        """Execute raw SQL without parameters; the current statement is left as is."""
        conn = self.connect()
        self._log(sql, None)
        conn.exec_driver_sql(sql)
        return self

    def query(self, sql: str, values: Sequence[Any] = ()) -> 'QueryHelper':
        """Execute SQL with '?' placeholders bound from values in order."""
        self._run(sql, list(values))
        return self

    def select(
        self, table: str, columns: Union[str, List[str]] = '*', where: Optional[Mapping[str, Any]] = None,
        group_by: Optional[str] = None, having: Optional[str] = None, order_by: Optional[str] = None,
        limit: Optional[Union[int, str]] = None, distinct: bool = False
    ) -> 'QueryHelper':
        """Build and run a SELECT; read rows with the fetch_* methods."""
        sql, params = self.builder.select(table, columns, where, group_by, having, order_by, limit, distinct)
        self._run(sql, params)
        return self

    def insert(self, table: str, values: Mapping[str, Any]) -> Any:
        """Insert one row and return the last inserted id."""
        sql, params = self.builder.insert(table, values)
        return self._run(sql, params).last_insert_id

    def update(self, table: str, values: Mapping[str, Any], where: Mapping[str, Any], allow_full: bool = False) -> int:
        """Update matching rows and return the affected row count."""
        sql, params = self.builder.update(table, values, where, allow_full=allow_full)
        return self._run(sql, params).row_count

    def delete(self, table: str, where: Mapping[str, Any], allow_full: bool = False) -> int:
        """Delete matching rows and return the affected row count."""
        sql, params = self.builder.delete(table, where, allow_full=allow_full)
        return self._run(sql, params).row_count

    def insert_on_duplicate_update(self, table: str, values: Mapping[str, Any]) -> Any:
        """Insert a row or update it on a unique key clash; returns the last inserted id."""
        sql, params = self.builder.insert_on_duplicate_update(table, values)
        return self._run(sql, params).last_insert_id

    def _current(self) -> Statement:
        if self.statement is None:
            raise RuntimeError('No statement has been executed')
        return self.statement

    def fetch_assoc(self) -> Optional[Dict[str, Any]]:
        return self._current().fetch_assoc()

    def fetch_all(self) -> List[Dict[str, Any]]:
        return self._current().fetch_all()

    def fetch_all_name(self) -> List[Dict[str, Any]]:
        return self._current().fetch_all_name()

    def fetch_all_num(self) -> List[Tuple[Any, ...]]:
        return self._current().fetch_all_num()

    def fetch_num(self) -> Optional[Tuple[Any, ...]]:
        return self._current().fetch_num()

    def fetch_all_assoc(self, on_conflict: str = 'overwrite') -> Dict[Any, Dict[str, Any]]:
        return self._current().fetch_all_assoc(on_conflict)

    def fetch_all_value(self) -> List[Any]:
        return self._current().fetch_all_value()

    def fetch_value(self) -> Any:
        return self._current().fetch_value()

    def fetch_df(self) -> pd.DataFrame:
        """Fetch remaining rows of the current statement as DataFrame."""
        return self._current().fetch_df()

    def get_query_string(self) -> str:
        return self._current().query_string

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.disconnect()
