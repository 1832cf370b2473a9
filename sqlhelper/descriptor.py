"""Connection descriptor: credentials, URL assembly and fixed engine options."""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from sqlalchemy.engine import URL
from sqlalchemy.engine.url import make_url
from sql_builder.mappings import default_timeout, driver_timeout_args, timeout_args

@dataclass(frozen=True)
class ConnectionDescriptor:
    """Immutable description of the database to connect to.

    ``driver`` is a SQLAlchemy driver name such as ``mysql+pymysql``,
    ``postgresql+psycopg2`` or ``sqlite``.
    """
    driver: str
    host: Optional[str] = None
    database: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    port: Optional[int] = None
    timeout: int = default_timeout

    @property
    def url(self) -> URL:
        return URL.create(
            self.driver, username=self.username, password=self.password,
            host=self.host or None, port=self.port, database=self.database
        )

    @property
    def dialect(self) -> str:
        """Dialect name without the driver suffix."""
        db = self.driver.split('+')[0].lower()
        return 'postgresql' if db == 'postgres' else db

    @property
    def driver_name(self) -> str:
        """DB-API driver name, resolving the dialect default when none is given."""
        return self.url.get_driver_name()

    def engine_options(self) -> Dict[str, Any]:
        """Keyword arguments for create_engine: timeouts on checkout and on connect."""
        opts: Dict[str, Any] = {'future': True}
        arg = driver_timeout_args.get(self.driver_name) or timeout_args.get(self.dialect)
        if arg:
            opts['connect_args'] = {arg: self.timeout}
        if self.dialect != 'sqlite':
            opts['pool_timeout'] = self.timeout
        return opts

    @classmethod
    def from_url(cls, conn: str) -> 'ConnectionDescriptor':
        """Build a descriptor from a SQLAlchemy URL string."""
        url = make_url(conn)
        return cls(
            driver=url.drivername, host=url.host, database=url.database,
            username=url.username, password=url.password, port=url.port
        )

    @classmethod
    def from_dict(cls, cfg: Mapping[str, Any]) -> 'ConnectionDescriptor':
        """Build a descriptor from a config dict, or its 'conn_str' entry."""
        if 'conn_str' in cfg:
            return cls.from_url(cfg['conn_str'])
        missing = [k for k in ('driver',) if k not in cfg]
        if missing:
            raise ValueError(f'Missing required fields: {missing}')
        return cls(
            driver=cfg['driver'], host=cfg.get('host'), database=cfg.get('database', cfg.get('db_name')),
            username=cfg.get('username'), password=cfg.get('password'), port=cfg.get('port'),
            timeout=cfg.get('timeout', default_timeout)
        )

    def __repr__(self) -> str:
        return f'ConnectionDescriptor({self.url.render_as_string(hide_password=True)!r})'
