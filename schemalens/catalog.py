"""
Catalog providers for live database metadata.

A provider answers four questions about a data source (is it reachable, which
databases, which tables, what does one table look like) through a uniform
contract. Two providers exist:

* ``LiveCatalogProvider`` talks to a MySQL-protocol server (MySQL, Doris FE)
  with PyMySQL, opening one short-lived connection per call.
* ``FixtureCatalogProvider`` serves the same catalog-shaped rows from a YAML
  file, for demos and tests.

Both feed rows through the same mapping functions, so normalization (row
counts, sizes, nullability, key flags) is identical.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Any, List, Dict

import pymysql
import pymysql.cursors
import yaml

from .formatting import format_size
from .identifiers import decode
from .logger import logger
from .models import ConnectionDescriptor, TableSummary, ColumnSchema, TableDetail


class CatalogError(Exception):
    """Raised when a catalog operation fails."""
    pass


class ConnectFailure(CatalogError):
    """Network or authentication failure while opening a connection."""
    pass


class QueryFailure(CatalogError):
    """Connected, but the catalog query was rejected."""
    pass


ACK_MESSAGE = "Connection successful"

LIVENESS_QUERY = "SELECT 1"

DATABASES_QUERY = "SHOW DATABASES"

TABLES_QUERY = (
    "SELECT TABLE_NAME AS name, TABLE_ROWS AS table_rows, DATA_LENGTH AS data_length, "
    "TABLE_COMMENT AS comment "
    "FROM information_schema.TABLES "
    "WHERE TABLE_SCHEMA = %s AND TABLE_TYPE = 'BASE TABLE' "
    "ORDER BY TABLE_NAME"
)

COLUMNS_QUERY = (
    "SELECT COLUMN_NAME AS name, DATA_TYPE AS data_type, "
    "CASE WHEN DATA_TYPE IN ('decimal', 'numeric') THEN NUMERIC_PRECISION "
    "ELSE CHARACTER_MAXIMUM_LENGTH END AS length, "
    "COALESCE(NUMERIC_SCALE, DATETIME_PRECISION) AS scale, "
    "IS_NULLABLE AS is_nullable, COLUMN_KEY AS column_key, "
    "COLUMN_DEFAULT AS column_default, COLUMN_COMMENT AS column_comment, "
    "ORDINAL_POSITION AS ordinal_position "
    "FROM information_schema.COLUMNS "
    "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s "
    "ORDER BY ORDINAL_POSITION"
)

TABLE_STATS_QUERY = (
    "SELECT TABLE_ROWS AS table_rows, DATA_LENGTH AS data_length, ENGINE AS engine, "
    "TABLE_COLLATION AS collation, TABLE_COMMENT AS comment "
    "FROM information_schema.TABLES "
    "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s"
)


def quote_identifier(name: str) -> str:
    """Backtick-quote a MySQL identifier, doubling embedded backticks."""
    return "`" + str(name).replace("`", "``") + "`"


def show_create_table_sql(database: str, table: str) -> str:
    """Identifiers cannot be bound as parameters here, so they are quoted."""
    return f"SHOW CREATE TABLE {quote_identifier(database)}.{quote_identifier(table)}"


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def map_table_summary(row: Dict[str, Any]) -> TableSummary:
    """Map one information_schema.TABLES row; unknown statistics become 0."""
    return TableSummary(
        name=row["name"],
        row_count=int(row.get("table_rows") or 0),
        size_label=format_size(row.get("data_length") or 0),
        comment=_optional_str(row.get("comment")),
    )


def map_column(row: Dict[str, Any]) -> ColumnSchema:
    """Map one information_schema.COLUMNS row."""
    return ColumnSchema(
        name=row["name"],
        type=row["data_type"],
        length=_optional_int(row.get("length")),
        scale=_optional_int(row.get("scale")),
        # Exact, case-sensitive flags
        nullable=row.get("is_nullable") == "YES",
        is_primary_key=row.get("column_key") == "PRI",
        default_value=_optional_str(row.get("column_default")),
        comment=_optional_str(row.get("column_comment")),
    )


def build_table_detail(
    table: str,
    column_rows: List[Dict[str, Any]],
    stats_row: Optional[Dict[str, Any]],
    ddl: str
) -> TableDetail:
    """
    Assemble a TableDetail from the three catalog reads.

    A missing statistics row is partial success: row count 0, ``"0 B"`` and
    no engine, collation or comment.
    """
    stats = stats_row or {}
    if stats_row is None:
        logger.warning(f"No table statistics for '{table}', defaulting row count and size")

    return TableDetail(
        name=table,
        row_count=int(stats.get("table_rows") or 0),
        size_label=format_size(stats.get("data_length") or 0),
        engine=_optional_str(stats.get("engine")),
        collation=_optional_str(stats.get("collation")),
        comment=_optional_str(stats.get("comment")),
        columns=[map_column(r) for r in column_rows],
        ddl=ddl or "",
    )


def _endpoint(descriptor: ConnectionDescriptor) -> str:
    return f"{descriptor.user}@{descriptor.host}:{descriptor.port}"


# ===== PROVIDERS =====

class DataSourceProvider(ABC):
    """Uniform metadata contract over a relational data source."""

    @abstractmethod
    def test_connection(self, descriptor: ConnectionDescriptor) -> str:
        """Connect and run a liveness query. Returns an ack message."""
        pass

    @abstractmethod
    def list_databases(self, identifier: str) -> List[str]:
        """All databases visible to the connecting user, system schemas included."""
        pass

    @abstractmethod
    def list_tables(self, identifier: str, database: str) -> List[TableSummary]:
        """Base tables (no views) of ``database`` with catalog statistics."""
        pass

    @abstractmethod
    def get_table_detail(self, identifier: str, database: str, table: str) -> TableDetail:
        """Columns, statistics and DDL for one table."""
        pass


class LiveCatalogProvider(DataSourceProvider):
    """
    Provider backed by a live MySQL-protocol server.

    Every operation opens a fresh connection and closes it before returning.
    The three reads of ``get_table_detail`` share a connection but no
    transaction, so concurrent DDL may make them disagree slightly.
    """

    def __init__(self, connect_timeout: int = 10):
        self.connect_timeout = connect_timeout

    def _connect(self, descriptor: ConnectionDescriptor, database: Optional[str] = None):
        endpoint = _endpoint(descriptor)
        logger.debug(f"Connecting to {endpoint} (database={database or '-'})")
        try:
            return pymysql.connect(
                host=descriptor.host,
                port=int(descriptor.port),
                user=descriptor.user,
                password=descriptor.credential,
                database=database or None,
                connect_timeout=self.connect_timeout,
                charset="utf8mb4",
                cursorclass=pymysql.cursors.DictCursor,
            )
        except (pymysql.MySQLError, ValueError, OSError) as e:
            logger.error(f"Failed to connect to {endpoint}: {e}")
            raise ConnectFailure(f"Failed to connect to {endpoint} - {e}") from e

    def _query(self, conn, descriptor: ConnectionDescriptor, what: str, sql: str,
               params: Optional[tuple] = None, one: bool = False):
        endpoint = _endpoint(descriptor)
        logger.debug(f"Executing on {endpoint}: {sql}")
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return cur.fetchone() if one else list(cur.fetchall())
        except pymysql.MySQLError as e:
            logger.error(f"Failed to fetch {what} from {endpoint}: {e}")
            raise QueryFailure(f"Failed to fetch {what} from {endpoint} (Query: {sql}): {e}") from e

    def test_connection(self, descriptor: ConnectionDescriptor) -> str:
        endpoint = _endpoint(descriptor)
        logger.info(f"Testing connection to {endpoint}")
        conn = self._connect(descriptor)
        try:
            try:
                with conn.cursor() as cur:
                    cur.execute(LIVENESS_QUERY)
            except pymysql.MySQLError as e:
                logger.error(f"Connected to {endpoint} but liveness query failed: {e}")
                raise QueryFailure(f"Connection established but query failed: {e}") from e
        finally:
            conn.close()
        return ACK_MESSAGE

    def list_databases(self, identifier: str) -> List[str]:
        descriptor = decode(identifier)
        conn = self._connect(descriptor)
        try:
            rows = self._query(conn, descriptor, "databases", DATABASES_QUERY)
        finally:
            conn.close()
        # SHOW DATABASES has a single column
        return [next(iter(r.values())) for r in rows]

    def list_tables(self, identifier: str, database: str) -> List[TableSummary]:
        descriptor = decode(identifier)
        conn = self._connect(descriptor, database)
        try:
            rows = self._query(conn, descriptor, "tables", TABLES_QUERY, (database,))
        finally:
            conn.close()
        return [map_table_summary(r) for r in rows]

    def get_table_detail(self, identifier: str, database: str, table: str) -> TableDetail:
        descriptor = decode(identifier)
        conn = self._connect(descriptor, database)
        try:
            column_rows = self._query(conn, descriptor, "columns", COLUMNS_QUERY, (database, table))
            stats_row = self._query(conn, descriptor, "table info", TABLE_STATS_QUERY,
                                    (database, table), one=True)
            ddl_row = self._query(conn, descriptor, "DDL", show_create_table_sql(database, table),
                                  one=True)
        finally:
            conn.close()

        ddl = ""
        if ddl_row:
            ddl = ddl_row.get("Create Table") or ddl_row.get("Create View") or ""
        return build_table_detail(table, column_rows, stats_row, ddl)


class FixtureCatalogProvider(DataSourceProvider):
    """
    Provider serving catalog rows from a fixture document.

    Expected shape::

        databases:
          shop:
            tables:   [ {name, table_type, table_rows, data_length, engine, collation, comment} ]
            columns:  { <table>: [ {name, data_type, length, scale, is_nullable,
                                   column_key, column_default, column_comment,
                                   ordinal_position} ] }
            ddl:      { <table>: "CREATE TABLE ..." }

    A table listed under ``columns`` but not under ``tables`` behaves like a
    table whose statistics row is missing.
    """

    def __init__(self, catalog: Dict[str, Any]):
        if not isinstance(catalog, dict) or "databases" not in catalog:
            raise ValueError("Fixture catalog requires a top-level 'databases' key")
        self.catalog = catalog

    @classmethod
    def from_file(cls, path: str) -> "FixtureCatalogProvider":
        with open(path, "r", encoding="utf-8") as f:
            return cls(yaml.safe_load(f) or {})

    def _database(self, descriptor: ConnectionDescriptor, database: str) -> Dict[str, Any]:
        databases = self.catalog["databases"] or {}
        if database not in databases:
            raise ConnectFailure(
                f"Failed to connect to {_endpoint(descriptor)}/{database} - Unknown database '{database}'"
            )
        return databases[database] or {}

    def test_connection(self, descriptor: ConnectionDescriptor) -> str:
        logger.info(f"Testing fixture connection to {_endpoint(descriptor)}")
        return ACK_MESSAGE

    def list_databases(self, identifier: str) -> List[str]:
        decode(identifier)
        return list((self.catalog["databases"] or {}).keys())

    def list_tables(self, identifier: str, database: str) -> List[TableSummary]:
        descriptor = decode(identifier)
        db = self._database(descriptor, database)
        rows = [r for r in db.get("tables") or [] if r.get("table_type", "BASE TABLE") == "BASE TABLE"]
        rows.sort(key=lambda r: r["name"])
        return [map_table_summary(r) for r in rows]

    def get_table_detail(self, identifier: str, database: str, table: str) -> TableDetail:
        descriptor = decode(identifier)
        db = self._database(descriptor, database)

        columns = db.get("columns") or {}
        ddl_map = db.get("ddl") or {}
        if table not in columns and table not in ddl_map:
            raise QueryFailure(
                f"Failed to fetch DDL from {_endpoint(descriptor)}: Table '{database}.{table}' doesn't exist"
            )

        column_rows = list(columns.get(table) or [])
        # Mirror ORDER BY ORDINAL_POSITION; rows without a position keep list order
        column_rows = [r for _, r in sorted(
            enumerate(column_rows),
            key=lambda item: (item[1].get("ordinal_position", item[0] + 1), item[0]),
        )]
        stats_row = next((r for r in db.get("tables") or [] if r.get("name") == table), None)
        return build_table_detail(table, column_rows, stats_row, ddl_map.get(table, ""))


# ===== FACTORY =====

def create_provider(settings) -> DataSourceProvider:
    """
    Build the provider named by ``settings.provider``.

    Raises:
        ValueError: If the provider is unknown or a fixture path is missing
    """
    if settings.provider == "live":
        return LiveCatalogProvider(connect_timeout=settings.connect_timeout)
    if settings.provider == "fixture":
        if not settings.fixture_path:
            raise ValueError("Fixture provider requires 'fixture_path'")
        if not Path(settings.fixture_path).exists():
            raise ValueError(f"Fixture catalog not found: {settings.fixture_path}")
        logger.info(f"Using fixture catalog: {settings.fixture_path}")
        return FixtureCatalogProvider.from_file(settings.fixture_path)
    raise ValueError(f"Unsupported provider: {settings.provider}")
