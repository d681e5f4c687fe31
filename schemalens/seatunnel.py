"""
SeaTunnel job configuration synthesis.

A job is always three blocks: ``env`` (batch, parallelism 1), a JDBC
``source`` and a ``sink`` whose plugin and fields depend on the sink dialect.
Output is pure: identical inputs give byte-identical text.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .logger import logger
from .models import Dialect, JobDescriptor, ColumnSchema

JDBC_DRIVER = "com.mysql.cj.jdbc.Driver"
JDBC_SCHEME = "mysql"
LABEL_PREFIX = "label_seatunnel"

INDENT = "    "


def hocon_string(value: str) -> str:
    """Quote a value as a HOCON string, escaping backslashes and double quotes."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def jdbc_url(job: JobDescriptor) -> str:
    return f"jdbc:{JDBC_SCHEME}://{job.host}:{job.port}/{job.database}"


def _column_list(columns: List[ColumnSchema]) -> str:
    return ", ".join(f"`{c.name}`" for c in columns)


def source_query(source: JobDescriptor, columns: Optional[List[ColumnSchema]] = None) -> str:
    """``select * from <table>``, or the explicit column list when given."""
    cols = _column_list(columns) if columns else "*"
    return f"select {cols} from {source.table}"


def _render_fields(fields: List[Tuple[str, str]]) -> str:
    return "\n".join(f"{INDENT}{key} = {hocon_string(value)}" for key, value in fields)


# ===== SINK BLOCKS =====

class SinkBlock(ABC):
    """Base class for dialect-specific sink blocks."""

    plugin: str = ""

    def __init__(self, job: JobDescriptor, columns: Optional[List[ColumnSchema]] = None):
        self.job = job
        self.columns = columns or []

    @property
    def identifier(self) -> str:
        return f"{self.job.database}.{self.job.table}"

    @abstractmethod
    def fields(self) -> List[Tuple[str, str]]:
        """Ordered ``key = value`` pairs of the block body."""
        pass

    def render(self) -> str:
        return f"  {self.plugin} {{\n{_render_fields(self.fields())}\n  }}"


class JdbcSinkBlock(SinkBlock):
    """Generic JDBC sink: full JDBC URL and driver class."""

    plugin = "Jdbc"

    def insert_query(self) -> str:
        names = _column_list(self.columns)
        placeholders = ", ".join("?" for _ in self.columns)
        return (
            f"INSERT INTO `{self.job.database}`.`{self.job.table}` "
            f"({names}) VALUES ({placeholders})"
        )

    def fields(self) -> List[Tuple[str, str]]:
        fields = [
            ("url", jdbc_url(self.job)),
            ("driver", JDBC_DRIVER),
            ("user", self.job.user),
            ("password", self.job.password or ""),
        ]
        if self.columns:
            fields.append(("query", self.insert_query()))
        else:
            fields.append(("table", self.identifier))
        return fields


class DorisSinkBlock(SinkBlock):
    """
    Columnar-warehouse (Doris) sink.

    ``fenodes`` is a bare ``host:port`` node list: no scheme, no database path.
    Two-phase commit is always on.
    """

    plugin = "Doris"

    def fields(self) -> List[Tuple[str, str]]:
        return [
            ("fenodes", f"{self.job.host}:{self.job.port}"),
            ("username", self.job.user),
            ("password", self.job.password or ""),
            ("table.identifier", self.identifier),
            ("sink.enable-2pc", "true"),
            ("sink.label-prefix", LABEL_PREFIX),
        ]


def create_sink_block(sink: JobDescriptor, columns: Optional[List[ColumnSchema]] = None) -> SinkBlock:
    """
    Factory function to create the sink block for the sink's dialect.

    Raises:
        ValueError: If the dialect has no sink block
    """
    blocks = {
        Dialect.GENERIC_JDBC: JdbcSinkBlock,
        Dialect.COLUMNAR_WAREHOUSE: DorisSinkBlock,
    }

    if sink.dialect not in blocks:
        raise ValueError(f"Unsupported sink dialect: {sink.dialect}")

    return blocks[sink.dialect](sink, columns)


def render_source_block(source: JobDescriptor, columns: Optional[List[ColumnSchema]] = None) -> str:
    fields = [
        ("url", jdbc_url(source)),
        ("driver", JDBC_DRIVER),
        ("user", source.user),
        ("password", source.password or ""),
        ("query", source_query(source, columns)),
    ]
    return f"  Jdbc {{\n{_render_fields(fields)}\n  }}"


ENV_BLOCK = """env {
  execution.parallelism = 1
  job.mode = "BATCH"
}"""


def synthesize_pipeline_config(
    source: JobDescriptor,
    sink: JobDescriptor,
    source_columns: Optional[List[ColumnSchema]] = None,
    sink_columns: Optional[List[ColumnSchema]] = None
) -> str:
    """
    Build the env/source/sink configuration for one source -> sink job.

    Args:
        source: Source job; always read through JDBC
        sink: Sink job; its dialect picks the sink plugin
        source_columns: Optional explicit column list for the source query
        sink_columns: Optional column list; a JDBC sink then gets an INSERT query

    Returns:
        Configuration text
    """
    sink_block = create_sink_block(sink, sink_columns)
    logger.debug(
        f"Synthesizing config {source.database}.{source.table} -> "
        f"{sink_block.identifier} ({sink.dialect.value})"
    )

    return (
        f"{ENV_BLOCK}\n"
        "\n"
        "source {\n"
        f"{render_source_block(source, source_columns)}\n"
        "}\n"
        "\n"
        "sink {\n"
        f"{sink_block.render()}\n"
        "}"
    )
