"""
Pydantic models for connection descriptors, job descriptors and catalog metadata.

All models are value objects: created per request, never persisted.
"""
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Dialect(str, Enum):
    """Destination system family that decides which sink fields are emitted."""

    GENERIC_JDBC = "generic-jdbc"
    COLUMNAR_WAREHOUSE = "columnar-warehouse"

    @classmethod
    def from_kind(cls, kind: str) -> "Dialect":
        """Map a free-form kind tag onto the closed dialect set."""
        if isinstance(kind, cls):
            return kind
        if str(kind).strip().lower() in _WAREHOUSE_KINDS:
            return cls.COLUMNAR_WAREHOUSE
        return cls.GENERIC_JDBC


_WAREHOUSE_KINDS = {"columnar-warehouse", "doris"}


class ConnectionDescriptor(BaseModel):
    """Structured connection settings for one connection attempt."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    kind: str = Field(default="mysql", alias="type")
    host: str = Field(min_length=1)
    port: str = Field(min_length=1)
    user: str = Field(min_length=1)
    password: Optional[str] = None
    database: Optional[str] = None
    default_database: Optional[str] = Field(default=None, alias="defaultDatabase")

    @field_validator("port", mode="before")
    @classmethod
    def coerce_port(cls, v):
        """Ports arrive as numbers from some clients."""
        if isinstance(v, int):
            return str(v)
        return v

    @property
    def credential(self) -> str:
        """Password as sent to drivers; absent means empty, not 'no auth'."""
        return self.password or ""


class JobDescriptor(BaseModel):
    """One side (source or sink) of a pipeline job."""

    model_config = ConfigDict(populate_by_name=True)

    dialect: Dialect = Field(default=Dialect.GENERIC_JDBC, alias="type")
    host: str
    port: str
    user: str
    password: Optional[str] = None
    database: str = Field(min_length=1)
    table: str = Field(min_length=1)

    @field_validator("dialect", mode="before")
    @classmethod
    def normalize_dialect(cls, v):
        return Dialect.from_kind(v)

    @field_validator("port", mode="before")
    @classmethod
    def coerce_port(cls, v):
        if isinstance(v, int):
            return str(v)
        return v


class PipelineJob(BaseModel):
    source: JobDescriptor
    sink: JobDescriptor


class TableSummary(BaseModel):
    """Per-table statistics as reported by the catalog."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    row_count: int = Field(default=0, ge=0, alias="rows")
    size_label: str = Field(default="0 B", alias="size")
    comment: Optional[str] = None


class ColumnSchema(BaseModel):
    """One column, in catalog ordinal order."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str
    length: Optional[int] = None
    scale: Optional[int] = None
    nullable: bool = True
    is_primary_key: bool = Field(default=False, alias="isPrimaryKey")
    default_value: Optional[str] = Field(default=None, alias="defaultValue")
    comment: Optional[str] = None


class TableDetail(BaseModel):
    """Table statistics, ordered columns and verbatim catalog DDL."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    row_count: int = Field(default=0, ge=0, alias="rows")
    size_label: str = Field(default="0 B", alias="size")
    engine: Optional[str] = None
    collation: Optional[str] = None
    comment: Optional[str] = None
    columns: List[ColumnSchema] = Field(default_factory=list)
    ddl: str = ""


class HostInfo(BaseModel):
    os: str
    kernel: str
    hostname: str
    cpu: str
    memory: str
    uptime: str


class HostStats(BaseModel):
    cpu: float
    mem: int
