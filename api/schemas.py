from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional, Literal
from schemalens.models import JobDescriptor, ColumnSchema, TableDetail

class ConnectionTestResponse(BaseModel):
    success: bool
    message: str
    error_kind: Optional[Literal["connect", "query"]] = None

class SheetListRequest(BaseModel):
    file_name: str

class SheetListResponse(BaseModel):
    sheets: List[str]

class CreateTableRequest(BaseModel):
    sheet_name: str
    dialect: str = "mysql"

class ConvertDdlRequest(BaseModel):
    table: TableDetail
    target: Literal["mysql", "doris"]

class SqlResponse(BaseModel):
    sql: str

class StatementsRequest(BaseModel):
    table: str
    columns: List[ColumnSchema]

class PipelineConfigRequest(BaseModel):
    source: JobDescriptor
    sink: JobDescriptor
    source_columns: Optional[List[ColumnSchema]] = None
    sink_columns: Optional[List[ColumnSchema]] = None

class PipelineConfigResponse(BaseModel):
    config: str

class DocumentJobRequest(BaseModel):
    mode: str
    files: List[str] = Field(default_factory=list)
    meta: Optional[Dict[str, Any]] = None

class DocumentJobResponse(BaseModel):
    success: bool
    message: str
