from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import sys
from pathlib import Path
from typing import List, Dict
from datetime import datetime

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from schemalens.config import load_settings
from schemalens.logger import setup_logger
from schemalens.catalog import create_provider, ConnectFailure, QueryFailure, ACK_MESSAGE
from schemalens.identifiers import MalformedIdentifier
from schemalens.hoststats import HostProbe
from schemalens.documents import list_spreadsheet_sheets, process_document, DocumentJobError
from schemalens.ddl import synthesize_create_table, convert_ddl
from schemalens.sqlgen import generate_statements
from schemalens.seatunnel import synthesize_pipeline_config
from schemalens.models import ConnectionDescriptor, TableSummary, TableDetail, HostInfo, HostStats
from api.schemas import (
    ConnectionTestResponse,
    SheetListRequest,
    SheetListResponse,
    CreateTableRequest,
    ConvertDdlRequest,
    SqlResponse,
    StatementsRequest,
    PipelineConfigRequest,
    PipelineConfigResponse,
    DocumentJobRequest,
    DocumentJobResponse,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load settings, then build the provider and the single host probe."""
    settings = load_settings()
    logger = setup_logger(level=settings.log_level, log_file=settings.log_file)
    app.state.settings = settings
    app.state.provider = create_provider(settings)
    app.state.host_probe = HostProbe()
    logger.info(f"SchemaLens API started with '{settings.provider}' provider")
    yield


app = FastAPI(title="SchemaLens API", version="1.0.0", lifespan=lifespan)

# Enable CORS for the desktop/web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_methods=["*"],
    allow_headers=["*"],
)


def _catalog_error(e: Exception) -> HTTPException:
    if isinstance(e, MalformedIdentifier):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, ConnectFailure):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


@app.post("/api/connections/test", response_model=ConnectionTestResponse)
def test_connection(descriptor: ConnectionDescriptor, request: Request):
    """Verify connectivity; connect and query failures are reported distinctly."""
    try:
        message = request.app.state.provider.test_connection(descriptor)
        return ConnectionTestResponse(success=True, message=message or ACK_MESSAGE)
    except ConnectFailure as e:
        return ConnectionTestResponse(success=False, message=str(e), error_kind="connect")
    except QueryFailure as e:
        return ConnectionTestResponse(success=False, message=str(e), error_kind="query")


@app.get("/api/databases", response_model=List[str])
def list_databases(request: Request, id: str = Query(...)):
    try:
        return request.app.state.provider.list_databases(id)
    except (MalformedIdentifier, ConnectFailure, QueryFailure) as e:
        raise _catalog_error(e)


@app.get("/api/databases/{database}/tables", response_model=List[TableSummary])
def list_tables(database: str, request: Request, id: str = Query(...)):
    try:
        return request.app.state.provider.list_tables(id, database)
    except (MalformedIdentifier, ConnectFailure, QueryFailure) as e:
        raise _catalog_error(e)


@app.get("/api/databases/{database}/tables/{table}", response_model=TableDetail)
def get_table_detail(database: str, table: str, request: Request, id: str = Query(...)):
    try:
        return request.app.state.provider.get_table_detail(id, database, table)
    except (MalformedIdentifier, ConnectFailure, QueryFailure) as e:
        raise _catalog_error(e)


@app.post("/api/spreadsheets/sheets", response_model=SheetListResponse)
def list_sheets(body: SheetListRequest):
    try:
        return SheetListResponse(sheets=list_spreadsheet_sheets(body.file_name))
    except DocumentJobError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/ddl/create-table", response_model=SqlResponse)
def create_table_ddl(body: CreateTableRequest):
    return SqlResponse(sql=synthesize_create_table(body.sheet_name, body.dialect))


@app.post("/api/ddl/convert", response_model=SqlResponse)
def convert_table_ddl(body: ConvertDdlRequest):
    return SqlResponse(sql=convert_ddl(body.table, body.target))


@app.post("/api/sql/statements", response_model=Dict[str, str])
def sql_statements(body: StatementsRequest):
    return generate_statements(body.table, body.columns)


@app.post("/api/pipelines/config", response_model=PipelineConfigResponse)
def pipeline_config(body: PipelineConfigRequest):
    config = synthesize_pipeline_config(
        body.source, body.sink,
        source_columns=body.source_columns,
        sink_columns=body.sink_columns,
    )
    return PipelineConfigResponse(config=config)


@app.get("/api/host/info", response_model=HostInfo)
def host_info(request: Request):
    return request.app.state.host_probe.get_host_info()


@app.get("/api/host/stats", response_model=HostStats)
def host_stats(request: Request):
    return request.app.state.host_probe.get_host_stats()


@app.post("/api/documents/process", response_model=DocumentJobResponse)
def documents_process(body: DocumentJobRequest, request: Request):
    """Opaque blocking job: success marker or failure string."""
    try:
        message = process_document(
            body.mode, body.files, body.meta,
            delay_s=request.app.state.settings.document_delay_s,
        )
        return DocumentJobResponse(success=True, message=message)
    except DocumentJobError as e:
        return DocumentJobResponse(success=False, message=str(e))


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
