"""
FastAPI Backend for Ledgerly Data Interchange
RESTful endpoints for exporting and importing financial records
"""

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
from pathlib import Path
from datetime import datetime
import json
import logging
import sys

# Add backend to path
backend_path = Path(__file__).parent.parent / 'backend'
sys.path.insert(0, str(backend_path))

# Import backend modules
from config import config
from logging_config import setup_logging
from main import (
    InterchangeService,
    MEDIA_TYPES,
    UnsupportedFormatError,
    export_filename,
    infer_format,
    normalize_format,
)
from models import SectionOptions, UserIdentity
from output.writer import ReportGenerationError
from repository import InMemoryRepository, RecordRepository

setup_logging(log_file="api.log")
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Ledgerly Data Interchange API",
    description="Export financial records to JSON, CSV or PDF and import them back",
    version=config.VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Process-wide store; swap via app.dependency_overrides[get_repository]
_repository = InMemoryRepository()


def get_repository() -> RecordRepository:
    return _repository


def get_service(repository: RecordRepository = Depends(get_repository)) -> InterchangeService:
    return InterchangeService(repository)


def get_current_user(
    x_user: Optional[str] = Header(None),
    x_user_email: Optional[str] = Header(None)
) -> UserIdentity:
    """Identity supplied by the authenticating proxy in front of this API."""
    if not x_user or not x_user.strip():
        raise HTTPException(status_code=401, detail="Missing X-User header")
    return UserIdentity(username=x_user.strip(), email=x_user_email)


def parse_import_options(options: Optional[str]) -> SectionOptions:
    """Read the optional {"transactions": true, ...} form field."""
    if not options or not options.strip():
        return SectionOptions()
    try:
        mapping = json.loads(options)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Invalid options JSON: {e}")
    if not isinstance(mapping, dict):
        raise HTTPException(status_code=400, detail="Options must be a JSON object")
    try:
        return SectionOptions.from_mapping(mapping)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {
        "message": "Ledgerly Data Interchange API",
        "version": config.VERSION,
        "endpoints": {
            "GET /api/export/{format}": "Export records as json, csv or pdf (?sections=all|transactions,budgets,goals)",
            "POST /api/export/import": "Import records from a .json, .csv or .pdf export",
            "GET /health": "Health check"
        },
        "settings": config.to_dict()
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat()
    }


@app.get("/api/export/{export_format}")
async def export_records(
    export_format: str,
    sections: str = "all",
    user: UserIdentity = Depends(get_current_user),
    service: InterchangeService = Depends(get_service)
):
    """
    Export the caller's records.

    - **export_format**: json, csv or pdf
    - **sections**: "all" or a comma-separated list of transactions, budgets, goals
    """
    section_options = SectionOptions.parse(sections)
    try:
        data = service.export_data(user, export_format, section_options)
    except UnsupportedFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ReportGenerationError as e:
        logger.error(f"Report generation failed for {user.username}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    fmt = normalize_format(export_format)
    filename = export_filename(fmt)
    return Response(
        content=data,
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@app.post("/api/export/import")
async def import_records(
    file: UploadFile = File(..., description="A .json, .csv or .pdf export file"),
    options: Optional[str] = Form(None, description='JSON such as {"transactions": true, "goals": false}'),
    user: UserIdentity = Depends(get_current_user),
    service: InterchangeService = Depends(get_service)
):
    """
    Import records from an export file.

    Returns the import outcome: per-kind counts, warnings and a success flag.
    """
    content = await file.read()
    filename = file.filename or ""

    is_valid, error = config.validate_file(filename, len(content))
    if not is_valid:
        logger.warning(f"Rejected upload {filename!r} from {user.username}: {error}")
        return JSONResponse(status_code=400, content={"success": False, "message": error})

    section_options = parse_import_options(options)
    fmt = infer_format(filename)

    try:
        outcome = service.import_data(user, fmt, content, section_options)
    except Exception as e:
        logger.error(f"Error importing {filename}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {e}")

    status_code = 200 if outcome.success else 400
    return JSONResponse(status_code=status_code, content=outcome.to_dict())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)
