import csv
from typing import Any, Dict, List

from fastapi import Body, FastAPI, File, HTTPException, UploadFile

from .config import load_settings
from .convert import read_regular_csv
from .errors import ConfigError, FormatError, IngestionError
from .logging_utils import configure_logging
from .models import HealthResponse, SegmentationResponse, ValidationResponse
from .pipeline import segment_bytes
from .rules import CSV_EXTENSION, SUPPORTED_EXTENSIONS
from .validation import validate_document

settings = load_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title="csv-segmenter",
    description="CSV/XLSX contact lists to segmentation-criteria JSON",
    version="0.1.0",
)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/segmentation", response_model=SegmentationResponse)
async def segment_file(file: UploadFile = File(...)):
    filename = file.filename or ""
    if not filename.lower().endswith(SUPPORTED_EXTENSIONS):
        raise HTTPException(status_code=422, detail="Only .xlsx and .csv files are supported")

    raw = await file.read()
    try:
        return segment_bytes(raw, filename, settings)
    except (FormatError, IngestionError, ConfigError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.post("/convert")
async def convert_csv(file: UploadFile = File(...)) -> List[Dict[str, Any]]:
    if not (file.filename or "").lower().endswith(CSV_EXTENSION):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    try:
        return read_regular_csv(raw)
    except csv.Error as exc:
        raise HTTPException(status_code=422, detail=f"malformed CSV: {exc}") from exc


@app.post("/validate", response_model=ValidationResponse)
def validate(document: Any = Body(...)):
    issues = validate_document(document)
    return {"ok": not issues, "errors": issues}
