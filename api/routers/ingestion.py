from fastapi import APIRouter, File, HTTPException, UploadFile
from pydantic import BaseModel
from typing import Any, Dict, List, Optional

from api import state
from logshield.core.errors import IngestionBusyError, NoParseableDataError, PARSE_FAILED_MESSAGE
from logshield.models.analysis_result import AnalysisResult
from logshield.utils.logger import log

router = APIRouter(prefix="/api/ingest", tags=["ingest"])


class IngestResponse(BaseModel):
    filename: Optional[str] = None
    strategy: str
    record_count: int
    analysis: AnalysisResult
    records: List[Dict[str, Any]]


class IngestStatus(BaseModel):
    state: str
    error_message: str = ""
    analysis: Optional[AnalysisResult] = None


@router.post("", response_model=IngestResponse)
async def ingest_file(file: UploadFile = File(...)):
    raw = await file.read()
    try:
        outcome = await state.ingestion.ingest(raw, filename=file.filename)
    except IngestionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except NoParseableDataError as e:
        raise HTTPException(status_code=422, detail={"error": PARSE_FAILED_MESSAGE, "reason": str(e)})
    except Exception as e:
        log.exception(f"[ingest][EXCEPTION] file={file.filename} err={e}")
        raise HTTPException(
            status_code=500,
            detail={"error": str(e), "hint": "Check server logs for full traceback."},
        )

    return IngestResponse(
        filename=file.filename,
        strategy=outcome.strategy.value,
        record_count=len(outcome.records),
        analysis=outcome.analysis,
        records=[r.to_dict() for r in outcome.records],
    )


@router.get("/status", response_model=IngestStatus)
async def ingest_status():
    svc = state.ingestion
    return IngestStatus(state=svc.state.value, error_message=svc.error_message, analysis=svc.last_result)


@router.post("/reset", response_model=IngestStatus)
async def ingest_reset():
    state.ingestion.reset()
    return IngestStatus(state=state.ingestion.state.value)
