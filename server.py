"""FastAPI backend for Clause Review.

Wraps the clause_review/ package as REST API endpoints. One shared session
holds the clause records of the most recently uploaded document.
"""

import os

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from clause_review.config import ANTHROPIC_API_KEY, LLM_MODEL, SEGMENT_STRATEGY
from clause_review.extractors import ExtractionError, document_from_text, extract_upload
from clause_review.models import DocumentText
from clause_review.pipeline import AnalysisSession, run_clauses, run_pipeline
from clause_review.segmenter import STRATEGIES, segment_document

app = FastAPI(title="Clause Review API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(","),
    allow_methods=["*"],
    allow_headers=["*"],
)

session = AnalysisSession()


def _check_strategy(strategy: str) -> str | None:
    strategy = strategy.strip().lower()
    if strategy and strategy not in STRATEGIES:
        raise HTTPException(
            status_code=400,
            detail=f"strategy must be one of: {', '.join(STRATEGIES)}",
        )
    return strategy or None


def _read_document(text: str, file: UploadFile | None) -> DocumentText:
    if file is None and not text.strip():
        raise HTTPException(status_code=400, detail="Provide a file or contract text")
    try:
        if file is not None:
            return extract_upload(file.filename, file.file.read())
        return document_from_text(text)
    except ExtractionError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


# ---------------------------------------------------------------------------
# GET /api/config - LLM availability check
# ---------------------------------------------------------------------------
@app.get("/api/config")
def api_config():
    return {
        "llm_available": bool(ANTHROPIC_API_KEY),
        "llm_model": LLM_MODEL,
        "segment_strategy": SEGMENT_STRATEGY,
        "strategies": list(STRATEGIES),
    }


# ---------------------------------------------------------------------------
# POST /api/segment - Clauses only, no scoring
# ---------------------------------------------------------------------------
@app.post("/api/segment")
def api_segment(
    file: UploadFile | None = File(None),
    text: str = Form(""),
    strategy: str = Form(""),
):
    strategy = _check_strategy(strategy)
    doc = _read_document(text, file)
    seg = segment_document(doc.text, strategy)
    return {
        "file_name": doc.file_name,
        "file_type": doc.file_type,
        "detector": seg.detector,
        "clauses": seg.clauses,
    }


# ---------------------------------------------------------------------------
# POST /api/analyze - Segment + score; or score a hand-edited clause list
# ---------------------------------------------------------------------------
@app.post("/api/analyze")
def api_analyze(
    file: UploadFile | None = File(None),
    text: str = Form(""),
    strategy: str = Form(""),
    clause: list[str] | None = Form(None),
):
    strategy = _check_strategy(strategy)
    if clause:
        try:
            result = run_clauses(clause, session=session)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
    else:
        doc = _read_document(text, file)
        result = run_pipeline(doc, strategy=strategy, session=session)

    if result["metadata"]["stale"]:
        raise HTTPException(status_code=409, detail="Superseded by a newer document")
    return result


# ---------------------------------------------------------------------------
# GET /api/clauses - Records currently on display
# ---------------------------------------------------------------------------
@app.get("/api/clauses")
def api_clauses():
    generation, clauses = session.snapshot()
    return {"generation": generation, "clauses": clauses}
