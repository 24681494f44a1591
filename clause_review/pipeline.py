"""Analysis orchestration: pending clause records, one batched scoring call,
positional reconciliation, and stale-response discard across uploads."""

import itertools
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

from .analysis import score_clauses
from .config import ANTHROPIC_API_KEY, LLM_MODEL, MIN_CLAUSE_CHARS
from .extractors import extract_text
from .models import ClauseAnalysis, ClauseRecord, DocumentText
from .output import generate_summary
from .segmenter import segment_document


# ---------------------------------------------------------------------------
# Clause records
# ---------------------------------------------------------------------------

def validate_clause(text: str) -> tuple[bool, str]:
    """Check a hand-edited clause before it is sent for scoring."""
    trimmed = (text or "").strip()
    if not trimmed:
        return False, "Clause cannot be empty"
    if len(trimmed) < MIN_CLAUSE_CHARS:
        return False, "Clause is too short for meaningful analysis"
    return True, ""


def build_records(clauses: list[str], batch_id: str | None = None) -> list[ClauseRecord]:
    """One pending record per clause; ids are only for tracking in the UI."""
    batch_id = batch_id or str(int(time.time() * 1000))
    return [
        ClauseRecord(id=f"{batch_id}-{idx}", original_text=text)
        for idx, text in enumerate(clauses)
    ]


def reconcile(records: list[ClauseRecord], results: list) -> list[ClauseRecord]:
    """Apply results[i] to records[i].

    Positions past the end of a short result list, and entries that are not
    analyses, fail individually. Surplus results are ignored.
    """
    for i, record in enumerate(records):
        result = results[i] if i < len(results) else None
        if isinstance(result, ClauseAnalysis):
            record.succeed(result)
        else:
            record.fail()
    return records


def fail_all(records: list[ClauseRecord]) -> list[ClauseRecord]:
    for record in records:
        record.fail()
    return records


def _request_scores(records: list[ClauseRecord], scorer) -> list | None:
    """Make the single batched scoring call. None means the call failed."""
    try:
        return list(scorer([r.original_text for r in records]))
    except Exception as e:
        print(f"  Scoring failed for {len(records)} clauses: {e}")
        return None


def _apply_scores(records: list[ClauseRecord], results: list | None) -> None:
    if results is None:
        fail_all(records)
    else:
        reconcile(records, results)


def analyze_records(records: list[ClauseRecord], scorer=None) -> list[ClauseRecord]:
    """Score all records in one call; any failure fails every record alike."""
    if not records:
        return records
    _apply_scores(records, _request_scores(records, scorer or score_clauses))
    return records


# ---------------------------------------------------------------------------
# Session - the currently displayed record set
# ---------------------------------------------------------------------------

@dataclass
class AnalysisRun:
    generation: int
    records: list[ClauseRecord] = field(default_factory=list)
    detector: str = ""
    settled: bool = False


class AnalysisSession:
    """Holds the records for the latest document.

    Each start() opens a new generation and replaces the displayed set.
    A scoring response is applied only if its run is still the active
    generation; responses for superseded runs are dropped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._generations = itertools.count(1)
        self._active = 0
        self._records: list[ClauseRecord] = []

    @property
    def records(self) -> list[ClauseRecord]:
        with self._lock:
            return list(self._records)

    @property
    def active_generation(self) -> int:
        with self._lock:
            return self._active

    def snapshot(self) -> tuple[int, list[dict]]:
        """Active generation and its records in wire shape, read in one step."""
        with self._lock:
            return self._active, [r.to_dict() for r in self._records]

    def is_current(self, run: AnalysisRun) -> bool:
        with self._lock:
            return run.generation == self._active

    def start(self, clauses: list[str], detector: str = "") -> AnalysisRun:
        records = build_records(clauses)
        with self._lock:
            generation = next(self._generations)
            self._active = generation
            self._records = records
        return AnalysisRun(generation=generation, records=records, detector=detector)

    def finish(self, run: AnalysisRun, scorer=None) -> bool:
        """Score the run's clauses once. Returns False if the response was discarded.

        A run that has already been applied is not scored again.
        """
        if run.settled:
            return True
        results = None
        if run.records:
            # Never hold the lock across the network call.
            results = _request_scores(run.records, scorer or score_clauses)
        with self._lock:
            if run.generation != self._active:
                print(f"  Discarding stale response for generation {run.generation} "
                      f"(active: {self._active})")
                return False
            if run.settled:
                return True
            if run.records:
                _apply_scores(run.records, results)
            run.settled = True
        return True


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------

def _reporter(progress_callback):
    def progress(step, total, msg):
        if progress_callback:
            progress_callback(step, total, msg)
        else:
            print(msg)
    return progress


def _score_and_summarize(session, run, scorer, progress, total_steps) -> tuple[bool, dict]:
    progress(total_steps - 1, total_steps,
             f"[Step {total_steps - 1}/{total_steps}] Scoring {len(run.records)} clauses...")
    applied = session.finish(run, scorer)

    progress(total_steps, total_steps, f"[Step {total_steps}/{total_steps}] Summarizing...")
    return applied, generate_summary(run.records)


def run_pipeline(
    source: Path | str | DocumentText,
    strategy: str | None = None,
    scorer=None,
    progress_callback=None,
    session: AnalysisSession | None = None,
) -> dict:
    """
    Run extraction, segmentation and scoring for one document.

    Returns a dict with metadata, summary and clause records (wire shape).
    metadata["stale"] is True when a newer document superseded this run
    before its scoring response arrived; its records are left pending.
    """
    progress = _reporter(progress_callback)
    _t0 = time.time()
    session = session or AnalysisSession()

    progress(1, 4, "[Step 1/4] Extracting text...")
    doc = source if isinstance(source, DocumentText) else extract_text(source)
    print(f"  {doc.file_name}: {len(doc.text)} characters ({doc.file_type})")

    progress(2, 4, "[Step 2/4] Segmenting clauses...")
    segmentation = segment_document(doc.text, strategy)
    print(f"  Clauses: {len(segmentation.clauses)} (detector: {segmentation.detector})")

    run = session.start(segmentation.clauses, segmentation.detector)
    applied, summary = _score_and_summarize(session, run, scorer, progress, 4)

    metadata = {
        "tool": "Clause Review",
        "file_name": doc.file_name,
        "file_type": doc.file_type,
        "detector": segmentation.detector,
        "llm_model": LLM_MODEL if ANTHROPIC_API_KEY or scorer else None,
        "generation": run.generation,
        "stale": not applied,
        "elapsed_seconds": round(time.time() - _t0, 1),
    }
    return {
        "metadata": metadata,
        "summary": summary,
        "clauses": [r.to_dict() for r in run.records],
    }


def run_clauses(
    clauses: list[str],
    scorer=None,
    progress_callback=None,
    session: AnalysisSession | None = None,
) -> dict:
    """Score a hand-edited clause list, skipping extraction and segmentation."""
    progress = _reporter(progress_callback)
    _t0 = time.time()
    session = session or AnalysisSession()
    cleaned = [(c or "").strip() for c in clauses]
    invalid = []
    for n, text in enumerate(cleaned, start=1):
        ok, message = validate_clause(text)
        if not ok:
            invalid.append((n, message))
    if invalid:
        numbers = ", ".join(str(n) for n, _ in invalid)
        raise ValueError(f"Invalid clauses found: {numbers}. {invalid[0][1]}")

    run = session.start(cleaned, "manual")
    applied, summary = _score_and_summarize(session, run, scorer, progress, 2)

    metadata = {
        "tool": "Clause Review",
        "detector": "manual",
        "llm_model": LLM_MODEL if ANTHROPIC_API_KEY or scorer else None,
        "generation": run.generation,
        "stale": not applied,
        "elapsed_seconds": round(time.time() - _t0, 1),
    }
    return {
        "metadata": metadata,
        "summary": summary,
        "clauses": [r.to_dict() for r in run.records],
    }
