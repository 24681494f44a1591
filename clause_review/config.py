"""Configuration constants, thresholds, and fixed texts."""

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Load .env if present
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).parent.parent
_env_path = BASE_DIR / ".env"
if _env_path.exists():
    for _line in _env_path.read_text().splitlines():
        _line = _line.strip()
        if _line and not _line.startswith("#") and "=" in _line:
            _k, _, _v = _line.partition("=")
            os.environ.setdefault(_k.strip(), _v.strip().strip("\"'"))

# ---------------------------------------------------------------------------
# LLM Settings
# ---------------------------------------------------------------------------
ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY", "")
LLM_MODEL = os.environ.get("LLM_MODEL", "claude-sonnet-4-20250514")
LLM_MAX_TOKENS = int(os.environ.get("LLM_MAX_TOKENS", "2000"))
LLM_SINGLE_MAX_TOKENS = int(os.environ.get("LLM_SINGLE_MAX_TOKENS", "300"))
LLM_TEMPERATURE = float(os.environ.get("LLM_TEMPERATURE", "0.2"))
LLM_TIMEOUT = float(os.environ.get("LLM_TIMEOUT", "120"))
LLM_MAX_RETRIES = int(os.environ.get("LLM_MAX_RETRIES", "2"))

# ---------------------------------------------------------------------------
# Segmentation
# ---------------------------------------------------------------------------
SEGMENT_STRATEGY = os.environ.get("SEGMENT_STRATEGY", "anchor")
HEADER_TITLES = ("SERVICE AGREEMENT", "AGREEMENT", "CONTRACT", "TERMS AND CONDITIONS")
MIN_CLAUSE_CHARS = 20
MIN_PARAGRAPH_CHARS = 50
DIGIT_SPLIT_MIN_CLAUSES = 3
ANCHOR_MIN_CLAUSES = 1

# ---------------------------------------------------------------------------
# Clause records
# ---------------------------------------------------------------------------
PLACEHOLDER_SUMMARY = "This is a placeholder summary"
PLACEHOLDER_SCORE = 50
PLACEHOLDER_RISK_REASON = "This is a placeholder risk assessment"

FAILED_SUMMARY = "Analysis failed"
FAILED_SCORE = 0
FAILED_RISK_REASON = "The clause could not be analyzed. Please try again."

DEFAULT_DANGER_SCORE = 50

# ---------------------------------------------------------------------------
# Risk bands (upper bound inclusive) and summary weights
# ---------------------------------------------------------------------------
RISK_BANDS = (
    (30, "Safe"),
    (60, "Moderate"),
    (80, "High"),
    (100, "Critical"),
)
RISK_WEIGHTS = {"Safe": 1, "Moderate": 2, "High": 3, "Critical": 4}
KEY_RISK_THRESHOLD = 60
MAX_KEY_RISKS = 5
