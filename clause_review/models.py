"""Data classes for the review pipeline."""

from dataclasses import dataclass

from .config import (
    FAILED_RISK_REASON, FAILED_SCORE, FAILED_SUMMARY,
    PLACEHOLDER_RISK_REASON, PLACEHOLDER_SCORE, PLACEHOLDER_SUMMARY,
)

PENDING = "pending"
SUCCEEDED = "succeeded"
FAILED = "failed"


@dataclass
class DocumentText:
    text: str
    file_name: str = ""
    file_type: str = "text"   # "pdf", "image", "docx" or "text"


@dataclass(frozen=True)
class ClauseAnalysis:
    summary: str
    danger_score: int         # 0-100
    risk_reason: str


@dataclass
class ClauseRecord:
    id: str
    original_text: str
    summary: str = PLACEHOLDER_SUMMARY
    danger_score: int = PLACEHOLDER_SCORE
    risk_reason: str = PLACEHOLDER_RISK_REASON
    status: str = PENDING

    def succeed(self, analysis: ClauseAnalysis) -> None:
        self._check_pending()
        self.summary = analysis.summary
        self.danger_score = analysis.danger_score
        self.risk_reason = analysis.risk_reason
        self.status = SUCCEEDED

    def fail(self) -> None:
        self._check_pending()
        self.summary = FAILED_SUMMARY
        self.danger_score = FAILED_SCORE
        self.risk_reason = FAILED_RISK_REASON
        self.status = FAILED

    def _check_pending(self) -> None:
        if self.status != PENDING:
            raise ValueError(f"Clause {self.id} already settled as {self.status}")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "originalText": self.original_text,
            "summary": self.summary,
            "dangerScore": self.danger_score,
            "riskReason": self.risk_reason,
            "status": self.status,
        }
