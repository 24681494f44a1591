"""Clause segmentation: split raw contract text into an ordered list of clauses.

Detectors are tried in priority order. The configured structural detector runs
first; when it keeps too few clauses the text is re-split on blank lines. The
worst case is the whole document returned as a single clause, never an error.
"""

import re
from dataclasses import dataclass, field

from .config import (
    ANCHOR_MIN_CLAUSES, DIGIT_SPLIT_MIN_CLAUSES, HEADER_TITLES,
    MIN_CLAUSE_CHARS, MIN_PARAGRAPH_CHARS, SEGMENT_STRATEGY,
)


@dataclass
class Segmentation:
    clauses: list[str] = field(default_factory=list)
    detector: str = ""        # "anchor", "digit_split" or "paragraph"


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_HEADER_RE = re.compile(
    r"^\s*(?:" + "|".join(re.escape(t) for t in HEADER_TITLES) + r")\b"
    r".*?\n[ \t]*\n",
    re.IGNORECASE | re.DOTALL,
)

_BULLETS = "-•‣▪●◦"

_MARKER = (
    r"(?:\d{1,2}(?:\.\d+)*[.)]"     # 1.  1)  2.3.  4.1)
    r"|\([A-Za-z]\)"                # (a)
    r"|[" + _BULLETS + r"])"        # - and bullet glyphs
)

# Markers count only at the start of a line, never mid-sentence.
_ANCHOR_RE = re.compile(r"^[ \t]*" + _MARKER + r"(?=\s)", re.MULTILINE)
_ANCHOR_STRIP_RE = re.compile(r"^" + _MARKER + r"(?:\s+|$)")

_DIGIT_RE = re.compile(r"^[ \t]*\d+\.(?=\s)", re.MULTILINE)
_DIGIT_STRIP_RE = re.compile(r"^\d+\.\s*")

_BLANK_LINE_RE = re.compile(r"\n[ \t]*(?:\n[ \t]*)+")
_SHOUTED_RE = re.compile(r"[A-Z\s]+")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _normalize(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def strip_header(text: str) -> str:
    """Drop a leading title paragraph such as "SERVICE AGREEMENT ...\\n\\n"."""
    return _HEADER_RE.sub("", text, count=1)


def _split_at(text: str, pattern: re.Pattern) -> list[tuple[str, bool]]:
    """Cut text before every match of pattern.

    Returns (piece, starts_with_marker) pairs. The piece before the first
    match is kept as an unmarked preamble. No match at all yields [].
    """
    starts = [m.start() for m in pattern.finditer(text)]
    if not starts:
        return []
    pieces = [(text[:starts[0]], False)]
    for begin, end in zip(starts, starts[1:] + [len(text)]):
        pieces.append((text[begin:end], True))
    return pieces


def _is_substantial(candidate: str) -> bool:
    if not candidate:
        return False
    return len(candidate) >= MIN_CLAUSE_CHARS or "\n" in candidate


def _collect(pieces: list[tuple[str, bool]], strip_re: re.Pattern) -> list[str]:
    clauses = []
    for piece, marked in pieces:
        candidate = piece.strip()
        if not _is_substantial(candidate):
            continue
        if marked:
            body = strip_re.sub("", candidate, count=1).strip()
            # A marker on its own line does not make a heading multi-line.
            if len(candidate) < MIN_CLAUSE_CHARS and "\n" not in body:
                continue
            candidate = body
        if candidate:
            clauses.append(candidate)
    return clauses


# ---------------------------------------------------------------------------
# Detectors
# ---------------------------------------------------------------------------

def _anchor_candidates(text: str) -> list[str]:
    return _collect(_split_at(text, _ANCHOR_RE), _ANCHOR_STRIP_RE)


def _digit_split_candidates(text: str) -> list[str]:
    pieces = _split_at(text, _DIGIT_RE) or [(text, False)]
    return _collect(pieces, _DIGIT_STRIP_RE)


def _paragraph_candidates(text: str) -> list[str]:
    clauses = []
    for piece in _BLANK_LINE_RE.split(text):
        piece = piece.strip()
        if len(piece) <= MIN_PARAGRAPH_CHARS:
            continue
        # An all-caps block is a title, not clause body.
        if _SHOUTED_RE.fullmatch(piece):
            continue
        clauses.append(piece)
    return clauses


_DETECTORS = {
    "anchor": (_anchor_candidates, ANCHOR_MIN_CLAUSES),
    "digit_split": (_digit_split_candidates, DIGIT_SPLIT_MIN_CLAUSES),
}

STRATEGIES = tuple(_DETECTORS)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def segment_document(text: str, strategy: str | None = None) -> Segmentation:
    """Segment text and report which detector produced the clauses."""
    strategy = strategy or SEGMENT_STRATEGY
    if strategy not in _DETECTORS:
        raise ValueError(
            f"Unknown segmentation strategy '{strategy}' "
            f"(expected one of: {', '.join(STRATEGIES)})"
        )
    if not text:
        return Segmentation([], strategy)

    body = strip_header(_normalize(text))
    detect, minimum = _DETECTORS[strategy]
    clauses = detect(body)
    if len(clauses) >= minimum:
        return Segmentation(clauses, strategy)
    return Segmentation(_paragraph_candidates(body), "paragraph")


def segment(text: str, strategy: str | None = None) -> list[str]:
    """Split contract text into clause strings, in document order."""
    return segment_document(text, strategy).clauses
