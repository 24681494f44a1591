"""LLM clause scoring - summary, danger score and risk rationale per clause."""

import json
import math
import re

from .config import (
    ANTHROPIC_API_KEY, DEFAULT_DANGER_SCORE, LLM_MAX_RETRIES, LLM_MAX_TOKENS,
    LLM_MODEL, LLM_SINGLE_MAX_TOKENS, LLM_TEMPERATURE, LLM_TIMEOUT,
)
from .models import ClauseAnalysis
from .prompts import SYSTEM_PROMPT, build_batch_message, build_single_message


class ScoringError(Exception):
    """The scoring call failed: transport, status, empty content or bad payload."""


_llm_client = None

_ARRAY_RE = re.compile(r"\[\s*[\{\[].*[\}\]]\s*\]", re.DOTALL)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def _get_llm_client():
    global _llm_client
    if _llm_client is None:
        import anthropic
        _llm_client = anthropic.Anthropic(
            api_key=ANTHROPIC_API_KEY,
            timeout=LLM_TIMEOUT,
            max_retries=LLM_MAX_RETRIES,
        )
    return _llm_client


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        _, _, body = text.partition("\n")
        text = body.rsplit("```", 1)[0].strip()
    return text


def _call_llm(user_message: str, max_tokens: int) -> tuple[str, str | None]:
    """Send one message and return (response text, stop reason)."""
    if not ANTHROPIC_API_KEY:
        raise ScoringError("ANTHROPIC_API_KEY not configured. Cannot score clauses.")

    import anthropic

    client = _get_llm_client()
    try:
        resp = client.messages.create(
            model=LLM_MODEL,
            max_tokens=max_tokens,
            temperature=LLM_TEMPERATURE,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": user_message}],
        )
    except anthropic.APIError as e:
        raise ScoringError(f"Anthropic API error: {e}") from e

    text = "".join(
        block.text for block in resp.content if getattr(block, "type", "") == "text"
    )
    text = _strip_fences(text)
    if not text:
        raise ScoringError("No content returned from the scoring model.")
    return text, resp.stop_reason


def _recover_truncated_json(text: str) -> list[dict]:
    """Try to recover complete objects from a truncated JSON array.

    When the LLM response hits max_tokens, the JSON gets cut mid-object.
    This extracts all complete objects before the truncation point.
    """
    results = []
    depth = 0
    obj_start = None
    in_string = False
    escape_next = False

    for i, ch in enumerate(text):
        if escape_next:
            escape_next = False
            continue
        if ch == "\\" and in_string:
            escape_next = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if ch == "{":
            if depth == 0:
                obj_start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0 and obj_start is not None:
                try:
                    results.append(json.loads(text[obj_start:i + 1]))
                except json.JSONDecodeError:
                    pass
                obj_start = None

    return results


def _parse_array(text: str, stop_reason: str | None) -> list:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        payload = None
        match = _ARRAY_RE.search(text)
        if match:
            try:
                payload = json.loads(match.group(0))
            except json.JSONDecodeError:
                print(f"  Failed to parse extracted JSON array: {match.group(0)[:200]}")
        if payload is None and stop_reason == "max_tokens":
            print("  Warning: Response truncated at max_tokens. Recovering complete objects...")
            payload = _recover_truncated_json(text) or None
            if payload:
                print(f"  Recovered {len(payload)} complete clause analyses from truncated response.")

    if payload is None:
        print(f"  Raw scoring response (batch): {text[:500]}")
        raise ScoringError("Failed to parse scoring response as JSON array.")
    if not isinstance(payload, list):
        raise ScoringError(f"Expected JSON array from LLM, got {type(payload).__name__}")
    return payload


_ITEM_KEYS = ("summary", "dangerScore", "danger_score", "riskReason", "risk_reason")


def _coerce_score(value) -> int:
    # bool is an int subclass; a true/false score is not a number here.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_DANGER_SCORE
    if not math.isfinite(value):
        return DEFAULT_DANGER_SCORE
    return max(0, min(100, int(round(value))))


def _normalize_item(item) -> ClauseAnalysis | None:
    if not isinstance(item, dict):
        return None
    # An object with none of the fields is not an analysis.
    if not any(key in item for key in _ITEM_KEYS):
        return None
    score = item.get("dangerScore")
    if score is None:
        score = item.get("danger_score")
    return ClauseAnalysis(
        summary=str(item.get("summary") or ""),
        danger_score=_coerce_score(score),
        risk_reason=str(item.get("riskReason") or item.get("risk_reason") or ""),
    )


def score_clauses(clause_texts: list[str]) -> list[ClauseAnalysis | None]:
    """
    Score every clause in a single LLM call.

    Args:
        clause_texts: Clause strings in document order

    Returns:
        Results in the same order. The list may be shorter than the input when
        the model truncates; entries that are not objects come back as None.

    Raises:
        ScoringError: on any transport, status, content or parse failure
    """
    if not clause_texts:
        return []

    text, stop_reason = _call_llm(build_batch_message(clause_texts), LLM_MAX_TOKENS)
    items = _parse_array(text, stop_reason)
    if len(items) != len(clause_texts):
        print(f"  Warning: {len(items)} results returned for {len(clause_texts)} clauses.")
    return [_normalize_item(item) for item in items]


def analyze_clause(clause_text: str) -> ClauseAnalysis:
    """Score a single clause. Raises ScoringError on failure."""
    text, _ = _call_llm(build_single_message(clause_text), LLM_SINGLE_MAX_TOKENS)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        match = _OBJECT_RE.search(text)
        if not match:
            print(f"  Raw scoring response (single): {text[:500]}")
            raise ScoringError("Failed to parse scoring response as JSON.")
        try:
            payload = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            print(f"  Failed to parse extracted JSON object: {match.group(0)[:200]}")
            raise ScoringError("Failed to parse scoring response as JSON.") from e

    result = _normalize_item(payload)
    if result is None:
        raise ScoringError(f"Expected JSON object from LLM, got {type(payload).__name__}")
    return result
