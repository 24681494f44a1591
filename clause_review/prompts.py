"""Centralized prompts for clause scoring.

All LLM prompts live here so they can be reviewed, versioned, and tuned in one place.
"""


# ---------------------------------------------------------------------------
# Batch - one request scores every clause of a document
# ---------------------------------------------------------------------------

def build_batch_message(clause_texts: list[str]) -> str:
    """Build the user message that numbers the clauses for batch scoring."""
    numbered = "\n".join(f"{i}. {text}" for i, text in enumerate(clause_texts, start=1))
    return f"""{BATCH_INSTRUCTION}

Clauses:
{numbered}

{BATCH_RESPONSE_FORMAT}"""


# ---------------------------------------------------------------------------
# Single clause
# ---------------------------------------------------------------------------

def build_single_message(clause_text: str) -> str:
    """Build the user message for scoring one clause."""
    return f"""{SINGLE_INSTRUCTION}

Clause: {clause_text}

{SINGLE_RESPONSE_FORMAT}"""


# ---------------------------------------------------------------------------
# Prompt Components - edit these to tune behavior
# ---------------------------------------------------------------------------

SYSTEM_PROMPT = "You are a legal contract analysis assistant."

BATCH_INSTRUCTION = (
    "Analyze the following legal contract clauses. For each clause, summarize it in "
    "1-2 sentences, assign a danger score from 0 (safe) to 100 (very risky), and "
    "explain the risk in 1-2 sentences."
)

SINGLE_INSTRUCTION = (
    "Analyze the following legal contract clause. Summarize it in 1-2 sentences, "
    "assign a danger score from 0 (safe) to 100 (very risky), and explain the risk "
    "in 1-2 sentences."
)

BATCH_RESPONSE_FORMAT = (
    "Respond ONLY with a valid JSON array, where each element has: summary, "
    "dangerScore, riskReason, in the same order as the clauses. Do not include any "
    "explanation or code block formatting."
)

SINGLE_RESPONSE_FORMAT = (
    "Respond ONLY with a valid JSON object with keys: summary, dangerScore, "
    "riskReason. Do not include any explanation or code block formatting."
)
