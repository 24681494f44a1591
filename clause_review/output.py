"""Output generation: contract summary, rich terminal output."""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import KEY_RISK_THRESHOLD, MAX_KEY_RISKS, RISK_BANDS, RISK_WEIGHTS
from .models import FAILED, SUCCEEDED, ClauseRecord

_RECOMMENDATIONS = {
    "Safe": "Accept",
    "Moderate": "Negotiate",
    "High": "Negotiate",
    "Critical": "Avoid",
}

_RISK_STYLE = {
    "Safe": "bold green",
    "Moderate": "bold yellow",
    "High": "bold dark_orange",
    "Critical": "bold red",
}


def risk_band(score: float) -> str:
    for upper, label in RISK_BANDS:
        if score <= upper:
            return label
    return RISK_BANDS[-1][1]


def generate_summary(records: list[ClauseRecord]) -> dict:
    """Roll per-clause scores up into a contract-level risk summary.

    Only succeeded records count towards scores; failed records carry a
    sentinel score that says nothing about the clause.
    """
    scored = [r for r in records if r.status == SUCCEEDED]
    failed = sum(1 for r in records if r.status == FAILED)

    summary = {
        "total_clauses": len(records),
        "analyzed_clauses": len(scored),
        "failed_clauses": failed,
        "average_score": None,
        "weighted_score": None,
        "risk_level": "Unknown",
        "recommendation": "Review manually",
        "band_breakdown": {},
        "key_risks": [],
        "explanation": "",
    }
    if not scored:
        summary["explanation"] = (
            f"None of the {len(records)} clauses could be analyzed."
            if records else "No clauses were found in the document."
        )
        return summary

    scores = [r.danger_score for r in scored]
    weights = [RISK_WEIGHTS[risk_band(s)] for s in scores]
    average = round(sum(scores) / len(scores), 1)
    weighted = round(sum(s * w for s, w in zip(scores, weights)) / sum(weights), 1)
    level = risk_band(weighted)

    by_band: dict[str, int] = {}
    for s in scores:
        by_band[risk_band(s)] = by_band.get(risk_band(s), 0) + 1

    numbered = [(n, r) for n, r in enumerate(records, start=1) if r.status == SUCCEEDED]
    ranked = sorted(
        (item for item in numbered if item[1].danger_score > KEY_RISK_THRESHOLD),
        key=lambda item: -item[1].danger_score,
    )
    key_risks = [
        {"clause_number": n, "score": r.danger_score, "description": r.risk_reason or r.summary}
        for n, r in ranked[:MAX_KEY_RISKS]
    ]

    lines = [f"{len(scored)} of {len(records)} clauses analyzed"
             + (f", {failed} failed." if failed else ".")]
    lines.append(f"Average danger score {average}, weighted score {weighted} ({level}).")
    if ranked:
        lines.append(f"{len(ranked)} clause(s) scored above {KEY_RISK_THRESHOLD}.")

    summary.update(
        average_score=average,
        weighted_score=weighted,
        risk_level=level,
        recommendation=_RECOMMENDATIONS[level],
        band_breakdown=by_band,
        key_risks=key_risks,
        explanation="\n".join(lines),
    )
    return summary


def print_rich_summary(summary: dict, records: list[ClauseRecord], metadata: dict) -> None:
    console = Console()
    console.print()
    level = summary["risk_level"]
    style = _RISK_STYLE.get(level, "bold")
    summary_text = (
        f"[bold]Clauses:[/bold] {summary['total_clauses']}  "
        f"[bold]Analyzed:[/bold] {summary['analyzed_clauses']}  "
        f"[bold red]Failed:[/bold red] {summary['failed_clauses']}\n"
        f"[bold]Risk:[/bold] [{style}]{level}[/]  "
        f"[bold]Recommendation:[/bold] {summary['recommendation']}\n"
        f"[bold]Average:[/bold] {summary['average_score']}  "
        f"[bold]Weighted:[/bold] {summary['weighted_score']}\n"
        f"[bold]Segmenter:[/bold] {metadata.get('detector', 'N/A')}  "
        f"[bold]Model:[/bold] {metadata.get('llm_model', 'N/A')}"
    )
    console.print(Panel(summary_text, title="Contract Review Summary", border_style="blue", expand=False))

    table = Table(title="Clauses", box=box.ROUNDED, show_lines=True)
    table.add_column("#", style="bold", width=4)
    table.add_column("Score", width=8)
    table.add_column("Summary", width=50)
    table.add_column("Risk", width=50)
    for n, r in enumerate(records, start=1):
        band = risk_band(r.danger_score)
        score = "n/a" if r.status == FAILED else f"[{_RISK_STYLE[band]}]{r.danger_score}[/]"
        table.add_row(str(n), score, r.summary, r.risk_reason)
    console.print(table)
    console.print()


def print_segments(clauses: list[str], detector: str) -> None:
    console = Console()
    table = Table(title=f"{len(clauses)} clauses ({detector})", box=box.ROUNDED, show_lines=True)
    table.add_column("#", style="bold", width=4)
    table.add_column("Clause", width=100)
    for n, text in enumerate(clauses, start=1):
        table.add_row(str(n), text[:300] + "..." if len(text) > 300 else text)
    console.print(table)
