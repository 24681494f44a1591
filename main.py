#!/usr/bin/env python3
"""
Clause Review

Extracts the text of a contract (PDF, scanned image, DOCX or plain text),
splits it into clauses, and asks Claude to summarize and risk-score each
clause in a single batched request.

Usage:
    python main.py <contract_file> [--strategy anchor|digit_split] [--segment-only] [--json]

ANTHROPIC_API_KEY is read from the environment or from .env in the project dir.
"""

import contextlib
import json
import sys

from clause_review.config import ANTHROPIC_API_KEY
from clause_review.extractors import ExtractionError, extract_text
from clause_review.output import print_rich_summary, print_segments
from clause_review.pipeline import AnalysisSession, run_pipeline
from clause_review.segmenter import STRATEGIES, segment_document

USAGE = "Usage: python main.py <contract_file> [--strategy anchor|digit_split] [--segment-only] [--json]"


def parse_args(args: list[str]) -> dict:
    opts = {"input": None, "strategy": None, "segment_only": False, "json": False}
    i = 0
    while i < len(args):
        if args[i] == "--strategy" and i + 1 < len(args):
            opts["strategy"] = args[i + 1].lower()
            if opts["strategy"] not in STRATEGIES:
                raise ValueError(
                    f"--strategy must be {' or '.join(STRATEGIES)} (got '{opts['strategy']}')"
                )
            i += 2
        elif args[i] == "--segment-only":
            opts["segment_only"] = True
            i += 1
        elif args[i] == "--json":
            opts["json"] = True
            i += 1
        else:
            opts["input"] = args[i]
            i += 1
    return opts


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(USAGE)
        print("\nExamples:")
        print("  python main.py lease.pdf                       # Segment + score every clause")
        print("  python main.py scan.png --segment-only         # OCR and show clauses, no LLM")
        print("  python main.py nda.docx --strategy digit_split --json")
        return 0

    try:
        opts = parse_args(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    if not opts["input"]:
        print(USAGE)
        return 1

    if opts["segment_only"]:
        try:
            doc = extract_text(opts["input"])
        except ExtractionError as e:
            print(f"Error: {e}")
            return 1
        seg = segment_document(doc.text, opts["strategy"])
        if opts["json"]:
            print(json.dumps({"detector": seg.detector, "clauses": seg.clauses}, indent=2, ensure_ascii=False))
        else:
            print_segments(seg.clauses, seg.detector)
        return 0

    session = AnalysisSession()
    # With --json, progress goes to stderr so stdout stays parseable.
    out = sys.stderr if opts["json"] else sys.stdout
    try:
        with contextlib.redirect_stdout(out):
            if not ANTHROPIC_API_KEY:
                print("Warning: ANTHROPIC_API_KEY not set. Every clause will be marked as failed.")
            result = run_pipeline(opts["input"], strategy=opts["strategy"], session=session)
    except ExtractionError as e:
        print(f"Error: {e}")
        return 1

    if opts["json"]:
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return 0

    print_rich_summary(result["summary"], session.records, result["metadata"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
