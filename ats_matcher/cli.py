from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Sequence

from ats_matcher.core.config import settings
from ats_matcher.parsing import mime_type_for_filename
from ats_matcher.schemas.analysis import FileInput, ScoringResult, SessionState, TextInput
from ats_matcher.session import SessionStateManager, SqliteStore

KEYWORD_DISPLAY_LIMIT = 25


def _read_source(path: str) -> FileInput:
    file_path = Path(path)
    if not file_path.is_file():
        raise SystemExit(f"File not found: {file_path}")
    return FileInput(
        content=file_path.read_bytes(),
        mime_type=mime_type_for_filename(file_path.name),
        file_name=file_path.name,
    )


def _format_time(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M")


def _keywords_line(label: str, keywords: Sequence[str]) -> str:
    shown = ", ".join(keywords[:KEYWORD_DISPLAY_LIMIT]) or "-"
    extra = len(keywords) - KEYWORD_DISPLAY_LIMIT
    if extra > 0:
        shown += f" (+{extra} more)"
    return f"{label}: {shown}"


def render_result(result: ScoringResult) -> str:
    lines = [
        f"ATS score: {result.score}/100 ({result.match_level})",
        f"Keyword coverage: {result.coverage}% "
        f"({len(result.matched_keywords)}/{result.keyword_total} keywords)",
        f"Experience alignment: {round(result.experience_match * 100)}%",
        "Sections: " + ", ".join(f"{name} {value}%" for name, value in result.section_scores.items()),
        _keywords_line("Matched", result.matched_keywords),
        _keywords_line("Missing", result.missing_keywords),
    ]
    if result.insights:
        lines.append("Insights:")
        lines.extend(f"  - {tip}" for tip in result.insights)
    return "\n".join(lines)


def render_status(state: SessionState, ready: bool) -> str:
    resume = state.resume_document
    jd = state.job_description_document
    lines = [
        f"Resume: {resume.file_name} ({len(resume.text)} chars)" if resume else "Resume: -",
        f"Job description: {jd.file_name} ({len(jd.text)} chars)" if jd else "Job description: -",
        f"Ready to analyze: {'yes' if ready else 'no'}",
    ]
    if state.history:
        latest = state.history[0]
        lines.append(f"Last score: {latest.score} (coverage {latest.coverage}%) at {_format_time(latest.timestamp)}")
    return "\n".join(lines)


def render_history(state: SessionState) -> str:
    if not state.history:
        return "No analyses yet."
    return "\n".join(
        f"{_format_time(entry.timestamp)}  score {entry.score:>3}  coverage {entry.coverage:>3}%  "
        f"{entry.resume_file_name} vs {entry.jd_file_name}"
        for entry in state.history
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ats-matcher",
        description="Score a resume against a job description and keep a local analysis history.",
    )
    parser.add_argument("--store", default=settings.session_store_path, help="Path of the local session store.")
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON.")
    sub = parser.add_subparsers(dest="command", required=True)

    resume = sub.add_parser("resume", help="Load a resume (PDF, DOCX, TXT or MD).")
    resume.add_argument("path")

    jd = sub.add_parser("jd", help="Load a job description from a file or pasted text.")
    source = jd.add_mutually_exclusive_group(required=True)
    source.add_argument("path", nargs="?")
    source.add_argument("--text", help="Job description text.")

    sub.add_parser("analyze", help="Score the loaded resume against the job description.")
    sub.add_parser("status", help="Show the loaded documents.")
    sub.add_parser("history", help="List previous analyses, most recent first.")
    sub.add_parser("reset", help="Forget the loaded documents (history is kept).")
    sub.add_parser("clear-history", help="Delete the analysis history.")

    optimize = sub.add_parser("optimize", help="Ask the AI service for optimization suggestions.")
    optimize.add_argument("--api-key", default=None, help="Override the configured API key.")

    letter = sub.add_parser("cover-letter", help="Generate a cover letter with the AI service.")
    letter.add_argument("company")
    letter.add_argument("--api-key", default=None, help="Override the configured API key.")
    return parser


def _source_for(args: argparse.Namespace) -> TextInput | FileInput | None:
    if args.command == "resume":
        return _read_source(args.path)
    if args.command == "jd":
        if args.text is not None:
            return TextInput(text=args.text, file_name="pasted-job-description.txt")
        return _read_source(args.path)
    return None


async def _dispatch(
    args: argparse.Namespace,
    manager: SessionStateManager,
    source: TextInput | FileInput | None = None,
) -> str | None:
    command = args.command
    if command == "resume" and source is not None:
        await manager.ingest_resume(source)
        return render_status(manager.state, manager.ready_to_analyze)
    if command == "jd" and source is not None:
        await manager.ingest_job_description(source)
        return render_status(manager.state, manager.ready_to_analyze)
    if command == "analyze":
        result = manager.run_analysis()
        if result is None:
            return None
        return result.model_dump_json(indent=2) if args.json else render_result(result)
    if command == "status":
        return render_status(manager.state, manager.ready_to_analyze)
    if command == "history":
        if args.json:
            return json.dumps([entry.model_dump() for entry in manager.history], indent=2)
        return render_history(manager.state)
    if command == "reset":
        manager.reset()
        return "Session reset. History kept."
    if command == "clear-history":
        manager.clear_history()
        return "History cleared."
    if command == "optimize":
        return await manager.request_optimization(args.api_key)
    if command == "cover-letter":
        return await manager.request_cover_letter(args.company, args.api_key)
    raise SystemExit(f"Unknown command: {command}")


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s", stream=sys.stderr)
    args = build_parser().parse_args(argv)
    source = _source_for(args)

    store = SqliteStore(args.store)
    try:
        manager = SessionStateManager(store)
        output = asyncio.run(_dispatch(args, manager, source))
        error = manager.state.error
    finally:
        store.close()

    if output:
        print(output)
    if error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
