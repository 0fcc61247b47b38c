from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from nexus.adapters.documents import LocalDirectoryDocumentSource
from nexus.app import (
    ask_portfolio,
    compute_quality_score,
    ingest_documents,
    ingest_email,
    list_conflicts,
    quick_update,
)
from nexus.config import configure_logging, get_ingest_config
from nexus.domain.model import CaptureMethod

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from nexus.domain.ingestion import IngestionResult

log = logging.getLogger(__name__)

_QUICK_METHODS = (CaptureMethod.QUICK_CAPTURE, CaptureMethod.VOICE)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ingest portfolio updates into the Nexus store")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Extract and merge every document in a folder")
    ingest.add_argument(
        "--dir",
        type=Path,
        help="Directory holding the documents (defaults to config)",
    )
    ingest.add_argument(
        "--delay",
        type=float,
        help="Seconds to wait between extraction calls (defaults to config)",
    )
    ingest.add_argument(
        "--concurrency",
        type=int,
        help="Maximum number of concurrent extraction calls (defaults to config)",
    )

    email = subparsers.add_parser("email", help="Ingest an already-parsed email body")
    email.add_argument(
        "body",
        help="Path to a text file holding the email body, or - to read standard input",
    )
    email.add_argument("--subject", default="", help="Email subject, used as the document name")

    quick = subparsers.add_parser("quick", help="Apply a one-sentence project update")
    quick.add_argument("text", nargs="+", help="The update note")
    quick.add_argument(
        "--method",
        choices=[method.value for method in _QUICK_METHODS],
        default=CaptureMethod.QUICK_CAPTURE.value,
        help="How the note was captured",
    )

    ask = subparsers.add_parser("ask", help="Ask a question about the project portfolio")
    ask.add_argument("question", nargs="+", help="The question")

    score = subparsers.add_parser("score", help="Recompute the store quality score")
    score.add_argument(
        "--save",
        action="store_true",
        help="Persist the recomputed score into the store metadata",
    )

    conflicts = subparsers.add_parser("conflicts", help="List detected conflict alerts")
    conflicts.add_argument("--project", type=str, help="Only alerts for matching project names")
    conflicts.add_argument(
        "--all",
        dest="include_resolved",
        action="store_true",
        help="Include alerts marked as resolved",
    )
    conflicts.add_argument("--limit", type=int, help="Maximum number of alerts to show")

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if args.command == "ingest":
        if args.delay is not None and args.delay < 0:
            raise ValueError("Delay must be non-negative")
        if args.concurrency is not None and args.concurrency < 1:
            raise ValueError("Concurrency must be at least 1")
    elif args.command == "quick":
        if not " ".join(args.text).strip():
            raise ValueError("Quick update text must not be blank")
    elif args.command == "ask":
        if not " ".join(args.question).strip():
            raise ValueError("Question must not be blank")
    elif args.command == "conflicts" and args.limit is not None and args.limit < 1:
        raise ValueError("Limit must be at least 1")


def _run_ingest(args: argparse.Namespace) -> None:
    config = get_ingest_config()
    if args.delay is not None:
        config = replace(config, inter_call_delay_seconds=args.delay)
    if args.concurrency is not None:
        config = replace(config, concurrency=args.concurrency)
    source = LocalDirectoryDocumentSource(args.dir) if args.dir is not None else None
    _report_ingestion(ingest_documents(source=source, ingest_config=config))


def _report_ingestion(result: IngestionResult) -> None:
    for error in result.errors:
        log.warning("Skipped %s: %s", error.label, error.message)
    for alert in result.conflicts:
        log.warning(
            "Conflict on %s (%s): %s -> %s",
            alert.project_name,
            alert.conflict_type,
            alert.previous_value,
            alert.new_value,
        )


def _run_quick(args: argparse.Namespace) -> None:
    result = quick_update(" ".join(args.text), capture_method=CaptureMethod(args.method))
    for alert in result.conflicts:
        log.warning(
            "Conflict on %s (%s): %s", alert.project_name, alert.conflict_type, alert.analysis
        )


def _run_email(args: argparse.Namespace) -> None:
    body = sys.stdin.read() if args.body == "-" else Path(args.body).read_text(encoding="utf-8")
    _report_ingestion(ingest_email(body, subject=args.subject))


def _run_conflicts(args: argparse.Namespace) -> None:
    alerts = list_conflicts(project_name=args.project, include_resolved=args.include_resolved)
    if args.limit is not None:
        alerts = alerts[: args.limit]
    if not alerts:
        print("No conflicts recorded.")
        return
    for alert in alerts:
        print(
            f"{alert.timestamp.isoformat()}  {alert.project_name}  {alert.conflict_type}: "
            f"{alert.previous_value} -> {alert.new_value}"
        )
        print(f"    {alert.analysis}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "ingest":
            _run_ingest(parsed_args)
        elif parsed_args.command == "email":
            _run_email(parsed_args)
        elif parsed_args.command == "quick":
            _run_quick(parsed_args)
        elif parsed_args.command == "ask":
            print(ask_portfolio(" ".join(parsed_args.question)))
        elif parsed_args.command == "score":
            score = compute_quality_score(persist=parsed_args.save)
            print(f"Quality score: {score}")
        elif parsed_args.command == "conflicts":
            _run_conflicts(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
