"""Command-line entry point for the trust gate."""

import argparse
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from trustgate.config.settings import Settings
from trustgate.imports.exceptions import SchemaInvalidError
from trustgate.imports.schema import load_exam
from trustgate.intake.models import AcceptedArtifact
from trustgate.intake.orchestrator import BatchIntakeOrchestrator, build_orchestrator
from trustgate.logging.logger import Log
from trustgate.sanitization.pipeline import (
    sanitize_input,
    sanitize_prompt_input,
    validate_code_input,
)
from trustgate.signature.models import Artifact

EXIT_ACCEPTED = 0
EXIT_REJECTED = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trustgate",
        description="Validate untrusted files, URLs and text before use.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Verify and reputation-scan local files")
    scan.add_argument("paths", nargs="+", type=Path)

    scan_url = sub.add_parser("scan-url", help="Fetch, verify and scan a remote file")
    scan_url.add_argument("url")

    sanitize = sub.add_parser("sanitize", help="Sanitize a text field")
    sanitize.add_argument("text")
    sanitize.add_argument("--mode", choices=("text", "code", "prompt"), default="text")
    sanitize.add_argument("--max-length", type=int, default=None)

    import_exam = sub.add_parser("import-exam", help="Validate a saved exam file")
    import_exam.add_argument("path", type=Path)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> configure logging -> dispatch command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    if args.command in ("scan", "scan-url"):
        orchestrator = build_orchestrator(settings)
        try:
            if args.command == "scan":
                artifacts = [Artifact(name=p.name, content=p.read_bytes()) for p in args.paths]
                accepted = orchestrator.process_files(artifacts, _print_delivery)
            else:
                accepted = orchestrator.process_url(args.url, _print_delivery)
            return _report_batch(orchestrator, accepted)
        finally:
            orchestrator.close()
    if args.command == "sanitize":
        return _sanitize(args.text, args.mode, args.max_length, settings)
    return _import_exam(args.path)


def _sanitize(text: str, mode: str, max_length: int | None, settings: Settings) -> int:
    if mode == "code":
        result = validate_code_input(text, max_length or settings.code_max_length)
    elif mode == "prompt":
        result = sanitize_prompt_input(text, max_length or settings.prompt_max_length)
    else:
        result = sanitize_input(text, max_length or settings.text_max_length)
    _emit(asdict(result))
    return EXIT_ACCEPTED if result.is_valid else EXIT_REJECTED


def _import_exam(path: Path) -> int:
    try:
        exam = load_exam(path.read_text(encoding="utf-8"))
    except SchemaInvalidError as exc:
        _emit({"valid": False, "error": str(exc)})
        return EXIT_REJECTED
    _emit({"valid": True, "questions": len(exam["questions"])})
    return EXIT_ACCEPTED


def _print_delivery(accepted: list[AcceptedArtifact]) -> None:
    Log.info(f"Consumer received {len(accepted)} artifacts")


def _report_batch(
    orchestrator: BatchIntakeOrchestrator,
    accepted: list[AcceptedArtifact],
) -> int:
    _emit({
        "log": [asdict(entry) for entry in orchestrator.log],
        "accepted": [
            {"name": a.name, "mime_type": a.mime_type, "digest": a.digest}
            for a in accepted
        ],
    })
    return EXIT_ACCEPTED if accepted and len(accepted) == len(orchestrator.log) else EXIT_REJECTED


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, default=str))


if __name__ == "__main__":
    raise SystemExit(main())
