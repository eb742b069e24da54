"""CLI entrypoints for spacecompiler commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict

from .config import ConfigError, load_config
from .logging import configure_logging
from .models import CompilationResult
from .orchestrator import Orchestrator
from .serialization import result_to_dict


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_output_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the JSON result to this file instead of stdout.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spacecompiler",
        description="Compile documents into block trees and a cross-document attention matrix.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("."),
        help="Path to .spacecompiler.yml or the directory holding it.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Abort compilation after this many seconds.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    file_parser = subparsers.add_parser("file", help="Compile a single document.")
    _add_verbose_option(file_parser, suppress_default=True)
    _add_output_option(file_parser)
    file_parser.add_argument("path", type=Path, help="Document to compile.")
    file_parser.add_argument(
        "--content-type",
        default=None,
        help="Override the content type detected from the file extension.",
    )

    files_parser = subparsers.add_parser(
        "files", help="Compile several documents into one attention matrix."
    )
    _add_verbose_option(files_parser, suppress_default=True)
    _add_output_option(files_parser)
    files_parser.add_argument("paths", type=Path, nargs="+", help="Documents to compile.")

    project_parser = subparsers.add_parser(
        "project", help="Compile a ZIP archive driven by its .spaceproj descriptor."
    )
    _add_verbose_option(project_parser, suppress_default=True)
    _add_output_option(project_parser)
    project_parser.add_argument("archive", type=Path, help="Project archive (.zip).")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for spacecompiler commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=args.quiet)

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    if args.timeout is not None:
        config.timeout_seconds = args.timeout
    orchestrator = Orchestrator(config=config)

    try:
        if args.command == "file":
            content = _read_text(args.path)
            result = orchestrator.compile_file(content, args.path.name, args.content_type)
        elif args.command == "files":
            files: Dict[str, str] = {}
            for path in args.paths:
                files[str(path)] = _read_text(path)
            result = orchestrator.compile_files(files)
        elif args.command == "project":
            result = orchestrator.compile_project(args.archive.read_bytes())
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except OSError as exc:
        parser.exit(1, f"spacecompiler {args.command} failed: {exc}\n")

    _emit(result, args.output)
    if not result.success:
        for message in result.errors:
            print(f"error: {message}", file=sys.stderr)
        sys.exit(1)


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _emit(result: CompilationResult, output: Path | None) -> None:
    payload = json.dumps(result_to_dict(result), indent=2)
    if output is None:
        print(payload)
        return
    output.write_text(payload + "\n", encoding="utf-8")
    print(f"Result written to {output}")


if __name__ == "__main__":
    main(sys.argv[1:])
