"""Command-line interface for converting @mermaid tags and injecting the runtime into HTML."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .page import bootstrap_fragment, convert_page_contents
from .plugin import MermaidOptions, add_options
from .tags import convert_comment_tag_text

logger = logging.getLogger(__name__)

SUBCOMMANDS_HINT = "Use one of: tag, inject, snippet."


@dataclass
class CliError(Exception):
    code: str
    message: str
    hint: Optional[str] = None
    exit_code: int = 1
    file: Optional[str] = None
    retryable: bool = True


class UsageError(Exception):
    pass


class FriendlyArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # pragma: no cover - argparse callback
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = FriendlyArgumentParser(
        prog="docmermaid",
        description="Convert @mermaid comment tags and inject the mermaid runtime into HTML pages.",
    )
    parser.add_argument("--error-format", choices=["text", "json"], default="text")
    parser.add_argument("--debug", action="store_true")

    subparsers = parser.add_subparsers(dest="command")

    tag_parser = subparsers.add_parser("tag", help="Convert raw @mermaid tag text to markup")
    tag_parser.add_argument("input", nargs="?", help="File holding the tag text")
    tag_parser.add_argument("--text", help="Raw tag text")

    inject_parser = subparsers.add_parser("inject", help="Inject the mermaid bootstrap into HTML")
    inject_parser.add_argument("inputs", nargs="*", metavar="FILE", help="HTML files (rewritten in place)")
    inject_parser.add_argument("--text", help="Raw HTML source")
    inject_parser.add_argument("--stdout", action="store_true", help="Write HTML to stdout")
    inject_parser.add_argument("-o", "--output", help="Output path (single input only)")
    add_options(inject_parser)

    snippet_parser = subparsers.add_parser("snippet", help="Print the bootstrap fragment")
    add_options(snippet_parser)

    return parser


def _configure_logging(debug: bool) -> None:
    level_name = "DEBUG" if debug else os.getenv("DOCMERMAID_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _read_path(path: Path) -> str:
    if not path.exists():
        raise CliError(
            "E_IO_READ",
            f"input file not found: {path}",
            exit_code=2,
            file=str(path),
        )
    try:
        with path.open("r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise CliError(
            "E_IO_READ",
            f"failed to read input file: {path}",
            hint=str(exc),
            exit_code=2,
            file=str(path),
        )


def _read_input(path: Optional[str], text: Optional[str]) -> str:
    if path and text is not None:
        raise CliError(
            "E_ARGS",
            "--text cannot be combined with file input",
            hint="Use either FILE or --text.",
            exit_code=2,
        )

    if text is not None:
        return text

    if path:
        return _read_path(Path(path))

    if sys.stdin.isatty():
        raise CliError(
            "E_ARGS",
            "no input provided",
            hint="Pass FILE, --text, or pipe stdin.",
            exit_code=2,
        )
    return sys.stdin.read()


def _write_text(path: Path, content: str) -> None:
    try:
        with path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(content)
    except OSError as exc:
        raise CliError(
            "E_IO_WRITE",
            f"failed to write output file: {path}",
            hint=str(exc),
            exit_code=4,
            file=str(path),
        )


def _error_from_exception(exc: Exception) -> CliError:
    if isinstance(exc, CliError):
        return exc
    return CliError(
        "E_INTERNAL",
        str(exc) or exc.__class__.__name__,
        hint="Re-run with --debug to see traceback.",
        exit_code=1,
        retryable=False,
    )


def _emit_error(err: CliError, *, error_format: str) -> None:
    if error_format == "json":
        payload = {
            "ok": False,
            "code": err.code,
            "message": err.message,
            "file": err.file,
            "hint": err.hint,
            "retryable": err.retryable,
        }
        sys.stderr.write(json.dumps(payload) + "\n")
        return

    sys.stderr.write(f"error[{err.code}]: {err.message}\n")
    if err.hint:
        sys.stderr.write(f"hint: {err.hint}\n")


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)
    if not text.endswith("\n"):
        sys.stdout.write("\n")


def _handle_tag(args: argparse.Namespace) -> int:
    source = _read_input(args.input, args.text)
    _write_stdout(convert_comment_tag_text(source))
    return 0


def _handle_inject(args: argparse.Namespace) -> int:
    if args.stdout and args.output:
        raise CliError(
            "E_ARGS",
            "--stdout and --output are mutually exclusive",
            hint="Choose either --stdout or --output.",
            exit_code=2,
        )
    if args.inputs and args.text is not None:
        raise CliError(
            "E_ARGS",
            "--text cannot be combined with file input",
            hint="Use either FILE or --text.",
            exit_code=2,
        )
    if args.output and len(args.inputs) > 1:
        raise CliError(
            "E_ARGS",
            "--output accepts a single input file",
            hint="Drop --output to rewrite each file in place.",
            exit_code=2,
        )

    options = MermaidOptions.from_namespace(args)

    if not args.inputs:
        source = _read_input(None, args.text)
        html = convert_page_contents(source, options.version)
        if args.output:
            _write_text(Path(args.output), html)
            print(f"Wrote {args.output}")
        else:
            sys.stdout.write(html)
        return 0

    for name in args.inputs:
        path = Path(name)
        source = _read_path(path)
        html = convert_page_contents(source, options.version)
        if args.stdout:
            sys.stdout.write(html)
            continue
        if html == source and not args.output:
            logger.info("no </body> in %s", path)
            print(f"Unchanged {path}")
            continue
        output_path = Path(args.output) if args.output else path
        _write_text(output_path, html)
        print(f"Wrote {output_path}")
    return 0


def _handle_snippet(args: argparse.Namespace) -> int:
    options = MermaidOptions.from_namespace(args)
    _write_stdout(bootstrap_fragment(options.version))
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    parser = _build_parser()

    if not raw_argv:
        err = CliError(
            "E_ARGS",
            "missing subcommand",
            hint=SUBCOMMANDS_HINT,
            exit_code=2,
        )
        _emit_error(err, error_format="text")
        return err.exit_code

    debug_enabled = "--debug" in raw_argv or os.getenv("DOCMERMAID_DEBUG") == "1"
    error_format = "text"
    if "--error-format" in raw_argv:
        idx = raw_argv.index("--error-format")
        if idx + 1 < len(raw_argv):
            error_format = raw_argv[idx + 1]

    try:
        args = parser.parse_args(raw_argv)
        error_format = args.error_format
        _configure_logging(debug_enabled)

        if args.command == "tag":
            return _handle_tag(args)
        if args.command == "inject":
            return _handle_inject(args)
        if args.command == "snippet":
            return _handle_snippet(args)

        raise CliError(
            "E_ARGS",
            "missing subcommand",
            hint=SUBCOMMANDS_HINT,
            exit_code=2,
        )
    except UsageError as exc:
        err = CliError(
            "E_ARGS",
            str(exc),
            hint=SUBCOMMANDS_HINT,
            exit_code=2,
        )
        _emit_error(err, error_format=error_format)
        return err.exit_code
    except Exception as exc:  # pragma: no cover - exercised in integration tests
        err = _error_from_exception(exc)
        _emit_error(err, error_format=error_format)
        if debug_enabled:
            traceback.print_exc(file=sys.stderr)
        return err.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
