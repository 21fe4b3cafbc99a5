"""
nlg/cli_frontend.py

Command-line interface for the grammar renderer.

Typical usage:

    grammar-lens render --input workspace.json --log
    grammar-lens render --input sentences.txt --notation
    grammar-lens render --input workspace.json --target ja
    grammar-lens notation --input workspace.json

The CLI:

- Reads a workspace from a file (or stdin): either a JSON object
  `{"sentences": [...]}`, a JSON list of sentences, or (with --notation)
  one compact-notation sentence per line.
- Renders every sentence and prints one line per sentence (English, or
  Japanese word order with --target ja).
- With --log, prints the flat derivation log as JSON to stderr.
- `notation` prints the compact notation of each sentence instead.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from app.core.domain.exceptions import DomainError
from app.core.domain.models import SentenceNode
from nlg.api import ORCHESTRATORS, RenderOptions, RenderSession
from semantics.notation import parse_notation, to_notation
from utils.logging_setup import init_logging

_SENTENCES = TypeAdapter(List[SentenceNode])


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grammar-lens",
        description="Render sentence ASTs to English and show how each form was derived.",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        required=True,
    )

    # `render` command
    ren = subparsers.add_parser(
        "render",
        help="Render a workspace of sentences to English.",
    )
    ren.add_argument(
        "--input",
        "-i",
        metavar="PATH",
        help="Workspace file. If omitted or '-', read from stdin.",
    )
    ren.add_argument(
        "--notation",
        action="store_true",
        help="Input is compact notation, one sentence per line.",
    )
    ren.add_argument(
        "--log",
        action="store_true",
        help="Print the derivation log (JSON) to stderr.",
    )
    ren.add_argument(
        "--target",
        choices=sorted(ORCHESTRATORS),
        default="en",
        help="Target language: English, or Japanese (SOV) word order.",
    )

    # `notation` command
    nota = subparsers.add_parser(
        "notation",
        help="Print the compact notation of each sentence in a JSON workspace.",
    )
    nota.add_argument(
        "--input",
        "-i",
        metavar="PATH",
        help="Workspace file. If omitted or '-', read from stdin.",
    )

    return parser


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _read(path: Optional[str]) -> str:
    if not path or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _load_workspace(raw: str) -> List[SentenceNode]:
    """Parse a JSON workspace: an object with "sentences" or a bare list."""
    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Error: invalid JSON input ({exc}).") from exc

    if isinstance(data, dict):
        data = data.get("sentences", [])
    if not isinstance(data, list):
        raise SystemExit("Error: expected a list of sentences or an object with 'sentences'.")

    try:
        return _SENTENCES.validate_python(data)
    except ValidationError as exc:
        raise SystemExit(f"Error: invalid sentence AST ({exc.error_count()} error(s)).\n{exc}") from exc


def _load_notation(raw: str) -> List[SentenceNode]:
    sentences = []
    for lineno, line in enumerate(raw.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            sentences.append(parse_notation(line))
        except DomainError as exc:
            raise SystemExit(f"Error: line {lineno}: {exc}") from exc
    return sentences


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_render(args: argparse.Namespace) -> int:
    raw = _read(args.input)
    sentences = _load_notation(raw) if args.notation else _load_workspace(raw)

    result = RenderSession().render(sentences, options=RenderOptions(target=args.target))

    for text in result.sentences:
        print(text)

    if args.log:
        print(json.dumps(result.logs, indent=2, ensure_ascii=False), file=sys.stderr)

    return 0


def _cmd_notation(args: argparse.Namespace) -> int:
    for sentence in _load_workspace(_read(args.input)):
        print(to_notation(sentence))
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    init_logging()

    if args.command == "render":
        exit_code = _cmd_render(args)
    elif args.command == "notation":
        exit_code = _cmd_notation(args)
    else:
        parser.error(f"Unknown command: {args.command}")
        return

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
