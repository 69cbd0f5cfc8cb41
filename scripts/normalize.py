"""Script to normalize text or a document and print the offset map."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
import time

try:
    from textnorm.engine import normalize_and_build_maps, normalize_query
    from textnorm.ingestion import build_document_index, load_document
    from textnorm.options import (
        NO_OP_OPTIONS,
        ConfigurationError,
        NormalizationOptions,
        search_options,
    )
    from textnorm.telemetry import configure_logging, log_event
except ModuleNotFoundError:
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root / "src"))
    from textnorm.engine import (  # type: ignore[reportMissingImports]
        normalize_and_build_maps,
        normalize_query,
    )
    from textnorm.ingestion import (  # type: ignore[reportMissingImports]
        build_document_index,
        load_document,
    )
    from textnorm.options import (  # type: ignore[reportMissingImports]
        NO_OP_OPTIONS,
        ConfigurationError,
        NormalizationOptions,
        search_options,
    )
    from textnorm.telemetry import (  # type: ignore[reportMissingImports]
        configure_logging,
        log_event,
    )


FLAG_OPTIONS = (
    ("unify_nbsp", "Replace NBSP variants with a plain space"),
    ("remove_soft_hyphen", "Delete soft hyphens"),
    ("remove_zero_width", "Delete zero-width and directional marks"),
    ("normalize_quotes_and_dashes", "Map curly quotes and dashes to ASCII"),
    ("case_insensitive", "Lower-case every codepoint"),
    ("normalize_whitespace", "Collapse whitespace runs to one space"),
    ("preserve_joiners", "Keep ZWJ/ZWNJ when removing zero-width marks"),
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Normalize text and map it back to source offsets"
    )
    parser.add_argument(
        "text", nargs="?", default=None, help="Text to normalize (default: stdin)"
    )
    parser.add_argument(
        "--path", type=Path, default=None, help="Document to load and normalize"
    )
    parser.add_argument(
        "--query",
        action="store_true",
        help="Normalize as a query (text only, no offset map)",
    )
    parser.add_argument(
        "--preset",
        choices=("none", "document"),
        default="document",
        help="Starting option set before flag overrides (default: document)",
    )
    for name, help_text in FLAG_OPTIONS:
        parser.add_argument(
            f"--{name.replace('_', '-')}",
            dest=name,
            action=argparse.BooleanOptionalAction,
            default=None,
            help=help_text,
        )
    parser.add_argument(
        "--unicode-form",
        type=str,
        default=None,
        help="Unicode normalization form: NFC, NFD or none",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the result as JSON with offset maps"
    )
    args = parser.parse_args()
    try:
        args.options = build_options(args)
    except ConfigurationError as exc:
        parser.error(str(exc))
    if args.text is not None and args.path is not None:
        parser.error("pass either TEXT or --path, not both")
    return args


def build_options(args: argparse.Namespace) -> NormalizationOptions:
    options = search_options() if args.preset == "document" else NO_OP_OPTIONS
    changes = {
        name: getattr(args, name)
        for name, _ in FLAG_OPTIONS
        if getattr(args, name) is not None
    }
    if args.unicode_form is not None:
        form = args.unicode_form.strip()
        changes["unicode_form"] = None if form.lower() == "none" else form.upper()
    return options.replace(**changes) if changes else options


def main() -> int:
    args = parse_args()
    logger = configure_logging()
    start = time.perf_counter()
    options: NormalizationOptions = args.options

    if args.path is not None:
        doc, report = load_document(args.path)
        if doc is None:
            print(
                f"Skipped {report.source_path}: {report.skip_reason}",
                file=sys.stderr,
            )
            return 1
        index = build_document_index(doc.blocks, options)
        payload = {
            **index.result.to_dict(),
            "blocks": len(index.blocks),
            "block_offsets": list(index.block_offsets),
            "source_type": doc.source_type,
        }
        normalized_text = index.normalized_text
        source_length = index.result.source_length
    else:
        text = args.text if args.text is not None else sys.stdin.read()
        if args.query:
            normalized_text = normalize_query(text, options)
            payload = {"normalized_text": normalized_text}
        else:
            result = normalize_and_build_maps(text, options)
            payload = result.to_dict()
            normalized_text = result.normalized_text
        source_length = len(text)

    latency_ms = (time.perf_counter() - start) * 1000
    log_event(
        logger,
        "normalize",
        mode="query" if args.query else "document",
        path=str(args.path) if args.path else None,
        options=options.to_dict(),
        source_length=source_length,
        normalized_length=len(normalized_text),
        latency_ms=latency_ms,
    )
    if args.json:
        print(json.dumps(payload, ensure_ascii=False))
    else:
        print(normalized_text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
