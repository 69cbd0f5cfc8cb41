"""Check engine invariants and latency over sample texts and an optional corpus."""

from __future__ import annotations

import argparse
import json
import subprocess
import time
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from textnorm.config import EVAL_REPORT_PATH
from textnorm.engine import normalize_and_build_maps, normalize_query
from textnorm.ingestion import SUPPORTED_SUFFIXES, join_blocks, load_document
from textnorm.options import DOCUMENT_SEARCH_OPTIONS, NormalizationOptions, UnicodeForm

PROFILES: dict[str, NormalizationOptions] = {
    "document": DOCUMENT_SEARCH_OPTIONS,
    "document_ci": DOCUMENT_SEARCH_OPTIONS.replace(case_insensitive=True),
    "decomposed_ci": DOCUMENT_SEARCH_OPTIONS.replace(
        unicode_form=UnicodeForm.NFD, case_insensitive=True
    ),
}

SAMPLE_TEXTS = (
    "",
    "\u00ad\u00ad\u00ad",
    "A\u00a0B\u00adC\u200b",
    "\u201cHello\u201d \u2014 \u2018World\u2019",
    "AcCi\u00d3n y acci\u006f\u0301n",
    "A   B\tC\nD\r\nE",
    "\u0130stanbul \u03a3\u039f\u03a6\u0399\u0391",
    "\u1100\u1161\u11a8 \u1112\u1161\u11ab",
    "e\u00ad\u0301 a\u0323\u0302 \u212b",
    "emoji \U0001f469\u200d\U0001f4bb and \ud800 lone surrogate",
    "T\u0308 \u0130\u0301 \u03aa\u0301 \u1fbc\u0300",
    "Art.\u00a0\u00a01\u2013 del C\u00f3digo Civil\u202f\u2033",
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run normalization invariant evaluation"
    )
    parser.add_argument(
        "--corpus",
        type=Path,
        default=None,
        help="File or directory of documents to check in addition to samples",
    )
    parser.add_argument(
        "--report-path",
        type=Path,
        default=EVAL_REPORT_PATH,
        help="Path to write eval report artifact",
    )
    parser.add_argument(
        "--history-dir",
        type=Path,
        default=None,
        help="Directory for timestamped report history (default: next to report)",
    )
    return parser.parse_args()


def check_invariants(text: str, options: NormalizationOptions) -> list[str]:
    result = normalize_and_build_maps(text, options)
    starts = result.norm_to_orig
    ends = result.norm_to_orig_end
    issues: list[str] = []
    if len(starts) != len(result.normalized_text) or len(ends) != len(starts):
        issues.append("map_length")
    if any(not 0 <= start < len(text) for start in starts):
        issues.append("map_range")
    if any(not start < end <= len(text) for start, end in zip(starts, ends)):
        issues.append("map_end_range")
    if any(a > b for a, b in zip(starts, starts[1:])) or any(
        a > b for a, b in zip(ends, ends[1:])
    ):
        issues.append("map_order")
    again = normalize_and_build_maps(result.normalized_text, options).normalized_text
    if again != result.normalized_text:
        issues.append("idempotence")
    if normalize_query(text, options) != result.normalized_text:
        issues.append("query_consistency")
    return issues


def _collect_texts(corpus: Path | None) -> list[tuple[str, str]]:
    texts = [(f"sample:{idx}", text) for idx, text in enumerate(SAMPLE_TEXTS)]
    if corpus is None:
        return texts
    files = [corpus] if corpus.is_file() else sorted(corpus.rglob("*"))
    for path in files:
        if not path.is_file() or path.suffix.lower() not in SUPPORTED_SUFFIXES:
            continue
        doc, _ = load_document(path)
        if doc is None:
            continue
        raw_text, _ = join_blocks(doc.blocks)
        texts.append((str(path), raw_text))
    return texts


def _latency_summary(samples: list[float]) -> dict[str, float]:
    if not samples:
        return {"p50": 0.0, "p95": 0.0, "max": 0.0}
    values = np.asarray(samples, dtype="float64")
    return {
        "p50": float(np.percentile(values, 50)),
        "p95": float(np.percentile(values, 95)),
        "max": float(values.max()),
    }


def _get_git_commit() -> str | None:
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            check=True,
            capture_output=True,
            text=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None
    return result.stdout.strip() or None


def run_eval(corpus: Path | None = None) -> dict:
    texts = _collect_texts(corpus)
    profiles: dict[str, dict] = {}
    violations: list[dict] = []
    for name, options in PROFILES.items():
        latencies: list[float] = []
        failed = 0
        for label, text in texts:
            start = time.perf_counter()
            normalize_and_build_maps(text, options)
            latencies.append((time.perf_counter() - start) * 1000)
            issues = check_invariants(text, options)
            if issues:
                failed += 1
                violations.append({"profile": name, "text": label, "issues": issues})
        profiles[name] = {
            "options": options.to_dict(),
            "checked": len(texts),
            "failed": failed,
            "latency_ms": _latency_summary(latencies),
        }
    return {
        "texts": len(texts),
        "characters": sum(len(text) for _, text in texts),
        "profiles": profiles,
        "violations": violations,
        "git_commit": _get_git_commit(),
    }


def main() -> None:
    args = parse_args()
    report = run_eval(args.corpus)

    args.report_path.parent.mkdir(parents=True, exist_ok=True)
    args.report_path.write_text(json.dumps(report, indent=2))

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    history_dir = args.history_dir or args.report_path.parent / "history"
    history_dir.mkdir(parents=True, exist_ok=True)
    history_path = history_dir / f"report_{timestamp}.json"
    history_path.write_text(json.dumps(report, indent=2))

    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
