"""Human-readable summary for normalization invariant reports."""

from __future__ import annotations

import argparse
import json
from pathlib import Path


def _format_value(value: float | int | None) -> str:
    if isinstance(value, (int, float)):
        return f"{value:.3f}"
    return "n/a"


def render_summary(report: dict) -> str:
    lines: list[str] = []
    lines.append("Invariant evaluation summary")
    lines.append(
        f"texts: {report.get('texts', 'n/a')}"
        f" | characters: {report.get('characters', 'n/a')}"
    )
    lines.append(f"commit: {report.get('git_commit') or 'n/a'}")
    lines.append("")
    header = (
        f"{'profile':<14} {'checked':>7} {'failed':>6}"
        f" {'p50 ms':>8} {'p95 ms':>8} {'max ms':>8}"
    )
    lines.append(header)
    profiles = report.get("profiles", {})
    if isinstance(profiles, dict):
        for name, profile in profiles.items():
            latency = profile.get("latency_ms", {}) if isinstance(profile, dict) else {}
            line = (
                f"{name:<14}"
                f" {profile.get('checked', 'n/a'):>7}"
                f" {profile.get('failed', 'n/a'):>6}"
                f" {_format_value(latency.get('p50')):>8}"
                f" {_format_value(latency.get('p95')):>8}"
                f" {_format_value(latency.get('max')):>8}"
            )
            lines.append(line)
    violations = report.get("violations") or []
    if violations:
        lines.append("")
        lines.append("violations:")
        for violation in violations:
            issues = ", ".join(violation.get("issues", []))
            label = f"[{violation.get('profile')}] {violation.get('text')}"
            lines.append(f"- {label}: {issues}")
    return "\n".join(lines)


def _load_report(path: Path) -> dict:
    return json.loads(path.read_text())


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarize eval report JSON")
    parser.add_argument(
        "--report-path",
        type=Path,
        default=Path("eval/reports/latest.json"),
        help="Path to eval report JSON",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    report = _load_report(args.report_path)
    print(render_summary(report))


if __name__ == "__main__":
    main()
