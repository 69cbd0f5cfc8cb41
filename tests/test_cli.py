import json
import os
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]


def _run(args: list[str], stdin: str | None = None) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(REPO_ROOT / "src")
    env["PYTHONIOENCODING"] = "utf-8"
    return subprocess.run(
        [sys.executable, "scripts/normalize.py", *args],
        cwd=REPO_ROOT,
        env=env,
        input=stdin,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


def test_cli_prints_offset_map_as_json() -> None:
    completed = _run(["--json"], stdin="A\u00a0\u00a0B\u00adC")
    assert completed.returncode == 0, completed.stderr
    payload = json.loads(completed.stdout)
    assert payload["normalized_text"] == "A BC"
    assert payload["norm_to_orig"] == [0, 1, 3, 5]
    assert payload["source_length"] == 6


def test_cli_query_mode_with_flag_override() -> None:
    completed = _run(["--query", "--case-insensitive"], stdin="ACCIO\u0301N")
    assert completed.returncode == 0, completed.stderr
    assert completed.stdout.rstrip("\n") == "acci\u00f3n"


def test_cli_rejects_unknown_unicode_form() -> None:
    completed = _run(["abc", "--unicode-form", "NFKC"])
    assert completed.returncode == 2
    assert "unicode_form" in completed.stderr


def test_cli_normalizes_documents(tmp_path: Path) -> None:
    doc_path = tmp_path / "escrito.txt"
    doc_path.write_text("Visto   el \u201cexpediente\u201d", encoding="utf-8")
    completed = _run(["--path", str(doc_path), "--json"])
    assert completed.returncode == 0, completed.stderr
    payload = json.loads(completed.stdout)
    assert payload["normalized_text"] == 'Visto el "expediente"'
    assert payload["blocks"] == 1
    assert payload["source_type"] == "text"
