from __future__ import annotations

from pathlib import Path

from soundboard.domain.filenames import extension, is_audio_filename
from runner.types import SmokeError, SmokeReport


def collect_fixtures(fixtures_dir: Path) -> list[Path]:
    """Return the audio fixtures in `fixtures_dir`, sorted by name."""
    if not fixtures_dir.exists():
        raise SmokeError(f"fixtures directory not found: {fixtures_dir}")
    files = sorted(p for p in fixtures_dir.iterdir() if p.is_file() and is_audio_filename(p.name))
    if not files:
        raise SmokeError(f"no audio fixtures found in {fixtures_dir}")
    return files


def build_config(filenames: list[str]) -> dict:
    """One category per extension, one sound per stored file."""
    by_ext: dict[str, list[dict]] = {}
    for name in sorted(filenames):
        stem = name.rpartition(".")[0] or name
        by_ext.setdefault(extension(name), []).append({"name": stem, "file": name})
    return {
        "categories": [
            {"name": f"Smoke {ext}", "sounds": sounds} for ext, sounds in sorted(by_ext.items())
        ]
    }


def summarize(report: SmokeReport) -> tuple[dict, int]:
    """Compute a summary dict and an exit code from the collected checks."""
    stored = [u for u in report.uploaded if u.success]
    summary = {
        "component": "runner",
        "event": "summary",
        "uploaded": len(stored),
        "rejected": [
            {"filename": u.filename, "code": u.code, "error": u.error}
            for u in report.uploaded
            if not u.success
        ],
        "listed": len(report.listed),
        "checks": report.checks,
        "elapsed_ms": max(0, report.finished_ms - report.started_ms),
    }
    passed = bool(report.checks) and all(report.checks.values())
    return summary, 0 if passed else 1
