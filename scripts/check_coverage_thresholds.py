"""Check blobfiles module coverage against per-module minimums from a coverage.py JSON report."""

import argparse
import json
import sys
from pathlib import Path
from typing import Final

# Session and service modules carry the release guarantees; keep them near-fully covered.
THRESHOLDS: Final[dict[str, float]] = {
    "src/blobfiles/sessions.py": 95.0,
    "src/blobfiles/options.py": 95.0,
    "src/blobfiles/files.py": 95.0,
    "src/blobfiles/service/_memory.py": 90.0,
    "src/blobfiles/service/_local.py": 85.0,
}


def _load_files(path: Path) -> dict[str, object]:
    """Return the ``files`` object of a coverage JSON report."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict) or not isinstance(raw.get("files"), dict):
        msg = f"{path} is not a coverage.py JSON report with a 'files' object."
        raise TypeError(msg)
    return raw["files"]


def _module_key(path: str) -> str:
    """Normalize a coverage file key to a ``src/...`` relative POSIX path."""
    normalized = path.replace("\\", "/").removeprefix("./")
    marker_index = normalized.rfind("/src/")
    if marker_index >= 0:
        return normalized[marker_index + 1 :]
    return normalized


def _percent_by_module(files: dict[str, object]) -> dict[str, float]:
    """Map normalized module paths to ``summary.percent_covered``."""
    percents: dict[str, float] = {}
    for file_key, entry in files.items():
        if not isinstance(entry, dict):
            continue
        summary = entry.get("summary")
        value = summary.get("percent_covered") if isinstance(summary, dict) else None
        if isinstance(value, int | float):
            percents[_module_key(file_key)] = float(value)
    return percents


def check_thresholds(report_path: Path, *, floor: float | None = None) -> list[str]:
    """Return one failure line per module below its minimum.

    ``floor`` additionally applies to every ``src/blobfiles`` module not listed in THRESHOLDS.
    """
    percents = _percent_by_module(_load_files(report_path))
    required = dict(THRESHOLDS)
    if floor is not None:
        for module_path in percents:
            if module_path.startswith("src/blobfiles/"):
                required.setdefault(module_path, floor)

    failures: list[str] = []
    for module_path, min_percent in sorted(required.items()):
        percent = percents.get(module_path)
        if percent is None:
            failures.append(f"{module_path}: coverage entry not found")
        elif percent < min_percent:
            failures.append(f"{module_path}: {percent:.2f}% < required {min_percent:.2f}%")
    return failures


def main() -> int:
    """Run the module-level coverage check."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "report",
        nargs="?",
        default="coverage.json",
        help="Path to coverage.py JSON report (default: coverage.json).",
    )
    parser.add_argument("--floor", type=float, default=None, help="Minimum percent for unlisted modules.")
    args = parser.parse_args()
    failures = check_thresholds(Path(args.report), floor=args.floor)
    for failure in failures:
        sys.stderr.write(f"{failure}\n")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
