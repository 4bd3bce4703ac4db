"""Tests for scripts/check_coverage_thresholds.py."""

import importlib.util
import json
from pathlib import Path
from types import ModuleType

import pytest

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "check_coverage_thresholds.py"


def _load_script() -> ModuleType:
    spec = importlib.util.spec_from_file_location("check_coverage_thresholds", SCRIPT)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _write_report(path: Path, percents: dict[str, float]) -> Path:
    files = {key: {"summary": {"percent_covered": value}} for key, value in percents.items()}
    path.write_text(json.dumps({"files": files}), encoding="utf-8")
    return path


def test_passes_when_all_modules_meet_thresholds(tmp_path: Path) -> None:
    script = _load_script()
    report = _write_report(tmp_path / "coverage.json", dict.fromkeys(script.THRESHOLDS, 100.0))
    assert script.check_thresholds(report) == []


def test_reports_low_and_missing_modules(tmp_path: Path) -> None:
    script = _load_script()
    report = _write_report(tmp_path / "coverage.json", {"./src/blobfiles/sessions.py": 50.0})

    failures = script.check_thresholds(report)

    assert "src/blobfiles/sessions.py: 50.00% < required 95.00%" in failures
    assert "src/blobfiles/options.py: coverage entry not found" in failures


def test_floor_applies_to_unlisted_modules(tmp_path: Path) -> None:
    script = _load_script()
    percents = dict.fromkeys(script.THRESHOLDS, 100.0)
    percents["/home/ci/repo/src/blobfiles/handles.py"] = 40.0
    report = _write_report(tmp_path / "coverage.json", percents)

    assert script.check_thresholds(report) == []
    assert script.check_thresholds(report, floor=80.0) == ["src/blobfiles/handles.py: 40.00% < required 80.00%"]


def test_rejects_non_report_json(tmp_path: Path) -> None:
    script = _load_script()
    path = tmp_path / "coverage.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(TypeError):
        script.check_thresholds(path)
