"""Command-line entry point: flags, overrides and exported artifacts."""

import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import main as cli  # noqa: E402


def _run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["main.py", *args])
    return cli.main()


def test_no_arguments_prints_help(monkeypatch, capsys):
    assert _run(monkeypatch) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_analysis(monkeypatch, capsys):
    assert _run(monkeypatch, "--analysis") == 0
    out = capsys.readouterr().out
    assert "Neutral Point" in out
    assert "Tail Volume" in out
    assert any(line.startswith("Metric") and "Tail" in line for line in out.splitlines())


def test_flying_wing_override(monkeypatch, capsys):
    assert _run(monkeypatch, "--analysis", "--flying-wing", "--static-margin", "7") == 0
    out = capsys.readouterr().out
    assert "flying_wing" in out
    assert "Tail Volume" not in out
    assert "OUTSIDE RECOMMENDED" not in out


def test_static_margin_warning(monkeypatch, capsys):
    assert _run(monkeypatch, "--validate", "--static-margin", "30") == 1
    assert "STABILITY WARNING" in capsys.readouterr().out


def test_exports_with_metadata(monkeypatch, tmp_path):
    report = tmp_path / "balance.json"
    drawing = tmp_path / "planform.dxf"
    assert _run(monkeypatch, "--export-json", str(report), "--dxf", str(drawing)) == 0

    assert json.loads(report.read_text())["topology"] == "conventional"
    assert drawing.exists()
    assert (tmp_path / "balance.metadata.json").exists()
    assert (tmp_path / "planform.metadata.json").exists()


def test_summary(monkeypatch, capsys):
    assert _run(monkeypatch, "--summary") == 0
    assert "Configuration Summary" in capsys.readouterr().out


def test_surface_without_panels_exits_cleanly(monkeypatch, capsys):
    monkeypatch.setattr(cli.config.wing, "panels", [])
    assert _run(monkeypatch, "--analysis") == 1
    out = capsys.readouterr().out
    assert "GEOMETRY ERROR" in out
    assert "Geometry error" in out
