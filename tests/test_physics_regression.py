from pathlib import Path
import json
import sys

# Ensure repository root on path for direct test execution
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from config import AircraftConfig  # noqa: E402
from core.simulation.regression import RegressionRunner  # noqa: E402


BASELINE = Path(__file__).parent / "snapshots" / "balance_baseline.json"


def test_balance_regressions_match_baseline(tmp_path):
    runner = RegressionRunner(tolerance=0.001, cfg=AircraftConfig())
    passed, current, failures = runner.compare_to_baseline(
        baseline_path=BASELINE, report_dir=tmp_path
    )

    assert passed, f"Balance regression failures: {failures}"
    # Spot check metrics are captured
    assert "flying_wing_default" in current
    assert "tail_volume" in current["conventional_default"]

    report = json.loads((tmp_path / "balance_validation_report.json").read_text())
    assert report["status"] == "pass"


def test_regression_flags_drift(tmp_path):
    cfg = AircraftConfig()
    cfg.layout.wing_to_tail_distance = 90.0
    runner = RegressionRunner(tolerance=0.01, cfg=cfg)
    passed, _, failures = runner.compare_to_baseline(
        baseline_path=BASELINE, report_dir=tmp_path
    )

    assert not passed
    assert any(f.startswith("conventional_default:neutral_point") for f in failures)
    # The flying wing ignores the tail entirely
    assert not any(f.startswith("flying_wing_default") for f in failures)


def _shifted_baseline(tmp_path, scenario, metric, delta):
    data = json.loads(BASELINE.read_text())
    data[scenario][metric] += delta
    path = tmp_path / "baseline.json"
    path.write_text(json.dumps(data))
    return path


def test_stations_are_judged_in_mac_fractions(tmp_path):
    # 0.15 cm is ~1.7% of the flying-wing NP but only ~0.8% of wing MAC
    baseline = _shifted_baseline(tmp_path, "flying_wing_default", "neutral_point", 0.15)
    runner = RegressionRunner(tolerance=0.01, cfg=AircraftConfig())
    passed, _, failures = runner.compare_to_baseline(baseline_path=baseline, report_dir=tmp_path)

    assert passed, failures
    report = json.loads((tmp_path / "balance_validation_report.json").read_text())
    entry = report["metrics"]["flying_wing_default"]["neutral_point"]
    assert entry["basis"] == "mac"
    assert entry["deviation"] < 0.01
    assert report["metrics"]["conventional_default"]["wing_area"]["basis"] == "relative"


def test_closed_form_scenario_uses_its_own_tolerance(tmp_path):
    # 0.1% area drift passes the 5% default but not the closed-form check
    baseline = _shifted_baseline(tmp_path, "reference_wing", "area", 2.45)
    runner = RegressionRunner(tolerance=0.05, cfg=AircraftConfig())
    passed, _, failures = runner.compare_to_baseline(baseline_path=baseline, report_dir=tmp_path)

    assert not passed
    assert [f.split(" ")[0] for f in failures] == ["reference_wing:area"]
