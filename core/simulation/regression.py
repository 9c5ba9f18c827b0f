"""Balance-point regression scenarios anchored to stored baselines."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from config import AircraftConfig, Topology, config
from ..analysis import BalanceEngine
from ..geometry import Panel, analyze_surface

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Chordwise stations, compared in fractions of wing MAC
STATION_METRICS = frozenset({"neutral_point", "cg_target", "ac_position"})


@dataclass
class ScenarioResult:
    name: str
    metrics: Dict[str, float]
    reference_mac: float = 0.0     # Wing MAC the stations are judged against


@dataclass
class RegressionScenario:
    name: str
    description: str
    evaluate: Callable[[AircraftConfig], ScenarioResult]
    tolerance: Optional[float] = None   # Overrides the runner default


class RegressionRunner:
    """Run deterministic balance regressions for CI validation."""

    def __init__(self, tolerance: float = 0.05, cfg: Optional[AircraftConfig] = None):
        self.tolerance = tolerance
        self.config = cfg or config
        self.scenarios: List[RegressionScenario] = [
            RegressionScenario(
                name="conventional_default",
                description="Default wing and tail, conventional layout",
                evaluate=self._conventional_default,
            ),
            RegressionScenario(
                name="flying_wing_default",
                description="Default wing flown as a tail-less aircraft",
                evaluate=self._flying_wing_default,
            ),
            RegressionScenario(
                name="reference_wing",
                description="Single-panel tapered wing with closed-form MAC",
                evaluate=self._reference_wing,
                tolerance=1e-4,
            ),
        ]

    @staticmethod
    def _with_topology(cfg: AircraftConfig, topology: Topology) -> AircraftConfig:
        return replace(cfg, layout=replace(cfg.layout, topology=topology))

    def _conventional_default(self, cfg: AircraftConfig) -> ScenarioResult:
        engine = BalanceEngine(self._with_topology(cfg, Topology.CONVENTIONAL))
        surfaces, result = engine.solve()
        return ScenarioResult(
            name="conventional_default",
            metrics={
                "neutral_point": result.neutral_point,
                "cg_target": result.cg_target,
                "tail_volume": result.tail_volume_coefficient,
                "wing_mac": surfaces.wing.mac,
                "wing_area": surfaces.wing.area,
            },
            reference_mac=surfaces.wing.mac,
        )

    def _flying_wing_default(self, cfg: AircraftConfig) -> ScenarioResult:
        engine = BalanceEngine(self._with_topology(cfg, Topology.FLYING_WING))
        surfaces, result = engine.solve()
        return ScenarioResult(
            name="flying_wing_default",
            metrics={
                "neutral_point": result.neutral_point,
                "cg_target": result.cg_target,
            },
            reference_mac=surfaces.wing.mac,
        )

    def _reference_wing(self, _: AircraftConfig) -> ScenarioResult:
        wing = analyze_surface(25.0, [Panel(tip_chord=10.0, sweep_offset=8.0, span=70.0)])
        return ScenarioResult(
            name="reference_wing",
            metrics={
                "area": wing.area,
                "mac": wing.mac,
                "ac_position": wing.ac_position,
                "aspect_ratio": wing.aspect_ratio,
            },
            reference_mac=wing.mac,
        )

    def run(self) -> List[ScenarioResult]:
        """Evaluate every scenario against the runner's configuration."""
        return [scenario.evaluate(self.config) for scenario in self.scenarios]

    def compare_to_baseline(
        self,
        baseline_path: Path,
        report_dir: Path,
    ) -> Tuple[bool, Dict[str, Dict[str, float]], List[str]]:
        """
        Compare every scenario metric to the stored baseline.

        Chordwise stations (NP, CG, AC) are judged as a fraction of the
        scenario's wing MAC, so a 0.01 tolerance means 1% MAC of balance
        drift. Every other metric is judged relative to its baseline value.
        """
        report_dir.mkdir(parents=True, exist_ok=True)
        with open(baseline_path, "r", encoding="utf-8") as f:
            baseline = json.load(f)

        current: Dict[str, Dict[str, float]] = {}
        deviations: Dict[str, Dict[str, dict]] = {}
        failures: List[str] = []

        for scenario, result in zip(self.scenarios, self.run()):
            current[result.name] = result.metrics
            tolerance = scenario.tolerance if scenario.tolerance is not None else self.tolerance

            reference_metrics = baseline.get(result.name)
            if reference_metrics is None:
                failures.append(f"Missing baseline for {result.name}")
                continue

            checked = deviations.setdefault(result.name, {})
            for metric_name, value in result.metrics.items():
                if metric_name not in reference_metrics:
                    failures.append(f"Missing baseline metric {metric_name} for {result.name}")
                    continue

                reference = reference_metrics[metric_name]
                if metric_name in STATION_METRICS:
                    basis = "mac"
                    deviation = abs(value - reference)
                    if result.reference_mac:
                        deviation /= abs(result.reference_mac)
                elif reference == 0:
                    basis = "absolute"
                    deviation = abs(value - reference)
                else:
                    basis = "relative"
                    deviation = abs(value - reference) / abs(reference)

                checked[metric_name] = {
                    "value": value,
                    "baseline": reference,
                    "deviation": deviation,
                    "basis": basis,
                    "tolerance": tolerance,
                }
                if deviation > tolerance:
                    unit = "MAC" if basis == "mac" else basis
                    failures.append(
                        f"{result.name}:{metric_name} deviated by {deviation:.2%} {unit} "
                        f"(value {value:.4f} vs {reference:.4f})"
                    )

        report = {
            "topology": self.config.layout.topology.value,
            "default_tolerance": self.tolerance,
            "metrics": deviations,
            "failures": failures,
            "status": "fail" if failures else "pass",
        }

        json_report = report_dir / "balance_validation_report.json"
        with open(json_report, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)
        logger.info(
            "Balance regressions %s (%d failure(s)), report at %s",
            report["status"], len(failures), json_report,
        )

        return (not failures, current, failures)
