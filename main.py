#!/usr/bin/env python3
"""
CG Balance PDE: Main Entry Point
================================

Usage:
    python main.py --analysis                 Neutral point and CG target
    python main.py --analysis --flying-wing   Same wing, tail-less
    python main.py --dxf output/DXF/planform.dxf
    python main.py --validate-physics         Regression against baselines

"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config import InvalidConfiguration, Topology, config  # noqa: E402
from core.analysis import BalanceEngine  # noqa: E402
from core.logging_config import setup_logging  # noqa: E402
from core.metadata import write_artifact_metadata  # noqa: E402
from core.planform import Planform  # noqa: E402


def validate_config(cfg) -> bool:
    """Validate aircraft configuration."""
    print("Validating configuration...")
    errors = cfg.validate()

    if errors:
        print("\nCONFIGURATION WARNINGS:")
        for err in errors:
            print(f"  [!] {err}")
        return False

    print("  Configuration valid.")
    return True


def validate_physics(cfg) -> bool:
    """Run balance regressions against stored baselines."""
    from core.simulation.regression import RegressionRunner

    print("\n--- Validating Balance Models ---")
    report_dir = project_root / "output" / "reports"
    baseline = project_root / "tests" / "snapshots" / "balance_baseline.json"

    runner = RegressionRunner(cfg=cfg)
    passed, current, failures = runner.compare_to_baseline(
        baseline_path=baseline, report_dir=report_dir
    )

    if passed:
        print("  Balance regressions PASSED")
    else:
        print("  Balance regressions FAILED:")
        for failure in failures:
            print(f"   - {failure}")
    return passed


def run_analysis(engine: BalanceEngine) -> None:
    """Print surface geometry and the balance point."""
    print("\n--- Running Balance Point Analysis ---")
    surfaces, _ = engine.solve()
    metrics = engine.calculate_metrics()

    print(surfaces.table(with_tail=engine.topology is Topology.CONVENTIONAL))
    print(metrics.summary())

    if not metrics.is_within_recommended:
        print("  WARNING: Static margin outside the recommended range")


def export_json(engine: BalanceEngine, target: Path) -> None:
    path = engine.export_json(target)
    write_artifact_metadata(
        path,
        {"name": "balance_report", "topology": engine.topology.value},
        "JSON",
        cfg=engine.config,
    )
    print(f"  Balance report written to: {path}")


def export_dxf(engine: BalanceEngine, target: Path) -> None:
    surfaces, result = engine.solve()
    planform = Planform.build(engine.config, surfaces, result)
    path = planform.export_dxf(target)
    write_artifact_metadata(path, planform.get_metadata(), "DXF", cfg=engine.config)
    print(f"  Planform drawing written to: {path}")


def build_config(args):
    """Apply command-line overrides to a copy of the SSOT configuration."""
    layout = config.layout
    if args.flying_wing:
        layout = replace(layout, topology=Topology.FLYING_WING)
    if args.static_margin is not None:
        layout = replace(layout, static_margin_percent=args.static_margin)
    return replace(config, layout=layout)


def main():
    parser = argparse.ArgumentParser(description="CG Balance PDE Environment")
    parser.add_argument("--analysis", action="store_true", help="Run balance analysis")
    parser.add_argument(
        "--flying-wing", action="store_true", help="Treat the aircraft as tail-less"
    )
    parser.add_argument(
        "--static-margin", type=float, default=None, metavar="PCT",
        help="Static margin in %% MAC"
    )
    parser.add_argument(
        "--export-json", type=Path, default=None, metavar="PATH",
        help="Write the balance report as JSON"
    )
    parser.add_argument(
        "--dxf", type=Path, default=None, metavar="PATH",
        help="Write the planform drawing as DXF"
    )
    parser.add_argument(
        "--validate", action="store_true", help="Validate configuration only"
    )
    parser.add_argument(
        "--validate-physics",
        action="store_true",
        help="Validate balance results against stored baselines",
    )
    parser.add_argument(
        "--summary", action="store_true", help="Show configuration summary"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    if len(sys.argv) == 1:
        parser.print_help()
        return 0

    if args.verbose:
        setup_logging(logging.DEBUG)

    cfg = build_config(args)
    print(f"{cfg.project_name} v{cfg.version} [{cfg.layout.topology.value}]")

    if args.summary:
        print(cfg.summary())
        return 0

    if args.validate:
        return 0 if validate_config(cfg) else 1

    if args.validate_physics:
        return 0 if validate_physics(cfg) else 1

    # Warnings are advisory; the balance is still computed
    validate_config(cfg)
    engine = BalanceEngine(cfg)

    try:
        if args.analysis:
            run_analysis(engine)
        if args.export_json:
            export_json(engine, args.export_json)
        if args.dxf:
            export_dxf(engine, args.dxf)
    except InvalidConfiguration as e:
        print(f"\nInvalid configuration: {e}")
        return 1
    except ValueError as e:
        # e.g. a surface left without panels
        print(f"\nGeometry error: {e}")
        return 1

    print("\nDone.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
