"""Check exported balance artifacts against their provenance sidecars.

Every balance report (.json) and planform drawing (.dxf) under output/
needs a `<stem>.metadata.json` sidecar whose recorded topology agrees with
what the artifact itself shows.
"""
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterator, List, Optional

import ezdxf

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import InvalidConfiguration, Topology
from core.metadata import REQUIRED_FIELDS


ARTIFACT_TYPES = {".dxf": "DXF", ".json": "JSON"}

# Sidecars and regression reports carry no sidecar of their own
SKIPPED_SUFFIXES = (".metadata.json", "_validation_report.json")


def iter_balance_artifacts(output_dir: Path) -> Iterator[Path]:
    if not output_dir.exists():
        return
    for path in sorted(output_dir.rglob("*")):
        if (
            path.is_file()
            and path.suffix.lower() in ARTIFACT_TYPES
            and not path.name.endswith(SKIPPED_SUFFIXES)
        ):
            yield path


def artifact_topology(artifact_path: Path) -> Topology:
    """Topology as recorded by the artifact itself.

    Reports store it by name; drawings show it by carrying a fuselage
    outline only for the conventional layout.
    """
    if artifact_path.suffix.lower() == ".json":
        report = json.loads(artifact_path.read_text())
        return Topology.parse(report.get("topology", ""))

    doc = ezdxf.readfile(str(artifact_path))
    fuselage = doc.modelspace().query('*[layer=="FUSELAGE"]')
    return Topology.CONVENTIONAL if len(fuselage) else Topology.FLYING_WING


def check_artifact(artifact_path: Path) -> Optional[str]:
    """Return a failure reason, or None when the sidecar matches."""
    metadata_path = artifact_path.parent / f"{artifact_path.stem}.metadata.json"
    if not metadata_path.exists():
        return f"Missing metadata for {artifact_path}"

    try:
        payload = json.loads(metadata_path.read_text())
    except json.JSONDecodeError:
        return f"Invalid JSON in {metadata_path}"

    missing = [name for name in REQUIRED_FIELDS if name not in payload]
    if missing:
        return f"Metadata missing fields {missing} for {artifact_path}"

    if payload["artifact"] != artifact_path.name:
        return f"Metadata names {payload['artifact']!r}, not {artifact_path.name}"

    expected_type = ARTIFACT_TYPES[artifact_path.suffix.lower()]
    if payload["artifact_type"] != expected_type:
        return f"{artifact_path.name} recorded as {payload['artifact_type']}, expected {expected_type}"

    if not str(payload["config_hash"]).strip():
        return f"Metadata for {artifact_path.name} has no config hash"

    try:
        recorded = Topology.parse(payload["component"].get("topology", ""))
    except InvalidConfiguration:
        return f"Metadata for {artifact_path.name} records no valid topology"

    try:
        actual = artifact_topology(artifact_path)
    except (InvalidConfiguration, ValueError, OSError, ezdxf.DXFError) as e:
        return f"Cannot read topology from {artifact_path.name}: {e}"

    if recorded is not actual:
        return (
            f"{artifact_path.name} is {actual.value} but its metadata "
            f"records {recorded.value}"
        )
    return None


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate balance artifact metadata")
    parser.add_argument(
        "--output",
        type=Path,
        default=PROJECT_ROOT / "output",
        help="Output directory to scan",
    )
    args = parser.parse_args(argv)

    artifacts = list(iter_balance_artifacts(args.output))
    if not artifacts:
        print(f"No balance artifacts under {args.output}.")
        return 0

    failures = [reason for reason in map(check_artifact, artifacts) if reason]
    if failures:
        print("\nMETADATA VALIDATION FAILED:")
        for failure in failures:
            print(f" - {failure}")
        return 1

    print(f"Metadata matches {len(artifacts)} balance artifact(s) in {args.output}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
