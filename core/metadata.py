"""
Metadata utilities for CG Balance PDE artifacts.

Standardizes provenance data stored alongside DXF drawings and JSON reports,
so a printed balance sheet can be traced back to the inputs that made it.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
import hashlib
import json
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

from config import AircraftConfig, config


REQUIRED_FIELDS = (
    "artifact",
    "artifact_type",
    "generated_at",
    "revision",
    "config_hash",
    "contributor",
    "component",
    "provenance",
)


def _serialize_config(cfg: AircraftConfig) -> str:
    """Serialize the configuration deterministically for hashing."""
    return json.dumps(asdict(cfg), default=str, sort_keys=True)


def compute_config_hash(cfg: Optional[AircraftConfig] = None) -> str:
    """Return a stable hash of the given (or active) configuration."""
    payload = _serialize_config(cfg or config).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def get_git_revision() -> str:
    """Return the current git revision or a placeholder when unavailable."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            check=True,
            capture_output=True,
            text=True,
        )
        return result.stdout.strip() or "unknown"
    except (OSError, subprocess.CalledProcessError):
        return "unknown"


@dataclass
class ArtifactMetadata:
    """Schema for artifact provenance tracked in output/ directories."""

    artifact: str
    artifact_type: str
    generated_at: str
    revision: str
    config_hash: str
    contributor: str
    component: Dict[str, Any]
    provenance: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def write_artifact_metadata(
    artifact_path: Path,
    component: Dict[str, Any],
    artifact_type: str,
    cfg: Optional[AircraftConfig] = None,
    contributor: Optional[str] = None,
    revision: Optional[str] = None,
) -> Path:
    """Persist metadata next to an exported artifact.

    Args:
        artifact_path: Path to the artifact being exported.
        component: Description of what produced the artifact.
        artifact_type: DXF, JSON, etc.
        cfg: Configuration the artifact was computed from (active one if unset).
        contributor: Optional contributor identifier (env var PDE_CONTRIBUTOR used if unset).
        revision: Git revision to pin; detected automatically if omitted.
    """
    cfg = cfg or config
    metadata = ArtifactMetadata(
        artifact=artifact_path.name,
        artifact_type=artifact_type,
        generated_at=datetime.now(timezone.utc).isoformat(),
        revision=revision or get_git_revision(),
        config_hash=compute_config_hash(cfg),
        contributor=contributor or os.environ.get("PDE_CONTRIBUTOR", "unknown"),
        component=component,
        provenance={
            "toolchain": cfg.project_name,
            "version": cfg.version,
            "automated": True,
        },
    )

    metadata_path = artifact_path.parent / f"{artifact_path.stem}.metadata.json"
    metadata_path.write_text(json.dumps(metadata.to_dict(), indent=2))
    return metadata_path
