"""Planform projection and DXF export.

Turns the panel chains and the solved 1-D stations (MAC, NP, CG) into
2-D outlines. Two coordinate systems are used:

- local: x spanwise (+ right), y chordwise (+ aft), origin at the surface
  root leading edge, model units (cm)
- screen: a fitted viewport with y pointing down, as drawn by the form

The DXF export works in model units with y flipped so that the nose points
up the sheet.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import ezdxf
import numpy as np
from ezdxf import units
from ezdxf.enums import TextEntityAlignment

from config import AircraftConfig, Topology
from .analysis import BalanceResult, SurfaceReport
from .geometry import Surface


def half_outline(surface: Surface, side: int = 1) -> np.ndarray:
    """Closed half-planform polygon in local coordinates.

    Vertex order: root LE, every panel tip LE, tip TE, then the trailing
    edge back to the root TE.
    """
    if side not in (1, -1):
        raise ValueError("side must be +1 (right) or -1 (left)")

    spans = np.array([p.span for p in surface.panels], dtype=float)
    sweeps = np.array([p.sweep_offset for p in surface.panels], dtype=float)
    chords = np.array(surface.station_chords(), dtype=float)

    x = np.concatenate(([0.0], np.cumsum(spans)))
    y_le = np.concatenate(([0.0], np.cumsum(sweeps)))
    y_te = y_le + chords

    leading = np.column_stack((x, y_le))
    trailing = np.column_stack((x, y_te))[::-1]
    outline = np.vstack((leading, trailing))
    outline[:, 0] *= side
    return outline


@dataclass
class Viewport:
    """Fitted drawing transform."""
    scale: float
    origin_x: float
    origin_y: float

    def project(self, points: np.ndarray, offset_y: float = 0.0) -> np.ndarray:
        """Map local (x, y) points to screen coordinates."""
        pts = np.asarray(points, dtype=float)
        screen = np.empty_like(pts)
        screen[:, 0] = self.origin_x + pts[:, 0] * self.scale
        screen[:, 1] = self.origin_y + (pts[:, 1] + offset_y) * self.scale
        return screen

    def station(self, y: float) -> float:
        """Screen y of a chordwise station measured from the wing root LE."""
        return self.origin_y + y * self.scale


class PlanformView:
    """Fits the aircraft into a fixed canvas."""

    def __init__(self, width: float = 600.0, height: float = 400.0, padding: float = 40.0):
        self.width = width
        self.height = height
        self.padding = padding

    def fit(self, cfg: AircraftConfig, surfaces: SurfaceReport) -> Viewport:
        flying_wing = cfg.layout.topology is Topology.FLYING_WING

        max_span = max(surfaces.wing.span, 0.0 if flying_wing else surfaces.tail.span)

        if flying_wing:
            wing = cfg.wing
            tip = wing.panels[-1].tip_chord if wing.panels else wing.root_chord
            max_length = sum(p.sweep for p in wing.panels) + tip + 10
        else:
            max_length = max(
                cfg.fuselage.length,
                cfg.layout.wing_to_tail_distance + surfaces.tail.mac + 20,
            )

        usable_w = self.width - 2 * self.padding
        usable_h = self.height - 2 * self.padding
        scale = min(usable_w / (max_span or 10), usable_h / (max_length or 10))

        origin_y = self.padding
        if not flying_wing:
            origin_y += cfg.fuselage.nose_overhang * scale

        return Viewport(scale=scale, origin_x=self.width / 2, origin_y=origin_y)


@dataclass
class Planform:
    """Outlines and stations of one configuration, in local coordinates."""
    topology: Topology
    wing: List[np.ndarray]
    tail: List[np.ndarray]
    tail_offset: float
    fuselage: Optional[np.ndarray]
    wing_span: float
    mac_leading_edge: float
    neutral_point: float
    cg_target: float

    @classmethod
    def build(
        cls,
        cfg: AircraftConfig,
        surfaces: SurfaceReport,
        result: BalanceResult,
    ) -> "Planform":
        wing = Surface.from_params(cfg.wing)
        conventional = cfg.layout.topology is Topology.CONVENTIONAL

        tail_outlines: List[np.ndarray] = []
        fuselage = None
        if conventional:
            tail = Surface.from_params(cfg.tail)
            tail_outlines = [half_outline(tail, 1), half_outline(tail, -1)]
            fuse = cfg.fuselage
            half_w = fuse.width / 2
            top = -fuse.nose_overhang
            fuselage = np.array([
                (-half_w, top),
                (half_w, top),
                (half_w, top + fuse.length),
                (-half_w, top + fuse.length),
            ])

        return cls(
            topology=cfg.layout.topology,
            wing=[half_outline(wing, 1), half_outline(wing, -1)],
            tail=tail_outlines,
            tail_offset=cfg.layout.wing_to_tail_distance if conventional else 0.0,
            fuselage=fuselage,
            wing_span=surfaces.wing.span,
            mac_leading_edge=surfaces.wing.mac_leading_edge_x,
            neutral_point=result.neutral_point,
            cg_target=result.cg_target if result.cg_target is not None else result.neutral_point,
        )

    def to_screen(self, viewport: Viewport) -> Dict[str, object]:
        """Project every element into a fitted viewport."""
        half_span = self.wing_span / 2
        mac_y = viewport.station(self.mac_leading_edge)
        return {
            "wing": [viewport.project(o) for o in self.wing],
            "tail": [viewport.project(o, self.tail_offset) for o in self.tail],
            "fuselage": None if self.fuselage is None else viewport.project(self.fuselage),
            "mac_line": (
                (viewport.origin_x - half_span * viewport.scale, mac_y),
                (viewport.origin_x + half_span * viewport.scale, mac_y),
            ),
            "neutral_point": (viewport.origin_x, viewport.station(self.neutral_point)),
            "cg": (viewport.origin_x, viewport.station(self.cg_target)),
        }

    def get_metadata(self) -> Dict[str, object]:
        return {
            "name": f"planform_{self.topology.value}",
            "topology": self.topology.value,
            "wing_span_cm": self.wing_span,
            "neutral_point_cm": self.neutral_point,
            "cg_target_cm": self.cg_target,
        }

    def export_dxf(self, output_path: Path, marker_half_width: float = 10.0) -> Path:
        """Write the planform at 1:1 in model units (cm)."""

        def model(points: np.ndarray, offset_y: float = 0.0) -> List[Tuple[float, float]]:
            return [(float(x), -float(y + offset_y)) for x, y in points]

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        doc = ezdxf.new()
        doc.units = units.CM
        for name, color in (("OUTLINE", 7), ("FUSELAGE", 8), ("MAC", 5), ("NP", 3), ("CG", 1)):
            doc.layers.add(name, color=color)
        msp = doc.modelspace()

        for outline in self.wing:
            msp.add_lwpolyline(model(outline), close=True, dxfattribs={"layer": "OUTLINE"})
        for outline in self.tail:
            msp.add_lwpolyline(
                model(outline, self.tail_offset), close=True, dxfattribs={"layer": "OUTLINE"}
            )
        if self.fuselage is not None:
            msp.add_lwpolyline(model(self.fuselage), close=True, dxfattribs={"layer": "FUSELAGE"})

        half_span = self.wing_span / 2
        msp.add_line(
            (-half_span, -self.mac_leading_edge),
            (half_span, -self.mac_leading_edge),
            dxfattribs={"layer": "MAC"},
        )

        for label, station in (("NP", self.neutral_point), ("CG", self.cg_target)):
            msp.add_line(
                (-marker_half_width, -station),
                (marker_half_width, -station),
                dxfattribs={"layer": label},
            )
            msp.add_text(
                f"{label} {station:.2f}",
                height=1.5,
                dxfattribs={"layer": label},
            ).set_placement(
                (marker_half_width + 2, -station), align=TextEntityAlignment.MIDDLE_LEFT
            )

        doc.saveas(output_path)
        return output_path


__all__ = ["half_outline", "Viewport", "PlanformView", "Planform"]
