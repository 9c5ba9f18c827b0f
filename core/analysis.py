"""
CG Balance PDE: Balance Point Analysis
======================================

Combines wing and tail geometry into a neutral point and a CG target.
Ensures the model balances *before* the first glide test.

Key Metrics:
- Neutral Point (NP): CG location with zero static margin
- Static Margin: Distance from CG to NP as % of wing MAC
- Tail Volume (V-bar): Stabilizing authority of the horizontal tail

All positions are measured from the wing root leading edge, positive aft.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Tuple
import json
import logging

from config import (
    AircraftConfig,
    FUSELAGE_NP_SHIFT_FRACTION,
    InvalidConfiguration,
    RECOMMENDED_STATIC_MARGIN,
    Topology,
    config,
)
from .geometry import Surface, SurfaceAnalysis, analyze

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class BalanceResult:
    """Neutral point solution for one aircraft configuration."""
    neutral_point: float            # From wing root LE
    tail_volume_coefficient: float  # 0 for flying wing
    fuselage_correction: float      # 0 for flying wing
    tail_arm: float = 0.0           # Wing AC to tail AC
    cg_target: Optional[float] = None

    @property
    def neutral_point_raw(self) -> float:
        """Neutral point before the fuselage correction."""
        return self.neutral_point + self.fuselage_correction


def solve_balance(
    wing: SurfaceAnalysis,
    tail: Optional[SurfaceAnalysis],
    wing_to_tail_distance: float = 0.0,
    tail_efficiency: float = 1.0,
    topology: "Topology | str" = Topology.CONVENTIONAL,
) -> BalanceResult:
    """
    Calculate the longitudinal neutral point.

    Flying wing: the NP is the wing AC. Any tail is ignored.

    Conventional: the NP is the lift-weighted center of both ACs:
        NP_raw = (x_w * S_w + x_t * S_t * eta) / (S_w + S_t * eta)
        NP     = NP_raw - 0.015 * MAC_w
        V_bar  = S_t * l_t / (S_w * MAC_w)

    where:
    - x_t = wing_to_tail_distance + tail AC (tail AC in wing coordinates)
    - eta = tail efficiency (dynamic pressure ratio at the tail)
    - l_t = x_t - x_w (tail arm)

    The 1.5% MAC shift is an empirical allowance for the destabilizing
    fuselage, not a function of fuselage geometry.

    Raises:
        InvalidConfiguration: conventional topology without a tail surface
    """
    topology = Topology.parse(topology)

    if topology is Topology.FLYING_WING:
        return BalanceResult(
            neutral_point=wing.ac_position,
            tail_volume_coefficient=0.0,
            fuselage_correction=0.0,
        )

    if tail is None:
        raise InvalidConfiguration(
            "Conventional topology requires a tail surface "
            "(pass a zeroed SurfaceAnalysis for a missing stabilizer)."
        )

    tail_ac = wing_to_tail_distance + tail.ac_position

    numerator = wing.ac_position * wing.area + tail_ac * tail.area * tail_efficiency
    denominator = wing.area + tail.area * tail_efficiency
    np_raw = numerator / denominator if denominator != 0 else 0.0

    fuselage_correction = wing.mac * FUSELAGE_NP_SHIFT_FRACTION

    tail_arm = tail_ac - wing.ac_position
    if wing.area != 0 and wing.mac != 0:
        v_bar = (tail.area * tail_arm) / (wing.area * wing.mac)
    else:
        v_bar = 0.0

    result = BalanceResult(
        neutral_point=np_raw - fuselage_correction,
        tail_volume_coefficient=v_bar,
        fuselage_correction=fuselage_correction,
        tail_arm=tail_arm,
    )
    logger.debug("Balance solved: %s", result)
    return result


def target_cg(neutral_point: float, wing_mac: float, static_margin_percent: float) -> float:
    """CG = NP - (static margin / 100) * MAC. The margin is not range-checked."""
    return neutral_point - (static_margin_percent / 100.0) * wing_mac


def percent_mac(position: float, wing: SurfaceAnalysis) -> float:
    """Express a chordwise position as % of wing MAC from the MAC leading edge."""
    if wing.mac == 0:
        return 0.0
    return (position - wing.mac_leading_edge_x) / wing.mac * 100.0


def balance_point(
    wing: SurfaceAnalysis,
    tail: Optional[SurfaceAnalysis],
    wing_to_tail_distance: float,
    tail_efficiency: float,
    topology: "Topology | str",
    static_margin_percent: float,
) -> BalanceResult:
    """Solve the neutral point and apply the static-margin policy in one call."""
    result = solve_balance(wing, tail, wing_to_tail_distance, tail_efficiency, topology)
    return replace(
        result,
        cg_target=target_cg(result.neutral_point, wing.mac, static_margin_percent),
    )


@dataclass
class StabilityMetrics:
    """Key balance indicators for one configuration."""
    topology: Topology
    neutral_point: float        # From wing root LE
    cg_location: float          # Recommended CG, from wing root LE
    static_margin: float        # % MAC
    mac: float                  # Wing mean aerodynamic chord
    mac_leading_edge: float     # Wing MAC LE, from wing root LE
    cg_percent_mac: float       # CG as % MAC from MAC LE

    # Advisory envelope from the recommended static margin range
    cg_range_fwd: float = 0.0
    cg_range_aft: float = 0.0
    tail_volume: float = 0.0
    tail_arm: float = 0.0
    fuselage_correction: float = 0.0

    @property
    def is_within_recommended(self) -> bool:
        low, high = RECOMMENDED_STATIC_MARGIN[self.topology]
        return low <= self.static_margin <= high

    def summary(self) -> str:
        """Generate human-readable balance summary."""
        status = "RECOMMENDED" if self.is_within_recommended else "OUTSIDE RECOMMENDED RANGE"
        lines = [
            "",
            "Balance Point Summary",
            "=====================",
            f"Topology:          {self.topology.value}",
            f"Neutral Point:     {self.neutral_point:.2f} cm (from wing root LE)",
            f"Center of Gravity: {self.cg_location:.2f} cm (from wing root LE)",
            f"CG Position:       {self.cg_percent_mac:.1f}% MAC",
            f"Mean Aero Chord:   {self.mac:.2f} cm",
            f"Static Margin:     {self.static_margin:.1f}% MAC",
        ]
        if self.topology is Topology.CONVENTIONAL:
            lines += [
                f"Tail Volume:       {self.tail_volume:.3f}",
                f"Tail Arm:          {self.tail_arm:.2f} cm",
                f"Fuselage Shift:    {self.fuselage_correction:.2f} cm",
            ]
        lines += [
            "",
            "CG Envelope:",
            f"  Forward Limit:   {self.cg_range_fwd:.2f} cm",
            f"  Aft Limit:       {self.cg_range_aft:.2f} cm",
            "",
            f"Status: {status}",
            "",
        ]
        return "\n".join(lines)


@dataclass
class SurfaceReport:
    """Wing and (optional) tail analysis side by side."""
    wing: SurfaceAnalysis
    tail: SurfaceAnalysis = field(default_factory=SurfaceAnalysis.zero)

    def table(self, with_tail: bool = True) -> str:
        rows = [
            ("Area", "area", "{:.0f} cm²"),
            ("Span", "span", "{:.0f} cm"),
            ("MAC", "mac", "{:.1f} cm"),
            ("Aspect Ratio", "aspect_ratio", "{:.1f}"),
        ]
        header = f"{'Metric':<14} {'Wing':>12}" + (f" {'Tail':>12}" if with_tail else "")
        lines = [header, "-" * len(header)]
        for label, attr, fmt in rows:
            line = f"{label:<14} {fmt.format(getattr(self.wing, attr)):>12}"
            if with_tail:
                line += f" {fmt.format(getattr(self.tail, attr)):>12}"
            lines.append(line)
        return "\n".join(lines)


class BalanceEngine:
    """
    Configuration-driven balance solver.

    Recomputes everything from the configuration on each call. Nothing is
    cached, so edits to the config are picked up immediately.
    """

    def __init__(self, cfg: Optional[AircraftConfig] = None):
        self.config = cfg or config

    @property
    def topology(self) -> Topology:
        return self.config.layout.topology

    def wing_surface(self) -> Surface:
        return Surface.from_params(self.config.wing)

    def tail_surface(self) -> Surface:
        return Surface.from_params(self.config.tail)

    def analyze_surfaces(self) -> SurfaceReport:
        """Analyze the wing, and the tail unless this is a flying wing."""
        wing = analyze(self.wing_surface())
        if self.topology is Topology.FLYING_WING:
            return SurfaceReport(wing=wing)
        return SurfaceReport(wing=wing, tail=analyze(self.tail_surface()))

    def solve(self) -> Tuple[SurfaceReport, BalanceResult]:
        layout = self.config.layout
        surfaces = self.analyze_surfaces()
        tail = None if self.topology is Topology.FLYING_WING else surfaces.tail
        result = balance_point(
            surfaces.wing,
            tail,
            layout.wing_to_tail_distance,
            layout.tail_efficiency,
            layout.topology,
            layout.static_margin_percent,
        )
        return surfaces, result

    def calculate_metrics(self) -> StabilityMetrics:
        """
        Calculate balance metrics including the advisory CG envelope.

        Forward limit uses the high end of the recommended static margin
        range for the topology, aft limit the low end.
        """
        return self._metrics(*self.solve())

    def _metrics(self, surfaces: SurfaceReport, result: BalanceResult) -> StabilityMetrics:
        wing = surfaces.wing
        low, high = self.config.layout.recommended_static_margin

        return StabilityMetrics(
            topology=self.topology,
            neutral_point=result.neutral_point,
            cg_location=result.cg_target,
            static_margin=self.config.layout.static_margin_percent,
            mac=wing.mac,
            mac_leading_edge=wing.mac_leading_edge_x,
            cg_percent_mac=percent_mac(result.cg_target, wing),
            cg_range_fwd=target_cg(result.neutral_point, wing.mac, high),
            cg_range_aft=target_cg(result.neutral_point, wing.mac, low),
            tail_volume=result.tail_volume_coefficient,
            tail_arm=result.tail_arm,
            fuselage_correction=result.fuselage_correction,
        )

    def export_json(self, output_path: Path) -> Path:
        """Export the balance analysis to JSON."""
        surfaces, result = self.solve()
        metrics = self._metrics(surfaces, result)

        def surface_dict(s: SurfaceAnalysis) -> dict:
            return {
                "area_cm2": s.area,
                "span_cm": s.span,
                "mac_cm": s.mac,
                "ac_position_cm": s.ac_position,
                "mac_le_cm": s.mac_leading_edge_x,
                "aspect_ratio": s.aspect_ratio,
                "root_chord_cm": s.root_chord,
            }

        data = {
            "project": self.config.project_name,
            "version": self.config.version,
            "topology": self.topology.value,
            "balance": {
                "neutral_point_cm": result.neutral_point,
                "cg_target_cm": result.cg_target,
                "cg_percent_mac": metrics.cg_percent_mac,
                "static_margin_pct": metrics.static_margin,
                "tail_volume": result.tail_volume_coefficient,
                "tail_arm_cm": result.tail_arm,
                "fuselage_correction_cm": result.fuselage_correction,
                "cg_forward_limit_cm": metrics.cg_range_fwd,
                "cg_aft_limit_cm": metrics.cg_range_aft,
                "within_recommended": metrics.is_within_recommended,
            },
            "wing": surface_dict(surfaces.wing),
        }
        if self.topology is Topology.CONVENTIONAL:
            data["tail"] = surface_dict(surfaces.tail)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w") as f:
            json.dump(data, f, indent=2)

        logger.info("Balance report written to %s", output_path)
        return output_path


__all__ = [
    "BalanceResult",
    "InvalidConfiguration",
    "solve_balance",
    "target_cg",
    "percent_mac",
    "balance_point",
    "StabilityMetrics",
    "SurfaceReport",
    "BalanceEngine",
]
