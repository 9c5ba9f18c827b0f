"""
CG Balance PDE: Single Source of Truth (SSOT)
=============================================

This configuration file defines ALL default inputs for the balance-point
calculation. NEVER hard-code dimensions elsewhere. Surface analysis, the
neutral point solver, the planform drawing and the reports all derive from
these variables.

All lengths are centimetres, all areas cm².

Stability Mandate: the CG must sit ahead of the neutral point. The static
margin defaults to 10% MAC, the low end of the conventional range.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


# Aerodynamic center of every panel sits at this fraction of its MAC
# (thin-airfoil quarter-chord).
AC_CHORD_FRACTION = 0.25

# Empirical forward NP shift for the fuselage, fraction of wing MAC.
# Not derived from fuselage geometry.
FUSELAGE_NP_SHIFT_FRACTION = 0.015

# Panel count limit of the input form. The solver accepts any length >= 1.
MAX_PANELS = 5


class InvalidConfiguration(ValueError):
    """Caller contract violation, e.g. conventional layout without a tail."""


class Topology(Enum):
    """Longitudinal layout of the aircraft."""
    CONVENTIONAL = "conventional"     # Wing + horizontal stabilizer
    FLYING_WING = "flying_wing"       # Tail-less

    @classmethod
    def parse(cls, value: "Topology | str") -> "Topology":
        """Accept an enum member or its name/value ("flyingWing" included)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        if key == "flyingwing":
            key = cls.FLYING_WING.value
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        raise InvalidConfiguration(f"Unknown topology: {value!r}")


# Advisory static-margin windows (% MAC). Not enforced by the CG policy.
RECOMMENDED_STATIC_MARGIN: Dict[Topology, Tuple[float, float]] = {
    Topology.FLYING_WING: (5.0, 10.0),
    Topology.CONVENTIONAL: (10.0, 15.0),
}


@dataclass
class PanelParams:
    """One trapezoidal panel as entered in the form."""
    tip_chord: float
    sweep: float                  # LE offset of tip vs. root, + = aft
    span: float                   # Half-span contribution


@dataclass
class SurfaceParams:
    """Root chord plus ordered root-to-tip panels."""
    root_chord: float
    panels: List[PanelParams] = field(default_factory=list)

    @property
    def half_span(self) -> float:
        return sum(p.span for p in self.panels)


def _default_wing() -> SurfaceParams:
    return SurfaceParams(
        root_chord=25.0,
        panels=[
            PanelParams(tip_chord=18.0, sweep=4.0, span=40.0),
            PanelParams(tip_chord=10.0, sweep=8.0, span=30.0),
        ],
    )


def _default_tail() -> SurfaceParams:
    return SurfaceParams(
        root_chord=12.0,
        panels=[PanelParams(tip_chord=8.0, sweep=3.0, span=25.0)],
    )


@dataclass
class LayoutParams:
    """Global layout inputs for the balance solver."""

    topology: Topology = Topology.CONVENTIONAL
    wing_to_tail_distance: float = 65.0   # LE wing root to LE tail root
    tail_efficiency: float = 0.9          # Dynamic pressure ratio at the tail
    static_margin_percent: float = 10.0   # % wing MAC

    @property
    def recommended_static_margin(self) -> Tuple[float, float]:
        return RECOMMENDED_STATIC_MARGIN[self.topology]


@dataclass
class FuselageParams:
    """Fuselage box used by the planform drawing only."""
    width: float = 8.0
    length: float = 90.0
    nose_overhang: float = 20.0           # Wing LE to nose


@dataclass
class AircraftConfig:
    """
    Master configuration singleton.

    ALL downstream modules import this. Changes here propagate through:
    - Surface analysis (area, MAC, AC)
    - Neutral point and CG target
    - Planform drawing / DXF export
    - JSON reports
    """

    wing: SurfaceParams = field(default_factory=_default_wing)
    tail: SurfaceParams = field(default_factory=_default_tail)
    layout: LayoutParams = field(default_factory=LayoutParams)
    fuselage: FuselageParams = field(default_factory=FuselageParams)

    # Project metadata
    project_name: str = "CG Balance PDE"
    version: str = "0.1.0"
    units: str = "cm"

    @property
    def is_flying_wing(self) -> bool:
        return self.layout.topology is Topology.FLYING_WING

    def validate(self) -> List[str]:
        """Collect advisory messages. Never blocks the calculation."""
        errors = []

        surfaces = [("Wing", self.wing)]
        if not self.is_flying_wing:
            surfaces.append(("Tail", self.tail))

        for label, surface in surfaces:
            if not surface.panels:
                errors.append(f"GEOMETRY ERROR: {label} has no panels.")
            if len(surface.panels) > MAX_PANELS:
                errors.append(
                    f"GEOMETRY WARNING: {label} has {len(surface.panels)} panels "
                    f"(form limit is {MAX_PANELS})."
                )
            if surface.root_chord <= 0:
                errors.append(f"GEOMETRY WARNING: {label} root chord must be positive.")
            for i, panel in enumerate(surface.panels, start=1):
                if panel.tip_chord <= 0 or panel.span <= 0:
                    errors.append(
                        f"GEOMETRY WARNING: {label} panel {i} needs positive tip chord and span."
                    )

        low, high = self.layout.recommended_static_margin
        margin = self.layout.static_margin_percent
        if not low <= margin <= high:
            errors.append(
                f"STABILITY WARNING: Static margin {margin:.1f}% outside recommended "
                f"{low:.0f}-{high:.0f}% for {self.layout.topology.value}."
            )

        if not self.is_flying_wing and not 0 < self.layout.tail_efficiency <= 1.2:
            errors.append(
                f"LAYOUT WARNING: Tail efficiency {self.layout.tail_efficiency:.2f} "
                "outside (0, 1.2]."
            )

        return errors

    def summary(self) -> str:
        """Generate human-readable configuration summary."""
        wing = self.wing
        lines = [
            "",
            f"{self.project_name} Configuration Summary",
            "=" * 40,
            f"Version: {self.version}",
            f"Topology: {self.layout.topology.value}",
            "",
            "WING",
            "----",
            f"Root Chord: {wing.root_chord:.1f} {self.units}",
            f"Panels: {len(wing.panels)}",
            f"Half Span: {wing.half_span:.1f} {self.units}",
        ]
        if not self.is_flying_wing:
            tail = self.tail
            lines += [
                "",
                "TAIL",
                "----",
                f"Root Chord: {tail.root_chord:.1f} {self.units}",
                f"Panels: {len(tail.panels)}",
                f"Half Span: {tail.half_span:.1f} {self.units}",
                f"Wing-Tail Distance: {self.layout.wing_to_tail_distance:.1f} {self.units}",
                f"Tail Efficiency: {self.layout.tail_efficiency:.2f}",
            ]
        low, high = self.layout.recommended_static_margin
        lines += [
            "",
            "BALANCE",
            "-------",
            f"Static Margin: {self.layout.static_margin_percent:.1f}% MAC "
            f"(recommended {low:.0f}-{high:.0f}%)",
            "",
        ]
        return "\n".join(lines)


# Singleton instance - import this throughout the project
config = AircraftConfig()

# Validate on import
_errors = config.validate()
if _errors:
    import warnings
    for err in _errors:
        warnings.warn(err, UserWarning)
