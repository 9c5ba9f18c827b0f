"""
CG Balance PDE: Lifting Surface Geometry
========================================

Reduces a multi-panel trapezoidal planform to the numbers the balance
solver needs: area, span, mean aerodynamic chord (MAC) and the chordwise
location of the aerodynamic center (AC).

A surface is a root chord plus panels chained root-to-tip. Panel i starts
with the tip chord of panel i-1; the first panel starts at the root chord.
Each panel is a trapezoid in the half-planform:

           root LE ●──────────── sweep ──────────▶ ● tip LE
                   │                                │
              root chord                        tip chord
                   │                                │
           root TE ●                                ● tip TE
                   ◀────────────── span ───────────▶

Positions are measured from the surface's own root leading edge,
positive aft. Areas and spans are reported for both sides.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple
import logging

from config import AC_CHORD_FRACTION, MAX_PANELS, SurfaceParams

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class Panel:
    """One tapered segment of a lifting surface."""
    tip_chord: float        # Chord at the outer edge
    sweep_offset: float     # Tip LE aft of root LE (same units as chord)
    span: float             # Half-span contribution


@dataclass(frozen=True)
class Surface:
    """Root chord plus ordered, non-empty root-to-tip panel chain."""
    root_chord: float
    panels: Tuple[Panel, ...]

    @classmethod
    def from_params(cls, params: SurfaceParams) -> "Surface":
        return cls(
            root_chord=params.root_chord,
            panels=tuple(
                Panel(tip_chord=p.tip_chord, sweep_offset=p.sweep, span=p.span)
                for p in params.panels
            ),
        )

    @property
    def half_span(self) -> float:
        return sum(p.span for p in self.panels)

    def station_chords(self) -> Tuple[float, ...]:
        """Chord at the root and at every panel tip."""
        return (self.root_chord,) + tuple(p.tip_chord for p in self.panels)


@dataclass(frozen=True)
class SurfaceAnalysis:
    """Aggregate geometry of one lifting surface."""
    area: float                 # Full planform area (both sides)
    span: float                 # Full span (both sides)
    mac: float                  # Mean aerodynamic chord
    ac_position: float          # AC chordwise position from root LE
    aspect_ratio: float
    root_chord: float
    mac_leading_edge_x: float = 0.0   # MAC LE chordwise position from root LE
    mac_station: float = 0.0          # MAC spanwise station from root (half-span)

    @classmethod
    def zero(cls) -> "SurfaceAnalysis":
        """Placeholder for a surface that does not exist (flying-wing tail)."""
        return cls(area=0.0, span=0.0, mac=0.0, ac_position=0.0,
                   aspect_ratio=0.0, root_chord=0.0)


@dataclass(frozen=True)
class PanelGeometry:
    """Per-panel intermediate results, kept for reports and the drawing."""
    root_chord: float
    tip_chord: float
    area: float             # Half-planform trapezoid area
    taper: float
    mac: float
    mac_station: float      # Spanwise, from the panel root
    mac_leading_edge_x: float   # Chordwise, from the surface root LE
    ac_position: float          # Chordwise, from the surface root LE


def _safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator != 0 else 0.0


def panel_geometry(
    root_chord: float, panel: Panel, leading_edge_x: float = 0.0
) -> PanelGeometry:
    """
    Geometry of a single trapezoidal panel.

    For a linearly tapered panel with taper ratio lambda = Ct/Cr:
        MAC    = (2/3) * Cr * (1 + lambda + lambda^2) / (1 + lambda)
        y_mac  = (b/3) * (1 + 2*lambda) / (1 + lambda)
        x_mac  = y_mac * sweep / b
        x_ac   = x_mac + 0.25 * MAC

    y_mac is measured from the panel root over the panel's own span b.
    The leading edge is a straight line, so its chordwise offset at y_mac
    is a linear interpolation of the sweep.

    Args:
        root_chord: Chord at the panel root (previous panel's tip chord)
        panel: The panel
        leading_edge_x: Chordwise position of the panel root LE

    Returns:
        PanelGeometry with chordwise positions relative to the surface root LE
    """
    cr = root_chord
    ct = panel.tip_chord
    b = panel.span

    area = (cr + ct) / 2 * b

    # lambda := 1 keeps a zero root chord finite
    taper = ct / cr if cr != 0 else 1.0

    # tip chord == -root chord collapses the trapezoid; both terms drop to 0
    mac = (2 / 3) * cr * _safe_ratio(1 + taper + taper**2, 1 + taper)
    y_mac = (b / 3) * _safe_ratio(1 + 2 * taper, 1 + taper)

    x_mac_local = y_mac * _safe_ratio(panel.sweep_offset, b)
    x_mac = leading_edge_x + x_mac_local

    return PanelGeometry(
        root_chord=cr,
        tip_chord=ct,
        area=area,
        taper=taper,
        mac=mac,
        mac_station=y_mac,
        mac_leading_edge_x=x_mac,
        ac_position=x_mac + AC_CHORD_FRACTION * mac,
    )


def iter_panel_geometry(
    root_chord: float, panels: Iterable[Panel]
) -> Iterable[Tuple[float, PanelGeometry]]:
    """Walk the chain root-to-tip, yielding (panel root station, geometry)."""
    current_root = root_chord
    current_le_x = 0.0
    current_y = 0.0
    for panel in panels:
        yield current_y, panel_geometry(current_root, panel, current_le_x)
        current_root = panel.tip_chord
        current_le_x += panel.sweep_offset
        current_y += panel.span


def analyze_surface(root_chord: float, panels: Iterable[Panel]) -> SurfaceAnalysis:
    """
    Area-weighted MAC and AC of a multi-panel surface.

    Every panel contributes its MAC and AC weighted by its area:
        MAC = sum(S_i * MAC_i) / sum(S_i)
        x_ac = sum(S_i * x_ac_i) / sum(S_i)

    Zero-area panels carry zero weight. When the whole surface has zero
    area the MAC, AC and aspect ratio degrade to 0 instead of raising,
    since edited inputs pass through zero transiently.

    Args:
        root_chord: Surface root chord
        panels: Root-to-tip panel chain (at least one)

    Returns:
        SurfaceAnalysis with full-surface area and span
    """
    panels = tuple(panels)
    if not panels:
        raise ValueError("A surface needs at least one panel.")

    total_area = 0.0
    total_mac_moment = 0.0
    total_ac_moment = 0.0
    total_station_moment = 0.0

    for station, geo in iter_panel_geometry(root_chord, panels):
        total_area += geo.area
        total_mac_moment += geo.area * geo.mac
        total_ac_moment += geo.area * geo.ac_position
        total_station_moment += geo.area * (station + geo.mac_station)
    total_span = sum(p.span for p in panels)

    mac = _safe_ratio(total_mac_moment, total_area)
    ac_position = _safe_ratio(total_ac_moment, total_area)

    area = 2 * total_area
    span = 2 * total_span

    if area == 0:
        logger.warning("Surface with root chord %s has zero area", root_chord)

    analysis = SurfaceAnalysis(
        area=area,
        span=span,
        mac=mac,
        ac_position=ac_position,
        aspect_ratio=_safe_ratio(span**2, area),
        root_chord=root_chord,
        mac_leading_edge_x=ac_position - AC_CHORD_FRACTION * mac,
        mac_station=_safe_ratio(total_station_moment, total_area),
    )
    logger.debug("Surface analysed: %s", analysis)
    return analysis


def analyze(surface: Surface) -> SurfaceAnalysis:
    """Analyze a Surface record."""
    return analyze_surface(surface.root_chord, surface.panels)


# =============================================================================
# Panel list editing (form helpers)
# =============================================================================

NEW_PANEL_TAPER = 0.8
NEW_PANEL_SPAN = 20.0


def add_panel(panels: Sequence[Panel], limit: int = MAX_PANELS) -> Tuple[Panel, ...]:
    """Append an unswept panel at 80% of the current tip chord."""
    panels = tuple(panels)
    if len(panels) >= limit:
        return panels
    last_tip = panels[-1].tip_chord if panels else 0.0
    return panels + (
        Panel(tip_chord=last_tip * NEW_PANEL_TAPER, sweep_offset=0.0, span=NEW_PANEL_SPAN),
    )


def remove_panel(panels: Sequence[Panel]) -> Tuple[Panel, ...]:
    """Drop the tip panel, never the last remaining one."""
    panels = tuple(panels)
    return panels[:-1] if len(panels) > 1 else panels


__all__ = [
    "Panel",
    "Surface",
    "SurfaceAnalysis",
    "PanelGeometry",
    "panel_geometry",
    "iter_panel_geometry",
    "analyze_surface",
    "analyze",
    "add_panel",
    "remove_panel",
]
