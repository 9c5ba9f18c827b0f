"""
S1: Surface Geometry Against Closed-Form Trapezoid Theory
=========================================================

For a single linearly tapered panel (root Cr, tip Ct, span b, LE sweep s):

    S      = (Cr + Ct) / 2 * b
    lambda = Ct / Cr
    MAC    = (2/3) * Cr * (1 + lambda + lambda^2) / (1 + lambda)
    y_mac  = (b/3) * (1 + 2*lambda) / (1 + lambda)
    x_ac   = y_mac * s / b + 0.25 * MAC

Multi-panel surfaces are the area-weighted average of their panels.
Reported area and span cover both sides.
"""

import math
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import pytest  # noqa: E402

from config import MAX_PANELS, config  # noqa: E402
from core.geometry import (  # noqa: E402
    Panel,
    Surface,
    add_panel,
    analyze,
    analyze_surface,
    panel_geometry,
    remove_panel,
)


def _closed_form(cr: float, ct: float, s: float, b: float):
    taper = ct / cr
    mac = (2 / 3) * cr * (1 + taper + taper**2) / (1 + taper)
    y_mac = (b / 3) * (1 + 2 * taper) / (1 + taper)
    ac = y_mac * s / b + 0.25 * mac
    return (cr + ct) / 2 * b, mac, ac


class TestReferenceWing:
    """Root 25 cm, one panel {tip 10, sweep 8, span 70}."""

    ROOT = 25.0
    PANEL = Panel(tip_chord=10.0, sweep_offset=8.0, span=70.0)

    def test_area_and_span(self):
        wing = analyze_surface(self.ROOT, [self.PANEL])
        assert wing.area == pytest.approx(2450.0, rel=1e-6)
        assert wing.span == pytest.approx(140.0, rel=1e-6)

    def test_mac_matches_closed_form(self):
        wing = analyze_surface(self.ROOT, [self.PANEL])
        _, mac, _ = _closed_form(25.0, 10.0, 8.0, 70.0)
        assert wing.mac == pytest.approx(mac, rel=1e-6)
        assert wing.mac == pytest.approx(18.5714286, rel=1e-6)

    def test_ac_matches_closed_form(self):
        wing = analyze_surface(self.ROOT, [self.PANEL])
        _, _, ac = _closed_form(25.0, 10.0, 8.0, 70.0)
        assert wing.ac_position == pytest.approx(ac, rel=1e-6)
        # y_mac = 30 cm, LE offset 30 * 8/70, plus quarter MAC
        assert wing.ac_position == pytest.approx(30.0 * 8.0 / 70.0 + 0.25 * 18.5714286, rel=1e-6)

    def test_aspect_ratio(self):
        wing = analyze_surface(self.ROOT, [self.PANEL])
        assert wing.aspect_ratio == pytest.approx(140.0**2 / 2450.0, rel=1e-6)

    def test_mac_leading_edge_is_quarter_chord_ahead_of_ac(self):
        wing = analyze_surface(self.ROOT, [self.PANEL])
        assert wing.mac_leading_edge_x == pytest.approx(wing.ac_position - 0.25 * wing.mac)

    def test_root_chord_echoed(self):
        assert analyze_surface(self.ROOT, [self.PANEL]).root_chord == self.ROOT


class TestUntaperedPanel:
    """lambda = 1: rectangle (or parallelogram when swept)."""

    def test_mac_equals_root_chord(self):
        wing = analyze_surface(20.0, [Panel(tip_chord=20.0, sweep_offset=6.0, span=50.0)])
        assert wing.mac == pytest.approx(20.0)

    def test_mac_station_at_half_panel_span(self):
        geo = panel_geometry(20.0, Panel(tip_chord=20.0, sweep_offset=6.0, span=50.0))
        assert geo.mac_station == pytest.approx(25.0)

    def test_ac_is_half_sweep_plus_quarter_chord(self):
        wing = analyze_surface(20.0, [Panel(tip_chord=20.0, sweep_offset=6.0, span=50.0)])
        assert wing.ac_position == pytest.approx(3.0 + 0.25 * 20.0)


class TestMultiPanel:
    """Chained panels: sums and area weighting."""

    PANELS = [
        Panel(tip_chord=18.0, sweep_offset=4.0, span=40.0),
        Panel(tip_chord=10.0, sweep_offset=8.0, span=30.0),
    ]

    def test_area_is_twice_sum_of_trapezoids(self):
        wing = analyze_surface(25.0, self.PANELS)
        expected = 2 * ((25 + 18) / 2 * 40 + (18 + 10) / 2 * 30)
        assert wing.area == pytest.approx(expected)

    def test_span_is_twice_sum_of_panel_spans(self):
        wing = analyze_surface(25.0, self.PANELS)
        assert wing.span == pytest.approx(2 * (40 + 30))

    def test_second_panel_starts_at_first_tip(self):
        s1, mac1, ac1 = _closed_form(25.0, 18.0, 4.0, 40.0)
        s2, mac2, ac2_local = _closed_form(18.0, 10.0, 8.0, 30.0)
        ac2 = 4.0 + ac2_local  # panel 2 root LE sits 4 cm aft

        wing = analyze_surface(25.0, self.PANELS)
        assert wing.mac == pytest.approx((s1 * mac1 + s2 * mac2) / (s1 + s2), rel=1e-9)
        assert wing.ac_position == pytest.approx((s1 * ac1 + s2 * ac2) / (s1 + s2), rel=1e-9)

    def test_default_config_wing(self):
        wing = analyze(Surface.from_params(config.wing))
        assert wing.area == pytest.approx(2560.0)
        assert wing.mac == pytest.approx(19.2916667, rel=1e-6)
        assert wing.ac_position == pytest.approx(8.59375, rel=1e-6)

    def test_panel_count_not_limited_by_form(self):
        panels = [Panel(tip_chord=20.0 - i, sweep_offset=1.0, span=10.0) for i in range(12)]
        wing = analyze_surface(21.0, panels)
        assert wing.span == pytest.approx(240.0)

    def test_idempotent(self):
        assert analyze_surface(25.0, self.PANELS) == analyze_surface(25.0, self.PANELS)

    def test_generator_input_matches_list(self):
        one_shot = analyze_surface(25.0, (p for p in self.PANELS))
        assert one_shot == analyze_surface(25.0, self.PANELS)
        assert one_shot.area == pytest.approx(2560.0)


class TestDegenerateGeometry:
    """Zero chords and spans are computed through, never raised."""

    def test_zero_root_chord_is_finite(self):
        wing = analyze_surface(0.0, [Panel(tip_chord=10.0, sweep_offset=5.0, span=20.0)])
        for value in (wing.area, wing.mac, wing.ac_position, wing.aspect_ratio):
            assert math.isfinite(value)
        assert wing.area == pytest.approx(200.0)

    def test_all_zero_surface(self):
        wing = analyze_surface(0.0, [Panel(tip_chord=0.0, sweep_offset=0.0, span=0.0)])
        assert wing.area == 0.0
        assert wing.mac == 0.0
        assert wing.ac_position == 0.0
        assert wing.aspect_ratio == 0.0

    def test_zero_span_panel_carries_no_weight(self):
        base = analyze_surface(25.0, [Panel(tip_chord=10.0, sweep_offset=8.0, span=70.0)])
        with_stub = analyze_surface(
            25.0,
            [
                Panel(tip_chord=10.0, sweep_offset=8.0, span=70.0),
                Panel(tip_chord=5.0, sweep_offset=3.0, span=0.0),
            ],
        )
        assert with_stub.area == pytest.approx(base.area)
        assert with_stub.mac == pytest.approx(base.mac)
        assert with_stub.ac_position == pytest.approx(base.ac_position)

    def test_empty_panel_list_rejected(self):
        with pytest.raises(ValueError):
            analyze_surface(25.0, [])

    def test_tip_chord_opposite_to_root_collapses_panel(self):
        geo = panel_geometry(10.0, Panel(tip_chord=-10.0, sweep_offset=2.0, span=20.0))
        assert geo.taper == pytest.approx(-1.0)
        assert geo.area == 0.0
        assert geo.mac == 0.0
        assert geo.mac_station == 0.0

        wing = analyze_surface(10.0, [Panel(tip_chord=-10.0, sweep_offset=2.0, span=20.0)])
        assert wing.area == 0.0
        assert wing.mac == 0.0
        assert wing.ac_position == 0.0

    def test_negative_chords_are_computed_through(self):
        wing = analyze_surface(10.0, [Panel(tip_chord=-5.0, sweep_offset=2.0, span=20.0)])
        for value in (wing.area, wing.mac, wing.ac_position, wing.aspect_ratio):
            assert math.isfinite(value)
        assert wing.area == pytest.approx(2 * (10.0 - 5.0) / 2 * 20.0)

        negative = analyze_surface(-10.0, [Panel(tip_chord=-10.0, sweep_offset=0.0, span=10.0)])
        assert negative.area == pytest.approx(-200.0)
        assert negative.mac == pytest.approx(-10.0)


class TestPanelEditing:
    """Form helpers for growing and shrinking the panel chain."""

    def test_add_panel_tapers_last_tip(self):
        panels = add_panel([Panel(tip_chord=10.0, sweep_offset=8.0, span=30.0)])
        assert len(panels) == 2
        assert panels[-1] == Panel(tip_chord=8.0, sweep_offset=0.0, span=20.0)

    def test_add_panel_stops_at_limit(self):
        panels = tuple(Panel(10.0, 0.0, 10.0) for _ in range(MAX_PANELS))
        assert add_panel(panels) == panels

    def test_remove_panel_keeps_last_one(self):
        single = (Panel(10.0, 0.0, 10.0),)
        assert remove_panel(single) == single
        assert remove_panel(single + (Panel(8.0, 0.0, 10.0),)) == single
