# CG Balance PDE Configuration Module
from .aircraft_config import (
    AircraftConfig, config, Topology, InvalidConfiguration,
    PanelParams, SurfaceParams, LayoutParams, FuselageParams,
    AC_CHORD_FRACTION, FUSELAGE_NP_SHIFT_FRACTION, MAX_PANELS,
    RECOMMENDED_STATIC_MARGIN,
)

__all__ = [
    "AircraftConfig", "config", "Topology", "InvalidConfiguration",
    "PanelParams", "SurfaceParams", "LayoutParams", "FuselageParams",
    "AC_CHORD_FRACTION", "FUSELAGE_NP_SHIFT_FRACTION", "MAX_PANELS",
    "RECOMMENDED_STATIC_MARGIN",
]
