# CG Balance PDE Core Module
from .geometry import Panel, Surface, SurfaceAnalysis, analyze_surface
from .analysis import (
    BalanceEngine, BalanceResult, InvalidConfiguration,
    solve_balance, target_cg,
)

__all__ = [
    "Panel",
    "Surface",
    "SurfaceAnalysis",
    "analyze_surface",
    "BalanceEngine",
    "BalanceResult",
    "InvalidConfiguration",
    "solve_balance",
    "target_cg",
]
