"""Regression scenarios for balance-point validation."""

from .regression import RegressionRunner, RegressionScenario, ScenarioResult

__all__ = [
    "RegressionRunner",
    "RegressionScenario",
    "ScenarioResult",
]
