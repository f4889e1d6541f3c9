"""
Frozen configuration and tolerances.
"""

from claim_pricing.config.settings import SETTINGS, Settings, SimulationConfig

__all__ = ["SETTINGS", "Settings", "SimulationConfig"]
