"""
Model capability interface and concrete models.

See: models/base.py for the Discretize contract
"""

from claim_pricing.models.base import Discretize
from claim_pricing.models.black import Black
from claim_pricing.models.heston import Heston

__all__ = ["Discretize", "Black", "Heston"]
