"""
Numeric kernels for hypersphere-style single-cell analysis.
"""

from .density import (
    estimate_density,
    tricube_weights,
)

from .redundancy import (
    filter_redundant,
    validate_redundancy_inputs,
)

__all__ = [
    # Density
    "estimate_density",
    "tricube_weights",
    # Redundancy
    "filter_redundant",
    "validate_redundancy_inputs",
]
