"""
Distributions: weighted particle beliefs and standard noise sources.
"""

from .base import Moments, StandardGaussianMapping, Sampling
from .discrete import DiscreteDistribution
from .standard_gaussian import StandardGaussian

__all__ = [
    "Moments",
    "StandardGaussianMapping",
    "Sampling",
    "DiscreteDistribution",
    "StandardGaussian",
]
