"""
Discrete particle filter library.

A NumPy-based sequential Monte Carlo filter:
- DiscreteDistribution: weighted particle belief with log-domain weights,
  inverse-CDF sampling and weighted moments
- StandardGaussian: seeded standard normal noise source
- ParticleFilter: predict / update with KL-triggered resampling
"""

from . import distributions
from . import filters
from . import models
from . import simulation
from . import utils

from .config import ParticleFilterConfig, DEFAULT_SEED
from .distributions import DiscreteDistribution, StandardGaussian
from .filters import ParticleFilter, FilterResult
from .exceptions import (
    ParticleFilterError,
    DimensionMismatchError,
    ParticleIndexError,
    NumericInstabilityError,
)

__version__ = "0.1.0"
