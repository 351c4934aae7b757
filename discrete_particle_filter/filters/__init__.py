"""
Filtering algorithms.
"""

from .base import FilterResult
from .particle import ParticleFilter, UpdateInfo

__all__ = [
    "FilterResult",
    "ParticleFilter",
    "UpdateInfo",
]
