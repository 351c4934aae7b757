"""
Capability contracts shared by distributions.

A distribution exposes moments, a mapping from standard noise to samples,
or both. These are structural protocols; no base class is required.
"""

import numpy as np
from typing import Protocol, Union, runtime_checkable


@runtime_checkable
class Moments(Protocol):
    """First and second moments."""

    def mean(self) -> np.ndarray:
        ...

    def covariance(self) -> np.ndarray:
        ...


@runtime_checkable
class StandardGaussianMapping(Protocol):
    """Maps standard-normal or standard-uniform variates to samples."""

    def map_standard_normal(self, z: Union[float, np.ndarray]) -> np.ndarray:
        ...

    def map_standard_uniform(self, u: Union[float, np.ndarray]) -> np.ndarray:
        ...


@runtime_checkable
class Sampling(Protocol):
    """Stateful sampler."""

    def sample(self) -> np.ndarray:
        ...

    def dimension(self) -> int:
        ...
