"""
Standard normal noise source.
"""

import numpy as np
from typing import Optional, Union
from numpy.random import Generator, SeedSequence, default_rng

from ..config import DEFAULT_SEED
from ..exceptions import DimensionMismatchError


class StandardGaussian:
    """
    Draws vectors of independent N(0, 1) components.

    Owns its generator state: successive sample() calls advance it, so the
    sequence is reproducible only for a fixed call order. Not safe to share
    between threads or filters.

    With fixed=True the dimension is locked at construction and
    set_dimension() to any other value raises DimensionMismatchError.
    """

    def __init__(
        self,
        dim: int,
        seed: Optional[Union[int, SeedSequence]] = DEFAULT_SEED,
        fixed: bool = False,
    ):
        """
        Args:
            dim: Output dimension (>= 0)
            seed: Integer seed or SeedSequence; None draws fresh OS entropy
            fixed: Lock the dimension
        """
        if dim < 0:
            raise ValueError(f"dim must be non-negative, got {dim}")
        self._dimension = int(dim)
        self._fixed = fixed
        self._rng: Generator = default_rng(seed)

    def sample(self) -> np.ndarray:
        """
        Returns:
            z: [dim] standard normal vector
        """
        return self._rng.standard_normal(self._dimension)

    def sample_batch(self, n: int) -> np.ndarray:
        """
        Draw n vectors at once.

        Returns:
            z: [n, dim]
        """
        return self._rng.standard_normal((n, self._dimension))

    def dimension(self) -> int:
        return self._dimension

    def set_dimension(self, new_dimension: int) -> None:
        if new_dimension == self._dimension:
            return
        if self._fixed:
            raise DimensionMismatchError(
                self._dimension, new_dimension, what="StandardGaussian dimension"
            )
        if new_dimension < 0:
            raise ValueError(f"dimension must be non-negative, got {new_dimension}")
        self._dimension = int(new_dimension)

    @property
    def is_fixed(self) -> bool:
        return self._fixed

    def __repr__(self) -> str:
        return f"StandardGaussian(dim={self._dimension}, fixed={self._fixed})"
