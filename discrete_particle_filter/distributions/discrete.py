"""
Discrete (weighted particle) distribution.

The belief representation of the particle filter: N locations with
normalized log weights, their exponentiated weights and the cumulative
distribution used for inverse-transform sampling.

Every weight mutation goes through set_log_weights(), which computes all
three weight arrays into fresh buffers and only then swaps them in, so the
log weights, weights and cumulative sums never disagree.
"""

import numpy as np
from typing import Optional, Union
from numpy.random import Generator
from scipy.special import erf

from ..exceptions import (
    DimensionMismatchError,
    NumericInstabilityError,
    ParticleIndexError,
)
from ..utils.resampling import (
    normalize_log_weights,
    cumulative_weights,
    effective_sample_size,
    entropy,
    kl_to_uniform,
)


class DiscreteDistribution:
    """
    Weighted particle set.

    Attributes (read through properties):
        locations: [N, dim] particle locations
        log_weights: [N] normalized log weights
        weights: [N] normalized weights, exp(log_weights)
        cumulative: [N] running sum of weights, cumulative[-1] == 1

    Created with a single particle at the origin carrying all the mass.
    Instances have value semantics: use copy() to obtain an independent
    belief, filters never alias the prior they are given.
    """

    def __init__(self, dim: int = 1):
        """
        Args:
            dim: Dimension of a location vector
        """
        self._locations = np.zeros((1, dim))
        self._log_weights = np.zeros(1)
        self._weights = np.ones(1)
        self._cumulative = np.ones(1)

    @classmethod
    def from_particles(
        cls,
        locations: np.ndarray,
        log_weights: Optional[np.ndarray] = None,
    ) -> "DiscreteDistribution":
        """
        Build a distribution from explicit particles.

        Args:
            locations: [N, dim] locations, or [N] for scalar states
            log_weights: [N] unnormalized log weights (uniform if None)

        Returns:
            DiscreteDistribution
        """
        locations = np.array(locations, dtype=np.float64)
        if locations.ndim == 1:
            locations = locations[:, np.newaxis]
        if locations.ndim != 2 or locations.shape[0] < 1:
            raise ValueError(
                f"locations must have shape [N, dim] with N >= 1, got {locations.shape}"
            )

        n, dim = locations.shape
        distribution = cls(dim)
        if log_weights is None:
            distribution.set_uniform(n)
        else:
            log_weights = np.asarray(log_weights, dtype=np.float64)
            if log_weights.shape != (n,):
                raise DimensionMismatchError(n, log_weights.size, what="log_weights length")
            distribution.set_log_weights(log_weights)
        distribution._locations = locations
        return distribution

    # -------------------------------------------------------------------------
    # Weights
    # -------------------------------------------------------------------------

    def set_log_weights(self, log_weights: np.ndarray) -> float:
        """
        Replace the weights by normalizing unnormalized log weights.

        The number of particles follows len(log_weights). Locations at
        indices shared with the old population are kept, new ones start at
        the origin and must be assigned by the caller.

        Args:
            log_weights: [M] unnormalized log weights, all finite

        Returns:
            log_normalizer: log(sum(exp(log_weights)))

        Raises:
            NumericInstabilityError: on NaN or infinite input
        """
        log_weights = np.asarray(log_weights, dtype=np.float64)
        if log_weights.ndim != 1 or log_weights.size == 0:
            raise ValueError(
                f"log_weights must be a non-empty 1-D array, got shape {log_weights.shape}"
            )
        if not np.all(np.isfinite(log_weights)):
            n_bad = int(np.sum(~np.isfinite(log_weights)))
            raise NumericInstabilityError(
                f"{n_bad} of {log_weights.size} log weights are not finite"
            )

        weights, normalized, log_normalizer = normalize_log_weights(log_weights)
        cumulative = cumulative_weights(weights)
        locations = self._resized_locations(log_weights.size)

        self._log_weights = normalized
        self._weights = weights
        self._cumulative = cumulative
        self._locations = locations

        return float(log_normalizer)

    def add_log_weights(self, delta: np.ndarray) -> float:
        """
        Multiply each weight by exp(delta[i]) and renormalize.

        Args:
            delta: [N] log weight increments (e.g. log likelihoods)

        Returns:
            log_normalizer: log(sum_i w_i exp(delta_i)), the log marginal
                likelihood of the increment when delta are log likelihoods
        """
        delta = np.asarray(delta, dtype=np.float64)
        if delta.shape != (self.size(),):
            raise DimensionMismatchError(self.size(), delta.size, what="log weight delta length")
        return self.set_log_weights(self._log_weights + delta)

    def set_uniform(self, new_size: Optional[int] = None) -> None:
        """Uniform weights over new_size particles (default: current size)."""
        if new_size is None:
            new_size = self.size()
        self.set_log_weights(np.zeros(new_size))

    def _resized_locations(self, new_size: int) -> np.ndarray:
        n = self.size()
        if new_size == n:
            return self._locations
        resized = np.zeros((new_size, self.dimension()), dtype=self._locations.dtype)
        shared = min(n, new_size)
        resized[:shared] = self._locations[:shared]
        return resized

    # -------------------------------------------------------------------------
    # Resampling
    # -------------------------------------------------------------------------

    def resample_from(
        self,
        source: "DiscreteDistribution",
        new_size: int,
        rng: Generator,
    ) -> None:
        """
        Replace this population by new_size draws from source.

        Each draw consumes one uniform variate and is mapped through the
        inverse CDF of source. Draws land in a fresh buffer that is swapped
        in afterwards, so source may be this very object.

        Args:
            source: Distribution to draw from
            new_size: Number of particles after resampling
            rng: NumPy random generator supplying the uniform variates
        """
        if new_size < 1:
            raise ValueError(f"new_size must be >= 1, got {new_size}")

        u = rng.random(new_size)
        new_locations = source.map_standard_uniform(u)

        self.set_uniform(new_size)
        self._locations = new_locations

    def sample(self, size: int, rng: Generator) -> np.ndarray:
        """
        Draw size locations by inverse-transform sampling.

        Returns:
            samples: [size, dim]
        """
        return self.map_standard_uniform(rng.random(size))

    def map_standard_normal(self, z: Union[float, np.ndarray]) -> np.ndarray:
        """
        Map standard normal variate(s) to particle location(s).

        z is converted to u = Phi(z) and passed to map_standard_uniform().

        Returns:
            location: [dim] for scalar z, [len(z), dim] for an array
        """
        u = 0.5 * (1.0 + erf(np.asarray(z, dtype=np.float64) / np.sqrt(2.0)))
        return self.map_standard_uniform(u)

    def map_standard_uniform(self, u: Union[float, np.ndarray]) -> np.ndarray:
        """
        Inverse CDF lookup.

        Returns the location of the smallest index i with cumulative[i] >= u.

        Args:
            u: Uniform variate(s) in [0, 1)

        Returns:
            location: [dim] for scalar u, [len(u), dim] for an array
        """
        index = np.searchsorted(self._cumulative, u, side='left')
        index = np.minimum(index, self.size() - 1)
        if np.ndim(index) == 0:
            return self._locations[int(index)].copy()
        return self._locations[index]

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def _check_index(self, i: int) -> int:
        if not 0 <= i < self.size():
            raise ParticleIndexError(i, self.size())
        return int(i)

    def location(self, i: int) -> np.ndarray:
        """
        Location of particle i.

        The returned row is a view into the population; writing to it
        moves the particle.
        """
        return self._locations[self._check_index(i)]

    def set_location(self, i: int, value: np.ndarray) -> None:
        value = np.asarray(value, dtype=self._locations.dtype).reshape(-1)
        if value.size != self.dimension():
            raise DimensionMismatchError(self.dimension(), value.size, what="location dimension")
        self._locations[self._check_index(i)] = value

    @property
    def locations(self) -> np.ndarray:
        """Read-only [N, dim] view of the locations."""
        view = self._locations.view()
        view.flags.writeable = False
        return view

    @locations.setter
    def locations(self, value: np.ndarray) -> None:
        value = np.array(value, dtype=np.float64)
        if value.ndim == 1:
            value = value[:, np.newaxis]
        if value.ndim != 2 or value.shape[0] != self.size():
            raise DimensionMismatchError(self.size(), value.shape[0], what="number of locations")
        self._locations = value

    def log_weight(self, i: int) -> float:
        return float(self._log_weights[self._check_index(i)])

    def weight(self, i: int) -> float:
        return float(self._weights[self._check_index(i)])

    @property
    def log_weights(self) -> np.ndarray:
        return self._log_weights.copy()

    @property
    def weights(self) -> np.ndarray:
        return self._weights.copy()

    @property
    def cumulative(self) -> np.ndarray:
        return self._cumulative.copy()

    def size(self) -> int:
        return self._locations.shape[0]

    def dimension(self) -> int:
        return self._locations.shape[1]

    def __len__(self) -> int:
        return self.size()

    # -------------------------------------------------------------------------
    # Moments and information measures
    # -------------------------------------------------------------------------

    def mean(self) -> np.ndarray:
        """Weighted mean, [dim]."""
        locations = self._locations.astype(np.float64)
        return np.sum(self._weights[:, np.newaxis] * locations, axis=0)

    def covariance(self) -> np.ndarray:
        """Weighted covariance about mean(), [dim, dim]."""
        diff = self._locations.astype(np.float64) - self.mean()
        cov = np.einsum('n,ni,nj->ij', self._weights, diff, diff)
        return 0.5 * (cov + cov.T)

    def entropy(self) -> float:
        """Entropy of the weights in nats."""
        return entropy(self._weights, self._log_weights)

    def kl_given_uniform(self) -> float:
        """KL divergence to the uniform distribution over the same particles."""
        return kl_to_uniform(self._weights, self._log_weights)

    def effective_sample_size(self) -> float:
        return effective_sample_size(self._weights)

    # -------------------------------------------------------------------------
    # Value semantics
    # -------------------------------------------------------------------------

    def copy(self) -> "DiscreteDistribution":
        other = type(self).__new__(type(self))
        other._locations = self._locations.copy()
        other._log_weights = self._log_weights.copy()
        other._weights = self._weights.copy()
        other._cumulative = self._cumulative.copy()
        return other

    def __copy__(self) -> "DiscreteDistribution":
        return self.copy()

    def __deepcopy__(self, memo) -> "DiscreteDistribution":
        return self.copy()

    def __repr__(self) -> str:
        return (
            f"DiscreteDistribution(n={self.size()}, dim={self.dimension()}, "
            f"kl_given_uniform={self.kl_given_uniform():.3f})"
        )
