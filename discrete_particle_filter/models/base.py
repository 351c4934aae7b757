"""
Model contracts used by the particle filter.

The filter only needs:
    process model:      state(x, v, u) -> x_next, noise_dimension(), state_dimension()
    observation model:  log_likelihoods(y, X) -> [N], noise_dimension()

Any object with these methods works. FunctionProcessModel is a ready-made
process model for additive Gaussian noise:

    x_t = f(x_{t-1}, u_t) + L v_t,   v_t ~ N(0, I),   Q = L L^T
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, runtime_checkable
from scipy.linalg import cholesky


@runtime_checkable
class ProcessModel(Protocol):

    def state(self, prior_state: np.ndarray, noise: np.ndarray, input: Any = None) -> np.ndarray:
        ...

    def noise_dimension(self) -> int:
        ...

    def state_dimension(self) -> int:
        ...


@runtime_checkable
class ObservationModel(Protocol):

    def log_likelihoods(self, observation: np.ndarray, locations: np.ndarray) -> np.ndarray:
        """
        Args:
            observation: [ny] single observation
            locations: [N, nx] particle locations

        Returns:
            log_prob: [N], index-aligned with locations
        """
        ...

    def noise_dimension(self) -> int:
        ...


@dataclass
class FunctionProcessModel:
    """
    Process model with additive Gaussian noise.

    Attributes:
        state_dim: State dimension (nx)
        transition: f(x, u), maps ([nx], input) -> [nx]
        noise_matrix: [nx, nv] noise factor L, Q = L @ L.T
    """
    state_dim: int
    transition: Callable[[np.ndarray, Any], np.ndarray]
    noise_matrix: np.ndarray = field(repr=False)

    def __post_init__(self):
        self.noise_matrix = np.atleast_2d(np.asarray(self.noise_matrix, dtype=np.float64))
        if self.noise_matrix.shape[0] != self.state_dim:
            raise ValueError(
                f"noise_matrix must have {self.state_dim} rows, got {self.noise_matrix.shape}"
            )

    @classmethod
    def from_covariance(
        cls,
        state_dim: int,
        transition: Callable[[np.ndarray, Any], np.ndarray],
        noise_cov: np.ndarray,
        eps: float = 1e-8,
    ) -> "FunctionProcessModel":
        """Build from a process noise covariance Q via its Cholesky factor."""
        Q = np.atleast_2d(np.asarray(noise_cov, dtype=np.float64))
        Q = 0.5 * (Q + Q.T)
        L = cholesky(Q + eps * np.eye(state_dim), lower=True)
        return cls(state_dim=state_dim, transition=transition, noise_matrix=L)

    def state(self, prior_state: np.ndarray, noise: np.ndarray, input: Any = None) -> np.ndarray:
        """
        Args:
            prior_state: [nx]
            noise: [nv] standard normal sample
            input: control input passed through to transition

        Returns:
            x_next: [nx]
        """
        return self.transition(prior_state, input) + self.noise_matrix @ noise

    def noise_dimension(self) -> int:
        return self.noise_matrix.shape[1]

    def state_dimension(self) -> int:
        return self.state_dim

    @property
    def noise_cov(self) -> np.ndarray:
        return self.noise_matrix @ self.noise_matrix.T
