"""
Observation models with additive Gaussian noise.

y = h(x) + w,  w ~ N(0, R)
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Callable, Optional
from scipy.linalg import cholesky, solve_triangular


@dataclass
class AdditiveGaussianObservationModel:
    """
    Observation y = h(x) + D w with w ~ N(0, I) and R = D D^T.

    Attributes:
        obs_dim: Observation dimension (ny)
        measurement: h(x), maps batched [N, nx] -> [N, ny]
        noise_cov: [ny, ny] observation noise covariance R
    """
    obs_dim: int
    measurement: Callable[[np.ndarray], np.ndarray]
    noise_cov: np.ndarray

    _noise_chol: Optional[np.ndarray] = field(default=None, repr=False)
    _noise_logdet: Optional[float] = field(default=None, repr=False)

    def __post_init__(self):
        eps = 1e-8
        R = np.atleast_2d(np.asarray(self.noise_cov, dtype=np.float64))
        self.noise_cov = 0.5 * (R + R.T)
        self._noise_chol = cholesky(self.noise_cov + eps * np.eye(self.obs_dim), lower=True)
        self._noise_logdet = 2.0 * np.sum(np.log(np.diag(self._noise_chol)))

    def predict(self, locations: np.ndarray) -> np.ndarray:
        """Noise-free observations h(x) for all particles, [N, ny]."""
        y_pred = self.measurement(np.atleast_2d(locations))
        return np.asarray(y_pred, dtype=np.float64).reshape(-1, self.obs_dim)

    def observation(self, state: np.ndarray, noise: np.ndarray) -> np.ndarray:
        """
        Args:
            state: [nx] single state
            noise: [ny] standard normal sample

        Returns:
            y: [ny]
        """
        return self.predict(state[np.newaxis, :])[0] + self._noise_chol @ noise

    def log_likelihoods(self, observation: np.ndarray, locations: np.ndarray) -> np.ndarray:
        """
        Gaussian log p(y | x) for every particle.

        Args:
            observation: [ny]
            locations: [N, nx]

        Returns:
            log_prob: [N]
        """
        residual = np.asarray(observation, dtype=np.float64).reshape(-1) - self.predict(locations)

        # Mahalanobis distance through the Cholesky factor: solve L z = r
        solved = solve_triangular(self._noise_chol, residual.T, lower=True)  # [ny, N]
        mahal_sq = np.sum(solved ** 2, axis=0)

        return -0.5 * (
            self.obs_dim * np.log(2 * np.pi) +
            self._noise_logdet +
            mahal_sq
        )

    def noise_dimension(self) -> int:
        return self.obs_dim


class AdditiveUncorrelatedObservationModel(AdditiveGaussianObservationModel):
    """
    Additive Gaussian observation noise with independent components.

    R = diag(noise_std ** 2). Log likelihoods are evaluated per component
    without a triangular solve.
    """

    def __init__(
        self,
        obs_dim: int,
        measurement: Callable[[np.ndarray], np.ndarray],
        noise_std: np.ndarray,
    ):
        noise_std = np.broadcast_to(np.asarray(noise_std, dtype=np.float64), (obs_dim,))
        if np.any(noise_std <= 0):
            raise ValueError("noise_std must be positive")
        self.noise_std = noise_std.copy()
        super().__init__(
            obs_dim=obs_dim,
            measurement=measurement,
            noise_cov=np.diag(self.noise_std ** 2),
        )

    def log_likelihoods(self, observation: np.ndarray, locations: np.ndarray) -> np.ndarray:
        residual = np.asarray(observation, dtype=np.float64).reshape(-1) - self.predict(locations)
        z = residual / self.noise_std
        return -0.5 * (
            self.obs_dim * np.log(2 * np.pi) +
            2.0 * np.sum(np.log(self.noise_std)) +
            np.sum(z ** 2, axis=1)
        )
