"""
Filter result container.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional


@dataclass
class FilterResult:
    """
    Outputs of a particle filter run.

    Attributes:
        means: [T+1, nx] Belief means (prior, then one per observation)
        covariances: [T+1, nx, nx] Belief covariances

        particles: [T+1, N, nx] Particle history (optional)
        weights: [T+1, N] Weight history (optional)
        ess: [T] Effective sample size of each posterior
        kl_given_uniform: [T] KL(p || uniform) of each predicted belief,
            the quantity compared against the resampling threshold

        log_likelihood: Total log marginal likelihood
        log_likelihood_increments: [T] Per-step log likelihood

        resampled: [T] Boolean mask of resampling events
    """
    means: np.ndarray
    covariances: Optional[np.ndarray] = None

    particles: Optional[np.ndarray] = None
    weights: Optional[np.ndarray] = None
    ess: Optional[np.ndarray] = None
    kl_given_uniform: Optional[np.ndarray] = None

    log_likelihood: Optional[float] = None
    log_likelihood_increments: Optional[np.ndarray] = None

    resampled: Optional[np.ndarray] = None

    @property
    def T(self) -> int:
        """Number of time steps (observations)."""
        return self.means.shape[0] - 1

    @property
    def state_dim(self) -> int:
        return self.means.shape[1]

    def rmse(self, true_states: np.ndarray) -> np.ndarray:
        """
        Per-timestep RMSE against true states.

        Args:
            true_states: [T+1, nx] True state trajectory

        Returns:
            rmse: [T+1]
        """
        squared_error = (self.means - true_states) ** 2
        return np.sqrt(np.mean(squared_error, axis=1))

    def mean_rmse(self, true_states: np.ndarray) -> float:
        return float(np.mean(self.rmse(true_states)))

    def average_ess(self) -> float:
        """Return average ESS if available."""
        if self.ess is None:
            return np.nan
        return float(np.mean(self.ess))
