"""
Particle filter with KL-triggered resampling.

Two transitions over DiscreteDistribution beliefs:

  predict:  move every particle through the process model with fresh
            process noise; weights are untouched.
  update:   if KL(p || uniform) of the predicted weights exceeds
            max_kl_divergence, redraw the particles by inverse-CDF sampling
            (weights reset to uniform); then add the observation log
            likelihoods to the log weights.

KL(p || uniform) = log N - H(p) can be read as -log(f) where f is the
fraction of particles carrying the mass, so max_kl_divergence = 1.0
resamples once the mass sits on roughly e^-1 ~ 37% of the particles.
"""

import dataclasses
import numpy as np
from dataclasses import dataclass
from typing import Any, Optional, Sequence
from numpy.random import SeedSequence, default_rng
from scipy.linalg import cholesky

from .base import FilterResult
from ..config import ParticleFilterConfig
from ..distributions.discrete import DiscreteDistribution
from ..distributions.standard_gaussian import StandardGaussian
from ..exceptions import DimensionMismatchError, NumericInstabilityError
from ..models.base import ProcessModel, ObservationModel
from ..utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class UpdateInfo:
    """Diagnostics of a single update step."""
    kl_given_uniform: float
    resampled: bool
    log_likelihood: float


class ParticleFilter:
    """
    Sequential importance resampling filter over weighted particle beliefs.

    The filter owns its random streams: process noise comes from a
    StandardGaussian, resampling and initial draws from NumPy generators,
    all spawned from config.seed. Calls on one filter must therefore not
    be interleaved across threads.
    """

    def __init__(
        self,
        process_model: ProcessModel,
        observation_model: ObservationModel,
        max_kl_divergence: Optional[float] = None,
        config: Optional[ParticleFilterConfig] = None,
    ):
        """
        Args:
            process_model: Provides state(), noise_dimension(), state_dimension()
            observation_model: Provides log_likelihoods(), noise_dimension()
            max_kl_divergence: Overrides config.max_kl_divergence if given
            config: Filter settings (defaults to ParticleFilterConfig())
        """
        if config is None:
            config = ParticleFilterConfig()
        if max_kl_divergence is not None:
            config = dataclasses.replace(config, max_kl_divergence=max_kl_divergence)

        self.process_model = process_model
        self.observation_model = observation_model
        self.config = config

        noise_seed, resample_seed, init_seed = SeedSequence(config.seed).spawn(3)
        self.process_noise = StandardGaussian(process_model.noise_dimension(), seed=noise_seed)
        self._resample_rng = default_rng(resample_seed)
        self._init_rng = default_rng(init_seed)

        self.last_update: Optional[UpdateInfo] = None

    @property
    def max_kl_divergence(self) -> float:
        return self.config.max_kl_divergence

    # -------------------------------------------------------------------------
    # Beliefs
    # -------------------------------------------------------------------------

    def create_belief(self) -> DiscreteDistribution:
        """Single particle at the origin of the process model's state space."""
        return DiscreteDistribution(self.process_model.state_dimension())

    def initial_belief(
        self,
        mean: np.ndarray,
        cov: np.ndarray,
        n_particles: Optional[int] = None,
    ) -> DiscreteDistribution:
        """
        Uniformly weighted particles drawn from N(mean, cov).

        Args:
            mean: [nx] Initial state mean
            cov: [nx, nx] Initial state covariance
            n_particles: Population size (defaults to config.n_particles)
        """
        if n_particles is None:
            n_particles = self.config.n_particles

        nx = self.process_model.state_dimension()
        mean = np.asarray(mean, dtype=np.float64).reshape(-1)
        if mean.size != nx:
            raise DimensionMismatchError(nx, mean.size, what="initial mean dimension")

        eps = 1e-8
        P0 = np.atleast_2d(np.asarray(cov, dtype=np.float64))
        L = cholesky(0.5 * (P0 + P0.T) + eps * np.eye(nx), lower=True)

        noise = self._init_rng.standard_normal((n_particles, nx))
        return DiscreteDistribution.from_particles(mean + noise @ L.T)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def predict(self, prior: DiscreteDistribution, input: Any = None) -> DiscreteDistribution:
        """
        Propagate each particle through the process model.

        Particles are visited in index order and each consumes one process
        noise sample, so the result is reproducible for a given seed.

        Returns:
            predicted: New belief with the prior's weights
        """
        predicted = prior.copy()
        for i in range(predicted.size()):
            predicted.set_location(
                i,
                self.process_model.state(predicted.location(i).copy(), self.process_noise.sample(), input),
            )
        return predicted

    def update(self, predicted: DiscreteDistribution, observation: np.ndarray) -> DiscreteDistribution:
        """
        Resample if degenerate, then reweight by the observation likelihood.

        Diagnostics of the step are kept in self.last_update.

        Returns:
            posterior: New belief; predicted is left untouched
        """
        kl = predicted.kl_given_uniform()
        resampled = kl > self.config.max_kl_divergence

        if resampled:
            posterior = DiscreteDistribution(predicted.dimension())
            posterior.resample_from(predicted, predicted.size(), self._resample_rng)
            logger.debug(
                "Resampled %d particles (KL to uniform %.4f > %.4f)",
                predicted.size(), kl, self.config.max_kl_divergence,
            )
        else:
            posterior = predicted.copy()

        if self.config.likelihood_locations == "predicted":
            locations = predicted.locations
        else:
            locations = posterior.locations

        log_lik = np.asarray(
            self.observation_model.log_likelihoods(observation, locations),
            dtype=np.float64,
        ).reshape(-1)
        if log_lik.size != posterior.size():
            raise DimensionMismatchError(
                posterior.size(), log_lik.size, what="number of log likelihoods"
            )

        log_normalizer = posterior.add_log_weights(log_lik)

        self.last_update = UpdateInfo(
            kl_given_uniform=kl,
            resampled=resampled,
            log_likelihood=log_normalizer,
        )
        return posterior

    def predict_and_update(
        self,
        prior: DiscreteDistribution,
        input: Any,
        observation: np.ndarray,
    ) -> DiscreteDistribution:
        return self.update(self.predict(prior, input), observation)

    # -------------------------------------------------------------------------
    # Batch run
    # -------------------------------------------------------------------------

    def filter(
        self,
        observations: np.ndarray,
        prior: DiscreteDistribution,
        inputs: Optional[Sequence[Any]] = None,
        return_particles: bool = False,
    ) -> FilterResult:
        """
        Run predict_and_update over a sequence of observations.

        Args:
            observations: [T, ny] Observations (y_1, ..., y_T)
            prior: Belief over x_0
            inputs: Optional length-T sequence of inputs (u_1, ..., u_T)
            return_particles: If True, store particle and weight history.
                Requires a fixed population size, which holds because
                resampling keeps the particle count.

        Returns:
            FilterResult
        """
        observations = np.asarray(observations, dtype=np.float64)
        if observations.ndim == 1:
            observations = observations[:, np.newaxis]
        T = observations.shape[0]
        if inputs is not None and len(inputs) != T:
            raise DimensionMismatchError(T, len(inputs), what="number of inputs")

        N = prior.size()
        nx = prior.dimension()

        means = np.zeros((T + 1, nx))
        covariances = np.zeros((T + 1, nx, nx))
        ess_history = np.zeros(T)
        kl_history = np.zeros(T)
        resampled_history = np.zeros(T, dtype=bool)
        log_likelihood_increments = np.zeros(T)

        if return_particles:
            particles_history = np.zeros((T + 1, N, nx))
            weights_history = np.zeros((T + 1, N))
            particles_history[0] = prior.locations
            weights_history[0] = prior.weights

        means[0] = prior.mean()
        covariances[0] = prior.covariance()

        belief = prior
        for t in range(T):
            u = None if inputs is None else inputs[t]
            try:
                belief = self.predict_and_update(belief, u, observations[t])
            except NumericInstabilityError as exc:
                raise NumericInstabilityError(f"step {t}: {exc}") from exc

            info = self.last_update
            kl_history[t] = info.kl_given_uniform
            resampled_history[t] = info.resampled
            log_likelihood_increments[t] = info.log_likelihood
            ess_history[t] = belief.effective_sample_size()

            means[t + 1] = belief.mean()
            covariances[t + 1] = belief.covariance()

            if return_particles:
                particles_history[t + 1] = belief.locations
                weights_history[t + 1] = belief.weights

        logger.info(
            "Filtered %d steps with %d particles: %d resampling events, log-lik %.3f",
            T, N, int(np.sum(resampled_history)), float(np.sum(log_likelihood_increments)),
        )

        result = FilterResult(
            means=means,
            covariances=covariances,
            ess=ess_history,
            kl_given_uniform=kl_history,
            log_likelihood=float(np.sum(log_likelihood_increments)),
            log_likelihood_increments=log_likelihood_increments,
            resampled=resampled_history,
        )

        if return_particles:
            result.particles = particles_history
            result.weights = weights_history

        return result
