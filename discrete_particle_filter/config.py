"""
Filter configuration.
"""

from dataclasses import dataclass
from typing import Literal


# Seed used whenever none is given, so runs are reproducible by default.
DEFAULT_SEED = 42


@dataclass
class ParticleFilterConfig:
    """
    Settings for ParticleFilter.

    Attributes:
        max_kl_divergence: Resampling threshold on KL(p || uniform) in nats.
            0 resamples whenever the weights are not uniform; larger values
            tolerate more weight concentration. -log(f) roughly corresponds
            to a fraction f of particles carrying the mass.
        seed: Root seed. Process noise, resampling and initial_belief() draw
            from independent streams spawned from it.
        likelihood_locations: Which locations the observation model is
            evaluated at after a resampling step.
            "resampled": the posterior's own (resampled) locations, keeping
                likelihoods index-aligned with the particles they reweight.
            "predicted": the pre-resampling predicted locations.
            Both are identical when no resampling happens.
        n_particles: Population size for initial_belief().
    """
    max_kl_divergence: float = 1.0
    seed: int = DEFAULT_SEED
    likelihood_locations: Literal["resampled", "predicted"] = "resampled"
    n_particles: int = 1000

    def __post_init__(self):
        if not self.max_kl_divergence >= 0.0:
            raise ValueError(
                f"max_kl_divergence must be non-negative, got {self.max_kl_divergence}"
            )
        if self.likelihood_locations not in ("resampled", "predicted"):
            raise ValueError(
                f"Unknown likelihood_locations: {self.likelihood_locations}"
            )
        if self.n_particles < 1:
            raise ValueError(f"n_particles must be >= 1, got {self.n_particles}")
