"""
Trajectory simulation.
"""

import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence
from numpy.random import SeedSequence

from ..config import DEFAULT_SEED
from ..distributions.standard_gaussian import StandardGaussian
from ..exceptions import DimensionMismatchError


@dataclass
class Trajectory:
    """
    Simulated trajectory.

    Attributes:
        states: [T+1, nx] State trajectory (x_0, x_1, ..., x_T)
        observations: [T, ny] Observations (y_1, y_2, ..., y_T)
        metadata: Optional dictionary for additional info
    """
    states: np.ndarray
    observations: np.ndarray
    metadata: Optional[Dict[str, Any]] = None

    @property
    def T(self) -> int:
        """Number of time steps."""
        return self.observations.shape[0]

    @property
    def state_dim(self) -> int:
        return self.states.shape[1]

    @property
    def obs_dim(self) -> int:
        return self.observations.shape[1]


def simulate(
    process_model,
    observation_model,
    x0: np.ndarray,
    T: int,
    inputs: Optional[Sequence[Any]] = None,
    seed: Optional[int] = DEFAULT_SEED,
    metadata: Optional[Dict[str, Any]] = None,
) -> Trajectory:
    """
    Simulate states and observations from a model pair.

    The observation model must provide observation(state, noise) in
    addition to the filtering interface (the additive Gaussian models do).

    Args:
        process_model: Provides state(), noise_dimension()
        observation_model: Provides observation(), noise_dimension()
        x0: [nx] Initial state
        T: Number of time steps
        inputs: Optional length-T sequence of inputs
        seed: Random seed
        metadata: Optional metadata to attach

    Returns:
        Trajectory
    """
    if inputs is not None and len(inputs) != T:
        raise DimensionMismatchError(T, len(inputs), what="number of inputs")

    process_seed, obs_seed = SeedSequence(seed).spawn(2)
    process_noise = StandardGaussian(process_model.noise_dimension(), seed=process_seed)
    obs_noise = StandardGaussian(observation_model.noise_dimension(), seed=obs_seed)

    x0 = np.asarray(x0, dtype=np.float64).reshape(-1)
    states = np.zeros((T + 1, x0.size))
    observations = np.zeros((T, observation_model.noise_dimension()))
    states[0] = x0

    for t in range(T):
        u = None if inputs is None else inputs[t]
        states[t + 1] = process_model.state(states[t], process_noise.sample(), u)
        observations[t] = observation_model.observation(states[t + 1], obs_noise.sample())

    return Trajectory(states=states, observations=observations, metadata=metadata)
