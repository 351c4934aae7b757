"""
Linear Gaussian models.

x_t = A @ x_{t-1} + B @ u_t + v_t,  v_t ~ N(0, Q)
y_t = C @ x_t + w_t,                w_t ~ N(0, R)
"""

import numpy as np
from typing import Optional

from .base import FunctionProcessModel
from .observation import AdditiveGaussianObservationModel


def make_linear_process_model(
    A: np.ndarray,
    Q: np.ndarray,
    B: Optional[np.ndarray] = None,
) -> FunctionProcessModel:
    """
    Linear process model x' = A x + B u + v, v ~ N(0, Q).

    Args:
        A: [nx, nx] State transition matrix
        Q: [nx, nx] Process noise covariance
        B: [nx, nu] Input matrix (None: inputs are ignored)

    Returns:
        FunctionProcessModel
    """
    A = np.atleast_2d(np.asarray(A, dtype=np.float64))
    nx = A.shape[0]
    if B is not None:
        B = np.atleast_2d(np.asarray(B, dtype=np.float64))

    def transition(x: np.ndarray, u=None) -> np.ndarray:
        """x: [nx] -> [nx]"""
        x_next = A @ x
        if B is not None and u is not None:
            x_next = x_next + B @ np.atleast_1d(u)
        return x_next

    return FunctionProcessModel.from_covariance(nx, transition, Q)


def make_linear_gaussian_models(
    A: np.ndarray,
    C: np.ndarray,
    Q: np.ndarray,
    R: np.ndarray,
    B: Optional[np.ndarray] = None,
) -> tuple:
    """
    Create a matching linear Gaussian process/observation model pair.

    Args:
        A: [nx, nx] State transition matrix
        C: [ny, nx] Observation matrix
        Q: [nx, nx] Process noise covariance
        R: [ny, ny] Observation noise covariance
        B: [nx, nu] Optional input matrix

    Returns:
        process_model: FunctionProcessModel
        observation_model: AdditiveGaussianObservationModel
    """
    C = np.atleast_2d(np.asarray(C, dtype=np.float64))
    ny = C.shape[0]

    def measurement(x: np.ndarray) -> np.ndarray:
        """x: [N, nx] -> [N, ny]"""
        return x @ C.T

    process_model = make_linear_process_model(A, Q, B)
    observation_model = AdditiveGaussianObservationModel(
        obs_dim=ny,
        measurement=measurement,
        noise_cov=R,
    )
    return process_model, observation_model
