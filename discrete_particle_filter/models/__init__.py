"""
Process and observation model definitions.
"""

from .base import ProcessModel, ObservationModel, FunctionProcessModel
from .observation import AdditiveGaussianObservationModel, AdditiveUncorrelatedObservationModel
from .linear_gaussian import make_linear_process_model, make_linear_gaussian_models

__all__ = [
    "ProcessModel",
    "ObservationModel",
    "FunctionProcessModel",
    "AdditiveGaussianObservationModel",
    "AdditiveUncorrelatedObservationModel",
    "make_linear_process_model",
    "make_linear_gaussian_models",
]
