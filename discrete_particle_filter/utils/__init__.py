"""
Utility functions.
"""

from .resampling import (
    normalize_log_weights,
    cumulative_weights,
    effective_sample_size,
    entropy,
    kl_to_uniform,
)

from .logging_config import (
    get_logger,
    setup_logging,
    set_level,
)

__all__ = [
    "normalize_log_weights",
    "cumulative_weights",
    "effective_sample_size",
    "entropy",
    "kl_to_uniform",
    "get_logger",
    "setup_logging",
    "set_level",
]
