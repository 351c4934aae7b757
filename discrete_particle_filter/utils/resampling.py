"""
Weight normalization and degeneracy diagnostics for weighted particle sets.
"""

import numpy as np


def normalize_log_weights(log_weights: np.ndarray) -> tuple:
    """
    Normalize unnormalized log weights.

    The maximum is shifted out before exponentiating, so weights spanning
    hundreds of nats neither overflow nor underflow to an all-zero vector.

    Args:
        log_weights: [N] Unnormalized log weights (finite)

    Returns:
        weights: [N] Normalized weights (sum to 1)
        log_weights: [N] log(weights)
        log_normalizer: log(sum(exp(log_weights)))
    """
    shift = np.max(log_weights)
    log_w = log_weights - shift
    w = np.exp(log_w)
    s = np.sum(w)

    w /= s
    log_w -= np.log(s)

    return w, log_w, shift + np.log(s)


def cumulative_weights(weights: np.ndarray) -> np.ndarray:
    """
    Running sum of normalized weights.

    The last entry is pinned to exactly 1.0 so that inverse-CDF lookups
    with u in [0, 1) never run past the end.

    Args:
        weights: [N] Normalized weights

    Returns:
        cdf: [N] Non-decreasing, cdf[-1] == 1
    """
    cdf = np.cumsum(weights)
    cdf[-1] = 1.0
    return cdf


def effective_sample_size(weights: np.ndarray) -> float:
    """
    Compute effective sample size (ESS).

    ESS = 1 / sum(w_i^2), where weights are normalized.

    Args:
        weights: [N] Normalized weights (must sum to 1)

    Returns:
        ESS value in [1, N]
    """
    return 1.0 / np.sum(weights ** 2)


def entropy(weights: np.ndarray, log_weights: np.ndarray) -> float:
    """Shannon entropy -sum(w_i log w_i) in nats."""
    return -float(np.sum(log_weights * weights))


def kl_to_uniform(weights: np.ndarray, log_weights: np.ndarray) -> float:
    """
    KL(p || u) between the weight distribution p and the uniform
    distribution u over the same N particles.

    Equals log(N) - H(p), summed termwise as sum(w_i (log w_i + log N)) so
    uniform weights (log w_i == -log N) give exactly 0. Roughly -log(f)
    where f is the fraction of particles carrying the mass.
    """
    kl = float(np.sum(weights * (log_weights + np.log(len(weights)))))
    return max(kl, 0.0)
