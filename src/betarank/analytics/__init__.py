"""Return, statistics and beta computations."""

from .beta import MIN_BETA_SAMPLES, estimate_beta
from .returns import aligned_log_returns, log_returns, trailing
from .stats import covariance, mean, variance

__all__ = [
    "MIN_BETA_SAMPLES",
    "aligned_log_returns",
    "covariance",
    "estimate_beta",
    "log_returns",
    "mean",
    "trailing",
    "variance",
]
