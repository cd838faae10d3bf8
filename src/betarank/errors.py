"""Custom exceptions for clearer error handling across the package."""


class BetaRankError(Exception):
    """Base exception for all package-specific errors."""


class ConfigError(BetaRankError, ValueError):
    """Raised when environment or CLI configuration is invalid."""


class InvalidRequestError(BetaRankError, ValueError):
    """Raised when a ranking request is rejected before any processing."""


class EmptyInputError(BetaRankError, ValueError):
    """Raised when a statistic is requested over an empty sequence."""


class LengthMismatchError(BetaRankError, ValueError):
    """Raised when paired sequences differ in length."""


class InsufficientDataError(BetaRankError, ValueError):
    """Raised when a series is too short for the requested computation."""


class DataProviderError(BetaRankError):
    """Raised when price data retrieval fails."""


class ProviderNetworkError(DataProviderError):
    """Raised on transport failures, timeouts and exhausted retries."""


class ProviderResponseError(DataProviderError):
    """Raised when the provider reports an error or returns a malformed payload."""


class BenchmarkUnavailableError(BetaRankError):
    """Raised when a benchmark series cannot be loaded for a ranking request."""
