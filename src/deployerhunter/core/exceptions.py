"""Deployer Hunter exception hierarchy.

This module defines the base exception class and specialized exceptions
for the error categories that cross module boundaries.
"""


class DeployerHunterError(Exception):
    """Base exception for all Deployer Hunter errors."""

    pass


class ConfigurationError(DeployerHunterError):
    """Raised when configuration is invalid or missing.

    Example:
        raise ConfigurationError("Unknown token source: 'foo'")
    """

    pass


class ExternalServiceError(DeployerHunterError):
    """Raised when an external service call fails.

    Use this for API errors from DexScreener, pump.fun, Solana RPC or the
    backend proxy.

    Attributes:
        service: Name of the external service that failed.
        status_code: HTTP status code if available, None otherwise.

    Example:
        raise ExternalServiceError(service="dexscreener", message="Rate limited", status_code=429)
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class CircuitBreakerOpenError(DeployerHunterError):
    """Raised when an API client's circuit breaker is open."""

    pass


class PipelineError(DeployerHunterError):
    """Raised when a ranking pipeline run fails.

    Attributes:
        view: Name of the view whose pipeline failed (if known).
    """

    def __init__(self, message: str, view: str | None = None) -> None:
        super().__init__(message)
        self.view = view
