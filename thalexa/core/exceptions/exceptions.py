"""
Custom exceptions for Thalexa.

Provides a hierarchy of exceptions for different error scenarios:
- Validation errors (bad caller input)
- Session errors (unauthorized, missing prerequisites)
- Provider errors (ledger or identity provider failures)
- Persistence and configuration errors
"""

from typing import Optional


class ThalexaException(Exception):
    """Base exception for all application exceptions."""

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class ValidationError(ThalexaException):
    """Raised when caller input fails validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.reason = message
        super().__init__(f"Validation error for '{field}': {message}")


class Unauthorized(ThalexaException):
    """Raised when an operation requires a connected wallet."""

    def __init__(self, message: str = "Please connect wallet first"):
        super().__init__(message)


class PrerequisiteMissing(ThalexaException):
    """Raised when the environment lacks a capability a provider needs."""

    def __init__(self, provider: str, install_url: Optional[str] = None):
        self.provider = provider
        self.install_url = install_url
        super().__init__(f"Please install {provider} to continue")


class ProviderError(ThalexaException):
    """Raised when an external collaborator (ledger, identity provider) fails."""

    def __init__(self, provider: str, message: str = "request failed"):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class PersistenceWarning(ThalexaException):
    """Raised internally when the state snapshot cannot be read or written."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Persistence problem with {path}: {message}")


class ConfigurationError(ThalexaException):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, message: str = "is missing or invalid"):
        self.config_key = config_key
        super().__init__(f"Configuration '{config_key}' {message}")


class ServiceNotRegisteredError(ThalexaException):
    """Raised when a service is not registered in the DI container."""

    def __init__(self, service_type: type):
        self.service_type = service_type
        type_name = getattr(service_type, "__name__", str(service_type))
        super().__init__(f"Service {type_name} is not registered")
