"""
Custom exceptions module.
"""

from thalexa.core.exceptions.exceptions import (
    ThalexaException,
    ValidationError,
    Unauthorized,
    PrerequisiteMissing,
    ProviderError,
    PersistenceWarning,
    ConfigurationError,
    ServiceNotRegisteredError,
)

__all__ = [
    "ThalexaException",
    "ValidationError",
    "Unauthorized",
    "PrerequisiteMissing",
    "ProviderError",
    "PersistenceWarning",
    "ConfigurationError",
    "ServiceNotRegisteredError",
]
