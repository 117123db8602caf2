"""
Identity provider interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from thalexa.domain.entities.session import Credential

AuthCallback = Callable[[Optional[Credential], Optional[Exception]], None]


class IAuthProvider(ABC):
    """
    Abstract interface for a pluggable authentication mechanism.

    Uses the callback-based async pattern: `authenticate` returns
    immediately and calls back exactly once, on the Qt main thread, with
    either a credential or an error.

    Example:
        def on_done(credential, error):
            if error is None:
                print(f"Connected {credential.address}")

        provider.authenticate({"email": "a@b.io"}, on_done)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of the provider (e.g. "magic_link")."""
        pass

    @property
    def label(self) -> str:
        """Human readable provider name."""
        return self.name

    def check_prerequisites(self) -> None:
        """
        Verify the environment supports this provider.

        Raises:
            PrerequisiteMissing: If a required capability is absent
        """

    def validate_input(self, provider_input: Dict[str, Any]) -> None:
        """
        Validate provider input before any pending state.

        Raises:
            ValidationError: If the input is unusable
        """

    @abstractmethod
    def authenticate(self, provider_input: Dict[str, Any], callback: AuthCallback) -> None:
        """
        Start authentication.

        Args:
            provider_input: Provider specific input (email, phrase, ...)
            callback: Called once with (credential, None) or (None, error)
        """
        pass
