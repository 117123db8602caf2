"""
Session service - wallet connection lifecycle across identity providers.
"""

import logging
import webbrowser
from typing import Any, Callable, Dict, List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from thalexa.application.services.notification_service import NotificationService
from thalexa.core.exceptions import (
    PrerequisiteMissing,
    ProviderError,
    ThalexaException,
    ValidationError,
)
from thalexa.core.interfaces.providers import IAuthProvider
from thalexa.domain.entities.notification import NotificationType
from thalexa.domain.entities.session import Credential
from thalexa.domain.value_objects.operation import AuthAttempt
from thalexa.presentation.state.store import AppStore, NoticeLevel, StateSection

log = logging.getLogger("ThalexaLogger")

AttemptCallback = Callable[[AuthAttempt], None]


class SessionService(QObject):
    """
    Owns the identity/wallet binding.

    Provides:
    - A registry of pluggable identity providers
    - connect: provider authentication -> wallet (and user) binding
    - disconnect: clears user and wallet, keeps products
    - clear_sessions: wipes all state and the stored snapshot

    Example:
        sessions = SessionService(store, notifications, [MagicLinkProvider()])
        sessions.connect("magic_link", {"email": "ann@example.com"})
    """

    session_started = pyqtSignal(object)  # Credential
    session_ended = pyqtSignal()
    attempt_failed = pyqtSignal(object)  # AuthAttempt

    def __init__(
        self,
        store: AppStore,
        notifications: NotificationService,
        providers: Optional[List[IAuthProvider]] = None,
        open_url: Callable[[str], Any] = webbrowser.open,
        parent: Optional[QObject] = None,
    ):
        """
        Initialize service.

        Args:
            store: Application store
            notifications: Notification queue
            providers: Providers available for connect
            open_url: Opens install pages for missing prerequisites
            parent: Optional parent QObject
        """
        super().__init__(parent)
        self._store = store
        self._notifications = notifications
        self._open_url = open_url
        self._providers: Dict[str, IAuthProvider] = {}
        for provider in providers or []:
            self.register_provider(provider)

    def register_provider(self, provider: IAuthProvider) -> None:
        self._providers[provider.name] = provider
        log.debug(f"Provider registered: {provider.name}")

    @property
    def provider_names(self) -> List[str]:
        return list(self._providers)

    @property
    def is_authenticated(self) -> bool:
        return self._store.state.is_authenticated

    @property
    def current_address(self) -> Optional[str]:
        return self._store.state.address

    # ----------------------------------------------------------------
    # Connect
    # ----------------------------------------------------------------

    def connect(
        self,
        provider_name: str,
        provider_input: Optional[Dict[str, Any]] = None,
        callback: Optional[AttemptCallback] = None,
    ) -> AuthAttempt:
        """
        Authenticate with a provider and bind the resulting wallet.

        Rejections (unknown provider, bad input, missing prerequisite)
        come back as an already failed attempt that never went pending.

        Args:
            provider_name: Registered provider name
            provider_input: Provider specific input
            callback: Called once when the attempt reaches a terminal state

        Returns:
            The attempt handle
        """
        provider_input = provider_input or {}
        provider = self._providers.get(provider_name)

        try:
            if provider is None:
                raise ValidationError("provider", f"unknown provider '{provider_name}'")
            provider.check_prerequisites()
            provider.validate_input(provider_input)
        except PrerequisiteMissing as e:
            self._store.post_notice(NoticeLevel.WARNING, e.message)
            if e.install_url:
                self._open_url(e.install_url)
            return self._reject(AuthAttempt.rejected(provider_name, e), callback)
        except ValidationError as e:
            self._store.post_notice(NoticeLevel.ERROR, e.message)
            return self._reject(AuthAttempt.rejected(provider_name, e), callback)

        attempt = AuthAttempt(provider=provider_name)
        self._store.post_notice(NoticeLevel.INFO, f"Connecting with {provider.label}...")

        def on_complete(credential: Optional[Credential], error: Optional[Exception]) -> None:
            if error is None and credential is None:
                error = ProviderError(provider.label, "returned no credential")
            if error is not None:
                self._on_failed(attempt, provider, error, callback)
            else:
                self._on_authenticated(attempt, credential, callback)

        try:
            provider.authenticate(provider_input, on_complete)
        except Exception as e:
            self._on_failed(attempt, provider, e, callback)
        return attempt

    def _reject(self, attempt: AuthAttempt, callback: Optional[AttemptCallback]) -> AuthAttempt:
        log.info(f"Connect rejected ({attempt.provider}): {attempt.error}")
        self.attempt_failed.emit(attempt)
        if callback:
            callback(attempt)
        return attempt

    def _on_failed(
        self,
        attempt: AuthAttempt,
        provider: IAuthProvider,
        error: Exception,
        callback: Optional[AttemptCallback],
    ) -> None:
        if not isinstance(error, ThalexaException):
            error = ProviderError(provider.label, str(error))
        if not attempt.fail(error):
            return
        self._store.post_notice(NoticeLevel.ERROR, f"Failed to connect: {error}")
        self.attempt_failed.emit(attempt)
        if callback:
            callback(attempt)

    def _on_authenticated(
        self,
        attempt: AuthAttempt,
        credential: Credential,
        callback: Optional[AttemptCallback],
    ) -> None:
        if not attempt.settle(credential):
            return

        state = self._store.state
        previous = state.wallet
        if previous is not None and previous.address != credential.address:
            # New identity: identity-tied view state goes, products stay
            log.info(f"Replacing session for {previous.short_address()}")
            state.balances = {}

        state.wallet = credential.to_wallet()
        state.user = credential.identity
        self._notifications.add(
            NotificationType.CONNECTED,
            "Wallet Connected",
            f"Connected {state.wallet.short_address()} via {credential.provider_name}",
        )
        self._store.commit(
            StateSection.SESSION, StateSection.BALANCES, StateSection.NOTIFICATIONS
        )

        log.info(f"Session started: {state.wallet.short_address()} ({credential.provider_name})")
        self._store.post_notice(NoticeLevel.SUCCESS, "Successfully connected!")
        self.session_started.emit(credential)
        if callback:
            callback(attempt)

    # ----------------------------------------------------------------
    # Disconnect
    # ----------------------------------------------------------------

    def disconnect(self) -> bool:
        """
        End the session. The caller is responsible for asking the user.

        Products stay recorded under their original owner.

        Returns:
            False if there was no session
        """
        state = self._store.state
        if state.wallet is None and state.user is None:
            return False

        state.user = None
        state.wallet = None
        self._store.commit(StateSection.SESSION)

        log.info("Session ended")
        self._store.post_notice(NoticeLevel.INFO, "Logged out successfully")
        self.session_ended.emit()
        return True

    def clear_sessions(self) -> None:
        """Wipe the whole state and the stored snapshot."""
        had_session = self._store.state.wallet is not None
        self._store.reset()
        self._store.post_notice(NoticeLevel.INFO, "All sessions cleared")
        if had_session:
            self.session_ended.emit()
