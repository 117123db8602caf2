"""
Application controller.

Single entry point for user actions: owns the store and the services,
and routes each command to the component responsible for it.
"""

import logging
from typing import Any, Callable, Dict, Optional, Type

from PyQt6.QtCore import QObject, pyqtSignal

from thalexa.application.commands import (
    ClearSessions,
    Command,
    Connect,
    Disconnect,
    MarkNotificationRead,
    Navigate,
    RegisterProduct,
    SaveSettings,
    SendPayment,
    ToggleTheme,
    VerifyProduct,
    command_from_dict,
)
from thalexa.application.services import (
    LedgerPipeline,
    NotificationService,
    RefreshService,
    SessionService,
    SettingsService,
)
from thalexa.core.exceptions import ValidationError
from thalexa.domain.value_objects.operation import AuthAttempt
from thalexa.presentation.pages import Page
from thalexa.presentation.router import Router
from thalexa.presentation.state.store import AppStore

log = logging.getLogger("ThalexaLogger")


class AppController(QObject):
    """
    Dispatches commands to the session, pipeline, settings and router.

    Example:
        controller.dispatch(Connect("magic_link", {"email": "ann@example.com"}))
        controller.dispatch(Navigate("wallet"))
    """

    command_dispatched = pyqtSignal(object)

    def __init__(
        self,
        store: AppStore,
        notifications: NotificationService,
        sessions: SessionService,
        pipeline: LedgerPipeline,
        settings: SettingsService,
        router: Router,
        refresher: Optional[RefreshService] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.store = store
        self.notifications = notifications
        self.sessions = sessions
        self.pipeline = pipeline
        self.settings = settings
        self.router = router
        self.refresher = refresher

        self._handlers: Dict[Type[Command], Callable[[Any], Any]] = {
            Connect: self._connect,
            Disconnect: self._disconnect,
            ClearSessions: self._clear_sessions,
            RegisterProduct: lambda c: self.pipeline.register_product(c.draft),
            VerifyProduct: lambda c: self.pipeline.verify_product(c.product_id),
            SendPayment: lambda c: self.pipeline.send_payment(c.recipient, c.amount, c.token),
            Navigate: lambda c: self.router.navigate(c.page),
            SaveSettings: lambda c: self.settings.save_settings(c.network, c.currency),
            ToggleTheme: lambda c: self.settings.toggle_theme(),
            MarkNotificationRead: self._mark_read,
        }

        self.sessions.session_started.connect(self._on_session_started)

    def dispatch(self, command: Command) -> Any:
        """
        Run a command.

        Args:
            command: Command instance

        Returns:
            Whatever the handling component returns (operation handle,
            page entered, new theme, ...)

        Raises:
            ValidationError: If the command type is unknown
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            raise ValidationError("command", f"unsupported command {type(command).__name__}")
        log.debug(f"Dispatching {command}")
        result = handler(command)
        self.command_dispatched.emit(command)
        return result

    def dispatch_dict(self, data: Dict[str, Any]) -> Any:
        """Run a command given in its JSON form."""
        return self.dispatch(command_from_dict(data))

    def start(self, initial_page: Any = Page.HOME, background_refresh: bool = True) -> None:
        """Show the first page and start background refresh."""
        self.router.navigate(initial_page)
        if background_refresh and self.refresher is not None:
            self.refresher.start()
            self.refresher.refresh_balances()

    # ----------------------------------------------------------------
    # Handlers
    # ----------------------------------------------------------------

    def _connect(self, command: Connect) -> AuthAttempt:
        return self.sessions.connect(command.provider, dict(command.input))

    def _on_session_started(self, credential: Any) -> None:
        self.router.navigate(Page.DASHBOARD)
        if self.refresher is not None:
            self.refresher.refresh_balances()

    def _disconnect(self, command: Disconnect) -> bool:
        ended = self.sessions.disconnect()
        self.router.navigate(Page.HOME)
        return ended

    def _clear_sessions(self, command: ClearSessions) -> None:
        self.sessions.clear_sessions()
        self.router.navigate(Page.HOME)

    def _mark_read(self, command: MarkNotificationRead) -> int:
        if command.notification_id is None:
            return self.notifications.mark_all_read()
        return int(self.notifications.mark_read(int(command.notification_id)))
