"""
Application state store using Qt signals for reactive updates.

Holds the single ApplicationState of a controller and funnels every
mutation through `commit`, which saves the snapshot and tells observers
what changed.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional
import logging

from PyQt6.QtCore import QObject, pyqtSignal

from thalexa.core.interfaces.repositories import IStateRepository
from thalexa.domain.entities.app_state import ApplicationState

log = logging.getLogger("ThalexaLogger")


class StateSection(Enum):
    """Parts of the state named in change notifications."""

    SESSION = "session"
    BALANCES = "balances"
    PRODUCTS = "products"
    NOTIFICATIONS = "notifications"
    SETTINGS = "settings"
    ALL = "all"


class NoticeLevel(Enum):
    """Severity of a transient user-facing notice (toast)."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class AppStore(QObject):
    """
    Central application store.

    One instance per controller; services receive it through their
    constructors. Readers may access `state` freely but only services
    write to it, always followed by `commit`.

    Example:
        store = AppStore(JsonStateRepository(path))
        store.state_changed.connect(self.on_state_changed)
        store.state.balances = {"SUI": Decimal("3")}
        store.commit(StateSection.BALANCES)
    """

    # Emitted after every commit with the StateSection values that changed
    state_changed = pyqtSignal(list)

    # Transient notice for the view layer: (level, message)
    notice_posted = pyqtSignal(str, str)

    def __init__(
        self,
        repository: IStateRepository,
        state: Optional[ApplicationState] = None,
        parent: Optional[QObject] = None,
    ):
        """
        Initialize the store.

        Args:
            repository: Snapshot storage
            state: Initial state (loaded from the repository when omitted)
            parent: Optional parent QObject
        """
        super().__init__(parent)
        self._repository = repository
        self._state = state if state is not None else repository.load()
        log.info("AppStore initialized")

    @property
    def state(self) -> ApplicationState:
        return self._state

    @property
    def repository(self) -> IStateRepository:
        return self._repository

    def commit(self, *sections: StateSection) -> None:
        """
        Persist the current state and notify observers.

        A failed save is logged by the repository and never undoes the
        in-memory change.

        Args:
            sections: Parts of the state that changed
        """
        self._repository.save(self._state)
        changed = [s.value for s in (sections or (StateSection.ALL,))]
        log.debug(f"State committed: {', '.join(changed)}")
        self.state_changed.emit(changed)

    def reset(self) -> None:
        """Reset to defaults in place and purge the stored snapshot."""
        self._state.reset()
        self._repository.clear()
        log.info("State reset to defaults")
        self.state_changed.emit([StateSection.ALL.value])

    def post_notice(self, level: NoticeLevel, message: str) -> None:
        """
        Post a transient notice for the view layer.

        Args:
            level: Notice severity
            message: Human readable text
        """
        if level is NoticeLevel.ERROR:
            log.error(message)
        elif level is NoticeLevel.WARNING:
            log.warning(message)
        else:
            log.info(message)
        self.notice_posted.emit(level.value, message)
