"""
Repository interfaces for data persistence.
"""

from abc import ABC, abstractmethod

from thalexa.domain.entities.app_state import ApplicationState, Theme


class IStateRepository(ABC):
    """
    Interface for the persisted application-state snapshot.

    Implementations never raise to callers: read problems fall back to
    defaults and write problems are logged.
    """

    @abstractmethod
    def load(self) -> ApplicationState:
        """
        Load the last saved state.

        Returns:
            Hydrated state, or a default state when nothing usable is stored
        """
        pass

    @abstractmethod
    def save(self, state: ApplicationState) -> None:
        """
        Save a snapshot of the state (last write wins).

        Args:
            state: State to persist
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Delete the snapshot and the theme preference."""
        pass

    @abstractmethod
    def load_theme(self) -> Theme:
        """Read the separately stored theme preference."""
        pass

    @abstractmethod
    def save_theme(self, theme: Theme) -> None:
        """Persist the theme preference under its own key."""
        pass
