"""
JSON file-based state repository implementation.

Implements IStateRepository with one snapshot file plus a separate
theme preference file.
"""

import json
import logging
import os
from typing import Any, Optional

from thalexa.core.exceptions import PersistenceWarning
from thalexa.core.interfaces.repositories import IStateRepository
from thalexa.domain.entities.app_state import ApplicationState, Theme

log = logging.getLogger("ThalexaLogger")

# Raised by ApplicationState.from_dict on a snapshot of the wrong shape
_SHAPE_ERRORS = (ValueError, TypeError, KeyError, AttributeError, ArithmeticError)


class JsonStateRepository(IStateRepository):
    """
    JSON file-based application-state repository.

    File structure:
        {base_path}/thalexa_state.json
        {base_path}/thalexa_theme.json

    Nothing here raises to the caller. Read problems fall back to the
    default state and write problems are logged as persistence warnings.

    Example:
        repo = JsonStateRepository("/home/me/.thalexa")
        state = repo.load()
        repo.save(state)
    """

    def __init__(
        self,
        base_path: str,
        state_file: str = "thalexa_state.json",
        theme_file: str = "thalexa_theme.json",
    ):
        """
        Initialize repository.

        Args:
            base_path: Directory for the snapshot files
            state_file: Snapshot file name
            theme_file: Theme preference file name
        """
        self.base_path = base_path
        self.state_path = os.path.join(base_path, state_file)
        self.theme_path = os.path.join(base_path, theme_file)

    def _ensure_directory(self) -> None:
        if not os.path.exists(self.base_path):
            os.makedirs(self.base_path, exist_ok=True)

    def _read_json_file(self, file_path: str) -> Optional[Any]:
        """
        Read and parse a JSON file.

        Args:
            file_path: Path to JSON file

        Returns:
            Parsed value or None when missing or unreadable
        """
        if not os.path.exists(file_path):
            return None

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            self._warn(PersistenceWarning(file_path, f"corrupt JSON ({e})"))
        except (OSError, UnicodeDecodeError) as e:
            self._warn(PersistenceWarning(file_path, f"read failed ({e})"))
        return None

    def _write_json_file(self, file_path: str, data: Any) -> None:
        """
        Write data to a JSON file.

        Args:
            file_path: Path to JSON file
            data: Data to write
        """
        try:
            self._ensure_directory()
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            self._warn(PersistenceWarning(file_path, f"write failed ({e})"))

    def _delete_json_file(self, file_path: str) -> None:
        if not os.path.exists(file_path):
            return

        try:
            os.remove(file_path)
        except OSError as e:
            self._warn(PersistenceWarning(file_path, f"delete failed ({e})"))

    @staticmethod
    def _warn(warning: PersistenceWarning) -> None:
        log.warning(warning.message)

    # ----------------------------------------------------------------
    # IStateRepository Implementation
    # ----------------------------------------------------------------

    def load(self) -> ApplicationState:
        """
        Load the saved state.

        Returns:
            Hydrated state, or defaults when missing or corrupt
        """
        data = self._read_json_file(self.state_path)
        state = ApplicationState()

        if data is not None:
            try:
                state = ApplicationState.from_dict(data)
            except _SHAPE_ERRORS as e:
                self._warn(PersistenceWarning(self.state_path, f"unusable snapshot ({e})"))
                state = ApplicationState()

        theme = self._read_theme()
        if theme is not None:
            state.theme = theme

        log.info(
            f"State loaded: authenticated={state.is_authenticated}, "
            f"products={len(state.products)}, notifications={len(state.notifications)}"
        )
        return state

    def save(self, state: ApplicationState) -> None:
        """
        Save a snapshot of the state.

        Args:
            state: State to persist
        """
        try:
            data = state.to_dict()
        except (AttributeError, TypeError, ValueError) as e:
            self._warn(PersistenceWarning(self.state_path, f"state not serializable ({e})"))
            return
        self._write_json_file(self.state_path, data)
        self.save_theme(state.theme)
        log.debug(f"State saved: {self.state_path}")

    def clear(self) -> None:
        """Delete the snapshot and the theme preference."""
        self._delete_json_file(self.state_path)
        self._delete_json_file(self.theme_path)
        log.info(f"Stored state cleared: {self.base_path}")

    def load_theme(self) -> Theme:
        """Read the theme preference (dark when unset)."""
        return self._read_theme() or Theme.DARK

    def save_theme(self, theme: Theme) -> None:
        """
        Persist the theme preference.

        Args:
            theme: Theme to store
        """
        self._write_json_file(self.theme_path, {"theme": theme.value})

    def _read_theme(self) -> Optional[Theme]:
        data = self._read_json_file(self.theme_path)
        if not isinstance(data, dict):
            return None
        try:
            return Theme(data.get("theme"))
        except ValueError:
            self._warn(PersistenceWarning(self.theme_path, "unknown theme value"))
            return None
