"""
Page router.

Keeps exactly one current page, guards pages that need a session and
re-renders the current page whenever the state changes.
"""

import logging
from typing import Any, Dict, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from thalexa.core.config.app_config import PricingConfig
from thalexa.presentation.pages import REFRESH_HOOKS, Page, ViewData
from thalexa.presentation.state.store import AppStore, NoticeLevel

log = logging.getLogger("ThalexaLogger")


class Router(QObject):
    """
    Page state machine.

    Example:
        router = Router(store, pricing)
        router.page_rendered.connect(view.render)
        router.navigate("dashboard")
    """

    page_changed = pyqtSignal(str)
    page_rendered = pyqtSignal(str, object)  # page id, view data

    GUARD_MESSAGE = "Please connect wallet first"

    def __init__(
        self,
        store: AppStore,
        pricing: Optional[PricingConfig] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._store = store
        self._pricing = pricing or PricingConfig()
        self._current = Page.HOME
        self._view_data: ViewData = {}
        self._store.state_changed.connect(self._on_state_changed)

    @property
    def current_page(self) -> Page:
        return self._current

    @property
    def view_data(self) -> ViewData:
        return self._view_data

    def navigate(self, target: Any) -> Page:
        """
        Enter a page.

        Args:
            target: Page or location token; unknown tokens go home

        Returns:
            The page actually entered
        """
        page = Page.from_token(target)
        if page.requires_auth and not self._store.state.is_authenticated:
            log.info(f"Navigation to {page.value} blocked: no session")
            self._store.post_notice(NoticeLevel.WARNING, self.GUARD_MESSAGE)
            page = Page.HOME

        if page is not self._current:
            log.debug(f"Page: {self._current.value} -> {page.value}")
            self._current = page
            self.page_changed.emit(page.value)

        self._render()
        return page

    def refresh(self) -> ViewData:
        """Re-run the current page's hook."""
        return self._render()

    def render_page(self, page: Page) -> ViewData:
        """Compute any page's view data without navigating."""
        return REFRESH_HOOKS[page](self._store.state, self._pricing)

    def _render(self) -> ViewData:
        self._view_data = self.render_page(self._current)
        self.page_rendered.emit(self._current.value, self._view_data)
        return self._view_data

    def _on_state_changed(self, sections: list) -> None:
        if self._current.requires_auth and not self._store.state.is_authenticated:
            # Session ended while on a guarded page
            self._current = Page.HOME
            self.page_changed.emit(Page.HOME.value)
        self._render()

    def snapshot(self) -> Dict[str, Any]:
        return {"page": self._current.value, "data": self._view_data}
