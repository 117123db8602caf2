"""
State store.
"""

from thalexa.presentation.state.store import AppStore, NoticeLevel, StateSection

__all__ = ["AppStore", "NoticeLevel", "StateSection"]
