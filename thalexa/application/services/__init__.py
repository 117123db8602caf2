"""
Application services.
"""

from thalexa.application.services.notification_service import NotificationService
from thalexa.application.services.session_service import SessionService
from thalexa.application.services.ledger_pipeline import LedgerPipeline
from thalexa.application.services.settings_service import SettingsService
from thalexa.application.services.refresh_service import RefreshService

__all__ = [
    "NotificationService",
    "SessionService",
    "LedgerPipeline",
    "SettingsService",
    "RefreshService",
]
