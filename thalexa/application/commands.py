"""
Commands accepted by the controller.

The view layer and the control server express every user action as one
of these immutable values instead of calling services directly.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type

from thalexa.core.exceptions import ValidationError
from thalexa.domain.entities.product import ProductDraft


@dataclass(frozen=True)
class Command:
    """Base class for controller commands."""

    type_name = ""


@dataclass(frozen=True)
class Connect(Command):
    type_name = "connect"
    provider: str
    input: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Disconnect(Command):
    """The caller has already asked the user for confirmation."""

    type_name = "disconnect"


@dataclass(frozen=True)
class ClearSessions(Command):
    type_name = "clear_sessions"


@dataclass(frozen=True)
class RegisterProduct(Command):
    type_name = "register_product"
    draft: ProductDraft


@dataclass(frozen=True)
class VerifyProduct(Command):
    type_name = "verify_product"
    product_id: str


@dataclass(frozen=True)
class SendPayment(Command):
    type_name = "send_payment"
    recipient: str
    amount: Any
    token: str = "SUI"


@dataclass(frozen=True)
class Navigate(Command):
    type_name = "navigate"
    page: str


@dataclass(frozen=True)
class SaveSettings(Command):
    type_name = "save_settings"
    network: Optional[str] = None
    currency: Optional[str] = None


@dataclass(frozen=True)
class ToggleTheme(Command):
    type_name = "toggle_theme"


@dataclass(frozen=True)
class MarkNotificationRead(Command):
    """Acknowledge one notification, or all of them when id is None."""

    type_name = "mark_notification_read"
    notification_id: Optional[int] = None


COMMAND_TYPES: Dict[str, Type[Command]] = {
    cls.type_name: cls
    for cls in (
        Connect,
        Disconnect,
        ClearSessions,
        RegisterProduct,
        VerifyProduct,
        SendPayment,
        Navigate,
        SaveSettings,
        ToggleTheme,
        MarkNotificationRead,
    )
}


def command_from_dict(data: Dict[str, Any]) -> Command:
    """
    Build a command from its JSON form, e.g. {"type": "navigate", "page": "wallet"}.

    Raises:
        ValidationError: If the type is unknown or fields are missing
    """
    cmd_type = data.get("type")
    cls = COMMAND_TYPES.get(cmd_type)
    if cls is None:
        raise ValidationError("type", f"unknown command type '{cmd_type}'")

    fields = {k: v for k, v in data.items() if k != "type"}
    if cls is RegisterProduct:
        draft = fields.pop("draft", None) or fields
        fields = {"draft": ProductDraft.from_dict(draft)}
    try:
        return cls(**fields)
    except TypeError as e:
        raise ValidationError("command", str(e))
