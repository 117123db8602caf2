"""
Session entities - who is signed in and which wallet is bound.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from thalexa.domain.entities.coercion import as_bool


@dataclass(frozen=True)
class UserIdentity:
    """
    Identity claim issued by a federated or email provider.

    Attributes:
        id: Provider-scoped user id
        email: Email address (may be empty)
        display_name: Human readable name
        provider: Identity provider name (e.g. "google", "email")
    """

    id: str
    email: str = ""
    display_name: str = ""
    provider: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "display_name": self.display_name,
            "provider": self.provider,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> UserIdentity:
        return cls(
            id=str(data["id"]),
            email=str(data.get("email") or ""),
            display_name=str(data.get("display_name") or ""),
            provider=str(data.get("provider") or ""),
        )


@dataclass(frozen=True)
class WalletBinding:
    """
    Connection record for the bound wallet.

    The address is opaque and never changes for the lifetime of a session;
    a different address means a new session.
    """

    address: str
    provider: str
    connected: bool = True

    def short_address(self, length: int = 6) -> str:
        return format_address(self.address, length)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "provider": self.provider,
            "connected": self.connected,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> WalletBinding:
        return cls(
            address=str(data["address"]),
            provider=str(data.get("provider") or ""),
            connected=as_bool(data.get("connected"), default=True),
        )


@dataclass(frozen=True)
class Credential:
    """
    What a provider hands back after a successful authentication.

    Attributes:
        address: Wallet address controlled by the user
        provider_name: Name of the provider that issued it
        identity: Identity claim, only for providers that know the user
    """

    address: str
    provider_name: str
    identity: Optional[UserIdentity] = None

    def to_wallet(self) -> WalletBinding:
        return WalletBinding(address=self.address, provider=self.provider_name, connected=True)


def format_address(address: Optional[str], length: int = 6) -> str:
    """
    Shorten an address for display ("0x1234...abcd").

    Args:
        address: Full address or None
        length: Characters kept on each side

    Returns:
        Shortened address, or "Not connected" when there is none
    """
    if not address:
        return "Not connected"
    if len(address) <= length * 2:
        return address
    return f"{address[:length]}...{address[-length:]}"
