"""
Simulated identity providers.

Each provider settles after a fixed delay on the Qt event loop. A real
backing implementation replaces `_issue` with a network round trip under
the same contract (input -> credential or error, called back once).
"""

from __future__ import annotations
import hashlib
import logging
import secrets
from abc import abstractmethod
from typing import Any, Dict, List, Optional, Protocol

from PyQt6.QtCore import QTimer

from thalexa.core.exceptions import PrerequisiteMissing, ProviderError, ValidationError
from thalexa.core.interfaces.providers import AuthCallback, IAuthProvider
from thalexa.domain.entities.session import Credential, UserIdentity
from thalexa.infrastructure.ledger.simulated_ledger_client import random_address

log = logging.getLogger("ThalexaLogger")


class WalletExtension(Protocol):
    """Local wallet bridge that can hand out authorized accounts."""

    def request_accounts(self) -> List[str]:
        ...


class SimulatedProvider(IAuthProvider):
    """Base class: runs `_issue` after the settle delay and reports back."""

    def __init__(self, settle_delay_ms: int = 1500):
        self._delay = settle_delay_ms

    def authenticate(self, provider_input: Dict[str, Any], callback: AuthCallback) -> None:
        def complete() -> None:
            try:
                credential = self._issue(provider_input)
            except ProviderError as e:
                callback(None, e)
                return
            callback(credential, None)

        log.debug(f"{self.name}: authenticating, settles in {self._delay}ms")
        QTimer.singleShot(self._delay, complete)

    @abstractmethod
    def _issue(self, provider_input: Dict[str, Any]) -> Credential:
        """Produce the credential (runs on settle)."""
        pass


def _user_id() -> str:
    return "user_" + secrets.token_hex(5)[:9]


def _require_email(provider_input: Dict[str, Any]) -> str:
    email = str(provider_input.get("email") or "").strip()
    local, _, domain = email.partition("@")
    if not local or not domain:
        raise ValidationError("email", "please enter a valid email")
    return email


class ZkLoginProvider(SimulatedProvider):
    """Federated login (Google) with a zero-knowledge derived address."""

    name = "zklogin"
    label = "Google (zkLogin)"

    def validate_input(self, provider_input: Dict[str, Any]) -> None:
        if provider_input.get("email"):
            _require_email(provider_input)

    def _issue(self, provider_input: Dict[str, Any]) -> Credential:
        email = str(provider_input.get("email") or "user@example.com").strip()
        identity = UserIdentity(
            id=_user_id(),
            email=email,
            display_name="Google User",
            provider="google",
        )
        return Credential(address=random_address(), provider_name="zkLogin", identity=identity)


class WalletExtensionProvider(SimulatedProvider):
    """Browser-extension style wallet reached through a local bridge."""

    name = "sui_wallet"
    label = "Sui Wallet"

    def __init__(
        self,
        extension: Optional[WalletExtension] = None,
        install_url: str = "",
        settle_delay_ms: int = 1500,
    ):
        super().__init__(settle_delay_ms)
        self._extension = extension
        self.install_url = install_url

    def check_prerequisites(self) -> None:
        if self._extension is None:
            raise PrerequisiteMissing(self.label, self.install_url)

    def _issue(self, provider_input: Dict[str, Any]) -> Credential:
        try:
            accounts = self._extension.request_accounts()
        except Exception as e:
            raise ProviderError(self.label, f"permission request failed ({e})") from e
        if not accounts:
            raise ProviderError(self.label, "no account was authorized")
        return Credential(address=accounts[0], provider_name="Sui Wallet")


class MagicLinkProvider(SimulatedProvider):
    """Passwordless email link."""

    name = "magic_link"
    label = "Email"

    def validate_input(self, provider_input: Dict[str, Any]) -> None:
        _require_email(provider_input)

    def _issue(self, provider_input: Dict[str, Any]) -> Credential:
        email = _require_email(provider_input)
        identity = UserIdentity(
            id=_user_id(),
            email=email,
            display_name=email.split("@")[0],
            provider="email",
        )
        return Credential(address=random_address(), provider_name="magic_link", identity=identity)


class SeedPhraseProvider(SimulatedProvider):
    """Import an existing wallet from its 12-word recovery phrase."""

    name = "seed_phrase"
    label = "Import Wallet"
    WORD_COUNT = 12

    @classmethod
    def _words(cls, provider_input: Dict[str, Any]) -> List[str]:
        words = str(provider_input.get("phrase") or "").split()
        if len(words) != cls.WORD_COUNT:
            raise ValidationError("phrase", f"please enter a valid {cls.WORD_COUNT}-word phrase")
        return words

    def validate_input(self, provider_input: Dict[str, Any]) -> None:
        self._words(provider_input)

    def _issue(self, provider_input: Dict[str, Any]) -> Credential:
        # Same phrase, same address; no real key derivation
        digest = hashlib.sha256(" ".join(self._words(provider_input)).lower().encode()).hexdigest()
        return Credential(address="0x" + digest[:40], provider_name="imported")


class NewWalletProvider(SimulatedProvider):
    """Create a fresh wallet."""

    name = "new_wallet"
    label = "New Wallet"

    def _issue(self, provider_input: Dict[str, Any]) -> Credential:
        return Credential(address=random_address(), provider_name="new")
