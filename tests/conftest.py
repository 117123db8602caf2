"""
Shared fixtures: in-memory collaborators and a wired set of services.
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from thalexa.application.controller import AppController
from thalexa.application.services import (
    LedgerPipeline,
    NotificationService,
    RefreshService,
    SessionService,
    SettingsService,
)
from thalexa.core.config.app_config import PricingConfig
from thalexa.core.exceptions import ProviderError
from thalexa.core.interfaces.ledger import ILedgerClient
from thalexa.core.interfaces.providers import IAuthProvider
from thalexa.domain.entities.session import Credential, UserIdentity, WalletBinding
from thalexa.domain.value_objects.operation import OperationKind
from thalexa.infrastructure.persistence import JsonStateRepository
from thalexa.presentation.router import Router
from thalexa.presentation.state.store import AppStore


class FakeLedgerClient(ILedgerClient):
    """
    Ledger double.

    Replies synchronously unless `hold` is set, in which case replies are
    queued in `held` and released with `release()`.
    """

    def __init__(self):
        self.submitted: List[Tuple[OperationKind, Dict[str, Any]]] = []
        self.registry: Dict[str, Dict[str, Any]] = {}
        self.balances: Dict[str, Decimal] = {"SUI": Decimal("10")}
        self.error: Optional[Exception] = None
        self.balance_error: Optional[Exception] = None
        self.reply: Optional[Dict[str, Any]] = None
        self.hold = False
        self.held: List[Callable[[], None]] = []
        self.balance_requests: List[str] = []

    def _complete(self, callback, result, error) -> None:
        if self.hold:
            self.held.append(lambda: callback(result, error))
        else:
            callback(result, error)

    def release(self) -> None:
        held, self.held = self.held, []
        for complete in held:
            complete()

    def submit(self, kind, payload, callback) -> None:
        self.submitted.append((kind, payload))
        if self.error is not None:
            self._complete(callback, None, self.error)
            return
        if self.reply is not None:
            self._complete(callback, self.reply, None)
            return
        if kind is OperationKind.REGISTER:
            record = dict(payload["product"])
            self.registry[record["id"]] = record
            result = {"ledger_ref": "0xref" + record["id"]}
        elif kind is OperationKind.VERIFY:
            record = self.registry.get(payload["product_id"])
            result = {"found": record is not None, "product": record}
        else:
            result = {"digest": "digest-1"}
        self._complete(callback, result, None)

    def fetch_balances(self, address, callback) -> None:
        self.balance_requests.append(address)
        if self.balance_error is not None:
            self._complete(callback, None, self.balance_error)
        else:
            self._complete(callback, dict(self.balances), None)

    def check_health(self, callback) -> None:
        self._complete(callback, {"healthy": True, "network": "testnet"}, None)


class FakeProvider(IAuthProvider):
    """Provider double that settles synchronously with a fixed address."""

    def __init__(
        self,
        name: str = "fake",
        address: str = "0xabc",
        identity: Optional[UserIdentity] = None,
        error: Optional[Exception] = None,
    ):
        self._name = name
        self.address = address
        self.identity = identity
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    @property
    def name(self) -> str:
        return self._name

    def authenticate(self, provider_input, callback) -> None:
        self.calls.append(provider_input)
        if self.error is not None:
            callback(None, self.error)
        else:
            callback(Credential(self.address, self._name, self.identity), None)


@pytest.fixture
def repository(tmp_path):
    return JsonStateRepository(str(tmp_path / "state"))


@pytest.fixture
def store(qapp, repository):
    return AppStore(repository)


@pytest.fixture
def notifications(store):
    return NotificationService(store)


@pytest.fixture
def ledger():
    return FakeLedgerClient()


@pytest.fixture
def provider():
    return FakeProvider(
        address="0xabc",
        identity=UserIdentity(id="user_1", email="ann@example.com", display_name="ann", provider="email"),
    )


@pytest.fixture
def opened_urls():
    return []


@pytest.fixture
def sessions(store, notifications, provider, opened_urls):
    return SessionService(store, notifications, [provider], open_url=opened_urls.append)


@pytest.fixture
def pipeline(store, notifications, ledger):
    return LedgerPipeline(store, notifications, ledger, verify_base_url="https://thalexa.com/verify")


@pytest.fixture
def settings(store):
    return SettingsService(store)


@pytest.fixture
def router(store):
    return Router(store, PricingConfig(prices={"SUI": Decimal("1.5")}))


@pytest.fixture
def refresher(store, ledger):
    return RefreshService(store, ledger, balance_interval_ms=30000, health_interval_ms=60000)


@pytest.fixture
def controller(store, notifications, sessions, pipeline, settings, router, refresher):
    controller = AppController(store, notifications, sessions, pipeline, settings, router, refresher)
    yield controller
    refresher.stop()


@pytest.fixture
def notices(store):
    """Collects (level, message) notices posted on the store."""
    posted = []
    store.notice_posted.connect(lambda level, message: posted.append((level, message)))
    return posted


def bind_wallet(store, address: str = "0xabc") -> None:
    """Put the store into an authenticated state without a provider."""
    store.state.wallet = WalletBinding(address=address, provider="fake")
    store.state.user = UserIdentity(id="user_1", display_name="ann")


@pytest.fixture
def signed_in(store):
    bind_wallet(store)
    return store
