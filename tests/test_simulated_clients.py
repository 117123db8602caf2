"""
Tests for the simulated ledger and identity providers on the Qt event loop.
"""

from decimal import Decimal

import pytest

from thalexa.core.exceptions import PrerequisiteMissing, ProviderError, ValidationError
from thalexa.domain.entities.product import Product
from thalexa.domain.value_objects.operation import OperationKind
from thalexa.infrastructure.ledger import SimulatedLedgerClient, random_address
from thalexa.infrastructure.providers import (
    MagicLinkProvider,
    NewWalletProvider,
    SeedPhraseProvider,
    WalletExtensionProvider,
    ZkLoginProvider,
)

PHRASE = "abandon ability able about above absent absorb abstract absurd abuse access accident"


class Recorder:
    """Collects (result, error) pairs from callback-style APIs."""

    def __init__(self):
        self.calls = []

    def __call__(self, result, error):
        self.calls.append((result, error))

    @property
    def done(self):
        return bool(self.calls)


def _wait(qtbot, recorder):
    qtbot.waitUntil(lambda: recorder.done, timeout=1000)
    assert len(recorder.calls) == 1
    return recorder.calls[0]


class TestSimulatedLedgerClient:
    @pytest.fixture
    def ledger(self, qapp):
        return SimulatedLedgerClient(settle_delay_ms=0, faucet_amount=Decimal("100"))

    def test_replies_asynchronously(self, qtbot, ledger):
        recorder = Recorder()

        ledger.check_health(recorder)

        assert not recorder.done
        status, error = _wait(qtbot, recorder)
        assert error is None
        assert status["healthy"] is True

    def test_register_then_verify(self, qtbot, ledger):
        registered = Recorder()
        ledger.submit(
            OperationKind.REGISTER, {"product": {"id": "prod_1", "name": "W"}}, registered
        )
        result, _ = _wait(qtbot, registered)
        assert result["ledger_ref"].startswith("0x")

        verified = Recorder()
        ledger.submit(OperationKind.VERIFY, {"product_id": "prod_1"}, verified)
        result, _ = _wait(qtbot, verified)
        assert result["found"] is True
        assert result["product"]["ledger_ref"] == registered.calls[0][0]["ledger_ref"]

    def test_unknown_product_is_not_found(self, qtbot, ledger):
        recorder = Recorder()
        ledger.submit(OperationKind.VERIFY, {"product_id": "prod_x"}, recorder)

        result, error = _wait(qtbot, recorder)

        assert error is None
        assert result == {"found": False, "product": None}

    def test_preloaded_products_verify(self, qtbot, ledger):
        ledger.preload(
            [Product(id="prod_9", name="W", description="D", owner_address="0x1", ledger_ref="0xr")]
        )
        recorder = Recorder()
        ledger.submit(OperationKind.VERIFY, {"product_id": "prod_9"}, recorder)

        result, _ = _wait(qtbot, recorder)

        assert result["found"] is True

    def test_new_address_gets_faucet_balance(self, qtbot, ledger):
        recorder = Recorder()
        ledger.fetch_balances("0xabc", recorder)

        balances, _ = _wait(qtbot, recorder)

        assert balances == {"SUI": Decimal("100")}

    def test_send_moves_funds(self, qtbot, ledger):
        sent = Recorder()
        payload = {"sender": "0xa", "recipient": "0xb", "amount": "40", "token": "SUI"}
        ledger.submit(OperationKind.SEND, payload, sent)
        receipt, error = _wait(qtbot, sent)
        assert error is None
        assert receipt["digest"]

        sender, recipient = Recorder(), Recorder()
        ledger.fetch_balances("0xa", sender)
        ledger.fetch_balances("0xb", recipient)
        qtbot.waitUntil(lambda: sender.done and recipient.done, timeout=1000)
        assert sender.calls[0][0] == {"SUI": Decimal("60")}
        assert recipient.calls[0][0] == {"SUI": Decimal("140")}

    def test_send_with_insufficient_funds_fails(self, qtbot, ledger):
        recorder = Recorder()
        payload = {"sender": "0xa", "recipient": "0xb", "amount": "1000", "token": "SUI"}
        ledger.submit(OperationKind.SEND, payload, recorder)

        result, error = _wait(qtbot, recorder)

        assert result is None
        assert isinstance(error, ProviderError)

    def test_random_address_format(self):
        address = random_address()

        assert address.startswith("0x") and len(address) == 42
        assert address != random_address()


class TestSimulatedProviders:
    @pytest.fixture(autouse=True)
    def _app(self, qapp):
        return qapp

    def test_magic_link(self, qtbot):
        provider = MagicLinkProvider(0)
        recorder = Recorder()

        provider.authenticate({"email": "ann@example.com"}, recorder)

        credential, error = _wait(qtbot, recorder)
        assert error is None
        assert credential.identity.display_name == "ann"
        assert credential.identity.email == "ann@example.com"
        assert credential.address.startswith("0x")

    def test_magic_link_rejects_bad_email(self):
        with pytest.raises(ValidationError):
            MagicLinkProvider(0).validate_input({"email": "ann"})

    def test_zklogin_issues_identity(self, qtbot):
        recorder = Recorder()

        ZkLoginProvider(0).authenticate({}, recorder)

        credential, _ = _wait(qtbot, recorder)
        assert credential.identity.provider == "google"
        assert credential.provider_name == "zkLogin"

    def test_seed_phrase_needs_twelve_words(self):
        with pytest.raises(ValidationError):
            SeedPhraseProvider(0).validate_input({"phrase": "too short"})

    def test_seed_phrase_address_is_deterministic(self, qtbot):
        first, second = Recorder(), Recorder()
        provider = SeedPhraseProvider(0)

        provider.authenticate({"phrase": PHRASE}, first)
        provider.authenticate({"phrase": "  " + PHRASE.upper() + " "}, second)
        qtbot.waitUntil(lambda: first.done and second.done, timeout=1000)

        assert first.calls[0][0].address == second.calls[0][0].address
        assert first.calls[0][0].identity is None

    def test_new_wallet(self, qtbot):
        recorder = Recorder()

        NewWalletProvider(0).authenticate({}, recorder)

        credential, _ = _wait(qtbot, recorder)
        assert credential.provider_name == "new"

    def test_wallet_extension_missing(self):
        provider = WalletExtensionProvider(None, "https://wallet.example/install", 0)

        with pytest.raises(PrerequisiteMissing) as exc_info:
            provider.check_prerequisites()

        assert exc_info.value.install_url == "https://wallet.example/install"

    def test_wallet_extension_returns_first_account(self, qtbot):
        class Extension:
            def request_accounts(self):
                return ["0xfirst", "0xsecond"]

        provider = WalletExtensionProvider(Extension(), "", 0)
        provider.check_prerequisites()
        recorder = Recorder()

        provider.authenticate({}, recorder)

        credential, _ = _wait(qtbot, recorder)
        assert credential.address == "0xfirst"

    def test_wallet_extension_without_accounts_fails(self, qtbot):
        class Extension:
            def request_accounts(self):
                return []

        recorder = Recorder()
        WalletExtensionProvider(Extension(), "", 0).authenticate({}, recorder)

        credential, error = _wait(qtbot, recorder)
        assert credential is None
        assert isinstance(error, ProviderError)
