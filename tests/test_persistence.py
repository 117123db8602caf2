"""
Tests for the JSON state repository and the state snapshot format.
"""

import json
import os
from decimal import Decimal

from thalexa.domain.entities.app_state import ApplicationState, Currency, Network, Theme
from thalexa.domain.entities.notification import Notification, NotificationType
from thalexa.domain.entities.product import Product, ProductDraft
from thalexa.domain.entities.session import UserIdentity, WalletBinding
from thalexa.infrastructure.persistence import JsonStateRepository


def _populated_state() -> ApplicationState:
    return ApplicationState(
        user=UserIdentity(id="user_1", email="ann@example.com", display_name="ann", provider="email"),
        wallet=WalletBinding(address="0xabc", provider="magic_link"),
        balances={"SUI": Decimal("12.5")},
        products=[
            Product(
                id="prod_123456789",
                name="Widget",
                description="A widget",
                owner_address="0xabc",
                ledger_ref="0xref",
                price=Decimal("9.99"),
            )
        ],
        notifications=[
            Notification(2, NotificationType.REGISTERED, "Product Registered", "Widget", 2),
            Notification(1, NotificationType.CONNECTED, "Wallet Connected", "0xabc", 1, read=True),
        ],
        network=Network.TESTNET,
        currency=Currency.EUR,
        theme=Theme.LIGHT,
    )


class TestJsonStateRepository:
    def test_load_without_files_returns_defaults(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))

        state = repo.load()

        assert state == ApplicationState()
        assert state.is_authenticated is False

    def test_save_then_load_restores_state(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path / "nested"))
        state = _populated_state()

        repo.save(state)
        loaded = JsonStateRepository(str(tmp_path / "nested")).load()

        assert loaded.wallet == state.wallet
        assert loaded.user == state.user
        assert loaded.balances == {"SUI": Decimal("12.5")}
        assert loaded.products[0].id == "prod_123456789"
        assert loaded.products[0].price == Decimal("9.99")
        assert [n.id for n in loaded.notifications] == [2, 1]
        assert loaded.notifications[1].read is True
        assert loaded.network is Network.TESTNET
        assert loaded.currency is Currency.EUR
        assert loaded.theme is Theme.LIGHT
        assert loaded.is_authenticated is True

    def test_snapshot_uses_snake_case_keys(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        repo.save(_populated_state())

        with open(repo.state_path, encoding="utf-8") as f:
            data = json.load(f)

        assert data["is_authenticated"] is True
        assert data["balances"] == {"SUI": "12.5"}
        assert data["products"][0]["owner_address"] == "0xabc"
        assert data["notifications"][0]["type"] == "registered"

    def test_corrupt_snapshot_falls_back_to_defaults(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        with open(repo.state_path, "w", encoding="utf-8") as f:
            f.write("{not json")

        state = repo.load()

        assert state == ApplicationState()

    def test_wrong_shape_falls_back_to_defaults(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        with open(repo.state_path, "w", encoding="utf-8") as f:
            json.dump({"network": "moonnet", "products": [{"name": "no id"}]}, f)

        state = repo.load()

        assert state == ApplicationState()

    def test_non_object_snapshot_falls_back_to_defaults(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        with open(repo.state_path, "w", encoding="utf-8") as f:
            json.dump([1, 2, 3], f)

        assert repo.load() == ApplicationState()

    def test_missing_keys_take_defaults(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        with open(repo.state_path, "w", encoding="utf-8") as f:
            json.dump({"currency": "GBP"}, f)

        state = repo.load()

        assert state.currency is Currency.GBP
        assert state.network is Network.MAINNET
        assert state.products == []
        assert state.wallet is None

    def test_stored_is_authenticated_is_ignored(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        with open(repo.state_path, "w", encoding="utf-8") as f:
            json.dump({"is_authenticated": True, "wallet": None}, f)

        assert repo.load().is_authenticated is False

    def test_theme_file_overrides_snapshot_theme(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        repo.save(ApplicationState(theme=Theme.DARK))

        repo.save_theme(Theme.LIGHT)

        assert repo.load().theme is Theme.LIGHT
        assert repo.load_theme() is Theme.LIGHT

    def test_unknown_theme_value_is_ignored(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        with open(repo.theme_path, "w", encoding="utf-8") as f:
            json.dump({"theme": "sepia"}, f)

        assert repo.load_theme() is Theme.DARK

    def test_clear_removes_both_files(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        repo.save(_populated_state())
        assert os.path.exists(repo.state_path)
        assert os.path.exists(repo.theme_path)

        repo.clear()

        assert not os.path.exists(repo.state_path)
        assert not os.path.exists(repo.theme_path)
        assert repo.load() == ApplicationState()

    def test_write_failure_does_not_raise(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        repo = JsonStateRepository(str(blocker / "state"))

        repo.save(_populated_state())

        assert repo.load() == ApplicationState()


class TestApplicationState:
    def test_reset_restores_defaults_in_place(self):
        state = _populated_state()
        products = state.products

        state.reset()

        assert state == ApplicationState()
        assert products != state.products

    def test_is_authenticated_follows_wallet(self):
        state = ApplicationState()
        assert state.is_authenticated is False

        state.wallet = WalletBinding(address="0xabc", provider="new")
        assert state.is_authenticated is True

        state.wallet = WalletBinding(address="0xabc", provider="new", connected=False)
        assert state.is_authenticated is False


class TestMalformedSnapshots:
    def test_non_string_created_at_falls_back_to_defaults(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        with open(repo.state_path, "w", encoding="utf-8") as f:
            json.dump({"products": [{"id": "prod_1", "name": "W", "created_at": 1700000000}]}, f)

        assert repo.load() == ApplicationState()

    def test_save_of_unserializable_state_does_not_raise(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        state = ApplicationState(
            products=[
                Product(
                    id="prod_1",
                    name="W",
                    description="D",
                    owner_address="0xabc",
                    ledger_ref="0xr",
                    created_at=1700000000,
                )
            ]
        )

        repo.save(state)

        assert not os.path.exists(repo.state_path)

    def test_null_values_take_defaults(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        with open(repo.state_path, "w", encoding="utf-8") as f:
            json.dump(
                {
                    "network": None,
                    "currency": "EUR",
                    "theme": None,
                    "notifications": [{"id": 3, "type": None, "title": None, "read": None}],
                },
                f,
            )

        state = repo.load()

        assert state.network is Network.MAINNET
        assert state.currency is Currency.EUR
        assert state.theme is Theme.DARK
        assert state.notifications[0].type is NotificationType.INFO
        assert state.notifications[0].title == ""
        assert state.notifications[0].read is False

    def test_string_flags_read_as_their_meaning(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        with open(repo.state_path, "w", encoding="utf-8") as f:
            json.dump(
                {
                    "wallet": {"address": "0xabc", "provider": "new", "connected": "true"},
                    "notifications": [
                        {"id": 2, "type": "info", "read": "false"},
                        {"id": 1, "type": "info", "read": "true"},
                    ],
                },
                f,
            )

        state = repo.load()

        assert state.is_authenticated is True
        assert [n.read for n in state.notifications] == [False, True]

    def test_unreadable_flag_falls_back_to_defaults(self, tmp_path):
        repo = JsonStateRepository(str(tmp_path))
        with open(repo.state_path, "w", encoding="utf-8") as f:
            json.dump({"notifications": [{"id": 1, "read": "maybe"}]}, f)

        assert repo.load() == ApplicationState()


def test_state_built_by_services_survives_a_reload(signed_in, notifications, pipeline, repository):
    pipeline.register_product(
        ProductDraft(
            name="Widget",
            description="A widget",
            manufacturer="Acme",
            production_date="2024-03-01",
            price="12.50",
        )
    )
    pipeline.verify_product("prod_missing")
    notifications.mark_all_read()

    loaded = repository.load()

    assert loaded == signed_in.state
