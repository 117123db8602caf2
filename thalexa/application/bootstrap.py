"""
Application bootstrap and dependency injection configuration.

Configures and wires up all services with their dependencies.
"""

import logging
import webbrowser
from typing import Any, Callable, List, Optional

from thalexa.application.controller import AppController
from thalexa.application.services import (
    LedgerPipeline,
    NotificationService,
    RefreshService,
    SessionService,
    SettingsService,
)
from thalexa.core.config.app_config import AppConfig
from thalexa.core.di.container import DIContainer
from thalexa.core.interfaces.ledger import ILedgerClient
from thalexa.core.interfaces.providers import IAuthProvider
from thalexa.core.interfaces.repositories import IStateRepository
from thalexa.infrastructure.ledger import SimulatedLedgerClient
from thalexa.infrastructure.persistence import JsonStateRepository
from thalexa.infrastructure.providers import (
    MagicLinkProvider,
    NewWalletProvider,
    SeedPhraseProvider,
    WalletExtension,
    WalletExtensionProvider,
    ZkLoginProvider,
)
from thalexa.presentation.router import Router
from thalexa.presentation.state.store import AppStore

log = logging.getLogger("ThalexaLogger")


class ApplicationBootstrap:
    """
    Application bootstrapper.

    Configures dependency injection container and starts services.
    Collaborators can be swapped (ledger, providers, repository) so tests
    and alternative backends reuse the same wiring.

    Example:
        bootstrap = ApplicationBootstrap(AppConfig("config.ini"))
        bootstrap.configure()
        bootstrap.start()

        controller = bootstrap.controller

        # Cleanup on exit
        bootstrap.shutdown()
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        ledger: Optional[ILedgerClient] = None,
        providers: Optional[List[IAuthProvider]] = None,
        repository: Optional[IStateRepository] = None,
        wallet_extension: Optional[WalletExtension] = None,
        open_url: Callable[[str], Any] = webbrowser.open,
    ):
        """
        Initialize bootstrap.

        Args:
            config: Application configuration
            ledger: Ledger client (simulated one when omitted)
            providers: Identity providers (simulated set when omitted)
            repository: State repository (JSON files when omitted)
            wallet_extension: Local wallet bridge for the extension provider
            open_url: Opens install pages
        """
        self.config = config or AppConfig()
        self.container = DIContainer()
        self._ledger = ledger
        self._providers = providers
        self._repository = repository
        self._wallet_extension = wallet_extension
        self._open_url = open_url
        self._configured = False
        self._started = False

    def configure(self) -> None:
        """Configure all dependencies in the container."""
        if self._configured:
            return

        log.info("Configuring application dependencies")

        self.container.register_instance(AppConfig, self.config)
        self._register_infrastructure()
        self._register_services()

        self._configured = True
        log.info("Application dependencies configured")

    def _register_infrastructure(self) -> None:
        """Register infrastructure layer dependencies."""
        config = self.config
        storage = config.storage_config
        ledger_config = config.ledger_config

        if self._repository is not None:
            self.container.register_instance(IStateRepository, self._repository)
        else:
            self.container.register_singleton(
                IStateRepository,
                factory=lambda c: JsonStateRepository(
                    storage.path, storage.state_file, storage.theme_file
                ),
            )

        self.container.register_singleton(
            AppStore, factory=lambda c: AppStore(c.resolve(IStateRepository))
        )

        def create_ledger(c: DIContainer) -> ILedgerClient:
            if self._ledger is not None:
                return self._ledger
            ledger = SimulatedLedgerClient(
                settle_delay_ms=ledger_config.settle_delay_ms,
                network=ledger_config.network,
                faucet_amount=ledger_config.faucet_amount,
                endpoint=ledger_config.rpc_url,
            )
            # Products registered in earlier runs stay verifiable
            ledger.preload(c.resolve(AppStore).state.products)
            return ledger

        self.container.register_singleton(ILedgerClient, factory=create_ledger)

    def _default_providers(self) -> List[IAuthProvider]:
        auth = self.config.auth_config
        delay = auth.settle_delay_ms
        return [
            ZkLoginProvider(delay),
            WalletExtensionProvider(self._wallet_extension, auth.wallet_install_url, delay),
            MagicLinkProvider(delay),
            SeedPhraseProvider(delay),
            NewWalletProvider(max(delay - 500, 0)),
        ]

    def _register_services(self) -> None:
        """Register application layer services."""
        ledger_config = self.config.ledger_config
        refresh = self.config.refresh_config

        self.container.register_singleton(
            NotificationService, factory=lambda c: NotificationService(c.resolve(AppStore))
        )

        self.container.register_singleton(
            SessionService,
            factory=lambda c: SessionService(
                c.resolve(AppStore),
                c.resolve(NotificationService),
                self._providers if self._providers is not None else self._default_providers(),
                open_url=self._open_url,
            ),
        )

        self.container.register_singleton(
            LedgerPipeline,
            factory=lambda c: LedgerPipeline(
                c.resolve(AppStore),
                c.resolve(NotificationService),
                c.resolve(ILedgerClient),
                verify_base_url=ledger_config.verify_base_url,
                timeout_ms=ledger_config.operation_timeout_ms,
            ),
        )

        self.container.register_singleton(
            SettingsService, factory=lambda c: SettingsService(c.resolve(AppStore))
        )

        self.container.register_singleton(
            Router,
            factory=lambda c: Router(c.resolve(AppStore), self.config.pricing_config),
        )

        self.container.register_singleton(
            RefreshService,
            factory=lambda c: RefreshService(
                c.resolve(AppStore),
                c.resolve(ILedgerClient),
                refresh.balance_interval_ms,
                refresh.health_interval_ms,
            ),
        )

        self.container.register_singleton(
            AppController,
            factory=lambda c: AppController(
                c.resolve(AppStore),
                c.resolve(NotificationService),
                c.resolve(SessionService),
                c.resolve(LedgerPipeline),
                c.resolve(SettingsService),
                c.resolve(Router),
                c.resolve(RefreshService),
            ),
        )

    def start(self, initial_page: Any = "home", background_refresh: bool = True) -> None:
        """
        Show the first page and start background refresh.

        Args:
            initial_page: Page token to open
            background_refresh: Start the balance/health timers
        """
        if not self._configured:
            self.configure()

        if self._started:
            return

        log.info("Starting application")
        self.controller.start(initial_page, background_refresh)

        self._started = True
        log.info("Application started")

    def shutdown(self) -> None:
        """Shutdown the application."""
        log.info("Shutting down application")

        try:
            self.container.dispose_all()
        except Exception as e:
            log.warning(f"Error disposing services: {e}")

        self._started = False
        log.info("Application shutdown complete")

    # ----------------------------------------------------------------
    # Convenience accessors
    # ----------------------------------------------------------------

    @property
    def controller(self) -> AppController:
        """Get the application controller."""
        if not self._configured:
            self.configure()
        return self.container.resolve(AppController)

    @property
    def store(self) -> AppStore:
        """Get the application store."""
        return self.container.resolve(AppStore)


def initialize_app(config: Optional[AppConfig] = None, **overrides: Any) -> ApplicationBootstrap:
    """
    Create and configure the application bootstrap.

    Args:
        config: Application configuration
        overrides: Collaborator overrides passed to ApplicationBootstrap

    Returns:
        Configured bootstrap
    """
    bootstrap = ApplicationBootstrap(config, **overrides)
    bootstrap.configure()
    return bootstrap
