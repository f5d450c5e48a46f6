"""
Dependency Injection container for Crieur.

Manages lifecycle and dependencies of all session components.
"""

from datetime import datetime, timezone
from typing import Optional

from shared.reporter import SystemReporter

from crieur.application.reconciliation import (
    CollectingNoticeSink,
    NotificationStore,
    QueryCache,
    ReconciliationPolicy,
    Reconciler,
    ReporterNoticeSink,
)
from crieur.application.session import RealtimeSession
from crieur.config.settings import Settings
from crieur.infrastructure.auth import RefreshClient, TokenDecoder, TokenGuard
from crieur.infrastructure.storage import (
    CredentialStore,
    FileCredentialStore,
    InMemoryCredentialStore,
)
from crieur.infrastructure.websocket import ConnectionManager
from crieur.infrastructure.websocket.connection_manager import TransportFactory


class Container:
    """
    Dependency Injection container.

    Creates and caches every session component from Settings.
    Tests inject a credential store, an httpx transport or a socket
    transport factory through the constructor.
    """

    def __init__(
        self,
        settings: Settings,
        reporter: Optional[SystemReporter] = None,
        credential_store: Optional[CredentialStore] = None,
        http_transport=None,
        transport_factory: Optional[TransportFactory] = None,
    ):
        """
        Initialize container with settings.

        Args:
            settings: Application settings
            reporter: Optional reporter (built from settings if omitted)
            credential_store: Optional store override
            http_transport: Optional httpx transport for the refresh client
            transport_factory: Optional socket transport factory
        """
        self.settings = settings
        self._reporter = reporter
        self._http_transport = http_transport
        self._transport_factory = transport_factory

        self._credential_store: Optional[CredentialStore] = credential_store
        self._token_decoder: Optional[TokenDecoder] = None
        self._refresh_client: Optional[RefreshClient] = None
        self._token_guard: Optional[TokenGuard] = None
        self._connection_manager: Optional[ConnectionManager] = None
        self._query_cache: Optional[QueryCache] = None
        self._notification_store: Optional[NotificationStore] = None
        self._notice_sink: Optional[CollectingNoticeSink] = None
        self._reconciler: Optional[Reconciler] = None
        self._session: Optional[RealtimeSession] = None

        self.created_at = datetime.now(timezone.utc)

    @property
    def reporter(self) -> SystemReporter:
        """
        Get SystemReporter singleton.

        Returns:
            SystemReporter configured from settings
        """
        if self._reporter is None:
            self._reporter = SystemReporter.from_level_name(
                name=self.settings.APP_NAME.lower(),
                log_level=self.settings.log_level,
                log_dir=self.settings.log_dir,
                verbose=self.settings.verbose,
            )
        return self._reporter

    @property
    def credential_store(self) -> CredentialStore:
        if self._credential_store is None:
            if self.settings.credential_file:
                self._credential_store = FileCredentialStore(
                    self.settings.credential_file
                )
            else:
                self._credential_store = InMemoryCredentialStore()
        return self._credential_store

    @property
    def token_decoder(self) -> TokenDecoder:
        if self._token_decoder is None:
            self._token_decoder = TokenDecoder(
                leeway_seconds=self.settings.expiry_leeway_seconds
            )
        return self._token_decoder

    @property
    def refresh_client(self) -> RefreshClient:
        if self._refresh_client is None:
            self._refresh_client = RefreshClient(
                server_url=self.settings.server_url,
                refresh_path=self.settings.refresh_path,
                timeout=self.settings.http_timeout,
                transport=self._http_transport,
                reporter=self.reporter,
            )
        return self._refresh_client

    @property
    def token_guard(self) -> TokenGuard:
        """
        Get TokenGuard singleton.

        Returns:
            TokenGuard instance
        """
        if self._token_guard is None:
            self._token_guard = TokenGuard(
                store=self.credential_store,
                refresh_client=self.refresh_client,
                decoder=self.token_decoder,
                access_token_key=self.settings.access_token_key,
                refresh_token_key=self.settings.refresh_token_key,
                reporter=self.reporter,
            )
        return self._token_guard

    @property
    def connection_manager(self) -> ConnectionManager:
        """
        Get ConnectionManager singleton.

        Returns:
            ConnectionManager instance
        """
        if self._connection_manager is None:
            self._connection_manager = ConnectionManager(
                endpoint_url=self.settings.server_url,
                namespace=self.settings.namespace,
                transports=self.settings.transports,
                connect_timeout=self.settings.connect_timeout,
                decoder=self.token_decoder,
                transport_factory=self._transport_factory,
                reporter=self.reporter,
            )
        return self._connection_manager

    @property
    def query_cache(self) -> QueryCache:
        if self._query_cache is None:
            self._query_cache = QueryCache(reporter=self.reporter)
        return self._query_cache

    @property
    def notification_store(self) -> NotificationStore:
        if self._notification_store is None:
            self._notification_store = NotificationStore(
                limit=self.settings.notification_limit, reporter=self.reporter
            )
        return self._notification_store

    @property
    def notice_sink(self) -> CollectingNoticeSink:
        if self._notice_sink is None:
            self._notice_sink = CollectingNoticeSink(
                history=self.settings.notice_history,
                forward=ReporterNoticeSink(self.reporter),
            )
        return self._notice_sink

    @property
    def reconciler(self) -> Reconciler:
        if self._reconciler is None:
            self._reconciler = Reconciler(
                policy=ReconciliationPolicy(self.settings.profile),
                query_cache=self.query_cache,
                notification_store=self.notification_store,
                notice_sink=self.notice_sink,
                reporter=self.reporter,
            )
        return self._reconciler

    @property
    def session(self) -> RealtimeSession:
        """
        Get RealtimeSession singleton.

        Returns:
            RealtimeSession wired to every other component
        """
        if self._session is None:
            self._session = RealtimeSession(
                token_guard=self.token_guard,
                connection_manager=self.connection_manager,
                reconciler=self.reconciler,
                reconnect_on_token_rotation=self.settings.reconnect_on_token_rotation,
                reporter=self.reporter,
            )
        return self._session

    async def reset(self) -> None:
        """
        Tear down cached singletons (for testing).

        Closes the channel and the HTTP client; the injected overrides are
        kept.
        """
        if self._session is not None:
            await self._session.stop()
        elif self._connection_manager is not None:
            await self._connection_manager.close_channel()
        if self._refresh_client is not None:
            await self._refresh_client.close()

        self._token_decoder = None
        self._refresh_client = None
        self._token_guard = None
        self._connection_manager = None
        self._query_cache = None
        self._notification_store = None
        self._notice_sink = None
        self._reconciler = None
        self._session = None
