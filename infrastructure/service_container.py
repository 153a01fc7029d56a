"""
Service container for dependency injection and initialization.

This module centralizes service creation and wiring so bot.py only has to
build a config, initialize the container and hand it the Discord adapters.

Usage:
    container = ServiceContainer(config)
    container.initialize()
    container.bind_adapters(renderer, notifier)

    # Access services
    lobby_service = container.lobby_service
    map_vote_service = container.map_vote_service
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from domain.models.map_catalog import MapCatalog
    from services.idle_reaper import IdleReaper
    from services.interfaces import ILobbyRenderer, INotifier
    from services.lobby_registry import LobbyRegistry
    from services.lobby_service import LobbyService
    from services.map_vote_service import MapVoteService
    from services.membership_service import MembershipService

logger = logging.getLogger("lobby_bot.infrastructure.container")


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    # Lobby settings
    lobby_default_max_size: int = 16
    lobby_idle_timeout_seconds: float = 3600.0
    lobby_idle_renew: bool = False
    lobby_host_auto_join: bool = True

    # Map vote settings
    map_database_path: str = "mapDatabase.json"
    mapvote_selection_timeout_seconds: float = 60.0
    mapvote_filter_timeout_seconds: float = 60.0
    mapvote_window_seconds: float = 30.0
    mapvote_candidate_count: int = 3


class ServiceContainer:
    """
    Central container for all application services.

    Handles proper initialization order and dependency injection. The lobby
    registry is in-memory, so one container is one bot's whole lobby state.

    Example:
        container = ServiceContainer(config)
        container.initialize()

        # Services are now available
        lobby_service = container.lobby_service
    """

    def __init__(self, config: ServiceConfig | None = None):
        """
        Initialize the container with configuration.

        Args:
            config: Service configuration (uses defaults if None)
        """
        self.config = config or ServiceConfig()
        self._initialized = False
        self._services: dict[str, Any] = {}

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized

    def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")

        self._init_lobby_services()
        self._init_map_vote_services()
        self._wire_dependencies()

        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_lobby_services(self) -> None:
        """Initialize the registry, membership engine, idle reaper and lobby service."""
        logger.debug("Initializing lobby services")

        from services.idle_reaper import IdleReaper
        from services.lobby_registry import LobbyRegistry
        from services.lobby_service import LobbyService
        from services.membership_service import MembershipService

        registry = LobbyRegistry()
        self._services["registry"] = registry
        self._services["membership"] = MembershipService(registry)
        self._services["reaper"] = IdleReaper(
            registry,
            window_seconds=self.config.lobby_idle_timeout_seconds,
            renew=self.config.lobby_idle_renew,
        )
        self._services["lobby"] = LobbyService(
            registry=registry,
            membership=self._services["membership"],
            reaper=self._services["reaper"],
            host_auto_join=self.config.lobby_host_auto_join,
            default_max_size=self.config.lobby_default_max_size,
        )

    def _init_map_vote_services(self) -> None:
        """Load the map catalog and build the map vote orchestrator."""
        logger.debug("Initializing map vote services")

        from domain.models.map_catalog import MapCatalog
        from domain.services.map_selection_service import MapSelectionService
        from services.map_vote_service import MapVoteService

        catalog = MapCatalog.load(self.config.map_database_path)
        self._services["catalog"] = catalog
        self._services["map_vote"] = MapVoteService(
            registry=self._services["registry"],
            catalog=catalog,
            selection=MapSelectionService(),
            selection_timeout=self.config.mapvote_selection_timeout_seconds,
            filter_timeout=self.config.mapvote_filter_timeout_seconds,
            vote_window=self.config.mapvote_window_seconds,
            candidate_count=self.config.mapvote_candidate_count,
        )

    def _wire_dependencies(self) -> None:
        """Wire any post-construction dependencies."""
        logger.debug("Wiring post-construction dependencies")

        # Evicted lobbies still need their message taken down
        self.idle_reaper.on_evict = self.lobby_service.handle_eviction

    def bind_adapters(self, renderer: "ILobbyRenderer", notifier: "INotifier") -> None:
        """
        Attach the outbound adapters once the Discord client exists.

        Args:
            renderer: Lobby message renderer
            notifier: Direct message sender
        """
        self.lobby_service.renderer = renderer
        self.lobby_service.notifier = notifier
        logger.debug("Lobby adapters bound")

    def shutdown(self) -> None:
        """Cancel pending idle checks."""
        reaper = self._services.get("reaper")
        if reaper is not None:
            reaper.cancel_all()

    # =========================================================================
    # Service accessors
    # =========================================================================

    @property
    def lobby_registry(self) -> "LobbyRegistry | None":
        """Get lobby registry."""
        return self._services.get("registry")

    @property
    def membership_service(self) -> "MembershipService | None":
        """Get membership service."""
        return self._services.get("membership")

    @property
    def idle_reaper(self) -> "IdleReaper | None":
        """Get idle reaper."""
        return self._services.get("reaper")

    @property
    def lobby_service(self) -> "LobbyService | None":
        """Get lobby service."""
        return self._services.get("lobby")

    @property
    def map_catalog(self) -> "MapCatalog | None":
        """Get map catalog."""
        return self._services.get("catalog")

    @property
    def map_vote_service(self) -> "MapVoteService | None":
        """Get map vote service."""
        return self._services.get("map_vote")

    def expose_to_bot(self, bot) -> None:
        """
        Expose all services to a Discord bot object.

        Cogs read their dependencies via bot.<service_name> in setup().

        Args:
            bot: The Discord bot instance
        """
        bot.service_container = self
        bot.lobby_registry = self.lobby_registry
        bot.membership_service = self.membership_service
        bot.idle_reaper = self.idle_reaper
        bot.lobby_service = self.lobby_service
        bot.map_catalog = self.map_catalog
        bot.map_vote_service = self.map_vote_service

        logger.info("Services exposed to bot object")
