"""Service container for dependency wiring and lifecycle management.

The container is protocol-agnostic: the HTTP server and the stdio MCP
server both build one and read their services from it.
"""

import logging
from typing import Optional

from .config import Settings, settings as get_default_settings
from .services.context_service import ContextService
from .services.dashboard_service import DashboardService
from .services.dataset_service import DatasetService
from .services.rollup_service import RollupService

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Wires together all services with proper dependency injection.

    Usage::

        container = ServiceContainer()          # uses default settings
        await container.initialize()

        view = container.dashboard_service.build_view(
            container.dataset_service.get_forest(), state
        )

        await container.shutdown()
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """
        Create a ServiceContainer.

        Args:
            settings: Application settings. If None, loads from environment
                      variables / .env file via the default ``settings()``
                      helper.
        """
        self._settings: Settings = settings or get_default_settings()
        self._initialized = False

        # Service instances (populated by initialize())
        self._dataset_service: Optional[DatasetService] = None
        self._rollup_service: Optional[RollupService] = None
        self._context_service: Optional[ContextService] = None
        self._dashboard_service: Optional[DashboardService] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Initialize all services in dependency order.

        A dataset that cannot be loaded is fatal: every tool reads from it.

        Raises:
            DatasetNotFoundError: If the configured dataset file is missing
            DatasetValidationError: If the configured dataset file is invalid
        """
        if self._initialized:
            logger.warning("ServiceContainer.initialize() called more than once")
            return

        s = self._settings
        logger.info("ServiceContainer: initializing services")

        # 1. Dataset
        self._dataset_service = DatasetService(
            dataset_path=s.dataset_path,
            seed=s.dataset_seed,
        )
        self._dataset_service.initialize()
        logger.info(
            f"ServiceContainer: dataset service initialized "
            f"({self._dataset_service.account_count} accounts, "
            f"source={s.dataset_path or 'generated'})"
        )

        # 2. Rollup engine
        self._rollup_service = RollupService(top_n=s.top_n)
        logger.info(f"ServiceContainer: rollup service initialized (top_n={s.top_n})")

        # 3. Presentation services (depend on rollup)
        self._context_service = ContextService(self._rollup_service)
        self._dashboard_service = DashboardService(self._rollup_service)
        logger.info("ServiceContainer: context and dashboard services initialized")

        self._initialized = True
        logger.info("ServiceContainer: all services initialized")

    async def shutdown(self) -> None:
        """Release service references."""
        logger.info("ServiceContainer: shutting down")
        self._dataset_service = None
        self._rollup_service = None
        self._context_service = None
        self._dashboard_service = None
        self._initialized = False
        logger.info("ServiceContainer: shutdown complete")

    # ------------------------------------------------------------------
    # Accessor properties
    # ------------------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def dataset_service(self) -> Optional[DatasetService]:
        return self._dataset_service

    @property
    def rollup_service(self) -> Optional[RollupService]:
        return self._rollup_service

    @property
    def context_service(self) -> Optional[ContextService]:
        return self._context_service

    @property
    def dashboard_service(self) -> Optional[DashboardService]:
        return self._dashboard_service
