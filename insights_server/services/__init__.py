"""Service layer for the FinOps Org Insights server."""

from .view_selector import (
    ScopeNotFoundError,
    accounts_in_scope,
    accounts_under,
    iter_nodes,
    resolve_scope,
)
from .rollup_service import RollupService
from .context_service import ContextService
from .dashboard_service import CHART_NAMES, DashboardService
from .dataset_service import (
    DatasetNotFoundError,
    DatasetService,
    DatasetValidationError,
)

__all__ = [
    "ScopeNotFoundError",
    "accounts_in_scope",
    "accounts_under",
    "iter_nodes",
    "resolve_scope",
    "RollupService",
    "ContextService",
    "CHART_NAMES",
    "DashboardService",
    "DatasetNotFoundError",
    "DatasetService",
    "DatasetValidationError",
]
