# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""MCP tool for building the dashboard of a scope."""

import logging
from typing import Optional

from ..models import DashboardView
from ..services.dashboard_service import DashboardService
from ..services.dataset_service import DatasetService
from ..services.view_selector import resolve_scope

logger = logging.getLogger(__name__)


async def get_dashboard_view(
    dataset_service: DatasetService,
    dashboard_service: DashboardService,
    scope_id: Optional[str] = None,
) -> DashboardView:
    """
    Build the complete dashboard for one scope.

    Args:
        dataset_service: DatasetService holding the active forest
        dashboard_service: DashboardService assembling the view
        scope_id: Id of an Area, Department, Team or Account. Omit for the
                  global view.

    Returns:
        DashboardView with headline stats, stat cards, table rows, the
        account detail panel (accounts only) and every chart

    Raises:
        ScopeNotFoundError: If scope_id matches no node
    """
    logger.info(f"Building dashboard view for scope_id={scope_id!r}")

    forest = dataset_service.get_forest()
    state = resolve_scope(forest, scope_id)
    return dashboard_service.build_view(forest, state)
