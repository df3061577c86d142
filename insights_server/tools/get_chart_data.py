# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""MCP tool for retrieving a single chart projection."""

import logging
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..services.dashboard_service import CHART_NAMES, DashboardService
from ..services.dataset_service import DatasetService
from ..services.view_selector import accounts_in_scope, resolve_scope

logger = logging.getLogger(__name__)


class GetChartDataResult(BaseModel):
    """Result from the get_chart_data tool."""

    chart: str = Field(..., description="Name of the projection")
    scope_label: str = Field(..., description="Breadcrumb label of the scope")
    data: list[dict[str, Any]] = Field(
        default_factory=list, description="Chart entries in display order"
    )


async def get_chart_data(
    dataset_service: DatasetService,
    dashboard_service: DashboardService,
    chart: str,
    scope_id: Optional[str] = None,
) -> GetChartDataResult:
    """
    Compute one named chart projection for a scope.

    Args:
        dataset_service: DatasetService holding the active forest
        dashboard_service: DashboardService computing the projections
        chart: One of the DashboardCharts field names, e.g. "spend_by_tier"
        scope_id: Id of an Area, Department, Team or Account. Omit for the
                  global view.

    Returns:
        GetChartDataResult with the chart's entries

    Raises:
        ValueError: If chart is not a known projection
        ScopeNotFoundError: If scope_id matches no node
    """
    chart_name = chart.strip().lower()
    if chart_name not in CHART_NAMES:
        raise ValueError(
            f"Invalid chart '{chart}'. Must be one of: {', '.join(CHART_NAMES)}"
        )

    forest = dataset_service.get_forest()
    state = resolve_scope(forest, scope_id)
    charts = dashboard_service.build_charts(forest, accounts_in_scope(forest, state))
    entries = getattr(charts, chart_name)

    logger.info(f"Computed chart {chart_name} for '{state.scope_label}': {len(entries)} entries")

    return GetChartDataResult(
        chart=chart_name,
        scope_label=state.scope_label,
        data=[entry.model_dump(mode="json") for entry in entries],
    )
