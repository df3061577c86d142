# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Context payloads handed to the AI assistant."""

from typing import Optional

from pydantic import BaseModel, Field

from .aggregates import AggregatedStats, ForecastVariance, MonthlyTrendPoint, TopSpender
from .enums import HierarchyLevel


class CurrentViewBundle(BaseModel):
    """Aggregates for the currently selected scope."""

    scope_label: str = Field(..., description="Human-readable path of the active selection")
    level: HierarchyLevel = Field(..., description="Level of the active selection")
    breadcrumbs: list[str] = Field(default_factory=list)
    stats: AggregatedStats
    forecast_variance: ForecastVariance
    top_spenders: list[TopSpender] = Field(
        default_factory=list, description="Top accounts by spend in the scope"
    )
    monthly_trends: list[MonthlyTrendPoint] = Field(
        default_factory=list, description="Spend and forecast per month of the window"
    )


class MonthlySpendPoint(BaseModel):
    """Spend for one month of an entity summary."""

    month: str
    spend: float


class EntitySummary(BaseModel):
    """
    Spend summary of one Area or Department.

    Produced for every Area and Department regardless of navigation, so
    questions about an entity outside the current scope can still be answered.
    """

    name: str
    type: str = Field(..., description="Hierarchy level tag, e.g. 'Level 1 (Area)'")
    parent: Optional[str] = Field(None, description="Owning Area name (Departments only)")
    monthly_spend: list[MonthlySpendPoint] = Field(default_factory=list)
    total_spend: float = 0.0


class AssistantContext(BaseModel):
    """Everything the AI assistant receives alongside a user question."""

    current_view: CurrentViewBundle
    available_entities: list[EntitySummary] = Field(default_factory=list)
    guidance: list[str] = Field(
        default_factory=list, description="Instructions on how to read the data"
    )
