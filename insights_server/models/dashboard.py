# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Dashboard payload models consumed by the rendering layer."""

from typing import Optional

from pydantic import BaseModel, Field

from .account import CloudAccount
from .aggregates import (
    AggregatedStats,
    ChartDatum,
    ForecastVariance,
    MonthlyTrendPoint,
    VulnerabilityStack,
)
from .enums import HierarchyLevel


class HierarchyRow(BaseModel):
    """One row of the hierarchy table for the current navigation level."""

    id: str
    name: str
    level: HierarchyLevel
    spend: float = 0.0
    forecast: float = 0.0
    critical: int = 0
    high: int = 0
    safe_deployment_risks: int = 0
    security_badge: str = Field(..., description="'N Critical', 'N High' or 'Secure'")


class DeploymentCheck(BaseModel):
    label: str
    passed: bool


class AccountDetail(BaseModel):
    """Detail panel shown when a single account is selected."""

    account: CloudAccount
    risk_label: str = Field(..., description="'High Risk' when any critical vulnerability is open")
    deployment_score: int = Field(..., ge=0, le=100)
    deployment_checks: list[DeploymentCheck] = Field(default_factory=list)


class StatCard(BaseModel):
    """A headline number with its caption."""

    title: str
    value: str
    sub_value: Optional[str] = None
    alert: bool = Field(False, description="Whether the card should be highlighted")


class DashboardCharts(BaseModel):
    """Every chart-ready projection for a scope."""

    spend_by_area: list[ChartDatum] = Field(default_factory=list)
    spend_by_provider: list[ChartDatum] = Field(default_factory=list)
    spend_by_tier: list[ChartDatum] = Field(default_factory=list)
    spend_by_sku_type: list[ChartDatum] = Field(default_factory=list)
    top_accounts: list[ChartDatum] = Field(default_factory=list)
    top_skus: list[ChartDatum] = Field(default_factory=list)
    vulnerabilities_by_tier: list[VulnerabilityStack] = Field(default_factory=list)
    vulnerabilities_by_area: list[VulnerabilityStack] = Field(default_factory=list)
    deployment_risks_by_tier: list[ChartDatum] = Field(default_factory=list)
    deployment_risks_by_area: list[ChartDatum] = Field(default_factory=list)
    monthly_trend: list[MonthlyTrendPoint] = Field(default_factory=list)


class DashboardView(BaseModel):
    """Complete dashboard payload for one navigation state."""

    scope_label: str
    level: HierarchyLevel
    breadcrumbs: list[str] = Field(default_factory=list)
    stats: AggregatedStats
    forecast_variance: ForecastVariance
    stat_cards: list[StatCard] = Field(default_factory=list)
    rows: list[HierarchyRow] = Field(default_factory=list)
    account_detail: Optional[AccountDetail] = None
    charts: DashboardCharts
