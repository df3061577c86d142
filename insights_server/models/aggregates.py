# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Aggregate records produced by the rollup engine.

These are derived on every scope change and never persisted.
"""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .account import VulnerabilityReport
from .enums import BudgetStatus, CloudProvider


class AggregatedStats(BaseModel):
    """Headline totals for a set of accounts."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total_spend": 10000.0,
                "total_forecast": 9500.0,
                "total_vulnerabilities": {"critical": 2, "high": 7, "medium": 30, "low": 80},
                "total_safe_deployment_risks": 12,
                "spend_by_provider": {"AWS": 6000.0, "Azure": 4000.0, "GCP": 0.0, "OCI": 0.0},
            }
        }
    )

    total_spend: float = Field(0.0, description="Summed account spend in USD")
    total_forecast: float = Field(0.0, description="Summed account forecast in USD")
    total_vulnerabilities: VulnerabilityReport = Field(default_factory=VulnerabilityReport)
    total_safe_deployment_risks: int = Field(
        0, description="Summed count of failed safe deployment checks", ge=0
    )
    spend_by_provider: dict[CloudProvider, float] = Field(
        default_factory=lambda: {provider: 0.0 for provider in CloudProvider},
        description="Spend per provider; every provider is present, zero or not",
    )


class RowRollup(BaseModel):
    """Per-node rollup shown on a hierarchy table row."""

    spend: float = 0.0
    forecast: float = 0.0
    critical: int = 0
    high: int = 0
    safe_deployment_risks: int = 0


class ChartDatum(BaseModel):
    """A single labelled value of a chart projection."""

    name: str = Field(..., description="Label (provider, tier, SKU, account, ...)")
    value: float = Field(..., description="Numeric value for the label")


class VulnerabilityStack(BaseModel):
    """Vulnerability counts stacked by severity for one label."""

    name: str
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @property
    def total(self) -> int:
        return self.critical + self.high + self.medium + self.low


class MonthlyTrendPoint(BaseModel):
    """Spend and forecast summed for one month index."""

    name: str = Field(..., description="Month label")
    spend: float = 0.0
    forecast: float = 0.0


class TopSpender(BaseModel):
    """An account ranked by spend."""

    name: str
    spend: float
    forecast: float


class ForecastVariance(BaseModel):
    """
    Spend versus forecast as a percentage of forecast.

    A zero forecast produces a non-finite ``variance_percent`` (inf or nan);
    it is kept as-is in Python and serialized to JSON as null.
    """

    variance_percent: float = Field(
        ..., description="(spend - forecast) / forecast * 100; may be non-finite"
    )
    status: BudgetStatus

    @field_serializer("variance_percent", when_used="json")
    def _serialize_variance(self, value: float) -> Optional[float]:
        # JSON has no inf or nan
        return value if math.isfinite(value) else None

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.variance_percent)

    def formatted(self) -> str:
        """Signed one-decimal percentage, e.g. '+10.0%'."""
        if not self.is_finite:
            return "n/a"
        return f"{self.variance_percent:+.1f}%"
