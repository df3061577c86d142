# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Cloud account data models and their metric sub-records."""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from .enums import CloudProvider, SkuType

# Dataset files use camelCase keys; Python code uses field names.
ENTITY_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
)

# Labels of the fixed six-month reporting window.
MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]

DEPLOYMENT_CHECK_LABELS = {
    "terraform_iac": "Terraform IaC",
    "ci_cd_deploy": "CI/CD Pipeline",
    "no_manual_access": "No Manual Access",
    "incremental_rollout": "Incremental Rollout",
    "soak_time": "Soak Time",
    "auto_rollback": "Auto Rollback",
    "health_checks": "Health Checks",
}


class MonthlyMetric(BaseModel):
    """Actual and forecast spend for one month of the reporting window."""

    model_config = ENTITY_CONFIG

    month: str = Field(..., description="Month label (e.g. 'Jan')")
    spend: float = Field(..., description="Actual spend in USD", ge=0.0)
    forecast: float = Field(..., description="Forecast spend in USD", ge=0.0)


class SkuDetail(BaseModel):
    """A single SKU line item billed to an account."""

    model_config = ENTITY_CONFIG

    id: str = Field(..., description="SKU identifier")
    name: str = Field(..., description="SKU display name")
    category: str = Field(..., description="Free-form SKU category (e.g. 'AI/ML')")
    sku_type: SkuType = Field(..., description="Reporting bucket for the SKU")
    cost: float = Field(..., description="Cost of the SKU in USD", ge=0.0)


class VulnerabilityReport(BaseModel):
    """Open vulnerability counts by severity."""

    model_config = ENTITY_CONFIG

    critical: int = Field(0, ge=0)
    high: int = Field(0, ge=0)
    medium: int = Field(0, ge=0)
    low: int = Field(0, ge=0)

    @property
    def total(self) -> int:
        return self.critical + self.high + self.medium + self.low


class SafeDeploymentProfile(BaseModel):
    """
    Seven-point safe deployment checklist for an account.

    ``risk_count`` and ``score`` are derived from the checks rather than
    stored, so they can never disagree with them. A dataset file that
    carries ``riskCount``/``score`` keys still loads; those keys are ignored.
    """

    model_config = ENTITY_CONFIG

    terraform_iac: bool = Field(..., alias="terraformIaC")
    ci_cd_deploy: bool
    no_manual_access: bool
    incremental_rollout: bool
    soak_time: bool
    auto_rollback: bool
    health_checks: bool

    @computed_field
    @property
    def risk_count(self) -> int:
        """Number of failed checks (0-7)."""
        return sum(1 for field_name in DEPLOYMENT_CHECK_LABELS if not getattr(self, field_name))

    @computed_field
    @property
    def score(self) -> int:
        """Share of passed checks as a 0-100 score."""
        total_checks = len(DEPLOYMENT_CHECK_LABELS)
        return round(100 * (total_checks - self.risk_count) / total_checks)

    def checks(self) -> list[tuple[str, bool]]:
        """Return (label, passed) pairs in checklist order."""
        return [
            (label, getattr(self, field_name))
            for field_name, label in DEPLOYMENT_CHECK_LABELS.items()
        ]


class CloudAccount(BaseModel):
    """
    Leaf entity of the organisation tree: one cloud billing/security unit.

    ``spend`` and ``forecast`` are the account totals for the reporting
    window. They are expected to match the sums of ``monthly_data`` and to
    roughly match the SKU costs, but neither is enforced.
    """

    model_config = ENTITY_CONFIG

    id: str = Field(..., description="Account identifier")
    name: str = Field(..., description="Account display name")
    provider: CloudProvider = Field(..., description="Billing cloud provider")
    tier: int = Field(..., description="Criticality tier, 0 (lowest) to 5", ge=0, le=5)
    spend: float = Field(..., description="Total spend for the window in USD", ge=0.0)
    forecast: float = Field(..., description="Total forecast for the window in USD", ge=0.0)
    monthly_data: list[MonthlyMetric] = Field(
        default_factory=list, description="Monthly spend/forecast, oldest first"
    )
    vulnerabilities: VulnerabilityReport = Field(default_factory=VulnerabilityReport)
    safe_deployment: SafeDeploymentProfile
    skus: list[SkuDetail] = Field(default_factory=list, description="SKU line items")
