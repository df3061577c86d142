# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Dashboard service: the payloads a rendering layer needs for one scope."""

import logging
from typing import Union

from ..models import (
    AccountDetail,
    AggregatedStats,
    CloudAccount,
    DashboardCharts,
    DashboardView,
    DeploymentCheck,
    ForecastVariance,
    HierarchyLevel,
    HierarchyRow,
    NavigationState,
    RowRollup,
    StatCard,
)
from ..models.hierarchy import Forest, OrgNode
from .rollup_service import RollupService
from .view_selector import accounts_in_scope

logger = logging.getLogger(__name__)

CHART_NAMES = tuple(DashboardCharts.model_fields)


def security_badge(critical: int, high: int) -> str:
    """Badge shown on a table row: worst severity present, or 'Secure'."""
    if critical > 0:
        return f"{critical} Critical"
    if high > 0:
        return f"{high} High"
    return "Secure"


class DashboardService:
    """
    Service assembling dashboard views.

    A view is derived entirely from the forest and the navigation state:
    - The hierarchy table rows for the next level down
    - The account detail panel when a single account is selected
    - The four headline stat cards
    - Every chart projection
    """

    def __init__(self, rollup_service: RollupService):
        """
        Initialize dashboard service.

        Args:
            rollup_service: Rollup engine used for every aggregate
        """
        self.rollup = rollup_service

    def visible_rows(self, forest: Forest, state: NavigationState) -> list[HierarchyRow]:
        """
        Rows of the hierarchy table for the current level.

        Areas when nothing is selected, then the children of the deepest
        selection. Selecting an account shows no rows.
        """
        if state.account is not None:
            return []
        if state.team is not None:
            return [
                self._row(account, HierarchyLevel.ACCOUNT, self._account_rollup(account))
                for account in state.team.accounts
            ]
        if state.department is not None:
            children = state.department.children
            level = HierarchyLevel.TEAM
        elif state.area is not None:
            children = state.area.children
            level = HierarchyLevel.DEPARTMENT
        else:
            children = forest
            level = HierarchyLevel.AREA

        return [self._row(node, level, self.rollup.row_rollup(node)) for node in children]

    def account_detail(self, account: CloudAccount) -> AccountDetail:
        profile = account.safe_deployment
        return AccountDetail(
            account=account,
            risk_label="High Risk" if account.vulnerabilities.critical > 0 else "Acceptable",
            deployment_score=profile.score,
            deployment_checks=[
                DeploymentCheck(label=label, passed=passed) for label, passed in profile.checks()
            ],
        )

    def build_charts(self, forest: Forest, accounts: list[CloudAccount]) -> DashboardCharts:
        """
        Compute every chart projection.

        Area charts always cover the whole forest; the rest cover the
        accounts in scope.
        """
        stats = self.rollup.aggregate(accounts)
        return DashboardCharts(
            spend_by_area=self.rollup.spend_by_area(forest),
            spend_by_provider=self.rollup.spend_by_provider(stats),
            spend_by_tier=self.rollup.spend_by_tier(accounts),
            spend_by_sku_type=self.rollup.spend_by_sku_type(accounts),
            top_accounts=self.rollup.top_accounts(accounts),
            top_skus=self.rollup.top_skus(accounts),
            vulnerabilities_by_tier=self.rollup.vulnerabilities_by_tier(accounts),
            vulnerabilities_by_area=self.rollup.vulnerabilities_by_area(forest),
            deployment_risks_by_tier=self.rollup.deployment_risks_by_tier(accounts),
            deployment_risks_by_area=self.rollup.deployment_risks_by_area(forest),
            monthly_trend=self.rollup.monthly_trend(accounts),
        )

    def build_view(self, forest: Forest, state: NavigationState) -> DashboardView:
        """
        Build the complete dashboard for a navigation state.

        Args:
            forest: Ordered list of Areas
            state: Current navigation state

        Returns:
            DashboardView with stats, cards, rows, detail panel and charts
        """
        accounts = accounts_in_scope(forest, state)
        stats = self.rollup.aggregate(accounts)
        variance = self.rollup.forecast_variance(stats)

        view = DashboardView(
            scope_label=state.scope_label,
            level=state.level,
            breadcrumbs=state.breadcrumbs,
            stats=stats,
            forecast_variance=variance,
            stat_cards=self.stat_cards(stats, variance),
            rows=self.visible_rows(forest, state),
            account_detail=(
                self.account_detail(state.account) if state.account is not None else None
            ),
            charts=self.build_charts(forest, accounts),
        )
        logger.info(
            f"Built dashboard view for '{view.scope_label}': "
            f"{len(accounts)} accounts, {len(view.rows)} rows"
        )
        return view

    def stat_cards(self, stats: AggregatedStats, variance: ForecastVariance) -> list[StatCard]:
        vulnerabilities = stats.total_vulnerabilities
        return [
            StatCard(
                title="Total Spend",
                value=f"${stats.total_spend:,.0f}",
                sub_value=f"Forecast: ${stats.total_forecast:,.0f}",
            ),
            StatCard(
                title="Forecast Variance",
                value=variance.formatted(),
                sub_value=variance.status.value,
                alert=stats.total_spend > stats.total_forecast,
            ),
            StatCard(
                title="Critical Vulns",
                value=str(vulnerabilities.critical),
                sub_value=f"{vulnerabilities.high} High Severity",
                alert=vulnerabilities.critical > 0,
            ),
            StatCard(
                title="Safe Deployment Risks",
                value=str(stats.total_safe_deployment_risks),
                sub_value="Failed checks",
                alert=stats.total_safe_deployment_risks > 0,
            ),
        ]

    def _account_rollup(self, account: CloudAccount) -> RowRollup:
        return RowRollup(
            spend=account.spend,
            forecast=account.forecast,
            critical=account.vulnerabilities.critical,
            high=account.vulnerabilities.high,
            safe_deployment_risks=account.safe_deployment.risk_count,
        )

    def _row(
        self,
        node: Union[OrgNode, CloudAccount],
        level: HierarchyLevel,
        rollup: RowRollup,
    ) -> HierarchyRow:
        return HierarchyRow(
            id=node.id,
            name=node.name,
            level=level,
            spend=rollup.spend,
            forecast=rollup.forecast,
            critical=rollup.critical,
            high=rollup.high,
            safe_deployment_risks=rollup.safe_deployment_risks,
            security_badge=security_badge(rollup.critical, rollup.high),
        )
