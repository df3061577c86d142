# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Rollup engine: aggregate account metrics at any level of the tree."""

import logging
import math
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from ..models import (
    MONTH_LABELS,
    AggregatedStats,
    BudgetStatus,
    ChartDatum,
    CloudAccount,
    CloudProvider,
    ForecastVariance,
    MonthlyTrendPoint,
    RowRollup,
    TopSpender,
    VulnerabilityReport,
    VulnerabilityStack,
)
from ..models.hierarchy import Forest, OrgNode
from .view_selector import accounts_in_area, accounts_under

logger = logging.getLogger(__name__)

T = TypeVar("T")

TIERS = range(6)


def tier_label(tier: int) -> str:
    return f"Tier {tier}"


def rank_descending(
    items: Iterable[T], key: Callable[[T], float], limit: int | None = None
) -> list[T]:
    """
    Sort items by key, largest first.

    The sort is stable, so items with equal keys keep their input order.
    """
    ranked = sorted(items, key=key, reverse=True)
    return ranked if limit is None else ranked[:limit]


def group_sum(pairs: Iterable[tuple[str, float]]) -> list[ChartDatum]:
    """Sum values per key, keeping keys in first-seen order."""
    groups: dict[str, list[float]] = defaultdict(list)
    for key, value in pairs:
        groups[key].append(value)
    return [ChartDatum(name=key, value=math.fsum(values)) for key, values in groups.items()]


class RollupService:
    """
    Pure, total reductions over collections of CloudAccount records.

    Provides:
    - Headline totals (AggregatedStats) for any account collection
    - Per-node row rollups for the hierarchy table
    - Grouped projections (provider, tier, SKU type, area, month)
    - Top-N rankings (accounts, SKUs)
    - Forecast variance

    Float totals are computed with math.fsum, so they do not depend on the
    order accounts are visited in. Empty inputs produce zero-valued results;
    none of the methods raise on well-formed input.
    """

    def __init__(self, top_n: int = 5):
        """
        Initialize rollup service.

        Args:
            top_n: Number of entries kept by top-N rankings
        """
        self.top_n = top_n

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def aggregate(self, accounts: Sequence[CloudAccount]) -> AggregatedStats:
        """
        Aggregate headline totals for a collection of accounts.

        Args:
            accounts: Accounts in scope (any order)

        Returns:
            AggregatedStats with every provider present in spend_by_provider
        """
        spend_by_provider = {
            provider: math.fsum(a.spend for a in accounts if a.provider == provider)
            for provider in CloudProvider
        }

        stats = AggregatedStats(
            total_spend=math.fsum(a.spend for a in accounts),
            total_forecast=math.fsum(a.forecast for a in accounts),
            total_vulnerabilities=VulnerabilityReport(
                critical=sum(a.vulnerabilities.critical for a in accounts),
                high=sum(a.vulnerabilities.high for a in accounts),
                medium=sum(a.vulnerabilities.medium for a in accounts),
                low=sum(a.vulnerabilities.low for a in accounts),
            ),
            total_safe_deployment_risks=sum(a.safe_deployment.risk_count for a in accounts),
            spend_by_provider=spend_by_provider,
        )
        logger.debug(
            f"Aggregated {len(accounts)} accounts: spend=${stats.total_spend:.2f}"
        )
        return stats

    def row_rollup(self, node: OrgNode) -> RowRollup:
        """
        Roll up the accounts under a single Area, Department or Team.

        Agrees with aggregate() over the same node's accounts.
        """
        return self.rollup_accounts(accounts_under(node))

    def rollup_accounts(self, accounts: Sequence[CloudAccount]) -> RowRollup:
        return RowRollup(
            spend=math.fsum(a.spend for a in accounts),
            forecast=math.fsum(a.forecast for a in accounts),
            critical=sum(a.vulnerabilities.critical for a in accounts),
            high=sum(a.vulnerabilities.high for a in accounts),
            safe_deployment_risks=sum(a.safe_deployment.risk_count for a in accounts),
        )

    def forecast_variance(self, stats: AggregatedStats) -> ForecastVariance:
        """
        Compute (spend - forecast) / forecast as a percentage.

        A zero forecast yields +inf, -inf or nan instead of raising.
        """
        difference = stats.total_spend - stats.total_forecast
        if stats.total_forecast != 0:
            variance = difference / stats.total_forecast * 100
        elif difference > 0:
            variance = math.inf
        elif difference < 0:
            variance = -math.inf
        else:
            variance = math.nan

        status = (
            BudgetStatus.OVER_BUDGET
            if stats.total_spend > stats.total_forecast
            else BudgetStatus.UNDER_BUDGET
        )
        return ForecastVariance(variance_percent=variance, status=status)

    # ------------------------------------------------------------------
    # Grouped projections
    # ------------------------------------------------------------------

    def spend_by_provider(self, stats: AggregatedStats) -> list[ChartDatum]:
        """Providers with non-zero spend, largest first."""
        data = [
            ChartDatum(name=provider.value, value=value)
            for provider, value in stats.spend_by_provider.items()
            if value > 0
        ]
        return rank_descending(data, key=lambda d: d.value)

    def spend_by_tier(self, accounts: Sequence[CloudAccount]) -> list[ChartDatum]:
        data = group_sum((tier_label(a.tier), a.spend) for a in accounts)
        return rank_descending(data, key=lambda d: d.value)

    def spend_by_sku_type(self, accounts: Sequence[CloudAccount]) -> list[ChartDatum]:
        data = group_sum(
            (sku.sku_type.value, sku.cost) for a in accounts for sku in a.skus
        )
        return rank_descending(data, key=lambda d: d.value)

    def deployment_risks_by_tier(self, accounts: Sequence[CloudAccount]) -> list[ChartDatum]:
        data = group_sum(
            (tier_label(a.tier), a.safe_deployment.risk_count) for a in accounts
        )
        return rank_descending(data, key=lambda d: d.value)

    def vulnerabilities_by_tier(
        self, accounts: Sequence[CloudAccount]
    ) -> list[VulnerabilityStack]:
        """Severity stacks per tier in tier order; tiers with no findings are dropped."""
        stacks = []
        for tier in TIERS:
            tier_accounts = [a for a in accounts if a.tier == tier]
            stack = self._vulnerability_stack(tier_label(tier), tier_accounts)
            if stack.total > 0:
                stacks.append(stack)
        return stacks

    def monthly_trend(self, accounts: Sequence[CloudAccount]) -> list[MonthlyTrendPoint]:
        """
        Sum spend and forecast per month index across accounts.

        Months are aligned by position in monthly_data, not by label. Entries
        past the six-month window are ignored and missing entries contribute
        nothing, so a short series never raises.
        """
        spend: list[list[float]] = [[] for _ in MONTH_LABELS]
        forecast: list[list[float]] = [[] for _ in MONTH_LABELS]

        for account in accounts:
            for index, metric in enumerate(account.monthly_data[: len(MONTH_LABELS)]):
                spend[index].append(metric.spend)
                forecast[index].append(metric.forecast)

        return [
            MonthlyTrendPoint(
                name=label,
                spend=math.fsum(spend[index]),
                forecast=math.fsum(forecast[index]),
            )
            for index, label in enumerate(MONTH_LABELS)
        ]

    # ------------------------------------------------------------------
    # Forest-wide projections (independent of navigation)
    # ------------------------------------------------------------------

    def spend_by_area(self, forest: Forest) -> list[ChartDatum]:
        data = [
            ChartDatum(name=area.name, value=self.row_rollup(area).spend) for area in forest
        ]
        return rank_descending(data, key=lambda d: d.value)

    def vulnerabilities_by_area(self, forest: Forest) -> list[VulnerabilityStack]:
        """Severity stacks per Area, ranked by critical + high findings."""
        stacks = [
            self._vulnerability_stack(area.name, accounts_in_area(area)) for area in forest
        ]
        return rank_descending(stacks, key=lambda s: s.critical + s.high)

    def deployment_risks_by_area(self, forest: Forest) -> list[ChartDatum]:
        data = [
            ChartDatum(name=area.name, value=self.row_rollup(area).safe_deployment_risks)
            for area in forest
        ]
        return rank_descending(data, key=lambda d: d.value)

    # ------------------------------------------------------------------
    # Rankings
    # ------------------------------------------------------------------

    def top_accounts(self, accounts: Sequence[CloudAccount]) -> list[ChartDatum]:
        ranked = rank_descending(accounts, key=lambda a: a.spend, limit=self.top_n)
        return [ChartDatum(name=a.name, value=a.spend) for a in ranked]

    def top_spenders(self, accounts: Sequence[CloudAccount]) -> list[TopSpender]:
        ranked = rank_descending(accounts, key=lambda a: a.spend, limit=self.top_n)
        return [TopSpender(name=a.name, spend=a.spend, forecast=a.forecast) for a in ranked]

    def top_skus(self, accounts: Sequence[CloudAccount]) -> list[ChartDatum]:
        """SKUs grouped by name across the scope, ranked by summed cost."""
        data = group_sum((sku.name, sku.cost) for a in accounts for sku in a.skus)
        return rank_descending(data, key=lambda d: d.value, limit=self.top_n)

    def _vulnerability_stack(
        self, name: str, accounts: Sequence[CloudAccount]
    ) -> VulnerabilityStack:
        return VulnerabilityStack(
            name=name,
            critical=sum(a.vulnerabilities.critical for a in accounts),
            high=sum(a.vulnerabilities.high for a in accounts),
            medium=sum(a.vulnerabilities.medium for a in accounts),
            low=sum(a.vulnerabilities.low for a in accounts),
        )
