# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Context summarizer: payloads handed to the AI assistant."""

import json
import logging
import math
from enum import Enum
from typing import Any

from ..models import (
    MONTH_LABELS,
    AssistantContext,
    CloudAccount,
    CurrentViewBundle,
    EntitySummary,
    HierarchyLevel,
    MonthlySpendPoint,
    NavigationState,
)
from ..models.hierarchy import Forest
from .rollup_service import RollupService
from .view_selector import accounts_in_area, accounts_in_department, accounts_in_scope

logger = logging.getLogger(__name__)

# Keys stripped from the serialized context to keep the payload small.
OMITTED_KEYS = frozenset({"skus"})

ASSISTANT_GUIDANCE = [
    "Providers: AWS, Azure, GCP, OCI.",
    "Tiers run from 0 (lowest priority) to 5 (mission critical).",
    "Vulnerabilities are counted by severity: critical, high, medium, low.",
    "Safe deployment risks count failed checks out of seven per account.",
    "For overspending questions compare spend against forecast.",
    "For security questions highlight critical vulnerabilities first.",
    "current_view covers the selected scope only; use available_entities "
    "to answer questions about other Areas or Departments.",
]


class ContextService:
    """
    Service producing the two context payloads for the AI assistant.

    1. The current-view bundle: totals, variance, top spenders and monthly
       trend for whatever scope is selected.
    2. The cross-entity reference summary: a monthly spend series for every
       Area and Department, independent of navigation.

    Both are rebuilt on every call; nothing is cached.
    """

    def __init__(self, rollup_service: RollupService):
        """
        Initialize context service.

        Args:
            rollup_service: Rollup engine used for every aggregate
        """
        self.rollup = rollup_service

    def build_current_view(self, forest: Forest, state: NavigationState) -> CurrentViewBundle:
        """
        Build the aggregate bundle for the selected scope.

        Args:
            forest: Ordered list of Areas
            state: Current navigation state

        Returns:
            CurrentViewBundle with stats, variance, top spenders and trend
        """
        accounts = accounts_in_scope(forest, state)
        stats = self.rollup.aggregate(accounts)

        return CurrentViewBundle(
            scope_label=state.scope_label,
            level=state.level,
            breadcrumbs=state.breadcrumbs,
            stats=stats,
            forecast_variance=self.rollup.forecast_variance(stats),
            top_spenders=self.rollup.top_spenders(accounts),
            monthly_trends=self.rollup.monthly_trend(accounts),
        )

    def build_entity_summaries(self, forest: Forest) -> list[EntitySummary]:
        """
        Summarize every Area and Department of the forest.

        Each Area is followed by its Departments, in tree order. Teams and
        accounts are not summarized.
        """
        summaries = []
        for area in forest:
            summaries.append(
                self._summarize(
                    name=area.name,
                    level=HierarchyLevel.AREA,
                    accounts=accounts_in_area(area),
                )
            )
            for department in area.children:
                summaries.append(
                    self._summarize(
                        name=department.name,
                        level=HierarchyLevel.DEPARTMENT,
                        accounts=accounts_in_department(department),
                        parent=area.name,
                    )
                )
        return summaries

    def build_assistant_context(
        self, forest: Forest, state: NavigationState
    ) -> AssistantContext:
        """Combine the current-view bundle and the entity summaries."""
        context = AssistantContext(
            current_view=self.build_current_view(forest, state),
            available_entities=self.build_entity_summaries(forest),
            guidance=list(ASSISTANT_GUIDANCE),
        )
        logger.info(
            f"Built assistant context for '{state.scope_label}' "
            f"with {len(context.available_entities)} entity summaries"
        )
        return context

    def serialize_for_assistant(self, context: AssistantContext) -> str:
        """
        Serialize the context compactly for the AI assistant.

        Numbers are rounded half-up to integers, SKU line items are dropped
        and non-finite numbers become null.
        """
        return json.dumps(_simplify(context.model_dump(mode="python")), separators=(",", ":"))

    def _summarize(
        self,
        name: str,
        level: HierarchyLevel,
        accounts: list[CloudAccount],
        parent: str | None = None,
    ) -> EntitySummary:
        trend = self.rollup.monthly_trend(accounts)
        return EntitySummary(
            name=name,
            type=level.tag,
            parent=parent,
            monthly_spend=[
                MonthlySpendPoint(month=label, spend=point.spend)
                for label, point in zip(MONTH_LABELS, trend)
            ],
            total_spend=self.rollup.rollup_accounts(accounts).spend,
        )


def _simplify(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            _key(k): _simplify(v) for k, v in value.items() if k not in OMITTED_KEYS
        }
    if isinstance(value, (list, tuple)):
        return [_simplify(item) for item in value]
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return math.floor(value + 0.5)
    if isinstance(value, Enum):
        return value.value
    return value


def _key(key: Any) -> str:
    return key.value if isinstance(key, Enum) else str(key)
