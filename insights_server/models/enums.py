# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Enumerations for providers, SKU types and hierarchy levels."""

from enum import Enum


class CloudProvider(str, Enum):
    """Cloud providers an account can be billed by."""

    AWS = "AWS"
    AZURE = "Azure"
    GCP = "GCP"
    OCI = "OCI"


class SkuType(str, Enum):
    """The three buckets SKU line items are reported under."""

    COMPUTE = "Compute"
    STORAGE = "Storage"
    NETWORKING = "Networking"


class HierarchyLevel(str, Enum):
    """Levels of the organisation tree, plus the global (no selection) scope."""

    GLOBAL = "global"
    AREA = "area"
    DEPARTMENT = "department"
    TEAM = "team"
    ACCOUNT = "account"

    @property
    def tag(self) -> str:
        """Human-readable level tag used in summaries."""
        return _LEVEL_TAGS[self]


class BudgetStatus(str, Enum):
    """Whether actual spend ran above or below forecast."""

    OVER_BUDGET = "Over Budget"
    UNDER_BUDGET = "Under Budget"


_LEVEL_TAGS = {
    HierarchyLevel.GLOBAL: "Global",
    HierarchyLevel.AREA: "Level 1 (Area)",
    HierarchyLevel.DEPARTMENT: "Level 2 (Department)",
    HierarchyLevel.TEAM: "Level 3 (Team)",
    HierarchyLevel.ACCOUNT: "Account",
}
