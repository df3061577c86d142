# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""MCP tool for listing the organisation hierarchy."""

import logging
from typing import Union

from pydantic import BaseModel, Field

from ..models import Area, CloudAccount, Department, HierarchyLevel, Team
from ..services.dataset_service import DatasetService
from ..services.view_selector import accounts_under

logger = logging.getLogger(__name__)


class OrgHierarchyNode(BaseModel):
    """One node of the hierarchy outline."""

    id: str = Field(..., description="Scope id accepted by the other tools")
    name: str
    level: HierarchyLevel
    account_count: int = Field(..., ge=0)
    children: list["OrgHierarchyNode"] = Field(default_factory=list)

    @classmethod
    def from_node(
        cls, node: Union[Area, Department, Team, CloudAccount]
    ) -> "OrgHierarchyNode":
        if isinstance(node, CloudAccount):
            return cls(id=node.id, name=node.name, level=HierarchyLevel.ACCOUNT, account_count=1)
        if isinstance(node, Team):
            level = HierarchyLevel.TEAM
            children = node.accounts
        elif isinstance(node, Department):
            level = HierarchyLevel.DEPARTMENT
            children = node.children
        else:
            level = HierarchyLevel.AREA
            children = node.children
        return cls(
            id=node.id,
            name=node.name,
            level=level,
            account_count=len(accounts_under(node)),
            children=[cls.from_node(child) for child in children],
        )


class GetOrgHierarchyResult(BaseModel):
    """Result from the get_org_hierarchy tool."""

    areas: list[OrgHierarchyNode] = Field(default_factory=list)
    total_accounts: int = Field(..., ge=0)
    dataset_version: int = Field(..., description="Incremented whenever the dataset is replaced")


async def get_org_hierarchy(dataset_service: DatasetService) -> GetOrgHierarchyResult:
    """
    Outline every node of the organisation tree.

    Use the ids in the outline as the scope_id argument of the other tools.

    Args:
        dataset_service: DatasetService holding the active forest

    Returns:
        GetOrgHierarchyResult with nested Areas, Departments, Teams and accounts
    """
    forest = dataset_service.get_forest()
    areas = [OrgHierarchyNode.from_node(area) for area in forest]
    total = sum(area.account_count for area in areas)

    logger.info(f"Listed organisation hierarchy: {len(areas)} areas, {total} accounts")

    return GetOrgHierarchyResult(
        areas=areas,
        total_accounts=total,
        dataset_version=dataset_service.dataset_version,
    )
