# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Navigation state: the single selected path through the organisation tree."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from .account import CloudAccount
from .enums import HierarchyLevel
from .hierarchy import Area, Department, Team

GLOBAL_SCOPE_LABEL = "Global View"


class NavigationState(BaseModel):
    """
    Immutable navigation state.

    Selection is single-path: selecting a node clears every selection below
    it while keeping its ancestors, so the breadcrumb trail stays addressable.
    Each transition returns a new state; the current one is never modified.
    """

    model_config = ConfigDict(frozen=True)

    area: Optional[Area] = None
    department: Optional[Department] = None
    team: Optional[Team] = None
    account: Optional[CloudAccount] = None

    def go_home(self) -> "NavigationState":
        return NavigationState()

    def select_area(self, area: Area) -> "NavigationState":
        return NavigationState(area=area)

    def select_department(self, department: Department) -> "NavigationState":
        return NavigationState(area=self.area, department=department)

    def select_team(self, team: Team) -> "NavigationState":
        return NavigationState(area=self.area, department=self.department, team=team)

    def select_account(self, account: CloudAccount) -> "NavigationState":
        return NavigationState(
            area=self.area,
            department=self.department,
            team=self.team,
            account=account,
        )

    @property
    def level(self) -> HierarchyLevel:
        """Level of the deepest active selection."""
        if self.account is not None:
            return HierarchyLevel.ACCOUNT
        if self.team is not None:
            return HierarchyLevel.TEAM
        if self.department is not None:
            return HierarchyLevel.DEPARTMENT
        if self.area is not None:
            return HierarchyLevel.AREA
        return HierarchyLevel.GLOBAL

    @property
    def active_node(self) -> Optional[Union[Area, Department, Team, CloudAccount]]:
        for node in (self.account, self.team, self.department, self.area):
            if node is not None:
                return node
        return None

    @property
    def breadcrumbs(self) -> list[str]:
        """Names along the selected path, outermost first."""
        path = [self.area, self.department, self.team, self.account]
        return [node.name for node in path if node is not None]

    @property
    def scope_label(self) -> str:
        crumbs = self.breadcrumbs
        return " > ".join(crumbs) if crumbs else GLOBAL_SCOPE_LABEL
