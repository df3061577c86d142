# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Resolve a navigation scope to the flat list of accounts it contains.

The flat account list returned here is the only input the rollup engine
needs for "current view" statistics. Every function returns a freshly
built list; nothing is accumulated across calls.
"""

import logging
from collections.abc import Iterator
from typing import Optional, Union

from ..models import Area, CloudAccount, Department, NavigationState, Team
from ..models.hierarchy import Forest, OrgNode

logger = logging.getLogger(__name__)


class ScopeNotFoundError(ValueError):
    """Raised when a scope id does not match any node of the forest."""

    pass


def accounts_in_team(team: Team) -> list[CloudAccount]:
    return list(team.accounts)


def accounts_in_department(department: Department) -> list[CloudAccount]:
    accounts: list[CloudAccount] = []
    for team in department.children:
        accounts.extend(team.accounts)
    return accounts


def accounts_in_area(area: Area) -> list[CloudAccount]:
    accounts: list[CloudAccount] = []
    for department in area.children:
        accounts.extend(accounts_in_department(department))
    return accounts


def accounts_in_forest(forest: Forest) -> list[CloudAccount]:
    accounts: list[CloudAccount] = []
    for area in forest:
        accounts.extend(accounts_in_area(area))
    return accounts


def accounts_under(node: OrgNode) -> list[CloudAccount]:
    """
    Flatten a single Area, Department or Team into its accounts.

    Dispatches on the node's model class.

    Raises:
        TypeError: If node is not an organisation node
    """
    if isinstance(node, Area):
        return accounts_in_area(node)
    if isinstance(node, Department):
        return accounts_in_department(node)
    if isinstance(node, Team):
        return accounts_in_team(node)
    raise TypeError(f"Unsupported organisation node: {type(node).__name__}")


def accounts_in_scope(forest: Forest, state: NavigationState) -> list[CloudAccount]:
    """
    Return the accounts contained in the currently selected scope.

    The deepest active selection wins: an account yields just itself, a team
    its accounts, a department or area the union of their teams' accounts in
    child order, and no selection the whole forest.

    Args:
        forest: Ordered list of Areas
        state: Current navigation state

    Returns:
        Flat list of CloudAccount records (empty for an empty forest)
    """
    if state.account is not None:
        return [state.account]
    if state.team is not None:
        return accounts_in_team(state.team)
    if state.department is not None:
        return accounts_in_department(state.department)
    if state.area is not None:
        return accounts_in_area(state.area)
    return accounts_in_forest(forest)


def iter_nodes(
    forest: Forest,
) -> Iterator[tuple[Union[Area, Department, Team, CloudAccount], NavigationState]]:
    """
    Walk every node of the forest depth-first.

    Yields:
        (node, state) pairs where state is the navigation state that selects
        exactly that node with its ancestors
    """
    home = NavigationState()
    for area in forest:
        area_state = home.select_area(area)
        yield area, area_state
        for department in area.children:
            department_state = area_state.select_department(department)
            yield department, department_state
            for team in department.children:
                team_state = department_state.select_team(team)
                yield team, team_state
                for account in team.accounts:
                    yield account, team_state.select_account(account)


def resolve_scope(forest: Forest, scope_id: Optional[str] = None) -> NavigationState:
    """
    Build the navigation state that selects the node with the given id.

    Args:
        forest: Ordered list of Areas
        scope_id: Id of an Area, Department, Team or Account. None or an empty
                  string selects the global scope.

    Returns:
        NavigationState whose active path ends at the matching node

    Raises:
        ScopeNotFoundError: If no node carries that id
    """
    if not scope_id:
        return NavigationState()

    for node, state in iter_nodes(forest):
        if node.id == scope_id:
            logger.debug(f"Resolved scope {scope_id} to {state.scope_label}")
            return state

    raise ScopeNotFoundError(f"Scope not found: {scope_id}")
