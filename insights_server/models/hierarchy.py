# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Organisation tree models: Area (L1) -> Department (L2) -> Team (L3)."""

from typing import Union

from pydantic import BaseModel, Field

from .account import ENTITY_CONFIG, CloudAccount


class Team(BaseModel):
    """Level 3 node; owns its accounts exclusively."""

    model_config = ENTITY_CONFIG

    id: str = Field(..., description="Team identifier")
    name: str = Field(..., description="Team display name")
    accounts: list[CloudAccount] = Field(default_factory=list)


class Department(BaseModel):
    """Level 2 node; owns its teams exclusively."""

    model_config = ENTITY_CONFIG

    id: str = Field(..., description="Department identifier")
    name: str = Field(..., description="Department display name")
    children: list[Team] = Field(default_factory=list)


class Area(BaseModel):
    """Level 1 node; the roots of the organisation forest."""

    model_config = ENTITY_CONFIG

    id: str = Field(..., description="Area identifier")
    name: str = Field(..., description="Area display name")
    children: list[Department] = Field(default_factory=list)


# A forest is the ordered list of Areas handed over by the dataset collaborator.
Forest = list[Area]

OrgNode = Union[Area, Department, Team]
