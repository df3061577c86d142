# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""MCP tool for building the context handed to an AI assistant."""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from ..models import AssistantContext
from ..services.context_service import ContextService
from ..services.dataset_service import DatasetService
from ..services.view_selector import resolve_scope

logger = logging.getLogger(__name__)


class GetAssistantContextResult(BaseModel):
    """Result from the get_assistant_context tool."""

    context: AssistantContext
    serialized: str = Field(
        ..., description="Compact JSON: whole-number figures, no SKU line items"
    )

    @classmethod
    def from_context(
        cls, context: AssistantContext, context_service: ContextService
    ) -> "GetAssistantContextResult":
        return cls(context=context, serialized=context_service.serialize_for_assistant(context))


async def get_assistant_context(
    dataset_service: DatasetService,
    context_service: ContextService,
    scope_id: Optional[str] = None,
) -> GetAssistantContextResult:
    """
    Build the assistant context for a scope.

    The context pairs the selected scope's totals with a monthly spend
    summary of every Area and Department, so questions about entities
    outside the current view can still be answered.

    Args:
        dataset_service: DatasetService holding the active forest
        context_service: ContextService building the payloads
        scope_id: Id of an Area, Department, Team or Account. Omit for the
                  global view.

    Returns:
        GetAssistantContextResult with the structured context and its
        compact serialisation

    Raises:
        ScopeNotFoundError: If scope_id matches no node
    """
    forest = dataset_service.get_forest()
    state = resolve_scope(forest, scope_id)
    context = context_service.build_assistant_context(forest, state)
    return GetAssistantContextResult.from_context(context, context_service)
