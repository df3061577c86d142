# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Health check data models."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    """Health status response for the insights server."""

    status: str = Field(
        ...,
        description="Overall health status: 'healthy' or 'unhealthy'",
        examples=["healthy"]
    )
    version: str = Field(
        ...,
        description="Version of the insights server",
        examples=["0.1.0"]
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when health check was performed"
    )
    cloud_providers: list[str] = Field(
        default=["AWS", "Azure", "GCP", "OCI"],
        description="Cloud providers present in the dataset model"
    )
    dataset_loaded: bool = Field(
        ...,
        description="Whether an organisation dataset is available"
    )
    dataset_version: int = Field(
        0,
        description="Monotonic version of the loaded dataset"
    )
    account_count: int = Field(
        0,
        description="Number of accounts in the loaded dataset"
    )
