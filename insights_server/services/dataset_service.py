# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Dataset service for generating and loading the organisation forest."""

import json
import logging
import random
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from ..models import (
    MONTH_LABELS,
    Area,
    CloudAccount,
    CloudProvider,
    Department,
    MonthlyMetric,
    SafeDeploymentProfile,
    SkuDetail,
    SkuType,
    Team,
    VulnerabilityReport,
)
from ..models.hierarchy import Forest
from .view_selector import accounts_in_forest

logger = logging.getLogger(__name__)

AREA_NAMES = ["Global Engineering", "Corporate IT", "Product R&D"]
DEPARTMENT_NAMES = ["Platform", "Data", "Security", "Marketing", "SalesOps", "Core"]
TEAM_NAMES = ["Team Alpha", "Team Beta", "Team Gamma", "Legacy Systems", "Innovation Lab"]
SKU_CATEGORIES = ["Compute", "Storage", "Networking", "Database", "AI/ML"]
MAX_SKUS_PER_ACCOUNT = 8

# Probability that each safe deployment check fails.
CHECK_FAILURE_RATES = {
    "terraform_iac": 0.15,
    "ci_cd_deploy": 0.1,
    "no_manual_access": 0.4,
    "incremental_rollout": 0.3,
    "soak_time": 0.5,
    "auto_rollback": 0.3,
    "health_checks": 0.1,
}

_FOREST_ADAPTER = TypeAdapter(list[Area])


class DatasetNotFoundError(Exception):
    """Raised when the dataset file is not found."""

    pass


class DatasetValidationError(Exception):
    """Raised when the dataset file is not a valid organisation forest."""

    pass


def sku_type_for_category(category: str) -> SkuType:
    """Map a free-form SKU category onto one of the three reporting buckets."""
    if category in ("Storage", "Database"):
        return SkuType.STORAGE
    if category == "Networking":
        return SkuType.NETWORKING
    return SkuType.COMPUTE


class DatasetGenerator:
    """
    Fabricates a synthetic organisation forest.

    Every random draw goes through one random.Random instance, so a seed
    reproduces the same forest.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def generate(self) -> Forest:
        forest = []
        for index, area_name in enumerate(AREA_NAMES):
            area_id = f"l1-{index}"
            departments = [
                self._department(f"{area_id}-l2-{i}", self._rng.choice(DEPARTMENT_NAMES))
                for i in range(self._rng.randint(2, 4))
            ]
            forest.append(Area(id=area_id, name=area_name, children=departments))
        return forest

    def _department(self, department_id: str, name: str) -> Department:
        teams = [
            self._team(f"{department_id}-l3-{i}", self._rng.choice(TEAM_NAMES))
            for i in range(self._rng.randint(2, 4))
        ]
        return Department(id=department_id, name=name, children=teams)

    def _team(self, team_id: str, name: str) -> Team:
        accounts = [
            self._account(f"{team_id}-acc-{i}") for i in range(self._rng.randint(2, 6))
        ]
        return Team(id=team_id, name=name, accounts=accounts)

    def _account(self, account_id: str) -> CloudAccount:
        rng = self._rng
        monthly_data = self._monthly_data()
        spend = sum(m.spend for m in monthly_data)
        forecast = sum(m.forecast for m in monthly_data)

        return CloudAccount(
            id=account_id,
            name=f"Cloud Acct {rng.randint(1, 99)}",
            provider=rng.choice(list(CloudProvider)),
            tier=rng.randint(0, 5),
            spend=round(spend, 2),
            forecast=round(forecast, 2),
            monthly_data=monthly_data,
            vulnerabilities=VulnerabilityReport(
                critical=rng.randint(1, 5) if rng.random() > 0.8 else 0,
                high=rng.randint(1, 10) if rng.random() > 0.6 else 0,
                medium=rng.randint(0, 20),
                low=rng.randint(0, 50),
            ),
            safe_deployment=SafeDeploymentProfile(
                **{
                    check: rng.random() > failure_rate
                    for check, failure_rate in CHECK_FAILURE_RATES.items()
                }
            ),
            skus=self._skus(spend),
        )

    def _monthly_data(self) -> list[MonthlyMetric]:
        """Six months trending upward about 5% a month with +/-20% noise."""
        rng = self._rng
        trend_base = rng.uniform(500, 5000)
        metrics = []
        for index, month in enumerate(MONTH_LABELS):
            growth = 1 + index * 0.05
            spend = trend_base * growth * rng.uniform(0.8, 1.2)
            forecast = spend * rng.uniform(0.95, 1.05) + rng.randint(-100, 100)
            metrics.append(
                MonthlyMetric(month=month, spend=round(spend, 2), forecast=round(forecast, 2))
            )
        return metrics

    def _skus(self, total_spend: float) -> list[SkuDetail]:
        """Carve the account spend into up to eight SKU line items."""
        rng = self._rng
        skus = []
        remaining = total_spend
        count = 0
        while remaining > 0 and count < MAX_SKUS_PER_ACCOUNT:
            if count == MAX_SKUS_PER_ACCOUNT - 1:
                cost = remaining
            else:
                cost = rng.uniform(remaining * 0.1, remaining * 0.4)
            category = rng.choice(SKU_CATEGORIES)
            skus.append(
                SkuDetail(
                    id=f"sku-{rng.randint(1000, 9999)}",
                    name=f"{category} Instance Type {chr(65 + count)}",
                    category=category,
                    sku_type=sku_type_for_category(category),
                    cost=round(cost, 2),
                )
            )
            remaining -= cost
            count += 1
        return skus


class DatasetService:
    """
    Service owning the organisation forest for a session.

    This service handles:
    - Loading a forest from a JSON file (camelCase or snake_case keys)
    - Generating a synthetic forest when no file is configured
    - Versioning the forest so consumers can tell when it was replaced
    """

    def __init__(
        self,
        dataset_path: str | Path | None = None,
        seed: Optional[int] = None,
    ):
        """
        Initialize the DatasetService.

        Args:
            dataset_path: Path to a dataset JSON file. If None, a synthetic
                          forest is generated instead.
            seed: Seed for the synthetic generator
        """
        self._dataset_path = Path(dataset_path) if dataset_path else None
        self._seed = seed
        self._forest: Forest = []
        self._version = 0

    @property
    def dataset_version(self) -> int:
        return self._version

    @property
    def account_count(self) -> int:
        return len(accounts_in_forest(self._forest))

    @property
    def is_loaded(self) -> bool:
        return self._version > 0

    def initialize(self) -> Forest:
        """
        Load the configured dataset file, or generate one.

        Returns:
            The active forest

        Raises:
            DatasetNotFoundError: If a dataset path is configured but missing
            DatasetValidationError: If the dataset file is invalid
        """
        if self._dataset_path is not None:
            forest = self.load_dataset(self._dataset_path)
        else:
            forest = self.generate_dataset(self._seed)
        self.replace_forest(forest)
        return forest

    def generate_dataset(self, seed: Optional[int] = None) -> Forest:
        """Generate a synthetic forest (reproducible when seeded)."""
        forest = DatasetGenerator(seed).generate()
        logger.info(
            f"Generated synthetic dataset with {len(forest)} areas and "
            f"{len(accounts_in_forest(forest))} accounts (seed={seed})"
        )
        return forest

    def load_dataset(self, dataset_path: str | Path) -> Forest:
        """
        Load an organisation forest from a JSON file.

        The file holds a JSON array of Areas.

        Raises:
            DatasetNotFoundError: If the file doesn't exist
            DatasetValidationError: If the JSON or its structure is invalid
        """
        path = Path(dataset_path)

        if not path.exists():
            raise DatasetNotFoundError(f"Dataset file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise DatasetValidationError(f"Invalid JSON in dataset file {path}: {e}") from e
        except OSError as e:
            raise DatasetValidationError(f"Error reading dataset file {path}: {e}") from e

        try:
            forest = _FOREST_ADAPTER.validate_python(data)
        except ValidationError as e:
            raise DatasetValidationError(f"Invalid dataset structure in {path}: {e}") from e

        logger.info(f"Loaded dataset from {path} with {len(forest)} areas")
        return forest

    def get_forest(self) -> Forest:
        """
        Get the active forest.

        Initializes the dataset on first use.
        """
        if not self.is_loaded:
            self.initialize()
        return self._forest

    def replace_forest(self, forest: Forest) -> int:
        """
        Swap in a new forest.

        Returns:
            The new dataset version
        """
        self._forest = list(forest)
        self._version += 1
        logger.info(f"Dataset replaced (version {self._version})")
        return self._version
