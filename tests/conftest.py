"""Pytest configuration and shared fixtures.

The sample forest has known totals:

    Global Engineering (l1-0)                 spend 10000, forecast 10200
        Platform (l1-0-l2-0)                  spend  4000, forecast  3800
            Team Alpha: Cloud Acct 11 (AWS, tier 5, 3000 / 2800)
                        Cloud Acct 12 (Azure, tier 3, 1000 / 1000)
        Data (l1-0-l2-1)                      spend  6000, forecast  6400
            Team Beta:  Cloud Acct 21 (GCP, tier 3, 4000 / 4400)
                        Cloud Acct 22 (AWS, tier 0, 2000 / 2000)
    Corporate IT (l1-1)                       spend   500, forecast   600
        Security: Legacy Systems: Cloud Acct 31 (OCI, tier 1, 500 / 600)
    Product R&D (l1-2)                        no departments
"""

import json
import os

import pytest
from hypothesis import settings as hypothesis_settings

from insights_server.models import (
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
from insights_server.services import (
    ContextService,
    DashboardService,
    DatasetService,
    RollupService,
)

# Hypothesis profiles, selected with HYPOTHESIS_PROFILE (see run_tests.py)
HYPOTHESIS_PROFILES = {
    "quick": 10,
    "ci": 100,
    "thorough": 1000,
}

for _name, _examples in HYPOTHESIS_PROFILES.items():
    hypothesis_settings.register_profile(_name, max_examples=_examples, deadline=None)
hypothesis_settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))

ALL_CHECKS_PASS = {
    "terraform_iac": True,
    "ci_cd_deploy": True,
    "no_manual_access": True,
    "incremental_rollout": True,
    "soak_time": True,
    "auto_rollback": True,
    "health_checks": True,
}


def make_profile(**overrides: bool) -> SafeDeploymentProfile:
    """Build a profile where every check passes unless overridden."""
    return SafeDeploymentProfile(**{**ALL_CHECKS_PASS, **overrides})


def make_monthly(spend: list[float], forecast: list[float]) -> list[MonthlyMetric]:
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
    return [
        MonthlyMetric(month=months[i], spend=s, forecast=f)
        for i, (s, f) in enumerate(zip(spend, forecast))
    ]


def build_sample_forest() -> list[Area]:
    acct_11 = CloudAccount(
        id="l1-0-l2-0-l3-0-acc-0",
        name="Cloud Acct 11",
        provider=CloudProvider.AWS,
        tier=5,
        spend=3000.0,
        forecast=2800.0,
        monthly_data=make_monthly([500.0] * 6, [400.0, 400.0, 500.0, 500.0, 500.0, 500.0]),
        vulnerabilities=VulnerabilityReport(critical=2, high=1, medium=3, low=4),
        safe_deployment=make_profile(soak_time=False),
        skus=[
            SkuDetail(
                id="sku-1001",
                name="Compute Instance Type A",
                category="Compute",
                sku_type=SkuType.COMPUTE,
                cost=2000.0,
            ),
            SkuDetail(
                id="sku-1002",
                name="Storage Instance Type B",
                category="Storage",
                sku_type=SkuType.STORAGE,
                cost=1000.0,
            ),
        ],
    )
    acct_12 = CloudAccount(
        id="l1-0-l2-0-l3-0-acc-1",
        name="Cloud Acct 12",
        provider=CloudProvider.AZURE,
        tier=3,
        spend=1000.0,
        forecast=1000.0,
        # Short series: only three months reported
        monthly_data=make_monthly([300.0, 300.0, 400.0], [300.0, 300.0, 400.0]),
        vulnerabilities=VulnerabilityReport(high=2),
        safe_deployment=make_profile(),
        skus=[
            SkuDetail(
                id="sku-2001",
                name="Compute Instance Type A",
                category="AI/ML",
                sku_type=SkuType.COMPUTE,
                cost=1000.0,
            ),
        ],
    )
    acct_21 = CloudAccount(
        id="l1-0-l2-1-l3-0-acc-0",
        name="Cloud Acct 21",
        provider=CloudProvider.GCP,
        tier=3,
        spend=4000.0,
        forecast=4400.0,
        monthly_data=make_monthly(
            [600.0, 600.0, 700.0, 700.0, 700.0, 700.0],
            [700.0, 700.0, 750.0, 750.0, 750.0, 750.0],
        ),
        safe_deployment=make_profile(ci_cd_deploy=False, soak_time=False, auto_rollback=False),
        skus=[
            SkuDetail(
                id="sku-3001",
                name="Database Instance Type A",
                category="Database",
                sku_type=SkuType.STORAGE,
                cost=4000.0,
            ),
        ],
    )
    acct_22 = CloudAccount(
        id="l1-0-l2-1-l3-0-acc-1",
        name="Cloud Acct 22",
        provider=CloudProvider.AWS,
        tier=0,
        spend=2000.0,
        forecast=2000.0,
        safe_deployment=make_profile(),
    )
    acct_31 = CloudAccount(
        id="l1-1-l2-0-l3-0-acc-0",
        name="Cloud Acct 31",
        provider=CloudProvider.OCI,
        tier=1,
        spend=500.0,
        forecast=600.0,
        vulnerabilities=VulnerabilityReport(critical=1),
        safe_deployment=SafeDeploymentProfile(**{check: False for check in ALL_CHECKS_PASS}),
    )

    return [
        Area(
            id="l1-0",
            name="Global Engineering",
            children=[
                Department(
                    id="l1-0-l2-0",
                    name="Platform",
                    children=[
                        Team(id="l1-0-l2-0-l3-0", name="Team Alpha", accounts=[acct_11, acct_12]),
                    ],
                ),
                Department(
                    id="l1-0-l2-1",
                    name="Data",
                    children=[
                        Team(id="l1-0-l2-1-l3-0", name="Team Beta", accounts=[acct_21, acct_22]),
                    ],
                ),
            ],
        ),
        Area(
            id="l1-1",
            name="Corporate IT",
            children=[
                Department(
                    id="l1-1-l2-0",
                    name="Security",
                    children=[
                        Team(id="l1-1-l2-0-l3-0", name="Legacy Systems", accounts=[acct_31]),
                    ],
                ),
            ],
        ),
        Area(id="l1-2", name="Product R&D", children=[]),
    ]


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def sample_forest():
    """Provide the hand-built forest described in the module docstring."""
    return build_sample_forest()


@pytest.fixture
def sample_dataset_file(tmp_path, sample_forest):
    """Write the sample forest to a camelCase dataset file."""
    path = tmp_path / "org_dataset.json"
    path.write_text(
        json.dumps([area.model_dump(mode="json", by_alias=True) for area in sample_forest])
    )
    return path


@pytest.fixture
def generated_forest():
    """Provide a seeded synthetic forest."""
    return DatasetService(seed=42).generate_dataset(seed=42)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def rollup_service():
    return RollupService(top_n=5)


@pytest.fixture
def context_service(rollup_service):
    return ContextService(rollup_service)


@pytest.fixture
def dashboard_service(rollup_service):
    return DashboardService(rollup_service)


@pytest.fixture
def dataset_service(sample_forest):
    """DatasetService holding the sample forest."""
    service = DatasetService()
    service.replace_forest(sample_forest)
    return service


# =============================================================================
# Pytest Hooks for Test Reporting
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "property: marks tests as property-based tests"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark tests by directory
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "property" in str(item.fspath):
            item.add_marker(pytest.mark.property)


def pytest_sessionstart(session):
    """Print test session information."""
    print("\n" + "=" * 70)
    print("FinOps Org Insights MCP Server - Test Suite")
    print("=" * 70)


def pytest_sessionfinish(session, exitstatus):
    """Print test session summary."""
    print("\n" + "=" * 70)
    if exitstatus == 0:
        print("PASS: All tests passed!")
    else:
        print(f"FAIL: Tests failed with exit status: {exitstatus}")
    print("=" * 70)
