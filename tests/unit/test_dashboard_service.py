"""Unit tests for DashboardService."""

import pytest

from insights_server.models import HierarchyLevel, NavigationState
from insights_server.services.dashboard_service import CHART_NAMES, security_badge
from insights_server.services.view_selector import resolve_scope


class TestSecurityBadge:
    """Test row security badges."""

    @pytest.mark.parametrize(
        "critical,high,expected",
        [(2, 5, "2 Critical"), (0, 4, "4 High"), (0, 0, "Secure")],
    )
    def test_badge(self, critical, high, expected):
        assert security_badge(critical, high) == expected


class TestVisibleRows:
    """Test the hierarchy table rows for each level."""

    def test_global_shows_areas(self, dashboard_service, sample_forest):
        rows = dashboard_service.visible_rows(sample_forest, NavigationState())

        assert [(r.name, r.level, r.spend, r.security_badge) for r in rows] == [
            ("Global Engineering", HierarchyLevel.AREA, 10000.0, "2 Critical"),
            ("Corporate IT", HierarchyLevel.AREA, 500.0, "1 Critical"),
            ("Product R&D", HierarchyLevel.AREA, 0.0, "Secure"),
        ]

    def test_area_shows_departments(self, dashboard_service, sample_forest):
        rows = dashboard_service.visible_rows(sample_forest, resolve_scope(sample_forest, "l1-0"))

        assert [r.name for r in rows] == ["Platform", "Data"]
        assert rows[1].level == HierarchyLevel.DEPARTMENT
        assert rows[1].forecast == 6400.0
        assert rows[1].safe_deployment_risks == 3
        assert rows[1].security_badge == "Secure"

    def test_department_shows_teams(self, dashboard_service, sample_forest):
        rows = dashboard_service.visible_rows(
            sample_forest, resolve_scope(sample_forest, "l1-0-l2-0")
        )

        assert [(r.id, r.level) for r in rows] == [("l1-0-l2-0-l3-0", HierarchyLevel.TEAM)]
        assert rows[0].spend == 4000.0

    def test_team_shows_accounts_with_own_metrics(self, dashboard_service, sample_forest):
        rows = dashboard_service.visible_rows(
            sample_forest, resolve_scope(sample_forest, "l1-0-l2-0-l3-0")
        )

        assert [(r.name, r.level, r.security_badge) for r in rows] == [
            ("Cloud Acct 11", HierarchyLevel.ACCOUNT, "2 Critical"),
            ("Cloud Acct 12", HierarchyLevel.ACCOUNT, "2 High"),
        ]
        assert rows[0].spend == 3000.0
        assert rows[0].safe_deployment_risks == 1

    def test_account_shows_no_rows(self, dashboard_service, sample_forest):
        state = resolve_scope(sample_forest, "l1-0-l2-0-l3-0-acc-0")

        assert dashboard_service.visible_rows(sample_forest, state) == []


class TestAccountDetail:
    """Test the account detail panel."""

    def test_acceptable_account(self, dashboard_service, sample_forest):
        account = sample_forest[0].children[1].children[0].accounts[0]

        detail = dashboard_service.account_detail(account)

        assert detail.risk_label == "Acceptable"
        assert detail.deployment_score == 57
        assert len(detail.deployment_checks) == 7
        assert {c.label for c in detail.deployment_checks if not c.passed} == {
            "CI/CD Pipeline",
            "Soak Time",
            "Auto Rollback",
        }

    def test_high_risk_account(self, dashboard_service, sample_forest):
        account = sample_forest[1].children[0].children[0].accounts[0]

        detail = dashboard_service.account_detail(account)

        assert detail.risk_label == "High Risk"
        assert detail.deployment_score == 0


class TestBuildView:
    """Test the complete dashboard view."""

    def test_global_view_stat_cards(self, dashboard_service, sample_forest):
        view = dashboard_service.build_view(sample_forest, NavigationState())
        cards = {card.title: card for card in view.stat_cards}

        assert [card.title for card in view.stat_cards] == [
            "Total Spend",
            "Forecast Variance",
            "Critical Vulns",
            "Safe Deployment Risks",
        ]
        assert cards["Total Spend"].value == "$10,500"
        assert cards["Total Spend"].sub_value == "Forecast: $10,800"
        assert cards["Forecast Variance"].value == "-2.8%"
        assert cards["Forecast Variance"].sub_value == "Under Budget"
        assert cards["Forecast Variance"].alert is False
        assert cards["Critical Vulns"].value == "3"
        assert cards["Critical Vulns"].alert is True
        assert cards["Safe Deployment Risks"].value == "11"

    def test_global_view_has_no_account_detail(self, dashboard_service, sample_forest):
        view = dashboard_service.build_view(sample_forest, NavigationState())

        assert view.scope_label == "Global View"
        assert view.account_detail is None
        assert len(view.rows) == 3

    def test_account_view(self, dashboard_service, sample_forest):
        state = resolve_scope(sample_forest, "l1-1-l2-0-l3-0-acc-0")

        view = dashboard_service.build_view(sample_forest, state)

        assert view.level == HierarchyLevel.ACCOUNT
        assert view.rows == []
        assert view.account_detail.account.name == "Cloud Acct 31"
        assert [d.name for d in view.charts.top_accounts] == ["Cloud Acct 31"]
        assert view.forecast_variance.status.value == "Under Budget"

    def test_empty_scope_renders_variance_as_na(self, dashboard_service, sample_forest):
        view = dashboard_service.build_view(sample_forest, resolve_scope(sample_forest, "l1-2"))
        cards = {card.title: card for card in view.stat_cards}

        assert view.stats.total_spend == 0.0
        assert cards["Forecast Variance"].value == "n/a"
        assert view.rows == []
        assert view.charts.spend_by_provider == []

    def test_area_charts_cover_whole_forest(self, dashboard_service, sample_forest):
        view = dashboard_service.build_view(sample_forest, resolve_scope(sample_forest, "l1-1"))

        assert [d.name for d in view.charts.spend_by_area] == [
            "Global Engineering",
            "Corporate IT",
            "Product R&D",
        ]
        assert [d.name for d in view.charts.spend_by_provider] == ["OCI"]

    def test_chart_names(self):
        assert "spend_by_provider" in CHART_NAMES
        assert "monthly_trend" in CHART_NAMES
        assert len(CHART_NAMES) == 11
