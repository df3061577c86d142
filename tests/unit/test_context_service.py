"""Unit tests for ContextService."""

import json

from insights_server.models import (
    Area,
    CloudAccount,
    CloudProvider,
    Department,
    HierarchyLevel,
    NavigationState,
    SafeDeploymentProfile,
    SkuDetail,
    SkuType,
    Team,
)
from insights_server.services.view_selector import resolve_scope


def single_account_forest(spend: float, forecast: float) -> list[Area]:
    account = CloudAccount(
        id="a-0",
        name="Cloud Acct 1",
        provider=CloudProvider.GCP,
        tier=2,
        spend=spend,
        forecast=forecast,
        safe_deployment=SafeDeploymentProfile(
            terraform_iac=True,
            ci_cd_deploy=True,
            no_manual_access=True,
            incremental_rollout=True,
            soak_time=True,
            auto_rollback=True,
            health_checks=True,
        ),
        skus=[
            SkuDetail(
                id="sku-1000",
                name="Compute Instance Type A",
                category="Compute",
                sku_type=SkuType.COMPUTE,
                cost=spend,
            )
        ],
    )
    return [
        Area(
            id="l1-0",
            name="Corporate IT",
            children=[
                Department(
                    id="l1-0-l2-0",
                    name="Core",
                    children=[Team(id="l1-0-l2-0-l3-0", name="Team Beta", accounts=[account])],
                )
            ],
        )
    ]


class TestBuildCurrentView:
    """Test the current-view bundle."""

    def test_department_scope(self, context_service, sample_forest):
        state = resolve_scope(sample_forest, "l1-0-l2-0")

        bundle = context_service.build_current_view(sample_forest, state)

        assert bundle.scope_label == "Global Engineering > Platform"
        assert bundle.level == HierarchyLevel.DEPARTMENT
        assert bundle.stats.total_spend == 4000.0
        assert [s.name for s in bundle.top_spenders] == ["Cloud Acct 11", "Cloud Acct 12"]
        assert len(bundle.monthly_trends) == 6
        assert bundle.monthly_trends[0].spend == 800.0

    def test_global_scope_label(self, context_service, sample_forest):
        bundle = context_service.build_current_view(sample_forest, NavigationState())

        assert bundle.scope_label == "Global View"
        assert bundle.breadcrumbs == []


class TestBuildEntitySummaries:
    """Test the cross-entity reference summary."""

    def test_every_area_and_department_in_tree_order(self, context_service, sample_forest):
        summaries = context_service.build_entity_summaries(sample_forest)

        assert [(s.name, s.type, s.parent) for s in summaries] == [
            ("Global Engineering", "Level 1 (Area)", None),
            ("Platform", "Level 2 (Department)", "Global Engineering"),
            ("Data", "Level 2 (Department)", "Global Engineering"),
            ("Corporate IT", "Level 1 (Area)", None),
            ("Security", "Level 2 (Department)", "Corporate IT"),
            ("Product R&D", "Level 1 (Area)", None),
        ]

    def test_totals_and_monthly_series(self, context_service, sample_forest):
        summaries = {s.name: s for s in context_service.build_entity_summaries(sample_forest)}

        assert summaries["Global Engineering"].total_spend == 10000.0
        assert summaries["Data"].total_spend == 6000.0
        assert [p.month for p in summaries["Data"].monthly_spend] == [
            "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        ]
        assert summaries["Data"].monthly_spend[0].spend == 600.0

    def test_empty_area_summary(self, context_service, sample_forest):
        summary = context_service.build_entity_summaries(sample_forest)[-1]

        assert summary.total_spend == 0.0
        assert len(summary.monthly_spend) == 6
        assert all(p.spend == 0.0 for p in summary.monthly_spend)

    def test_summaries_ignore_navigation(self, context_service, sample_forest):
        global_context = context_service.build_assistant_context(sample_forest, NavigationState())
        team_context = context_service.build_assistant_context(
            sample_forest, resolve_scope(sample_forest, "l1-1-l2-0-l3-0")
        )

        assert global_context.available_entities == team_context.available_entities
        assert global_context.current_view != team_context.current_view


class TestSerializeForAssistant:
    """Test the compact serialisation."""

    def test_numbers_become_integers(self, context_service, sample_forest):
        context = context_service.build_assistant_context(sample_forest, NavigationState())

        payload = json.loads(context_service.serialize_for_assistant(context))

        assert payload["current_view"]["stats"]["total_spend"] == 10500
        assert isinstance(payload["current_view"]["stats"]["total_spend"], int)
        assert payload["current_view"]["stats"]["spend_by_provider"]["Azure"] == 1000
        assert payload["available_entities"][0]["total_spend"] == 10000

    def test_rounds_half_up(self, context_service):
        forest = single_account_forest(spend=2.5, forecast=0.5)
        context = context_service.build_assistant_context(forest, NavigationState())

        payload = json.loads(context_service.serialize_for_assistant(context))

        assert payload["current_view"]["stats"]["total_spend"] == 3
        assert payload["current_view"]["stats"]["total_forecast"] == 1

    def test_omits_sku_line_items(self, context_service):
        forest = single_account_forest(spend=100.0, forecast=100.0)
        context = context_service.build_assistant_context(forest, NavigationState())

        serialized = context_service.serialize_for_assistant(context)

        assert "skus" not in serialized
        assert "Instance Type" not in serialized

    def test_zero_forecast_becomes_null(self, context_service, sample_forest):
        state = resolve_scope(sample_forest, "l1-2")
        context = context_service.build_assistant_context(sample_forest, state)

        payload = json.loads(context_service.serialize_for_assistant(context))

        assert payload["current_view"]["forecast_variance"]["variance_percent"] is None
        assert payload["current_view"]["forecast_variance"]["status"] == "Under Budget"

    def test_output_is_compact(self, context_service, sample_forest):
        context = context_service.build_assistant_context(sample_forest, NavigationState())

        serialized = context_service.serialize_for_assistant(context)

        assert serialized == json.dumps(json.loads(serialized), separators=(",", ":"))
        assert set(json.loads(serialized)) == {"current_view", "available_entities", "guidance"}
