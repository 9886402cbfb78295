"""Tests for insight classification."""

from datetime import date

import pytest

from budgetlens.analytics.aggregation import aggregate, transaction_stats
from budgetlens.analytics.insights import classify, sort_by_priority, summarize_insights
from budgetlens.core.config import InsightConfig
from budgetlens.core.models import PRIORITY_RANK, Insight, InsightType, Priority, priority_for
from conftest import make_budget, make_transaction

TODAY = date(2024, 6, 20)


def run(budgets, transactions, **kwargs):
    """Aggregate and classify in one step."""
    return classify(aggregate(budgets, transactions), transaction_stats(transactions), today=TODAY, **kwargs)


def by_title(insights):
    return {insight.title: insight for insight in insights}


class TestPriorityTable:
    """Priority is a fixed function of type."""

    @pytest.mark.parametrize(
        "insight_type,expected",
        [
            (InsightType.BUDGET_WARNING, Priority.HIGH),
            (InsightType.WARNING, Priority.HIGH),
            (InsightType.SPENDING_PATTERN, Priority.MEDIUM),
            (InsightType.TREND, Priority.MEDIUM),
            (InsightType.SUCCESS, Priority.LOW),
            (InsightType.INFO, Priority.LOW),
            (InsightType.EFFICIENCY, Priority.LOW),
            (InsightType.NO_DATA, Priority.LOW),
        ],
    )
    def test_mapping(self, insight_type, expected):
        assert priority_for(insight_type) == expected

    def test_insight_priority_follows_type(self):
        insight = Insight(id="x", type=InsightType.WARNING, title="t", description="d")

        assert insight.priority == Priority.HIGH
        assert insight.model_dump()["priority"] == Priority.HIGH


class TestScenarios:
    """End-to-end classification scenarios."""

    def test_over_budget_food(self):
        """Food at 120% is reported as an over-budget category."""
        insights = run([make_budget("Food", 500.0)], [make_transaction("Food", 600.0)])
        titles = by_title(insights)

        assert "Over Budget Categories" in titles
        assert "Food" in titles["Over Budget Categories"].value
        assert titles["Over Budget Categories"].priority == Priority.HIGH
        assert "Approaching Limits" not in titles

    def test_no_data(self):
        """No budgets and no transactions give exactly one no-data insight."""
        insights = run([], [])

        assert len(insights) == 1
        assert insights[0].type == InsightType.NO_DATA
        assert insights[0].type.value == "no-data"
        assert insights[0].title == "No Budget Data"

    def test_approaching_limit_travel(self):
        """Travel at 85% is approaching its limit, not over budget."""
        insights = run([make_budget("Travel", 1000.0)], [make_transaction("Travel", 850.0)])
        titles = by_title(insights)

        assert "Approaching Limits" in titles
        assert titles["Approaching Limits"].priority == Priority.MEDIUM
        assert titles["Approaching Limits"].value == "Travel"
        assert "Over Budget Categories" not in titles

    def test_duplicate_budgets_agree_with_headline(self):
        """Duplicate over-budget lines push the headline to an alert as well."""
        budgets = [make_budget("Food", 500.0), make_budget("Food", 500.0)]
        titles = by_title(run(budgets, [make_transaction("Food", 600.0)]))

        assert titles["Over Budget Categories"].value == "Food, Food"
        assert titles["Budget Alert"].value == "120.0%"
        assert "Budget on Track" not in titles

    def test_household_ordering(self, household_budgets, household_transactions):
        """Insights come out high, then medium, then low, in rule order within a priority."""
        insights = run(household_budgets, household_transactions)

        assert [i.id for i in insights] == [
            "over-budget",
            "near-limit",
            "highest-spending",
            "budget-health-good",
            "under-utilized",
            "most-efficient",
            "limited-history",
        ]


class TestBudgetHealth:
    """Overall utilization thresholds."""

    @pytest.mark.parametrize(
        "spent,title,priority",
        [
            (95.0, "Budget Alert", Priority.HIGH),
            (90.5, "Budget Alert", Priority.HIGH),
            (90.0, "Budget Watch", Priority.MEDIUM),
            (76.0, "Budget Watch", Priority.MEDIUM),
            (75.0, "Budget on Track", Priority.LOW),
            (1.0, "Budget on Track", Priority.LOW),
            (0.0, "No Spending Recorded", Priority.LOW),
        ],
    )
    def test_thresholds(self, spent, title, priority):
        transactions = [make_transaction("Food", spent)] if spent else []
        insights = run([make_budget("Food", 100.0)], transactions)

        health = [i for i in insights if i.id.startswith("budget-health")]
        assert len(health) == 1
        assert health[0].title == title
        assert health[0].priority == priority

    def test_no_spending_is_info(self):
        insights = run([make_budget("Food", 100.0)], [])

        health = by_title(insights)["No Spending Recorded"]
        assert health.type == InsightType.INFO
        assert health.value == "0.0%"

    def test_no_health_without_budgets(self):
        """Transactions without budgets skip the budget rules."""
        insights = run([], [make_transaction("Food", 20.0)])

        assert not any(i.id.startswith("budget-health") for i in insights)
        assert [i.id for i in insights] == ["limited-history"]


class TestCategoryAlerts:
    """Per-category rules and name truncation."""

    def test_truncates_to_three_names(self):
        names = ["Food", "Rent", "Fuel", "Gym", "Pets"]
        budgets = [make_budget(name, 100.0) for name in names]
        transactions = [make_transaction(name, 150.0) for name in names]

        over = by_title(run(budgets, transactions))["Over Budget Categories"]

        assert over.value == "Food, Rent, Fuel..."
        assert over.description == "5 categories are over budget"

    def test_exactly_three_names_has_no_ellipsis(self):
        names = ["Food", "Rent", "Fuel"]
        budgets = [make_budget(name, 100.0) for name in names]
        transactions = [make_transaction(name, 90.0) for name in names]

        near = by_title(run(budgets, transactions))["Approaching Limits"]

        assert near.value == "Food, Rent, Fuel"

    def test_hundred_percent_is_approaching_not_over(self):
        insights = by_title(run([make_budget("Food", 100.0)], [make_transaction("Food", 100.0)]))

        assert "Approaching Limits" in insights
        assert "Over Budget Categories" not in insights

    def test_eighty_percent_is_not_approaching(self):
        insights = by_title(run([make_budget("Food", 100.0)], [make_transaction("Food", 80.0)]))

        assert "Approaching Limits" not in insights
        assert "Under-Utilized Budgets" not in insights

    def test_under_utilized_excludes_zero(self):
        budgets = [make_budget("Food", 100.0), make_budget("Rent", 100.0)]
        insights = by_title(run(budgets, [make_transaction("Food", 20.0)]))

        assert insights["Under-Utilized Budgets"].value == "Food"


class TestSpendingHighlights:
    """Top spending and most efficient categories."""

    def test_top_spending_tie_keeps_first(self):
        budgets = [make_budget("Food", 1000.0), make_budget("Rent", 1000.0)]
        transactions = [make_transaction("Food", 300.0), make_transaction("Rent", 300.0)]

        top = by_title(run(budgets, transactions))["Top Spending Category"]

        assert top.description == "Food is your highest expense"
        assert top.value == "$300.00"

    def test_top_spending_uses_configured_currency(self):
        top = by_title(run([make_budget("Food", 1000.0)], [make_transaction("Food", 1234.5)], currency="EUR"))[
            "Top Spending Category"
        ]

        assert top.value == "€1,234.50"

    def test_no_top_spending_without_spend(self):
        insights = by_title(run([make_budget("Food", 100.0)], []))

        assert "Top Spending Category" not in insights
        assert "Most Efficient Budget" not in insights

    def test_most_efficient_ignores_zero_percentages(self):
        budgets = [make_budget("Food", 100.0), make_budget("Rent", 100.0), make_budget("Fun", 100.0)]
        transactions = [make_transaction("Food", 60.0), make_transaction("Rent", 30.0)]

        efficient = by_title(run(budgets, transactions))["Most Efficient Budget"]

        assert efficient.description.startswith("Rent")
        assert efficient.value == "30.0%"


class TestDataQuality:
    """Insights derived from raw transaction statistics."""

    def test_stale_activity(self):
        transactions = [make_transaction("Food", 10.0, when=date(2024, 4, 1))]

        stale = by_title(run([make_budget("Food", 100.0)], transactions))["No Recent Activity"]

        assert stale.type == InsightType.DATA_QUALITY
        assert stale.description == "Your last transaction was 80 days ago"

    def test_stale_threshold_is_configurable(self):
        transactions = [make_transaction("Food", 10.0, when=date(2024, 6, 1))]
        config = InsightConfig(stale_activity_days=7)

        insights = by_title(run([make_budget("Food", 100.0)], transactions, config=config))

        assert "No Recent Activity" in insights

    def test_enough_history_and_budgets(self):
        names = ["Food", "Rent", "Fuel"]
        budgets = [make_budget(name, 1000.0) for name in names]
        transactions = [make_transaction(names[i % 3], 10.0) for i in range(12)]

        titles = by_title(run(budgets, transactions))

        assert "Limited Transaction History" not in titles
        assert "Add More Budgets" not in titles

    def test_few_budgets(self):
        titles = by_title(run([make_budget("Food", 100.0)], [make_transaction("Food", 10.0)]))

        assert titles["Add More Budgets"].value == "1"


class TestOrderingAndSummary:
    """Sorting and summary helpers."""

    def test_no_lower_priority_before_high(self, household_budgets, household_transactions):
        insights = run(household_budgets, household_transactions)
        ranks = [PRIORITY_RANK[i.priority] for i in insights]

        assert ranks == sorted(ranks)

    def test_sort_is_stable(self):
        insights = [
            Insight(id="a", type=InsightType.INFO, title="a", description=""),
            Insight(id="b", type=InsightType.WARNING, title="b", description=""),
            Insight(id="c", type=InsightType.SUCCESS, title="c", description=""),
            Insight(id="d", type=InsightType.BUDGET_WARNING, title="d", description=""),
        ]

        assert [i.id for i in sort_by_priority(insights)] == ["b", "d", "a", "c"]

    def test_summary_counts(self, household_budgets, household_transactions):
        summary = summarize_insights(run(household_budgets, household_transactions))

        assert summary["total"] == 7
        assert summary["high"] == 1
        assert summary["medium"] == 2
        assert summary["low"] == 4
        assert summary["warnings"] == 1
        assert summary["trends"] == 1
        assert summary["avg_confidence"] == 0.0
