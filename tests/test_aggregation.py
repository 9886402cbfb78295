"""Tests for budget vs. actual aggregation."""

from datetime import date

import pytest

from budgetlens.analytics.aggregation import aggregate, category_totals, transaction_stats
from conftest import make_budget, make_transaction


class TestAggregate:
    """Tests for aggregate()."""

    def test_over_budget_category_is_not_clamped(self):
        """A category spending 600 against 500 reports 120%."""
        result = aggregate([make_budget("Food", 500.0)], [make_transaction("Food", 600.0)])

        assert len(result.category_spending) == 1
        food = result.category_spending[0]
        assert food.category_name == "Food"
        assert food.budget == 500.0
        assert food.spent == 600.0
        assert food.percentage == pytest.approx(120.0)

    def test_empty_inputs_yield_zero_aggregates(self):
        """No budgets and no transactions is a valid, all-zero result."""
        result = aggregate([], [])

        assert result.total_budget == 0
        assert result.total_spent == 0
        assert result.total_remaining == 0
        assert result.overall_utilization == 0
        assert result.category_spending == []
        assert result.budget_distribution == []

    def test_no_transactions_against_budgets(self, household_budgets):
        """Budgets without spending give zero percentages, never an error."""
        result = aggregate(household_budgets, [])

        assert result.total_spent == 0
        assert result.total_budget == 3200.0
        assert result.total_remaining == 3200.0
        assert all(c.percentage == 0 for c in result.category_spending)

    def test_zero_amount_budget_guards_division(self):
        """A zero budget with spending reports 0%, not an exception."""
        result = aggregate([make_budget("Gifts", 0.0)], [make_transaction("Gifts", 40.0)])

        assert result.category_spending[0].spent == 40.0
        assert result.category_spending[0].percentage == 0
        assert result.overall_utilization == 0

    def test_totals(self, household_budgets, household_transactions):
        """Portfolio totals across mixed categories."""
        result = aggregate(household_budgets, household_transactions)

        assert result.total_budget == sum(b.amount for b in household_budgets)
        assert result.total_spent == 2050.0
        assert result.total_remaining == 1150.0
        assert result.overall_utilization == pytest.approx(64.0625)

    def test_income_is_not_spending(self):
        """Only expense transactions count as spent."""
        result = aggregate(
            [make_budget("Food", 100.0)],
            [make_transaction("Food", 30.0), make_transaction("Food", 500.0, type="income")],
        )

        assert result.category_spending[0].spent == 30.0

    def test_matches_by_category_id_or_name(self):
        """Transactions match on budget id or on the name, ignoring case."""
        budget = make_budget("Groceries", 200.0, category_id="cat-7")
        transactions = [
            make_transaction("cat-7", 20.0),
            make_transaction("groceries", 30.0),
            make_transaction("GROCERIES ", 10.0),
            make_transaction("Dining", 99.0),
        ]

        result = aggregate([budget], transactions)

        assert result.category_spending[0].spent == 60.0
        assert result.unbudgeted_spent == 99.0

    def test_duplicate_budgets_are_summed(self):
        """Two budget lines for one category both count toward the totals."""
        budgets = [make_budget("Food", 300.0), make_budget("Food", 200.0)]
        transactions = [make_transaction("Food", 100.0)]

        result = aggregate(budgets, transactions)

        assert result.total_budget == 500.0
        assert len(result.category_spending) == 2
        assert [c.spent for c in result.category_spending] == [100.0, 100.0]
        assert result.total_spent == 200.0
        assert result.overall_utilization == pytest.approx(40.0)
        assert result.unbudgeted_spent == 0.0

    @pytest.mark.parametrize("amounts", [[600.0], [250.0, 400.0], [10.0, 20.0, 30.0]])
    def test_total_spent_is_sum_of_category_spent(self, amounts):
        """total_spent never disagrees with the per-line figures."""
        budgets = [make_budget("Food", 500.0), make_budget("Food", 500.0), make_budget("Rent", 900.0)]
        transactions = [make_transaction("Food", amount) for amount in amounts]

        result = aggregate(budgets, transactions)

        assert result.total_spent == pytest.approx(sum(c.spent for c in result.category_spending))
        assert result.total_spent == pytest.approx(2 * sum(amounts))

    def test_budget_distribution_sorted_by_amount(self, household_budgets):
        """Distribution lists each budget's share, largest first."""
        result = aggregate(household_budgets, [])

        assert [share.category for share in result.budget_distribution] == ["Rent", "Travel", "Food", "Fun"]
        assert sum(share.percentage for share in result.budget_distribution) == pytest.approx(100.0)

    @pytest.mark.parametrize("amounts", [[0.0], [10.0, 20.5], [1000.0, 0.0, 3.25, 99.99]])
    def test_total_budget_is_sum_of_amounts(self, amounts):
        """total_budget always equals the plain sum of budget amounts."""
        budgets = [make_budget(f"Cat{i}", amount) for i, amount in enumerate(amounts)]

        assert aggregate(budgets, []).total_budget == pytest.approx(sum(amounts))


class TestTransactionStats:
    """Tests for transaction_stats()."""

    def test_empty(self):
        stats = transaction_stats([])

        assert stats.count == 0
        assert stats.average_amount == 0
        assert stats.last_activity is None

    def test_counts_and_average(self, household_transactions):
        """Average covers expenses only; count covers everything."""
        stats = transaction_stats(household_transactions)

        assert stats.count == 5
        assert stats.expense_count == 4
        assert stats.average_amount == pytest.approx(512.5)
        assert stats.last_activity == date(2024, 6, 15)

    def test_last_activity_ignores_undated(self):
        transactions = [
            make_transaction("Food", 10.0, when=date(2024, 1, 3)),
            make_transaction("Food", 10.0, when=None),
            make_transaction("Food", 10.0, when=date(2024, 2, 1)),
        ]

        assert transaction_stats(transactions).last_activity == date(2024, 2, 1)


def test_category_totals_first_seen_order(household_transactions):
    """Expense totals by category in the order categories first appear."""
    totals = category_totals(household_transactions)

    assert list(totals) == ["Food", "Travel", "Rent"]
    assert totals["Food"] == 600.0
