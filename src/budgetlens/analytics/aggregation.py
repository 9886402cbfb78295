"""Budget vs. actual aggregation over in-memory transactions."""

from collections.abc import Iterable, Sequence

from budgetlens.core.formatting import safe_percentage
from budgetlens.core.models import (
    Budget,
    BudgetShare,
    CategorySpending,
    SpendingAggregates,
    Transaction,
    TransactionStats,
)


def aggregate(budgets: Sequence[Budget], transactions: Sequence[Transaction]) -> SpendingAggregates:
    """Reduce budgets and transactions into per-category and portfolio figures.

    Every budget line yields one ``CategorySpending`` entry. Duplicate
    budgets for one category appear twice and both count toward
    ``total_budget`` and ``total_spent``: a transaction matched by two budget
    lines is spent twice. ``total_spent`` is always the sum of the per-line
    ``spent`` figures.

    Empty inputs produce an all-zero result rather than an error.
    """
    expenses = [t for t in transactions if t.is_expense]

    category_spending = []
    matched: set[int] = set()
    total_budget = 0.0

    for budget in budgets:
        matching = [i for i, t in enumerate(expenses) if budget.matches(t)]
        spent = sum(expenses[i].amount for i in matching)
        matched.update(matching)
        total_budget += budget.amount

        category_spending.append(
            CategorySpending(
                category_id=budget.category_id,
                category_name=budget.category_name,
                budget=budget.amount,
                spent=spent,
                percentage=safe_percentage(spent, budget.amount),
            )
        )

    total_spent = sum(c.spent for c in category_spending)
    unbudgeted_spent = sum(t.amount for i, t in enumerate(expenses) if i not in matched)

    distribution = sorted(
        (
            BudgetShare(
                category=budget.category_name or "Unknown",
                amount=budget.amount,
                percentage=safe_percentage(budget.amount, total_budget),
            )
            for budget in budgets
        ),
        key=lambda share: share.amount,
        reverse=True,
    )

    return SpendingAggregates(
        total_budget=total_budget,
        total_spent=total_spent,
        total_remaining=total_budget - total_spent,
        overall_utilization=safe_percentage(total_spent, total_budget),
        category_spending=category_spending,
        budget_distribution=distribution,
        unbudgeted_spent=unbudgeted_spent,
    )


def transaction_stats(transactions: Iterable[Transaction]) -> TransactionStats:
    """Count, average expense amount and most recent dated activity."""
    count = 0
    expense_amounts = []
    last_activity = None

    for transaction in transactions:
        count += 1
        if transaction.is_expense:
            expense_amounts.append(transaction.amount)
        if transaction.date and (last_activity is None or transaction.date > last_activity):
            last_activity = transaction.date

    average = sum(expense_amounts) / len(expense_amounts) if expense_amounts else 0.0

    return TransactionStats(
        count=count,
        expense_count=len(expense_amounts),
        average_amount=average,
        last_activity=last_activity,
    )


def category_totals(transactions: Iterable[Transaction]) -> dict[str, float]:
    """Expense totals keyed by category, in first-seen order."""
    totals: dict[str, float] = {}
    for transaction in transactions:
        if transaction.is_expense:
            totals[transaction.category] = totals.get(transaction.category, 0.0) + transaction.amount
    return totals
