"""Budget predictions, saving suggestions and financial-health alerts.

All three work on the yearly tables of
:func:`budgetlens.analytics.year_over_year.build_yearly_data`. ``months``
is the number of calendar months, counted from January, that the current
year's table covers: 12 for a closed year, the current month number for a
year in progress.
"""

import logging
from collections.abc import Sequence

from budgetlens.core.formatting import format_currency, format_percentage, growth_percentage, safe_percentage
from budgetlens.core.models import (
    Budget,
    BudgetPrediction,
    Insight,
    InsightType,
    Priority,
    YearlyComparisonData,
)

logger = logging.getLogger(__name__)

RECOMMENDED_HEADROOM = 1.1
SAVING_SHARE = 0.1
MIN_MONTHLY_SAVING = 50.0
HIGH_IMPACT_SAVING = 200.0
MEDIUM_IMPACT_SAVING = 100.0
OPTIMIZATION_CANDIDATES = 5
HIGH_SPENDING_RATIO = 90.0
SPIKE_FACTOR = 1.3
RECENT_MONTHS = 3


def _check_months(months: int) -> None:
    if not 1 <= months <= 12:
        raise ValueError(f"months must be between 1 and 12, got {months}")


def _budget_spending(data: YearlyComparisonData | None, budget: Budget, months: int) -> float:
    """Expense total of the budget's categories over the first ``months`` months."""
    if data is None:
        return 0.0
    return sum(
        category.amount
        for row in data.monthly_data[:months]
        for name, category in row.category_breakdown.items()
        if budget.matches_category(name)
    )


def budget_predictions(
    budgets: Sequence[Budget],
    current: YearlyComparisonData,
    previous: YearlyComparisonData | None = None,
    months: int = 12,
) -> list[BudgetPrediction]:
    """Project next month's spending for every budget, riskiest first.

    The projection is the current monthly average scaled by the growth
    against the same months of the previous year (no scaling without a
    previous baseline). Risk is how far the projection exceeds the monthly
    limit, clamped to 0..100; a zero limit carries no risk. The recommended
    budget keeps 10% headroom over the projection and never drops below the
    current limit.
    """
    _check_months(months)

    predictions = []
    for budget in budgets:
        spent = _budget_spending(current, budget, months)
        previous_spent = _budget_spending(previous, budget, months)
        trend_factor = spent / previous_spent if previous_spent > 0 else 1.0

        monthly = spent / months
        predicted = monthly * trend_factor
        limit = budget.monthly_amount
        risk = safe_percentage(predicted, limit) - 100 if limit > 0 else 0.0

        predictions.append(
            BudgetPrediction(
                category_id=budget.category_id,
                category=budget.category_name or "Unknown",
                current_spending=monthly,
                predicted_spending=predicted,
                budget_limit=limit,
                over_budget_risk=min(100.0, max(0.0, risk)),
                recommended_budget=max(limit, predicted * RECOMMENDED_HEADROOM),
            )
        )

    return sorted(predictions, key=lambda prediction: prediction.over_budget_risk, reverse=True)


def _impact(saving: float) -> Priority:
    if saving > HIGH_IMPACT_SAVING:
        return Priority.HIGH
    if saving > MEDIUM_IMPACT_SAVING:
        return Priority.MEDIUM
    return Priority.LOW


def budget_optimizations(current: YearlyComparisonData, months: int = 12, currency: str = "USD") -> list[Insight]:
    """Suggest a 10% cut in the largest categories where it saves more than 50 a month."""
    _check_months(months)

    largest = sorted(current.category_breakdown.items(), key=lambda item: item[1].amount, reverse=True)
    insights = []
    for name, category in largest[:OPTIMIZATION_CANDIDATES]:
        saving = category.amount / months * SAVING_SHARE
        if saving <= MIN_MONTHLY_SAVING:
            continue

        insights.append(
            Insight(
                id=f"optimize-{name.lower().replace(' ', '-')}",
                type=InsightType.SAVING_SUGGESTION,
                title=f"Optimize {name} Spending",
                description=(
                    f"Reducing {name.lower()} spending by 10% could save you "
                    f"{format_currency(saving, currency)} per month"
                ),
                value=format_currency(saving, currency),
                trend="down",
                action=f"Look for cheaper alternatives or cut back on {name.lower()}",
                confidence=70.0,
                impact=_impact(saving),
            )
        )

    logger.debug("Suggested %d optimizations from %d categories", len(insights), len(largest))
    return insights


def financial_health_alerts(current: YearlyComparisonData, months: int = 12, currency: str = "USD") -> list[Insight]:
    """Alerts for spending close to income and for a recent spending spike."""
    _check_months(months)
    insights = []

    ratio = safe_percentage(current.total_spending, current.total_income)
    if ratio > HIGH_SPENDING_RATIO:
        insights.append(
            Insight(
                id="high-spending-ratio",
                type=InsightType.WARNING,
                title="High Spending-to-Income Ratio",
                description=f"You're spending {ratio:.0f}% of your income",
                value=format_percentage(ratio),
                trend="up",
                action="Consider reducing expenses or increasing income",
                confidence=95.0,
                impact=Priority.HIGH,
            )
        )

    if months >= RECENT_MONTHS:
        covered = [row.total_spending for row in current.monthly_data[:months]]
        recent_average = sum(covered[-RECENT_MONTHS:]) / RECENT_MONTHS
        year_average = sum(covered) / months
        if year_average > 0 and recent_average > year_average * SPIKE_FACTOR:
            insights.append(
                Insight(
                    id="spending-spike",
                    type=InsightType.SPENDING_PATTERN,
                    title="Unusual Spending Spike",
                    description=(
                        f"Your spending in recent months is "
                        f"{growth_percentage(recent_average, year_average):.0f}% above your yearly average"
                    ),
                    value=format_currency(recent_average, currency),
                    trend="up",
                    action="Check recent months for one-off or recurring new expenses",
                    confidence=85.0,
                    impact=Priority.MEDIUM,
                )
            )

    return insights
