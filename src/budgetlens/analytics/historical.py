"""Monthly historical series, trend direction and historical insights."""

import logging
from collections.abc import Sequence
from datetime import date, timedelta

import pandas as pd
from dateutil.relativedelta import relativedelta

from budgetlens.analytics.insights import sort_by_priority
from budgetlens.core.formatting import growth_percentage, month_key, safe_percentage
from budgetlens.core.models import (
    Budget,
    CategoryBreakdown,
    HistoricalDataPoint,
    Insight,
    InsightType,
    Transaction,
    TrendAnalysis,
    TrendDirection,
)

logger = logging.getLogger(__name__)

ALLOWED_MONTHS = (6, 12, 24)
TREND_WINDOW = 3
STABLE_BAND = 5.0
CATEGORY_TREND_THRESHOLD = 20.0
MAX_CATEGORY_INSIGHTS = 3
MIN_POINTS_FOR_INSIGHTS = 3
MIN_POINTS_FOR_SEASONS = 6

SEASONS = {
    12: "Winter", 1: "Winter", 2: "Winter",
    3: "Spring", 4: "Spring", 5: "Spring",
    6: "Summer", 7: "Summer", 8: "Summer",
    9: "Fall", 10: "Fall", 11: "Fall",
}  # fmt: skip


def month_window(months: int, today: date) -> list[tuple[date, date]]:
    """First and last day of each of the trailing ``months`` calendar months, oldest first."""
    current = today.replace(day=1)
    window = []
    for offset in range(months - 1, -1, -1):
        start = current - relativedelta(months=offset)
        end = start + relativedelta(months=1) - timedelta(days=1)
        window.append((start, end))
    return window


def _monthly_expenses(transactions: Sequence[Transaction]) -> dict[str, dict[str, float]]:
    """Expense totals as {period: {category: amount}}."""
    rows = []
    skipped = 0
    for transaction in transactions:
        if not transaction.is_expense:
            continue
        if transaction.date is None:
            skipped += 1
            continue
        rows.append(
            {"period": month_key(transaction.date), "category": transaction.category, "amount": transaction.amount}
        )

    if skipped:
        logger.debug("Skipped %d undated expense transactions while bucketing by month", skipped)
    if not rows:
        return {}

    frame = pd.DataFrame(rows)
    grouped = frame.groupby(["period", "category"], sort=False)["amount"].sum()

    by_period: dict[str, dict[str, float]] = {}
    for (period, category), amount in grouped.items():
        by_period.setdefault(period, {})[category] = float(amount)
    return by_period


def build_series(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget] = (),
    months: int = 12,
    today: date | None = None,
) -> list[HistoricalDataPoint]:
    """Build one data point per calendar month in the trailing window.

    Months with neither expense activity nor an active budget are omitted,
    so the result is sparse and callers needing a continuous axis must
    reindex it themselves.
    """
    if months not in ALLOWED_MONTHS:
        raise ValueError(f"months must be one of {ALLOWED_MONTHS}, got {months}")

    today = today or date.today()
    expenses = _monthly_expenses(transactions)

    series = []
    for start, end in month_window(months, today):
        period = month_key(start)
        spending = expenses.get(period)
        active = [budget for budget in budgets if budget.is_active_in(start, end)]
        if not spending and not active:
            continue

        spending = spending or {}
        breakdown: dict[str, dict] = {}
        for budget in active:
            entry = breakdown.setdefault(
                budget.category_id,
                {"category_name": budget.category_name or "Unknown", "budgeted": 0.0, "spent": None},
            )
            entry["budgeted"] += budget.monthly_amount
            if entry["spent"] is None:
                entry["spent"] = sum(
                    amount for category, amount in spending.items() if budget.matches_category(category)
                )

        total_budget = sum(budget.monthly_amount for budget in active)
        total_spent = sum(spending.values())

        series.append(
            HistoricalDataPoint(
                period=period,
                date=start,
                total_budget=total_budget,
                total_spent=total_spent,
                utilization=safe_percentage(total_spent, total_budget),
                category_breakdown=[
                    CategoryBreakdown(
                        category_id=category_id,
                        category_name=entry["category_name"],
                        budgeted=entry["budgeted"],
                        spent=entry["spent"] or 0.0,
                        percentage=safe_percentage(entry["spent"] or 0.0, entry["budgeted"]),
                    )
                    for category_id, entry in breakdown.items()
                ],
            )
        )

    logger.debug("Built %d of %d possible monthly points", len(series), months)
    return series


def calculate_trend(values: Sequence[float]) -> TrendAnalysis | None:
    """Compare the mean of the most recent points with the mean of the points before them.

    Uses up to three points on each side. Returns None with fewer than two
    values, which callers should treat as insufficient data.
    """
    if len(values) < 2:
        return None

    size = min(TREND_WINDOW, len(values) // 2)
    recent = values[-size:]
    previous = values[-2 * size : -size]

    change = growth_percentage(sum(recent) / size, sum(previous) / size)
    if change > STABLE_BAND:
        direction = TrendDirection.INCREASING
    elif change < -STABLE_BAND:
        direction = TrendDirection.DECREASING
    else:
        direction = TrendDirection.STABLE

    return TrendAnalysis(
        direction=direction,
        percentage=abs(change),
        description=f"{direction.value} by {abs(change):.1f}%",
    )


def spending_trend(series: Sequence[HistoricalDataPoint]) -> TrendAnalysis | None:
    return calculate_trend([point.total_spent for point in series])


def utilization_trend(series: Sequence[HistoricalDataPoint]) -> TrendAnalysis | None:
    return calculate_trend([point.utilization for point in series])


def trend_confidence(data_points: int, trend_strength: float) -> float:
    """Blend of history length (12 months is full) and trend strength."""
    data_confidence = min(100.0, data_points / 12 * 100)
    strength_confidence = min(100.0, trend_strength * 2)
    return (data_confidence + strength_confidence) / 2


def _arrow(trend: TrendAnalysis) -> str:
    return {TrendDirection.INCREASING: "up", TrendDirection.DECREASING: "down"}.get(trend.direction, "stable")


def historical_insights(series: Sequence[HistoricalDataPoint]) -> list[Insight]:
    """Insights about how spending has moved across the series."""
    if len(series) < MIN_POINTS_FOR_INSIGHTS:
        return [
            Insight(
                id="history-insufficient",
                type=InsightType.SPENDING_PATTERN,
                title="Insufficient Data",
                description="Need at least 3 months of data to generate meaningful insights",
                trend="stable",
                action="Continue tracking your expenses for better insights",
                confidence=0.0,
            )
        ]

    count = len(series)
    insights = []

    spending = spending_trend(series)
    insights.append(
        Insight(
            id="history-spending-trend",
            type=InsightType.SPENDING_PATTERN,
            title="Overall Spending Trend",
            description=(
                f"Your spending has been {spending.direction.value} by {spending.percentage:.1f}% "
                f"over the past {count} months"
            ),
            value=f"{spending.percentage:.1f}%",
            trend=_arrow(spending),
            action=(
                "Consider reviewing your budget allocations and identifying areas to reduce spending"
                if spending.direction == TrendDirection.INCREASING
                else "Great job maintaining or reducing your spending levels"
            ),
            confidence=trend_confidence(count, spending.percentage),
        )
    )

    efficiency = utilization_trend(series)
    running_hot = efficiency.direction == TrendDirection.INCREASING and series[-1].utilization > 90
    insights.append(
        Insight(
            id="history-utilization-trend",
            type=InsightType.BUDGET_EFFICIENCY,
            title="Budget Utilization Trend",
            description=(
                f"Your budget utilization has been {efficiency.direction.value} by {efficiency.percentage:.1f}%"
            ),
            value=f"{series[-1].utilization:.1f}%",
            trend=_arrow(efficiency),
            action=(
                "Your budget utilization is high and increasing. Consider adjusting your budgets or reducing spending"
                if running_hot
                else "Your budget utilization trend looks healthy"
            ),
            confidence=trend_confidence(count, efficiency.percentage),
        )
    )

    insights.extend(_category_trends(series))
    insights.extend(_seasonal_pattern(series))

    insights.sort(key=lambda insight: insight.confidence or 0.0, reverse=True)
    return sort_by_priority(insights)


def _category_trends(series: Sequence[HistoricalDataPoint]) -> list[Insight]:
    names: dict[str, str] = {}
    for point in series:
        for category in point.category_breakdown:
            names.setdefault(category.category_id, category.category_name)

    insights = []
    for category_id, name in names.items():
        values = []
        for point in series:
            match = next((c for c in point.category_breakdown if c.category_id == category_id), None)
            values.append(match.spent if match else 0.0)

        trend = calculate_trend(values)
        if trend is None or trend.percentage <= CATEGORY_TREND_THRESHOLD:
            continue

        insights.append(
            Insight(
                id=f"history-category-{category_id}",
                type=InsightType.CATEGORY_TREND,
                title=f"{name} Spending Trend",
                description=f"Spending in {name} has been {trend.direction.value} by {trend.percentage:.1f}%",
                value=f"{trend.percentage:.1f}%",
                trend=_arrow(trend),
                action=(
                    f"Consider reviewing your {name} expenses and look for optimization opportunities"
                    if trend.direction == TrendDirection.INCREASING
                    else f"Great job managing your {name} spending"
                ),
                confidence=trend_confidence(len(series), trend.percentage),
            )
        )
        if len(insights) == MAX_CATEGORY_INSIGHTS:
            break

    return insights


def _seasonal_pattern(series: Sequence[HistoricalDataPoint]) -> list[Insight]:
    if len(series) < MIN_POINTS_FOR_SEASONS:
        return []

    by_season: dict[str, list[float]] = {}
    for point in series:
        by_season.setdefault(SEASONS[point.date.month], []).append(point.total_spent)

    highest_season = ""
    highest_average = 0.0
    for season, values in by_season.items():
        average = sum(values) / len(values)
        if average > highest_average:
            highest_season, highest_average = season, average

    if not highest_season:
        return []

    return [
        Insight(
            id="history-seasonal",
            type=InsightType.SEASONAL_PATTERN,
            title="Seasonal Spending Pattern",
            description=f"Your highest spending typically occurs in {highest_season}",
            value=highest_season,
            trend="stable",
            action=(
                f"Plan ahead for {highest_season} by setting aside extra budget "
                "or reducing discretionary spending in other seasons"
            ),
            confidence=trend_confidence(len(series), 50),
        )
    ]
