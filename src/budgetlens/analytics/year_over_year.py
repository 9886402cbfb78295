"""Year-over-year comparison of monthly aggregates."""

import calendar
import logging
from collections.abc import Sequence

from budgetlens.core.formatting import MONTH_NAMES, growth_percentage, safe_percentage
from budgetlens.core.models import (
    CategoryData,
    MonthlyComparison,
    MonthlyData,
    PeriodFigures,
    PeriodGrowth,
    QuarterlyComparison,
    QuarterlyData,
    TopCategory,
    Transaction,
    TransactionType,
    YearlyComparisonData,
    YearOverYearMetrics,
)

logger = logging.getLogger(__name__)

TOP_CATEGORY_LIMIT = 10
UNCATEGORIZED = "Uncategorized"


def _quarter_of(month_number: int) -> int:
    return (month_number - 1) // 3 + 1


class _CategoryTally:
    def __init__(self) -> None:
        self.amount = 0.0
        self.count = 0

    def add(self, amount: float) -> None:
        self.amount += amount
        self.count += 1

    def to_data(self, total_spending: float) -> CategoryData:
        return CategoryData(
            amount=self.amount,
            percentage=safe_percentage(self.amount, total_spending),
            transaction_count=self.count,
            average_transaction_amount=self.amount / self.count if self.count else 0.0,
        )


def build_yearly_data(transactions: Sequence[Transaction], year: int) -> YearlyComparisonData:
    """Aggregate one calendar year of transactions into twelve monthly rows.

    Unlike the historical series this table is dense: every calendar month
    is present, zero-filled when it had no activity. Undated transactions
    are skipped and category figures cover expenses only.
    """
    months = {
        number: {"spending": 0.0, "income": 0.0, "count": 0, "categories": {}} for number in range(1, 13)
    }
    yearly_categories: dict[str, _CategoryTally] = {}
    transaction_count = 0

    for transaction in transactions:
        if transaction.date is None or transaction.date.year != year:
            continue

        month = months[transaction.date.month]
        category = transaction.category or UNCATEGORIZED
        if transaction.type == TransactionType.EXPENSE:
            month["spending"] += transaction.amount
            month["categories"].setdefault(category, _CategoryTally()).add(transaction.amount)
            yearly_categories.setdefault(category, _CategoryTally()).add(transaction.amount)
        else:
            month["income"] += transaction.amount
        month["count"] += 1
        transaction_count += 1

    total_spending = sum(m["spending"] for m in months.values())
    total_income = sum(m["income"] for m in months.values())

    monthly_data = [
        MonthlyData(
            month=MONTH_NAMES[number - 1],
            month_number=number,
            year=year,
            total_spending=m["spending"],
            total_income=m["income"],
            net_income=m["income"] - m["spending"],
            transaction_count=m["count"],
            average_daily_spending=m["spending"] / calendar.monthrange(year, number)[1],
            category_breakdown={
                name: tally.to_data(m["spending"]) for name, tally in m["categories"].items()
            },
        )
        for number, m in months.items()
    ]

    category_breakdown = {name: tally.to_data(total_spending) for name, tally in yearly_categories.items()}
    top_categories = sorted(
        (
            TopCategory(
                name=name,
                amount=data.amount,
                percentage=data.percentage,
                transaction_count=data.transaction_count,
                average_amount=data.average_transaction_amount,
            )
            for name, data in category_breakdown.items()
        ),
        key=lambda category: category.amount,
        reverse=True,
    )[:TOP_CATEGORY_LIMIT]

    return YearlyComparisonData(
        year=year,
        monthly_data=monthly_data,
        total_spending=total_spending,
        total_income=total_income,
        net_income=total_income - total_spending,
        average_monthly_spending=total_spending / 12,
        average_monthly_income=total_income / 12,
        transaction_count=transaction_count,
        category_breakdown=category_breakdown,
        quarterly_data=quarterly_data(monthly_data, year),
        top_categories=top_categories,
    )


def quarterly_data(monthly_data: Sequence[MonthlyData], year: int) -> list[QuarterlyData]:
    """Roll monthly rows up into calendar quarters that have at least one month."""
    quarters = []
    for quarter in range(1, 5):
        rows = [m for m in monthly_data if _quarter_of(m.month_number) == quarter]
        if not rows:
            continue
        spending = sum(m.total_spending for m in rows)
        income = sum(m.total_income for m in rows)
        quarters.append(
            QuarterlyData(
                quarter=quarter,
                year=year,
                period=f"Q{quarter} {year}",
                total_spending=spending,
                total_income=income,
                net_income=income - spending,
                transaction_count=sum(m.transaction_count for m in rows),
                months_included=[m.month for m in rows],
            )
        )
    return quarters


def _figures(rows: Sequence[MonthlyData]) -> PeriodFigures:
    return PeriodFigures(
        spending=sum(m.total_spending for m in rows),
        income=sum(m.total_income for m in rows),
        net_income=sum(m.net_income for m in rows),
        transactions=sum(m.transaction_count for m in rows),
    )


def _growth(current: PeriodFigures, previous: PeriodFigures) -> PeriodGrowth:
    return PeriodGrowth(
        spending_growth=growth_percentage(current.spending, previous.spending),
        income_growth=growth_percentage(current.income, previous.income),
        net_income_growth=growth_percentage(current.net_income, previous.net_income),
        transaction_growth=growth_percentage(current.transactions, previous.transactions),
    )


def _average_transaction_size(data: YearlyComparisonData) -> float:
    return data.total_spending / data.transaction_count if data.transaction_count else 0.0


def compare(current: YearlyComparisonData, previous: YearlyComparisonData) -> YearOverYearMetrics:
    """Growth of ``current`` against ``previous``, overall and month by month.

    Every growth figure uses the previous year as baseline and is 0 when that
    baseline is 0. ``savings_rate_change`` is a percentage-point difference.
    """
    categories = list(dict.fromkeys([*current.category_breakdown, *previous.category_breakdown]))
    category_growth = {
        name: growth_percentage(
            current.category_breakdown[name].amount if name in current.category_breakdown else 0.0,
            previous.category_breakdown[name].amount if name in previous.category_breakdown else 0.0,
        )
        for name in categories
    }

    monthly_comparison = []
    for number, name in enumerate(MONTH_NAMES, start=1):
        current_figures = _figures([m for m in current.monthly_data if m.month_number == number])
        previous_figures = _figures([m for m in previous.monthly_data if m.month_number == number])
        monthly_comparison.append(
            MonthlyComparison(
                month=name,
                month_number=number,
                current_year=current_figures,
                previous_year=previous_figures,
                growth=_growth(current_figures, previous_figures),
            )
        )

    quarterly_comparison = []
    for quarter in range(1, 5):
        current_figures = _figures([m for m in current.monthly_data if _quarter_of(m.month_number) == quarter])
        previous_figures = _figures([m for m in previous.monthly_data if _quarter_of(m.month_number) == quarter])
        quarterly_comparison.append(
            QuarterlyComparison(
                quarter=quarter,
                current_year=current_figures,
                previous_year=previous_figures,
                growth=_growth(current_figures, previous_figures),
            )
        )

    return YearOverYearMetrics(
        current_year=current.year,
        previous_year=previous.year,
        spending_growth=growth_percentage(current.total_spending, previous.total_spending),
        income_growth=growth_percentage(current.total_income, previous.total_income),
        net_income_growth=growth_percentage(current.net_income, previous.net_income),
        transaction_growth=growth_percentage(current.transaction_count, previous.transaction_count),
        average_transaction_size_growth=growth_percentage(
            _average_transaction_size(current), _average_transaction_size(previous)
        ),
        savings_rate_change=current.savings_rate - previous.savings_rate,
        category_growth=category_growth,
        monthly_comparison=monthly_comparison,
        quarterly_comparison=quarterly_comparison,
    )


def compare_years(yearly_data: Sequence[YearlyComparisonData]) -> YearOverYearMetrics | None:
    """Compare the two most recent years, or return None with fewer than two."""
    if len(yearly_data) < 2:
        logger.debug("Year-over-year comparison needs two years, got %d", len(yearly_data))
        return None
    current, previous = sorted(yearly_data, key=lambda data: data.year, reverse=True)[:2]
    return compare(current, previous)


def spending_insights(current: YearlyComparisonData, previous: YearlyComparisonData) -> dict[str, list[str]]:
    """Plain-language trends, recommendations and alerts from a year-over-year comparison."""
    metrics = compare(current, previous)
    trends: list[str] = []
    recommendations: list[str] = []
    alerts: list[str] = []

    if metrics.spending_growth > 20:
        alerts.append(f"Spending increased by {metrics.spending_growth:.1f}% compared to last year")
        recommendations.append("Consider reviewing your budget and identifying areas to reduce expenses")
    elif metrics.spending_growth > 5:
        trends.append(f"Moderate spending increase of {metrics.spending_growth:.1f}% year-over-year")
    elif metrics.spending_growth < -5:
        trends.append(
            f"Great job! Spending decreased by {abs(metrics.spending_growth):.1f}% compared to last year"
        )

    if metrics.income_growth > 10:
        trends.append(f"Income increased by {metrics.income_growth:.1f}% - excellent progress!")
    elif metrics.income_growth < -10:
        alerts.append(f"Income decreased by {abs(metrics.income_growth):.1f}% compared to last year")
        recommendations.append("Consider exploring additional income sources or optimizing existing ones")

    for category, growth in metrics.category_growth.items():
        if growth > 50:
            alerts.append(f"{category} spending increased significantly by {growth:.1f}%")

    return {"trends": trends, "recommendations": recommendations, "alerts": alerts}
