"""Threshold-based insight classification.

The classifier turns the output of :func:`budgetlens.analytics.aggregation.aggregate`
plus raw transaction statistics into a priority-ordered list of insights.
Budget-health and category thresholds are fixed:

- overall utilization above 90% is a budget alert, above 75% a budget watch,
  above 0% on track, and exactly 0% with budgets present means no spending;
- categories above 100% are over budget, in (80, 100] approaching their
  limit, and in (0, 50) under-utilized.
"""

import logging
from collections import Counter
from datetime import date, timedelta
from typing import Any

from budgetlens.core.config import InsightConfig
from budgetlens.core.formatting import format_currency, format_percentage, join_names
from budgetlens.core.models import (
    PRIORITY_RANK,
    CategorySpending,
    Insight,
    InsightType,
    Priority,
    SpendingAggregates,
    TransactionStats,
)

logger = logging.getLogger(__name__)

ALERT_UTILIZATION = 90.0
WATCH_UTILIZATION = 75.0
OVER_BUDGET_PERCENTAGE = 100.0
NEAR_LIMIT_PERCENTAGE = 80.0
UNDER_UTILIZED_PERCENTAGE = 50.0

NO_DATA_INSIGHT = Insight(
    id="no-data",
    type=InsightType.NO_DATA,
    title="No Budget Data",
    description="Create budgets and record transactions to see insights",
    action="Add your first budget to get started",
)


def sort_by_priority(insights: list[Insight]) -> list[Insight]:
    """Stable sort: high before medium before low, insertion order within a priority."""
    return sorted(insights, key=lambda insight: PRIORITY_RANK[insight.priority])


def classify(
    aggregates: SpendingAggregates,
    stats: TransactionStats,
    config: InsightConfig | None = None,
    today: date | None = None,
    currency: str = "USD",
) -> list[Insight]:
    """Classify aggregates and raw statistics into ranked insights."""
    if not aggregates.category_spending and stats.count == 0:
        return [NO_DATA_INSIGHT]

    config = config or InsightConfig()
    today = today or date.today()

    insights: list[Insight] = []
    if aggregates.category_spending:
        insights.append(_budget_health(aggregates))
        insights.extend(_category_alerts(aggregates.category_spending))
        insights.extend(_spending_highlights(aggregates.category_spending, currency))
    insights.extend(_data_quality(aggregates, stats, config, today))

    logger.debug("Classified %d insights from %d budget lines", len(insights), len(aggregates.category_spending))
    return sort_by_priority(insights)


def _budget_health(aggregates: SpendingAggregates) -> Insight:
    utilization = aggregates.overall_utilization
    value = format_percentage(utilization)

    if utilization > ALERT_UTILIZATION:
        return Insight(
            id="budget-health-danger",
            type=InsightType.BUDGET_WARNING,
            title="Budget Alert",
            description="You've used over 90% of your total budget",
            value=value,
            trend="up",
            action="Consider reducing spending or adjusting budgets",
        )
    if utilization > WATCH_UTILIZATION:
        return Insight(
            id="budget-health-warning",
            type=InsightType.SPENDING_PATTERN,
            title="Budget Watch",
            description="You're approaching your budget limits",
            value=value,
            trend="up",
            action="Monitor spending closely",
        )
    if utilization > 0:
        return Insight(
            id="budget-health-good",
            type=InsightType.SUCCESS,
            title="Budget on Track",
            description="Your spending is well within budget limits",
            value=value,
            trend="stable",
            action="Keep up the good work!",
        )
    return Insight(
        id="budget-health-empty",
        type=InsightType.INFO,
        title="No Spending Recorded",
        description="None of your budgeted categories have spending yet",
        value=value,
        trend="stable",
        action="Record expenses to start tracking your budgets",
    )


def _category_alerts(categories: list[CategorySpending]) -> list[Insight]:
    insights = []

    over = [c for c in categories if c.percentage > OVER_BUDGET_PERCENTAGE]
    if over:
        insights.append(
            Insight(
                id="over-budget",
                type=InsightType.WARNING,
                title="Over Budget Categories",
                description=f"{len(over)} {_plural(len(over))} over budget",
                value=join_names([c.category_name for c in over]),
                trend="up",
                action="Review and adjust these category budgets",
            )
        )

    near = [c for c in categories if NEAR_LIMIT_PERCENTAGE < c.percentage <= OVER_BUDGET_PERCENTAGE]
    if near:
        insights.append(
            Insight(
                id="near-limit",
                type=InsightType.SPENDING_PATTERN,
                title="Approaching Limits",
                description=f"{len(near)} {_plural(len(near))} near their budget limits",
                value=join_names([c.category_name for c in near]),
                trend="up",
                action="Monitor these categories closely",
            )
        )

    under = [c for c in categories if 0 < c.percentage < UNDER_UTILIZED_PERCENTAGE]
    if under:
        insights.append(
            Insight(
                id="under-utilized",
                type=InsightType.INFO,
                title="Under-Utilized Budgets",
                description=f"{len(under)} {_plural(len(under))} using less than 50% of their budget",
                value=join_names([c.category_name for c in under]),
                trend="down",
                action="Consider reallocating funds to other categories",
            )
        )

    return insights


def _spending_highlights(categories: list[CategorySpending], currency: str) -> list[Insight]:
    insights = []

    # max() keeps the first of equal elements
    top = max(categories, key=lambda c: c.spent)
    if top.spent > 0:
        insights.append(
            Insight(
                id="highest-spending",
                type=InsightType.TREND,
                title="Top Spending Category",
                description=f"{top.category_name} is your highest expense",
                value=format_currency(top.spent, currency),
                trend="up",
                action="Review if this aligns with your priorities",
            )
        )

    active = [c for c in categories if c.percentage > 0]
    if active:
        efficient = min(active, key=lambda c: c.percentage)
        insights.append(
            Insight(
                id="most-efficient",
                type=InsightType.EFFICIENCY,
                title="Most Efficient Budget",
                description=f"{efficient.category_name} has the lowest budget utilization",
                value=format_percentage(efficient.percentage),
                trend="down",
                action="Use this category as a model for others",
            )
        )

    return insights


def _data_quality(
    aggregates: SpendingAggregates, stats: TransactionStats, config: InsightConfig, today: date
) -> list[Insight]:
    insights = []

    if 0 < stats.count < config.min_transactions:
        insights.append(
            Insight(
                id="limited-history",
                type=InsightType.DATA_QUALITY,
                title="Limited Transaction History",
                description=f"Only {stats.count} transactions recorded so far",
                value=str(stats.count),
                action="Track expenses for at least a month for meaningful trends",
            )
        )

    if stats.last_activity and stats.last_activity < today - timedelta(days=config.stale_activity_days):
        days = (today - stats.last_activity).days
        insights.append(
            Insight(
                id="stale-activity",
                type=InsightType.DATA_QUALITY,
                title="No Recent Activity",
                description=f"Your last transaction was {days} days ago",
                value=stats.last_activity.isoformat(),
                action="Import or record recent transactions to keep insights current",
            )
        )

    if 0 < len(aggregates.category_spending) < config.min_budgets:
        insights.append(
            Insight(
                id="few-budgets",
                type=InsightType.DATA_QUALITY,
                title="Add More Budgets",
                description="Budgets for more categories give better insights",
                value=str(len(aggregates.category_spending)),
                action="Create budgets for your main spending categories",
            )
        )

    return insights


def _plural(count: int) -> str:
    return "category is" if count == 1 else "categories are"


def summarize_insights(insights: list[Insight]) -> dict[str, Any]:
    """Counts by priority and by type family."""
    by_priority = Counter(insight.priority for insight in insights)
    by_type = Counter(insight.type for insight in insights)
    confidences = [insight.confidence for insight in insights if insight.confidence is not None]

    return {
        "total": len(insights),
        "high": by_priority[Priority.HIGH],
        "medium": by_priority[Priority.MEDIUM],
        "low": by_priority[Priority.LOW],
        "warnings": by_type[InsightType.WARNING] + by_type[InsightType.BUDGET_WARNING],
        "successes": by_type[InsightType.SUCCESS],
        "suggestions": by_type[InsightType.SAVING_SUGGESTION],
        "trends": by_type[InsightType.TREND],
        "avg_confidence": sum(confidences) / len(confidences) if confidences else 0.0,
    }
