"""Core data models for BudgetLens."""

import datetime
import logging
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

logger = logging.getLogger(__name__)


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class BudgetPeriod(str, Enum):
    """Period a budget amount applies to."""

    MONTHLY = "monthly"
    WEEKLY = "weekly"
    YEARLY = "yearly"


WEEKS_PER_MONTH = 4.33


class Priority(str, Enum):
    """Display priority of an insight."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class InsightType(str, Enum):
    """Kinds of insight the engine can emit."""

    BUDGET_WARNING = "budget_warning"
    WARNING = "warning"
    SPENDING_PATTERN = "spending_pattern"
    TREND = "trend"
    SUCCESS = "success"
    INFO = "info"
    EFFICIENCY = "efficiency"
    DATA_QUALITY = "data_quality"
    NO_DATA = "no-data"
    BUDGET_EFFICIENCY = "budget_efficiency"
    CATEGORY_TREND = "category_trend"
    SEASONAL_PATTERN = "seasonal_pattern"
    SAVING_SUGGESTION = "saving_suggestion"


# Priority is derived from type only. Anything not listed is low.
PRIORITY_BY_TYPE: dict[InsightType, Priority] = {
    InsightType.BUDGET_WARNING: Priority.HIGH,
    InsightType.WARNING: Priority.HIGH,
    InsightType.SPENDING_PATTERN: Priority.MEDIUM,
    InsightType.TREND: Priority.MEDIUM,
}


def priority_for(insight_type: InsightType) -> Priority:
    """Return the fixed priority for an insight type."""
    return PRIORITY_BY_TYPE.get(insight_type, Priority.LOW)


class TrendDirection(str, Enum):
    """Qualitative direction of a series."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class Transaction(BaseModel):
    """A transaction fetched from the external store."""

    model_config = ConfigDict(frozen=True)

    id: str
    amount: float = Field(ge=0.0)
    type: TransactionType
    category: str
    # Module-qualified: the field name shadows the type once a default is assigned
    date: datetime.date | None = None
    description: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def coerce_bad_date(cls, v: Any) -> Any:
        """Turn missing or unparseable dates into None."""
        if isinstance(v, datetime.datetime):
            return v.date()
        if v is None or isinstance(v, date):
            return v
        if isinstance(v, str):
            text = v.strip()[:10]
            try:
                return date.fromisoformat(text)
            except ValueError:
                logger.debug("Dropping unparseable transaction date %r", v)
                return None
        logger.debug("Dropping transaction date of type %s", type(v).__name__)
        return None

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


class Budget(BaseModel):
    """A category budget fetched from the external store."""

    model_config = ConfigDict(frozen=True)

    id: str
    category_id: str
    category_name: str
    amount: float = Field(ge=0.0)
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: date | None = None
    end_date: date | None = None

    @property
    def monthly_amount(self) -> float:
        """Budget amount normalised to one calendar month."""
        if self.period == BudgetPeriod.WEEKLY:
            return self.amount * WEEKS_PER_MONTH
        if self.period == BudgetPeriod.YEARLY:
            return self.amount / 12
        return self.amount

    def is_active_in(self, month_start: date, month_end: date) -> bool:
        """Check whether the budget overlaps the given calendar month."""
        if self.start_date and self.start_date > month_end:
            return False
        if self.end_date and self.end_date < month_start:
            return False
        return True

    def matches_category(self, category: str) -> bool:
        """Match a transaction category by id or, case-insensitively, by name."""
        category = category.strip()
        return category == self.category_id or category.lower() == self.category_name.strip().lower()

    def matches(self, transaction: Transaction) -> bool:
        return self.matches_category(transaction.category)


class CategorySpending(BaseModel):
    """Spending against a single budget."""

    model_config = ConfigDict(frozen=True)

    category_id: str
    category_name: str
    budget: float
    spent: float
    percentage: float


class BudgetShare(BaseModel):
    """Share of the total budget held by one budget line."""

    model_config = ConfigDict(frozen=True)

    category: str
    amount: float
    percentage: float


class SpendingAggregates(BaseModel):
    """Portfolio totals and per-category spending."""

    model_config = ConfigDict(frozen=True)

    total_budget: float = 0.0
    total_spent: float = 0.0
    total_remaining: float = 0.0
    overall_utilization: float = 0.0
    category_spending: list[CategorySpending] = Field(default_factory=list)
    budget_distribution: list[BudgetShare] = Field(default_factory=list)
    unbudgeted_spent: float = 0.0


class TransactionStats(BaseModel):
    """Raw statistics over a transaction list."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    expense_count: int = 0
    average_amount: float = 0.0
    last_activity: date | None = None


class Insight(BaseModel):
    """A classified, human-readable observation."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: InsightType
    title: str
    description: str
    value: str | None = None
    trend: str | None = Field(None, pattern="^(up|down|stable)$")
    action: str | None = None
    confidence: float | None = Field(None, ge=0.0, le=100.0)
    # Expected effect of acting on the insight, independent of display priority
    impact: Priority | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def priority(self) -> Priority:
        return priority_for(self.type)


class BudgetPrediction(BaseModel):
    """Next-month spending projection for one budget line."""

    model_config = ConfigDict(frozen=True)

    category_id: str
    category: str
    current_spending: float
    predicted_spending: float
    budget_limit: float
    over_budget_risk: float = Field(ge=0.0, le=100.0)
    recommended_budget: float


class TrendAnalysis(BaseModel):
    """Direction and magnitude of change between two windows."""

    model_config = ConfigDict(frozen=True)

    direction: TrendDirection
    percentage: float
    description: str


class CategoryBreakdown(BaseModel):
    """Per-category figures inside one historical month."""

    model_config = ConfigDict(frozen=True)

    category_id: str
    category_name: str
    budgeted: float
    spent: float
    percentage: float


class HistoricalDataPoint(BaseModel):
    """Aggregate budget and spending for one calendar month."""

    model_config = ConfigDict(frozen=True)

    period: str
    date: date
    total_budget: float
    total_spent: float
    utilization: float
    category_breakdown: list[CategoryBreakdown] = Field(default_factory=list)


class ForecastRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: float
    max: float


class ForecastPoint(BaseModel):
    """Projected spending for one future month."""

    model_config = ConfigDict(frozen=True)

    month: str
    predicted_spending: float
    confidence: float = Field(ge=0.0, le=100.0)
    range: ForecastRange


class CategoryData(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: float = 0.0
    percentage: float = 0.0
    transaction_count: int = 0
    average_transaction_amount: float = 0.0


class MonthlyData(BaseModel):
    """Totals for one calendar month of a year."""

    model_config = ConfigDict(frozen=True)

    month: str
    month_number: int = Field(ge=1, le=12)
    year: int
    total_spending: float = 0.0
    total_income: float = 0.0
    net_income: float = 0.0
    transaction_count: int = 0
    average_daily_spending: float = 0.0
    category_breakdown: dict[str, CategoryData] = Field(default_factory=dict)


class QuarterlyData(BaseModel):
    model_config = ConfigDict(frozen=True)

    quarter: int = Field(ge=1, le=4)
    year: int
    period: str
    total_spending: float = 0.0
    total_income: float = 0.0
    net_income: float = 0.0
    transaction_count: int = 0
    months_included: list[str] = Field(default_factory=list)


class TopCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    amount: float
    percentage: float
    transaction_count: int
    average_amount: float


class YearlyComparisonData(BaseModel):
    """One year of monthly aggregates."""

    model_config = ConfigDict(frozen=True)

    year: int
    monthly_data: list[MonthlyData] = Field(default_factory=list)
    total_spending: float = 0.0
    total_income: float = 0.0
    net_income: float = 0.0
    average_monthly_spending: float = 0.0
    average_monthly_income: float = 0.0
    transaction_count: int = 0
    category_breakdown: dict[str, CategoryData] = Field(default_factory=dict)
    quarterly_data: list[QuarterlyData] = Field(default_factory=list)
    top_categories: list[TopCategory] = Field(default_factory=list)

    @property
    def savings_rate(self) -> float:
        """Share of income not spent, as a percentage."""
        if self.total_income <= 0:
            return 0.0
        return (self.total_income - self.total_spending) * 100 / self.total_income


class PeriodFigures(BaseModel):
    model_config = ConfigDict(frozen=True)

    spending: float = 0.0
    income: float = 0.0
    net_income: float = 0.0
    transactions: int = 0


class PeriodGrowth(BaseModel):
    model_config = ConfigDict(frozen=True)

    spending_growth: float = 0.0
    income_growth: float = 0.0
    net_income_growth: float = 0.0
    transaction_growth: float = 0.0


class MonthlyComparison(BaseModel):
    """Same calendar month in two consecutive years."""

    model_config = ConfigDict(frozen=True)

    month: str
    month_number: int
    current_year: PeriodFigures
    previous_year: PeriodFigures
    growth: PeriodGrowth


class QuarterlyComparison(BaseModel):
    model_config = ConfigDict(frozen=True)

    quarter: int
    current_year: PeriodFigures
    previous_year: PeriodFigures
    growth: PeriodGrowth


class YearOverYearMetrics(BaseModel):
    """Growth figures of one year against the previous one."""

    model_config = ConfigDict(frozen=True)

    current_year: int
    previous_year: int
    spending_growth: float
    income_growth: float
    net_income_growth: float
    transaction_growth: float
    average_transaction_size_growth: float
    savings_rate_change: float
    category_growth: dict[str, float] = Field(default_factory=dict)
    monthly_comparison: list[MonthlyComparison] = Field(default_factory=list)
    quarterly_comparison: list[QuarterlyComparison] = Field(default_factory=list)
