"""Pydantic models for API requests and responses."""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from budgetlens.core.models import (
    Budget,
    BudgetPrediction,
    ForecastPoint,
    HistoricalDataPoint,
    Insight,
    SpendingAggregates,
    Transaction,
    TransactionStats,
    TrendAnalysis,
    YearlyComparisonData,
    YearOverYearMetrics,
)


class AnalyticsRequest(BaseModel):
    """Request model carrying one user's transactions and budgets."""

    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    today: date | None = None


class HistoryRequest(AnalyticsRequest):
    """Request model for the historical series."""

    months: int | None = None


class ForecastRequest(HistoryRequest):
    """Request model for spending forecasts."""

    horizon_months: int | None = Field(None, ge=0, le=24)


class YearOverYearRequest(BaseModel):
    """Request model for year-over-year comparison."""

    transactions: list[Transaction] = Field(default_factory=list)
    years: list[int] | None = None
    today: date | None = None


class PredictionsRequest(AnalyticsRequest):
    """Request model for budget predictions and financial-health alerts."""


class SummaryResponse(BaseModel):
    """Response model for the budget summary."""

    aggregates: SpendingAggregates
    stats: TransactionStats
    insights: list[Insight]
    insight_summary: dict[str, Any]


class HistoryResponse(BaseModel):
    """Response model for the historical series."""

    months: int
    series: list[HistoricalDataPoint]
    spending_trend: TrendAnalysis | None = None
    utilization_trend: TrendAnalysis | None = None
    insights: list[Insight]


class ForecastResponse(BaseModel):
    """Response model for spending forecasts."""

    forecast: list[ForecastPoint]
    methodology: str


class PredictionsResponse(BaseModel):
    """Response model for budget predictions."""

    year: int
    months_covered: int
    budget_predictions: list[BudgetPrediction]
    insights: list[Insight]


class YearOverYearResponse(BaseModel):
    """Response model for year-over-year comparison."""

    years: list[YearlyComparisonData]
    metrics: YearOverYearMetrics | None = None
    insights: dict[str, list[str]] = Field(default_factory=dict)
