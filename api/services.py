"""Service layer wiring API requests to the analytics engine."""

from datetime import date

from api.models import (
    AnalyticsRequest,
    ForecastRequest,
    ForecastResponse,
    HistoryRequest,
    HistoryResponse,
    PredictionsRequest,
    PredictionsResponse,
    SummaryResponse,
    YearOverYearRequest,
    YearOverYearResponse,
)
from budgetlens.analytics import (
    aggregate,
    budget_optimizations,
    budget_predictions,
    build_series,
    build_yearly_data,
    classify,
    compare_years,
    financial_health_alerts,
    forecast,
    forecast_methodology,
    historical_insights,
    spending_insights,
    spending_trend,
    summarize_insights,
    transaction_stats,
    utilization_trend,
)
from budgetlens.analytics.insights import sort_by_priority
from budgetlens.core.config import AppConfig


class AnalyticsService:
    """Service for analytics operations."""

    @staticmethod
    def get_summary(config: AppConfig, request: AnalyticsRequest) -> SummaryResponse:
        """Budget aggregates with classified insights."""
        aggregates = aggregate(request.budgets, request.transactions)
        stats = transaction_stats(request.transactions)
        insights = classify(aggregates, stats, config.insights, today=request.today, currency=config.currency)

        return SummaryResponse(
            aggregates=aggregates,
            stats=stats,
            insights=insights,
            insight_summary=summarize_insights(insights),
        )

    @staticmethod
    def get_history(config: AppConfig, request: HistoryRequest) -> HistoryResponse:
        """Sparse monthly series with trend direction and historical insights."""
        months = request.months or config.history.default_months
        series = build_series(request.transactions, request.budgets, months, today=request.today)

        return HistoryResponse(
            months=months,
            series=series,
            spending_trend=spending_trend(series),
            utilization_trend=utilization_trend(series),
            insights=historical_insights(series),
        )

    @staticmethod
    def get_forecast(config: AppConfig, request: ForecastRequest) -> ForecastResponse:
        """Spending forecast built on the historical series."""
        horizon = config.forecast.default_horizon if request.horizon_months is None else request.horizon_months
        months = request.months or config.history.default_months
        series = build_series(request.transactions, request.budgets, months, today=request.today)

        return ForecastResponse(
            forecast=forecast(series, horizon, config.forecast),
            methodology=forecast_methodology(series, config.forecast),
        )

    @staticmethod
    def get_year_over_year(config: AppConfig, request: YearOverYearRequest) -> YearOverYearResponse:
        """Yearly tables for the requested years and growth of the latest two."""
        years = request.years
        if not years:
            current_year = (request.today or date.today()).year
            years = [current_year, current_year - 1, current_year - 2]

        yearly = sorted(
            (build_yearly_data(request.transactions, year) for year in set(years)),
            key=lambda data: data.year,
            reverse=True,
        )
        metrics = compare_years(yearly)

        return YearOverYearResponse(
            years=yearly,
            metrics=metrics,
            insights=spending_insights(yearly[0], yearly[1]) if metrics else {},
        )

    @staticmethod
    def get_predictions(config: AppConfig, request: PredictionsRequest) -> PredictionsResponse:
        """Next-month budget predictions plus saving suggestions and health alerts for the current year."""
        today = request.today or date.today()
        current = build_yearly_data(request.transactions, today.year)
        previous = build_yearly_data(request.transactions, today.year - 1)
        months = today.month

        insights = financial_health_alerts(current, months, config.currency)
        insights += budget_optimizations(current, months, config.currency)

        return PredictionsResponse(
            year=today.year,
            months_covered=months,
            budget_predictions=budget_predictions(request.budgets, current, previous, months),
            insights=sort_by_priority(insights),
        )
