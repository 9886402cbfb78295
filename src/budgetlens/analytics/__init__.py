"""Analytics engine components."""

from .aggregation import aggregate, category_totals, transaction_stats
from .forecast import forecast, forecast_methodology
from .historical import build_series, historical_insights, spending_trend, utilization_trend
from .insights import classify, summarize_insights
from .predictive import budget_optimizations, budget_predictions, financial_health_alerts
from .year_over_year import build_yearly_data, compare, compare_years, spending_insights

__all__ = [
    # Aggregation
    "aggregate",
    "category_totals",
    "transaction_stats",
    # Insights
    "classify",
    "summarize_insights",
    # Historical series
    "build_series",
    "historical_insights",
    "spending_trend",
    "utilization_trend",
    # Forecast
    "forecast",
    "forecast_methodology",
    # Predictions
    "budget_optimizations",
    "budget_predictions",
    "financial_health_alerts",
    # Year over year
    "build_yearly_data",
    "compare",
    "compare_years",
    "spending_insights",
]
