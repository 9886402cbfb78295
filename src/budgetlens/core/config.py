"""Configuration settings for BudgetLens."""

import os

from pydantic import BaseModel, Field


def _env_float(name: str, default: str) -> float:
    return float(os.getenv(name, default))


def _env_int(name: str, default: str) -> int:
    return int(os.getenv(name, default))


class ForecastConfig(BaseModel):
    """Spending forecast settings."""

    # Number of trailing months feeding the weighted average
    window: int = Field(default_factory=lambda: _env_int("BUDGETLENS_FORECAST_WINDOW", "6"), ge=2)
    min_confidence: float = Field(
        default_factory=lambda: _env_float("BUDGETLENS_FORECAST_MIN_CONFIDENCE", "20"), ge=0.0, le=100.0
    )
    # Confidence points lost per additional month of horizon
    confidence_decay: float = Field(
        default_factory=lambda: _env_float("BUDGETLENS_FORECAST_CONFIDENCE_DECAY", "5"), ge=0.0
    )
    range_multiplier: float = Field(default=1.5, gt=0.0)
    # Smallest half-width of a forecast range at one month out
    min_margin: float = Field(default_factory=lambda: _env_float("BUDGETLENS_FORECAST_MIN_MARGIN", "1"), gt=0.0)
    default_horizon: int = Field(default_factory=lambda: _env_int("BUDGETLENS_FORECAST_HORIZON", "3"), ge=0)


class HistoryConfig(BaseModel):
    """Historical series settings."""

    default_months: int = Field(default_factory=lambda: _env_int("BUDGETLENS_HISTORY_MONTHS", "12"))


class InsightConfig(BaseModel):
    """Data-quality insight settings."""

    stale_activity_days: int = Field(default_factory=lambda: _env_int("BUDGETLENS_STALE_DAYS", "30"), ge=1)
    min_transactions: int = 10
    min_budgets: int = 3


class AppConfig(BaseModel):
    """Application configuration."""

    forecast: ForecastConfig = Field(default_factory=ForecastConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    insights: InsightConfig = Field(default_factory=InsightConfig)

    currency: str = Field(default_factory=lambda: os.getenv("BUDGETLENS_CURRENCY", "USD"))
    slow_request_seconds: float = Field(default_factory=lambda: _env_float("BUDGETLENS_SLOW_REQUEST", "0.1"))
