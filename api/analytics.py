"""Analytics API endpoints for BudgetLens."""

from fastapi import APIRouter, HTTPException

from api.dependencies import ConfigDep
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
from api.services import AnalyticsService

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.post("/summary")
async def get_summary(request: AnalyticsRequest, config: ConfigDep) -> SummaryResponse:
    """Get budget totals, per-category spending and ranked insights."""
    return AnalyticsService.get_summary(config, request)


@router.post("/history")
async def get_history(request: HistoryRequest, config: ConfigDep) -> HistoryResponse:
    """Get the monthly historical series with trend direction."""
    try:
        return AnalyticsService.get_history(config, request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post("/forecast")
async def get_forecast(request: ForecastRequest, config: ConfigDep) -> ForecastResponse:
    """Get a short-horizon spending forecast."""
    try:
        return AnalyticsService.get_forecast(config, request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post("/year-over-year")
async def get_year_over_year(
    request: YearOverYearRequest, config: ConfigDep
) -> YearOverYearResponse:
    """Get yearly tables and growth of the most recent year against the one before."""
    return AnalyticsService.get_year_over_year(config, request)


@router.post("/predictions")
async def get_predictions(request: PredictionsRequest, config: ConfigDep) -> PredictionsResponse:
    """Get next-month budget predictions, saving suggestions and financial-health alerts."""
    return AnalyticsService.get_predictions(config, request)
