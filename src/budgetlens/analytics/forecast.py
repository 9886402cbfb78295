"""Short-horizon spending forecast from a monthly historical series."""

import logging
import math
from collections.abc import Sequence

import numpy as np
from dateutil.relativedelta import relativedelta

from budgetlens.core.config import ForecastConfig
from budgetlens.core.formatting import month_key
from budgetlens.core.models import ForecastPoint, ForecastRange, HistoricalDataPoint

logger = logging.getLogger(__name__)

MIN_HISTORY = 2
# Share of the base estimate always added to the range, so flat histories still get an envelope
BASE_RANGE_SHARE = 0.05


def forecast(
    series: Sequence[HistoricalDataPoint],
    horizon_months: int = 3,
    config: ForecastConfig | None = None,
) -> list[ForecastPoint]:
    """Project spending for the months following the series.

    The point estimate is a linearly weighted moving average of the last
    ``config.window`` months plus the window's mean month-to-month drift per
    step. Confidence starts from the window's coefficient of variation and
    loses ``config.confidence_decay`` points per additional month, so it never
    increases with horizon. The range widens with the square root of the
    horizon step and never collapses below ``config.min_margin``. A history
    with no spending at all forecasts at ``config.min_confidence``.

    Returns an empty list when the series has fewer than two points.
    """
    if horizon_months < 0:
        raise ValueError(f"horizon_months must be non-negative, got {horizon_months}")
    if len(series) < MIN_HISTORY or horizon_months == 0:
        logger.debug("No forecast: %d points, horizon %d", len(series), horizon_months)
        return []

    config = config or ForecastConfig()
    recent = np.array([point.total_spent for point in series[-config.window :]], dtype=float)

    weights = np.arange(1, len(recent) + 1)
    base = float(np.average(recent, weights=weights))
    drift = float(np.mean(np.diff(recent)))
    sigma = float(np.std(recent))
    mean = float(np.mean(recent))

    if mean > 0:
        base_confidence = min(100.0, max(config.min_confidence, 100.0 - sigma / mean * 100))
    else:
        # No spending at all carries no signal
        base_confidence = config.min_confidence
    spread = max(config.min_margin, config.range_multiplier * sigma + BASE_RANGE_SHARE * base)

    last_month = series[-1].date.replace(day=1)
    points = []
    for step in range(1, horizon_months + 1):
        predicted = max(0.0, base + drift * step)
        confidence = max(config.min_confidence, base_confidence - config.confidence_decay * (step - 1))
        margin = spread * math.sqrt(step)

        points.append(
            ForecastPoint(
                month=month_key(last_month + relativedelta(months=step)),
                predicted_spending=predicted,
                confidence=confidence,
                range=ForecastRange(min=max(0.0, predicted - margin), max=predicted + margin),
            )
        )

    return points


def forecast_methodology(series: Sequence[HistoricalDataPoint], config: ForecastConfig | None = None) -> str:
    """Describe how a forecast for this series is produced."""
    if len(series) < MIN_HISTORY:
        return "Insufficient historical data for forecasting"
    config = config or ForecastConfig()
    used = min(len(series), config.window)
    return f"Weighted moving average with linear drift based on {used} months of historical data"
