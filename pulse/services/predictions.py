"""
Milestone Prediction Service.

Forecasts when a growing counter (stars, forum members, creators, ...) will
cross a target value by fitting a linear trend to its recent history.

Algorithm Overview:
    1. Drop non-positive values ("not yet measuring") and unparseable dates,
       sort by date.
    2. Keep the last LOOKBACK_MONTHS of data; if that leaves fewer than
       MIN_DATA_POINTS, fall back to the last MIN_DATA_POINTS points.
    3. Regress value against days since the first point of the window.
    4. Solve slope * x + intercept = target and convert to a calendar date.

Confidence:
    - high: R² >= 0.9 with >= 8 points (or the milestone is already reached)
    - medium: R² >= 0.7 with >= 5 points
    - low: anything else, including every "no prediction" outcome

Crossings more than MAX_FORECAST_DAYS away, in the future or the past, are
suppressed as too uncertain.

Usage:
    from pulse.services.predictions import predict_milestone, get_next_milestones

    milestones = get_next_milestones(current_value=166_000, kind=MilestoneKind.STARS)
    prediction = predict_milestone(series, milestones[0])
"""

import math
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from pulse.models.enums import Confidence, MilestoneKind
from pulse.models.schemas import MilestonePrediction, TimeSeriesPoint
from pulse.services.dates import days_between, parse_series_date
from pulse.services.statistics import linear_regression


# =============================================================================
# Constants
# =============================================================================

# Months of recent history the trend is fitted on
LOOKBACK_MONTHS: int = 6

# Minimum number of positive points required before any forecast is attempted
MIN_DATA_POINTS: int = 4

# Lookback months are converted to days at 30 days per month
DAYS_PER_LOOKBACK_MONTH: int = 30

# Crossings further than this from today, either way, are not shown
MAX_FORECAST_DAYS: int = 730

# Confidence thresholds: (min R², min points used)
HIGH_CONFIDENCE: Tuple[float, int] = (0.9, 8)
MEDIUM_CONFIDENCE: Tuple[float, int] = (0.7, 5)

# Round-number targets offered as "next milestones"
MILESTONE_LADDER: Tuple[int, ...] = (
    1_000, 2_000, 2_500, 5_000,
    10_000, 15_000, 20_000, 25_000, 50_000, 75_000,
    100_000, 125_000, 150_000, 175_000, 200_000, 250_000,
    500_000, 750_000, 1_000_000,
)

# Number of upcoming milestones returned by get_next_milestones
NEXT_MILESTONE_COUNT: int = 3


# =============================================================================
# Prediction
# =============================================================================


def _rate_confidence(r_squared: float, points_used: int) -> Confidence:
    if r_squared >= HIGH_CONFIDENCE[0] and points_used >= HIGH_CONFIDENCE[1]:
        return Confidence.HIGH
    if r_squared >= MEDIUM_CONFIDENCE[0] and points_used >= MEDIUM_CONFIDENCE[1]:
        return Confidence.MEDIUM
    return Confidence.LOW


def predict_milestone(
    series: Sequence[TimeSeriesPoint],
    milestone: float,
    lookback_months: int = LOOKBACK_MONTHS,
    min_data_points: int = MIN_DATA_POINTS,
    now: Optional[datetime] = None,
) -> MilestonePrediction:
    """
    Predict when a series will reach a milestone value.

    Args:
        series: Historical points in any date form (YYYY-MM-DD, YYYY-MM,
            YYYY-Www); order does not matter.
        milestone: Target value.
        lookback_months: Months of recent history to fit on.
        min_data_points: Minimum positive points needed to attempt a fit.
        now: Reference "today"; defaults to the current time.

    Returns:
        MilestonePrediction. predictedDate/daysUntil are None when the
        milestone is already reached (high confidence), when growth is flat
        or negative (low), when there is too little data (low), or when the
        crossing is more than MAX_FORECAST_DAYS away in either direction
        (low). daysUntil is only reported when positive.

    Example:
        >>> points = [TimeSeriesPoint(date=f"2024-01-0{d}", value=100 + 10 * d) for d in range(1, 6)]
        >>> result = predict_milestone(points, 1000, now=datetime(2024, 1, 5))
        >>> result.growthPerDay
        10.0
    """
    reference = now or datetime.now()

    dated: List[Tuple[datetime, float]] = []
    for point in series:
        if point.value is None or point.value <= 0:
            continue
        moment = parse_series_date(point.date)
        if moment is None:
            continue
        dated.append((moment, float(point.value)))
    dated.sort(key=lambda item: item[0])

    if len(dated) < min_data_points:
        return MilestonePrediction(
            milestone=milestone,
            confidence=Confidence.LOW,
            growthPerDay=0.0,
            currentValue=dated[-1][1] if dated else 0.0,
        )

    # Restrict to the lookback window, keeping at least min_data_points
    lookback_days = lookback_months * DAYS_PER_LOOKBACK_MONTH
    recent = [item for item in dated if days_between(item[0], reference) <= lookback_days]
    window = recent if len(recent) >= min_data_points else dated[-min_data_points:]

    first_moment = window[0][0]
    points = [(days_between(first_moment, moment), value) for moment, value in window]

    fit = linear_regression(points)
    slope = fit.slope if fit else 0.0
    intercept = fit.intercept if fit else 0.0
    r_squared = fit.r_squared if fit else 0.0

    current_value = dated[-1][1]
    growth_per_day = slope

    if current_value >= milestone:
        return MilestonePrediction(
            milestone=milestone,
            confidence=Confidence.HIGH,
            growthPerDay=growth_per_day,
            currentValue=current_value,
        )

    if growth_per_day <= 0:
        return MilestonePrediction(
            milestone=milestone,
            confidence=Confidence.LOW,
            growthPerDay=growth_per_day,
            currentValue=current_value,
        )

    # milestone = slope * x + intercept  ->  x = (milestone - intercept) / slope
    days_from_first = (milestone - intercept) / slope
    days_elapsed = days_between(first_moment, reference)
    days_until = int(math.ceil(days_from_first - days_elapsed))

    # Crossings further out either way than the horizon carry no date.
    if abs(days_until) > MAX_FORECAST_DAYS:
        return MilestonePrediction(
            milestone=milestone,
            confidence=Confidence.LOW,
            growthPerDay=growth_per_day,
            currentValue=current_value,
        )

    predicted = reference + timedelta(days=days_until)

    return MilestonePrediction(
        milestone=milestone,
        predictedDate=predicted.date(),
        daysUntil=days_until if days_until > 0 else None,
        confidence=_rate_confidence(r_squared, len(window)),
        growthPerDay=growth_per_day,
        currentValue=current_value,
    )


def get_next_milestones(
    current_value: float,
    kind: MilestoneKind = MilestoneKind.GENERIC,
) -> List[int]:
    """
    Return up to three ladder milestones strictly above current_value.

    The ladder is shared by every kind of counter today. `kind` is reserved
    for per-kind ladders and does not change the result yet. Empty once the
    value is past the top of the ladder.

    Example:
        >>> get_next_milestones(166_000, MilestoneKind.STARS)
        [175000, 200000, 250000]
    """
    upcoming = [m for m in MILESTONE_LADDER if m > current_value]
    return upcoming[:NEXT_MILESTONE_COUNT]
