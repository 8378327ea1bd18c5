"""
Tests for milestone prediction.

Every test pins `now` so forecasts are deterministic.
"""

from datetime import date, datetime, timedelta
from typing import List

import pytest

from pulse.models.enums import Confidence, MilestoneKind
from pulse.models.schemas import TimeSeriesPoint
from pulse.services.predictions import (
    MAX_FORECAST_DAYS,
    MILESTONE_LADDER,
    get_next_milestones,
    predict_milestone,
)


NOW = datetime(2024, 1, 10)


def daily_series(start: date, values: List[float]) -> List[TimeSeriesPoint]:
    """One point per day starting at `start`."""
    return [
        TimeSeriesPoint(date=(start + timedelta(days=i)).isoformat(), value=v)
        for i, v in enumerate(values)
    ]


class TestPredictMilestone:
    """predict_milestone outcomes and confidence levels."""

    def test_linear_growth_high_confidence(self) -> None:
        # 1000, 1100, ... on Jan 1..10; crossing 2550 at x=15.5 -> 6.5 days after Jan 10
        series = daily_series(date(2024, 1, 1), [1000 + 100 * i for i in range(10)])
        result = predict_milestone(series, 2550, now=NOW)

        assert result.confidence == Confidence.HIGH
        assert result.daysUntil == 7
        assert result.predictedDate == date(2024, 1, 17)
        assert result.growthPerDay == pytest.approx(100.0)
        assert result.currentValue == 1900

    def test_medium_confidence_with_few_points(self) -> None:
        series = daily_series(date(2024, 1, 5), [500 + 10 * i for i in range(6)])
        result = predict_milestone(series, 1000.5, now=NOW)

        assert result.confidence == Confidence.MEDIUM
        assert result.predictedDate is not None

    def test_low_confidence_with_minimum_points(self) -> None:
        series = daily_series(date(2024, 1, 7), [500, 510, 520, 530])
        result = predict_milestone(series, 1000.5, now=NOW)

        assert result.confidence == Confidence.LOW
        assert result.predictedDate is not None

    def test_milestone_already_reached(self) -> None:
        series = daily_series(date(2024, 1, 1), [900, 950, 1000, 1050, 1100])
        result = predict_milestone(series, 1000, now=NOW)

        assert result.predictedDate is None
        assert result.daysUntil is None
        assert result.confidence == Confidence.HIGH
        assert result.currentValue == 1100

    def test_declining_series_is_unreachable(self) -> None:
        series = daily_series(date(2024, 1, 1), [1000, 950, 900, 850, 800, 750])
        result = predict_milestone(series, 2000, now=NOW)

        assert result.predictedDate is None
        assert result.confidence == Confidence.LOW
        assert result.growthPerDay < 0

    def test_flat_series_is_unreachable(self) -> None:
        series = daily_series(date(2024, 1, 1), [500] * 6)
        result = predict_milestone(series, 1000, now=NOW)

        assert result.predictedDate is None
        assert result.confidence == Confidence.LOW
        assert result.growthPerDay == pytest.approx(0.0)

    def test_too_few_points(self) -> None:
        series = daily_series(date(2024, 1, 1), [100, 200, 300])
        result = predict_milestone(series, 1000, now=NOW)

        assert result.predictedDate is None
        assert result.confidence == Confidence.LOW
        assert result.currentValue == 300

    def test_empty_series(self) -> None:
        result = predict_milestone([], 1000, now=NOW)
        assert result.currentValue == 0
        assert result.predictedDate is None

    def test_non_positive_values_are_ignored(self) -> None:
        # Zeros mean "not yet measured"; only three real points remain
        series = daily_series(date(2024, 1, 1), [0, 0, 0, 100, 200, 300])
        result = predict_milestone(series, 1000, now=NOW)

        assert result.predictedDate is None
        assert result.confidence == Confidence.LOW

    def test_unparseable_dates_are_ignored(self) -> None:
        series = daily_series(date(2024, 1, 1), [100, 200, 300]) + [
            TimeSeriesPoint(date='not-a-date', value=400),
        ]
        result = predict_milestone(series, 1000, now=NOW)
        assert result.currentValue == 300

    def test_unsorted_input_is_sorted(self) -> None:
        series = daily_series(date(2024, 1, 1), [1000 + 100 * i for i in range(10)])
        result = predict_milestone(list(reversed(series)), 2550, now=NOW)
        assert result.predictedDate == date(2024, 1, 17)

    def test_forecast_beyond_horizon_is_suppressed(self) -> None:
        series = daily_series(date(2024, 1, 1), [1000 + i for i in range(10)])
        result = predict_milestone(series, 1000 + MAX_FORECAST_DAYS * 2, now=NOW)

        assert result.predictedDate is None
        assert result.daysUntil is None
        assert result.confidence == Confidence.LOW
        assert result.growthPerDay == pytest.approx(1.0)

    def test_crossing_far_in_the_past_is_suppressed(self) -> None:
        # Flat around 1010 with a 1e-6/day drift; the latest reading dips under
        # 1000, so the fitted line crosses 1000 thousands of years ago
        values = [1010 + 1e-6 * i for i in range(180)]
        values[0] = values[-1] = 995.5
        series = daily_series(date(2024, 1, 1), values)
        result = predict_milestone(series, 1000, now=datetime(2024, 6, 28))

        assert result.predictedDate is None
        assert result.daysUntil is None
        assert result.confidence == Confidence.LOW
        assert result.growthPerDay > 0
        assert result.currentValue == 995.5

    def test_sparse_recent_window_falls_back_to_last_points(self) -> None:
        # All points are two years old; the last four grow 10/day
        series = daily_series(date(2022, 1, 1), [100, 100, 100, 100, 110, 120, 130, 140])
        result = predict_milestone(series, 1000, now=datetime(2024, 1, 1))

        assert result.growthPerDay == pytest.approx(10.0)
        assert result.currentValue == 140

    def test_monthly_dates_are_supported(self) -> None:
        series = [
            TimeSeriesPoint(date=f"2023-{m:02d}", value=1000 + 100 * m)
            for m in range(7, 13)
        ]
        result = predict_milestone(series, 5000, now=datetime(2023, 12, 20))
        assert result.growthPerDay > 0


class TestNextMilestones:
    """get_next_milestones ladder lookups."""

    def test_next_three_above_current(self) -> None:
        assert get_next_milestones(166_000, MilestoneKind.STARS) == [175_000, 200_000, 250_000]

    def test_exact_milestone_is_excluded(self) -> None:
        assert get_next_milestones(1_000) == [2_000, 2_500, 5_000]

    def test_near_top_of_ladder(self) -> None:
        assert get_next_milestones(760_000) == [1_000_000]

    def test_past_top_of_ladder(self) -> None:
        assert get_next_milestones(MILESTONE_LADDER[-1]) == []

    @pytest.mark.parametrize('kind', list(MilestoneKind))
    def test_every_kind_shares_the_ladder(self, kind: MilestoneKind) -> None:
        assert get_next_milestones(166_000, kind) == get_next_milestones(166_000)
