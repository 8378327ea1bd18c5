"""
FastAPI router for individual metrics.

Endpoints:
- GET /metrics: every registered metric with its owning source
- GET /metrics/{metric_id}: one metric
- GET /metrics/{metric_id}/data: the metric's raw series at a granularity
- GET /metrics/{metric_id}/predictions: milestone forecasts

The data endpoint returns the loader output untouched, zeros included;
chart-ready series (sentinel zeros hidden, range filters) come from /series.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from pulse.api.sources import metric_info
from pulse.core.dependencies import DataStoreDep, SettingsDep
from pulse.models.enums import Granularity, MilestoneKind
from pulse.models.schemas import LoadedMetricData, MetricInfo, MilestoneForecast
from pulse.registry import get_all_metrics, get_metric_by_id, get_source_by_id
from pulse.services.formatters import format_days_until, format_number, format_predicted_date
from pulse.services.loaders import load_metric_data
from pulse.services.predictions import get_next_milestones, predict_milestone

logger = logging.getLogger(__name__)

router = APIRouter()


def _milestone_kind(metric_id: str) -> MilestoneKind:
    """Classify a metric for get_next_milestones, which keeps `kind` for per-kind ladders."""
    if 'stars' in metric_id:
        return MilestoneKind.STARS
    if 'creators' in metric_id:
        return MilestoneKind.CREATORS
    if 'users' in metric_id or 'members' in metric_id or 'subscribers' in metric_id:
        return MilestoneKind.USERS
    return MilestoneKind.GENERIC


@router.get(
    "",
    response_model=List[MetricInfo],
    summary="List Metrics",
)
async def list_metrics() -> List[MetricInfo]:
    return [
        metric_info(entry.metric, get_source_by_id(entry.source_id))
        for entry in get_all_metrics()
    ]


@router.get(
    "/{metric_id}",
    response_model=MetricInfo,
    summary="Get Metric",
)
async def get_metric(metric_id: str) -> MetricInfo:
    resolved = get_metric_by_id(metric_id)
    if resolved is None:
        logger.warning(f"Metric not found: {metric_id}")
        raise HTTPException(status_code=404, detail=f"Metric '{metric_id}' not found")
    return metric_info(resolved.metric, resolved.source)


@router.get(
    "/{metric_id}/data",
    response_model=LoadedMetricData,
    summary="Get Metric Series",
    description="""
    Load a metric's time series.

    An unavailable `granularity` falls back to the source default; the
    response's `granularity` field reports the one actually used.
    """,
)
async def get_metric_data(
    metric_id: str,
    store: DataStoreDep,
    granularity: Optional[Granularity] = Query(default=None, description="daily, weekly or monthly"),
) -> LoadedMetricData:
    if get_metric_by_id(metric_id) is None:
        logger.warning(f"Metric not found: {metric_id}")
        raise HTTPException(status_code=404, detail=f"Metric '{metric_id}' not found")

    try:
        data = await load_metric_data(metric_id, granularity, cache=store)
    except Exception as e:
        logger.error(f"Error loading metric {metric_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to load metric: {str(e)}")

    if data is None:
        logger.warning(f"No data available for metric {metric_id}")
        raise HTTPException(status_code=404, detail=f"No data available for metric '{metric_id}'")
    return data


@router.get(
    "/{metric_id}/predictions",
    response_model=List[MilestoneForecast],
    summary="Get Milestone Predictions",
    description="""
    Forecast when a metric reaches a milestone.

    With `milestone` a single forecast is returned; without it, forecasts
    for the next round-number milestones above the current value.
    """,
)
async def get_metric_predictions(
    metric_id: str,
    store: DataStoreDep,
    settings: SettingsDep,
    milestone: Optional[float] = Query(default=None, gt=0, description="Target value"),
    granularity: Optional[Granularity] = Query(default=None, description="Series granularity to fit on"),
) -> List[MilestoneForecast]:
    if get_metric_by_id(metric_id) is None:
        logger.warning(f"Metric not found: {metric_id}")
        raise HTTPException(status_code=404, detail=f"Metric '{metric_id}' not found")

    try:
        data = await load_metric_data(metric_id, granularity, cache=store)
        if data is None:
            logger.warning(f"No data available for metric {metric_id}")
            raise HTTPException(status_code=404, detail=f"No data available for metric '{metric_id}'")

        # Trailing zeros mark months that were not measured yet
        positive = [p.value for p in data.data if p.value is not None and p.value > 0]
        current = positive[-1] if positive else 0.0
        targets = [milestone] if milestone is not None else get_next_milestones(current, _milestone_kind(metric_id))

        forecasts: List[MilestoneForecast] = []
        for target in targets:
            prediction = predict_milestone(
                data.data,
                target,
                lookback_months=settings.prediction_lookback_months,
                min_data_points=settings.prediction_min_data_points,
            )
            forecasts.append(MilestoneForecast(
                metricId=metric_id,
                prediction=prediction,
                milestoneLabel=format_number(target),
                predictedDateLabel=format_predicted_date(prediction.predictedDate),
                daysUntilLabel=format_days_until(prediction.daysUntil),
            ))

        logger.info(f"Computed {len(forecasts)} milestone forecasts for {metric_id}")
        return forecasts

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error predicting milestones for {metric_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to compute predictions: {str(e)}")
