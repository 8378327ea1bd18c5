"""
FastAPI router for multi-metric chart series.

GET /series?m=github-stars,discord-members&range=1y&dataMode=change

Loads up to four metrics and applies the chart pipeline (sentinel zeros
hidden, range preset, period change, overlap alignment, percent rebasing).
Unknown metric ids are skipped; the response lists only datasets that loaded.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from pulse.core.dependencies import DataStoreDep
from pulse.models.enums import DataMode, Granularity, RangePreset
from pulse.models.schemas import MAX_SELECTED_METRICS, SeriesResponse
from pulse.services.loaders import load_series

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=SeriesResponse,
    summary="Get Chart Series",
)
async def get_series(
    store: DataStoreDep,
    m: str = Query(..., description="Comma-separated metric ids (at most 4)"),
    granularity: Optional[Granularity] = Query(default=None),
    range: RangePreset = Query(default=RangePreset.ONE_YEAR, description="Date range preset"),
    dataMode: DataMode = Query(default=DataMode.CUMULATIVE),
    percent: bool = Query(default=False, description="Rebase to percent change from first point"),
    align: bool = Query(default=False, description="Clip datasets to their overlapping window"),
) -> SeriesResponse:
    metric_ids = [metric_id for metric_id in m.split(',') if metric_id]
    if not metric_ids:
        logger.warning("Series requested without metric ids")
        raise HTTPException(status_code=400, detail="At least one metric id is required")
    if len(metric_ids) > MAX_SELECTED_METRICS:
        logger.warning(f"Too many metrics requested: {len(metric_ids)}")
        raise HTTPException(
            status_code=400,
            detail=f"At most {MAX_SELECTED_METRICS} metrics can be compared",
        )

    try:
        return await load_series(
            metric_ids,
            granularity=granularity,
            range_preset=range,
            data_mode=dataMode,
            percent=percent,
            align=align,
            cache=store,
        )
    except Exception as e:
        logger.error(f"Error building series for {metric_ids}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to build series: {str(e)}")
