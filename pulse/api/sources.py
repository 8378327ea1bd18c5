"""
FastAPI router for source listings and categorical data.

Endpoints:
- GET /sources: timeseries sources with their metrics
- GET /sources/{source_id}: one timeseries source
- GET /categorical: categorical sources, optionally filtered by data type
- GET /categorical/{source_id}: one categorical source
- GET /categorical/{source_id}/distribution/{field_id}: histogram payload
- GET /categorical/{source_id}/ranking: sorted/filtered ranking payload
- GET /categorical/{source_id}/correlation: scatter payload for two fields

Registry records are converted to the camelCase listing schemas here; the
conversion helpers are shared with the metrics router.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from pulse.core.dependencies import DataStoreDep
from pulse.models.enums import CategoricalDataType, SortDirection
from pulse.models.schemas import (
    CategoricalFieldInfo,
    CategoricalSourceInfo,
    CorrelationData,
    DistributionData,
    MetricInfo,
    RankingData,
    SourceInfo,
)
from pulse.registry import (
    CATEGORICAL_SOURCES,
    DATA_SOURCES,
    CategoricalSource,
    DataSource,
    MetricDefinition,
    get_categorical_source_by_id,
    get_categorical_sources_by_type,
    get_source_by_id,
)
from pulse.services.loaders import (
    apply_ranking_view,
    load_correlation_data,
    load_distribution_data,
    load_ranking_data,
    should_eager_load,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Listing Conversions
# =============================================================================


def metric_info(metric: MetricDefinition, source: DataSource) -> MetricInfo:
    """Registry metric -> listing schema, with per-metric overrides applied."""
    return MetricInfo(
        id=metric.id,
        label=metric.label,
        color=metric.color,
        path=metric.path,
        valueKey=metric.value_key,
        dateKey=metric.date_key,
        excludeZero=metric.exclude_zero,
        file=metric.file or source.file,
        measuredSince=metric.measured_since or source.measured_since,
        sourceId=source.id,
        sourceLabel=source.label,
    )


def source_info(source: DataSource) -> SourceInfo:
    return SourceInfo(
        id=source.id,
        label=source.label,
        shortLabel=source.short_label,
        file=source.file,
        type=source.type,
        granularities=list(source.granularities),
        defaultGranularity=source.default_granularity,
        historyStart=source.history_start,
        measuredSince=source.measured_since,
        metrics=[metric_info(m, source) for m in source.metrics],
    )


def categorical_source_info(source: CategoricalSource) -> CategoricalSourceInfo:
    fields = {
        CategoricalDataType.DISTRIBUTION: source.distribution_fields,
        CategoricalDataType.RANKING: source.ranking_fields,
        CategoricalDataType.CORRELATION: source.correlation_fields,
    }[source.data_type]
    return CategoricalSourceInfo(
        id=source.id,
        label=source.label,
        file=source.file,
        dataType=source.data_type,
        sizeHint=source.size_hint,
        eagerLoad=should_eager_load(source.id),
        fields=[CategoricalFieldInfo(id=f.id, label=f.label) for f in fields],
    )


def _require_categorical(source_id: str, data_type: CategoricalDataType) -> CategoricalSource:
    source = get_categorical_source_by_id(source_id)
    if source is None or source.data_type != data_type:
        logger.warning(f"{data_type.value} source not found: {source_id}")
        raise HTTPException(
            status_code=404,
            detail=f"{data_type.value.capitalize()} source '{source_id}' not found",
        )
    return source


# =============================================================================
# Timeseries Sources
# =============================================================================


@router.get(
    "/sources",
    response_model=List[SourceInfo],
    summary="List Timeseries Sources",
)
async def list_sources() -> List[SourceInfo]:
    return [source_info(s) for s in DATA_SOURCES]


@router.get(
    "/sources/{source_id}",
    response_model=SourceInfo,
    summary="Get Timeseries Source",
)
async def get_source(source_id: str) -> SourceInfo:
    source = get_source_by_id(source_id)
    if source is None:
        logger.warning(f"Source not found: {source_id}")
        raise HTTPException(status_code=404, detail=f"Source '{source_id}' not found")
    return source_info(source)


# =============================================================================
# Categorical Sources
# =============================================================================


@router.get(
    "/categorical",
    response_model=List[CategoricalSourceInfo],
    summary="List Categorical Sources",
    description="All distribution, ranking and correlation sources, or only those of one `type`.",
)
async def list_categorical_sources(
    type: Optional[CategoricalDataType] = Query(default=None, description="Filter by data type"),
) -> List[CategoricalSourceInfo]:
    sources = get_categorical_sources_by_type(type) if type else CATEGORICAL_SOURCES
    return [categorical_source_info(s) for s in sources]


@router.get(
    "/categorical/{source_id}",
    response_model=CategoricalSourceInfo,
    summary="Get Categorical Source",
)
async def get_categorical_source(source_id: str) -> CategoricalSourceInfo:
    source = get_categorical_source_by_id(source_id)
    if source is None:
        logger.warning(f"Categorical source not found: {source_id}")
        raise HTTPException(status_code=404, detail=f"Categorical source '{source_id}' not found")
    return categorical_source_info(source)


@router.get(
    "/categorical/{source_id}/distribution/{field_id}",
    response_model=DistributionData,
    summary="Get Distribution",
    description="""
    Histogram bins and summary statistics for one distribution field.

    Pre-binned fields are returned as stored; raw fields are binned with
    Sturges' rule (at most 20 bins of integer width).
    """,
)
async def get_distribution(
    source_id: str,
    field_id: str,
    store: DataStoreDep,
) -> DistributionData:
    source = _require_categorical(source_id, CategoricalDataType.DISTRIBUTION)
    if source.get_distribution_field(field_id) is None:
        logger.warning(f"Distribution field not found: {source_id}/{field_id}")
        raise HTTPException(status_code=404, detail=f"Field '{field_id}' not found in '{source_id}'")

    try:
        data = await load_distribution_data(source_id, field_id, cache=store)
    except Exception as e:
        logger.error(f"Error loading distribution {source_id}/{field_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to load distribution: {str(e)}")

    if data is None:
        logger.warning(f"No distribution data for {source_id}/{field_id}")
        raise HTTPException(status_code=404, detail=f"No data available for '{source_id}/{field_id}'")
    return data


@router.get(
    "/categorical/{source_id}/ranking",
    response_model=RankingData,
    summary="Get Ranking",
    description="""
    Ranked items of a ranking source.

    Items are sorted by `sort` (default: the source's first field) in `dir`
    order, optionally restricted to one group with `filter`, and truncated
    to `limit`.
    """,
)
async def get_ranking(
    source_id: str,
    store: DataStoreDep,
    sort: Optional[str] = Query(default=None, description="Ranking field id to sort by"),
    dir: SortDirection = Query(default=SortDirection.DESC, description="Sort direction"),
    filter: Optional[str] = Query(default=None, description="Only items in this group"),
    limit: int = Query(default=20, ge=1, le=100, description="Maximum items returned"),
) -> RankingData:
    _require_categorical(source_id, CategoricalDataType.RANKING)

    try:
        data = await load_ranking_data(source_id, cache=store)
    except Exception as e:
        logger.error(f"Error loading ranking {source_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to load ranking: {str(e)}")

    if data is None:
        logger.warning(f"No ranking data for {source_id}")
        raise HTTPException(status_code=404, detail=f"No data available for '{source_id}'")

    return apply_ranking_view(data, sort=sort, sort_dir=dir, group=filter, limit=limit)


@router.get(
    "/categorical/{source_id}/correlation",
    response_model=CorrelationData,
    summary="Get Correlation",
    description="Scatter points for two fields with Pearson r and an OLS trend line.",
)
async def get_correlation(
    source_id: str,
    store: DataStoreDep,
    x: str = Query(..., description="Correlation field id for the x axis"),
    y: str = Query(..., description="Correlation field id for the y axis"),
) -> CorrelationData:
    source = _require_categorical(source_id, CategoricalDataType.CORRELATION)
    for field_id in (x, y):
        if source.get_correlation_field(field_id) is None:
            logger.warning(f"Correlation field not found: {source_id}/{field_id}")
            raise HTTPException(status_code=404, detail=f"Field '{field_id}' not found in '{source_id}'")

    try:
        data = await load_correlation_data(source_id, x, y, cache=store)
    except Exception as e:
        logger.error(f"Error loading correlation {source_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to load correlation: {str(e)}")

    if data is None:
        logger.warning(f"No correlation data for {source_id}")
        raise HTTPException(status_code=404, detail=f"No data available for '{source_id}'")
    return data
