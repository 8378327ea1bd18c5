"""
Data Loader / Query Engine.

Turns registry ids into chart-ready payloads by reading the backing JSON
history files through the shared DataFileCache and reshaping them:

- Time series: extract_time_series / load_metric_data / load_multiple_metrics,
  and load_series which composes them with the chart transforms.
- Distributions: pre-binned histograms used as-is, raw values binned with
  Sturges' rule (load_distribution_data).
- Rankings: row tables or per-category aggregates (load_ranking_data), then
  sorted/filtered/limited for display (apply_ranking_view).
- Correlations: (x, y) projections with Pearson r and an OLS trend line
  (load_correlation_data).

Failure semantics:
    No loader raises. Unknown ids, unreadable files and unexpected shapes are
    logged and surface as None (single payloads) or [] (series extraction).
    Zeros are returned as-is; sentinel-zero hiding is a display concern
    handled by transforms.apply_exclude_zero.

Usage:
    from pulse.services.loaders import load_metric_data, load_ranking_data

    stars = await load_metric_data('github-stars', Granularity.WEEKLY)
    nodes = await load_ranking_data('node-usage')
"""

import asyncio
import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from pulse.core.data_store import DataFileCache, get_data_store
from pulse.models.enums import (
    CategoricalDataType,
    DataLayout,
    DataMode,
    FieldAggregate,
    Granularity,
    RangePreset,
    SizeHint,
    SortDirection,
)
from pulse.models.schemas import (
    CorrelationAxis,
    CorrelationData,
    CorrelationPoint,
    DistributionBin,
    DistributionData,
    DistributionStats,
    LoadedMetricData,
    RankingData,
    RankingFieldInfo,
    RankingItem,
    SeriesResponse,
    TimeSeriesPoint,
    TrendPoint,
)
from pulse.registry import (
    CategoricalSource,
    DistributionField,
    MetricDefinition,
    get_categorical_source_by_id,
    get_metric_by_id,
)
from pulse.services.statistics import (
    MAX_AUTO_BINS,
    linear_regression,
    pearson_correlation,
    round_half_up,
    sturges_bin_count,
)
from pulse.services.transforms import (
    apply_exclude_zero,
    filter_by_date_range,
    find_overlapping_range,
    needs_dual_axis,
    normalize_to_percent_change,
    to_period_change,
)
from pulse.services.url_state import get_date_range_filter

logger = logging.getLogger(__name__)


# =============================================================================
# Helper Functions
# =============================================================================


def _get_nested_value(obj: Any, path: Optional[str]) -> Any:
    """Walk a dotted path ('complexity.distribution'); None if any step is missing."""
    if not path:
        return obj
    current = obj
    for part in path.split('.'):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def _safe_float(value: Any) -> Optional[float]:
    """
    Leniently convert a value to float, returning None for invalid values.

    Numeric strings are accepted (snapshot files occasionally carry them);
    booleans, null, NaN and infinities are not.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        float_val = float(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if not math.isfinite(float_val):
        return None
    return float_val


def _format_bound(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _last_updated(raw: Any, source: CategoricalSource) -> Optional[str]:
    value = _get_nested_value(raw, source.last_updated_path) if source.last_updated_path else None
    return None if value is None else str(value)


def _row_label(item: Dict[str, Any], source: CategoricalSource) -> str:
    label = item.get(source.label_field)
    return str(label) if label else 'Unknown'


def _row_group(item: Dict[str, Any], source: CategoricalSource) -> Optional[str]:
    if not source.group_by_field:
        return None
    group = item.get(source.group_by_field)
    return None if group is None else str(group)


def _median_of_expanded(bins: Sequence[DistributionBin]) -> float:
    """
    Median convention shared by every histogram: the element at index
    floor(total / 2) of the ascending value list, found by walking
    cumulative counts instead of materialising the list.
    """
    total = sum(b.count for b in bins)
    if total == 0:
        return 0.0
    target = total // 2
    seen = 0
    for b in sorted(bins, key=lambda b: b.value):
        seen += b.count
        if seen > target:
            return b.value
    return 0.0


async def _fetch(path: str, cache: Optional[DataFileCache]) -> Any:
    store = cache if cache is not None else get_data_store()
    return await store.fetch(path)


# =============================================================================
# Time Series
# =============================================================================


def extract_time_series(
    raw: Any,
    metric: MetricDefinition,
    granularity: Granularity,
) -> List[TimeSeriesPoint]:
    """
    Extract (date, value) points for a metric from a parsed history file.

    A dotted `metric.path` names a nested array whose elements carry
    `date_key` (default 'date') and `value_key` (default 'value'). Otherwise
    the array is `raw[granularity]` and each element carries `metric.path`.

    Elements that are not objects or lack a string date are skipped. Values go
    through the same lenient conversion as every other loader, so numeric
    strings are read and anything else that is not a finite number comes
    back as None. A missing or non-array target yields [].
    """
    date_key = metric.date_key or 'date'

    if '.' in metric.path:
        rows = _get_nested_value(raw, metric.path)
        value_key = metric.value_key or 'value'
    else:
        rows = raw.get(Granularity(granularity).value) if isinstance(raw, dict) else None
        value_key = metric.path

    if not isinstance(rows, list):
        return []

    points: List[TimeSeriesPoint] = []
    for item in rows:
        if not isinstance(item, dict):
            continue
        date = item.get(date_key)
        if not isinstance(date, str):
            continue
        points.append(TimeSeriesPoint(date=date, value=_safe_float(item.get(value_key))))
    return points


async def load_metric_data(
    metric_id: str,
    granularity: Optional[Granularity] = None,
    cache: Optional[DataFileCache] = None,
) -> Optional[LoadedMetricData]:
    """
    Load one metric's series.

    Args:
        metric_id: Registry metric id.
        granularity: Requested granularity; falls back to the source default
            (with a warning) when the source does not provide it.
        cache: File cache; defaults to the process-wide store.

    Returns:
        LoadedMetricData with points lacking a value removed, or None when
        the metric is unknown or its file cannot be loaded.
    """
    resolved = get_metric_by_id(metric_id)
    if resolved is None:
        logger.error(f"Unknown metric: {metric_id}")
        return None

    source = resolved.source
    metric = resolved.metric
    effective = Granularity(granularity) if granularity else source.default_granularity

    if effective not in source.granularities:
        logger.warning(
            f"Granularity {effective.value} not available for {source.id}, "
            f"using {source.default_granularity.value}"
        )
        effective = source.default_granularity

    try:
        raw = await _fetch(resolved.file, cache)
    except Exception as e:
        logger.error(f"Failed to load metric {metric_id} from {resolved.file}: {e}")
        return None

    points = extract_time_series(raw, metric, effective)

    return LoadedMetricData(
        metricId=metric.id,
        label=metric.label,
        color=metric.color,
        granularity=effective,
        excludeZero=metric.exclude_zero,
        measuredSince=resolved.measured_since,
        data=[p for p in points if p.value is not None],
    )


async def load_multiple_metrics(
    metric_ids: Sequence[str],
    granularity: Optional[Granularity] = None,
    cache: Optional[DataFileCache] = None,
) -> List[LoadedMetricData]:
    """
    Load several metrics concurrently.

    Results keep the request order; metrics that fail to load are dropped
    rather than failing the whole batch.
    """
    results = await asyncio.gather(
        *(load_metric_data(metric_id, granularity, cache) for metric_id in metric_ids),
        return_exceptions=True,
    )

    loaded: List[LoadedMetricData] = []
    for metric_id, result in zip(metric_ids, results):
        if isinstance(result, BaseException):
            logger.error(f"Failed to load metric {metric_id}: {result}")
            continue
        if result is not None:
            loaded.append(result)
    return loaded


async def load_series(
    metric_ids: Sequence[str],
    granularity: Optional[Granularity] = None,
    range_preset: RangePreset = RangePreset.ALL,
    data_mode: DataMode = DataMode.CUMULATIVE,
    percent: bool = False,
    align: bool = False,
    cache: Optional[DataFileCache] = None,
    now: Optional[datetime] = None,
) -> SeriesResponse:
    """
    Build a multi-metric chart payload.

    Pipeline per dataset: hide sentinel zeros, apply the range preset, convert
    to period change (dataMode=change), optionally clip every dataset to the
    shared overlap window (align), optionally rebase to percent change.
    The dual-axis flag is computed on the final values.
    """
    datasets = await load_multiple_metrics(metric_ids, granularity, cache)
    datasets = [apply_exclude_zero(d) for d in datasets]

    date_range = get_date_range_filter(range_preset, now)
    if date_range is not None:
        datasets = [
            d.model_copy(update={"data": filter_by_date_range(d.data, date_range.start, date_range.end)})
            for d in datasets
        ]

    if data_mode == DataMode.CHANGE:
        datasets = [d.model_copy(update={"data": to_period_change(d.data)}) for d in datasets]

    overlap = find_overlapping_range(datasets)
    if align and overlap is not None:
        datasets = [
            d.model_copy(update={"data": filter_by_date_range(d.data, overlap.start, overlap.end)})
            for d in datasets
        ]

    if percent:
        datasets = [d.model_copy(update={"data": normalize_to_percent_change(d.data)}) for d in datasets]

    return SeriesResponse(
        datasets=datasets,
        range=date_range,
        overlap=overlap,
        dualAxis=needs_dual_axis(datasets),
        dataMode=data_mode,
        percent=percent,
    )


# =============================================================================
# Categorical: Distribution
# =============================================================================


def _resolve_categorical(source_id: str, data_type: CategoricalDataType) -> Optional[CategoricalSource]:
    source = get_categorical_source_by_id(source_id)
    if source is None or source.data_type != data_type:
        logger.error(f"Invalid {data_type.value} source: {source_id}")
        return None
    return source


def _prebinned_distribution(rows: List[Any], field: DistributionField) -> List[DistributionBin]:
    bins: List[DistributionBin] = []
    for item in rows:
        if not isinstance(item, dict):
            continue
        value = _safe_float(item.get(field.value_key))
        count = _safe_float(item.get(field.count_key))
        if value is None or count is None:
            continue
        label = item.get(field.label_key or field.value_key)
        bins.append(DistributionBin(
            label=str(label) if label is not None else _format_bound(value),
            value=value,
            count=int(count),
        ))
    return bins


def _binned_distribution(values: List[float]) -> List[DistributionBin]:
    num_bins = min(sturges_bin_count(len(values)), MAX_AUTO_BINS)
    low = min(values)
    high = max(values)
    bin_width = math.ceil((high - low) / num_bins) or 1

    counts = [0] * num_bins
    for value in values:
        index = min(int(math.floor((value - low) / bin_width)), num_bins - 1)
        counts[index] += 1

    bins: List[DistributionBin] = []
    for index, count in enumerate(counts):
        bin_min = low + index * bin_width
        bin_max = bin_min + bin_width
        bins.append(DistributionBin(
            label=f"{_format_bound(bin_min)}-{_format_bound(bin_max - 1)}",
            value=bin_min,
            count=count,
        ))
    return bins


async def load_distribution_data(
    source_id: str,
    field_id: str,
    cache: Optional[DataFileCache] = None,
) -> Optional[DistributionData]:
    """
    Load a histogram for one distribution field.

    Pre-binned fields (count_key set) are used as-is with stats derived from
    the bin counts. Raw fields are binned with Sturges' rule capped at
    MAX_AUTO_BINS bins of integer width. Both report average (rounded half
    up), median (element floor(total/2) of the sorted values), max and total.

    Returns:
        DistributionData, or None for an unknown source/field, an unreadable
        file, a non-array data path or no valid values.
    """
    source = _resolve_categorical(source_id, CategoricalDataType.DISTRIBUTION)
    if source is None:
        return None

    field = source.get_distribution_field(field_id)
    if field is None:
        logger.error(f"Unknown field: {field_id} in source {source_id}")
        return None

    try:
        raw = await _fetch(source.file, cache)
    except Exception as e:
        logger.error(f"Failed to load distribution {source_id}/{field_id}: {e}")
        return None

    rows = _get_nested_value(raw, field.data_path)
    if not isinstance(rows, list):
        logger.error(f"Data at path {field.data_path} is not an array")
        return None

    if field.count_key:
        bins = _prebinned_distribution(rows, field)
        if not bins:
            logger.error(f"No valid bins found for {source_id}/{field_id}")
            return None
        total = sum(b.count for b in bins)
        weighted = sum(b.value * b.count for b in bins)
        stats = DistributionStats(
            average=round_half_up(weighted / total) if total > 0 else 0,
            median=_median_of_expanded(bins),
            max=max(b.value for b in bins),
            total=total,
        )
    else:
        values = [
            v for v in (_safe_float(item.get(field.value_key)) for item in rows if isinstance(item, dict))
            if v is not None
        ]
        if not values:
            logger.error(f"No valid values found for binning {source_id}/{field_id}")
            return None
        bins = _binned_distribution(values)
        ordered = sorted(values)
        stats = DistributionStats(
            average=round_half_up(sum(values) / len(values)),
            median=ordered[len(ordered) // 2],
            max=ordered[-1],
            total=len(values),
        )

    return DistributionData(
        sourceId=source.id,
        fieldId=field.id,
        label=field.label,
        lastUpdated=_last_updated(raw, source),
        bins=bins,
        stats=stats,
    )


# =============================================================================
# Categorical: Ranking
# =============================================================================


def _ranking_by_category(categories: Any, source: CategoricalSource) -> List[RankingItem]:
    items: List[RankingItem] = []
    if not isinstance(categories, dict):
        return items

    for category, rows in categories.items():
        if not isinstance(rows, list):
            continue
        values: Dict[str, float] = {}
        for ranking_field in source.ranking_fields:
            if ranking_field.aggregate == FieldAggregate.SUM:
                key = ranking_field.source_key or ranking_field.id
                values[ranking_field.id] = sum(
                    _safe_float(row.get(key)) or 0.0 for row in rows if isinstance(row, dict)
                )
            else:
                values[ranking_field.id] = float(len(rows))
        items.append(RankingItem(label=str(category), values=values, group=str(category)))
    return items


def _ranking_rows(rows: List[Any], source: CategoricalSource) -> List[RankingItem]:
    items: List[RankingItem] = []
    for item in rows:
        if not isinstance(item, dict):
            continue
        values = {
            ranking_field.id: _safe_float(item.get(ranking_field.source_key or ranking_field.id)) or 0.0
            for ranking_field in source.ranking_fields
        }
        metadata = {key: item[key] for key in source.metadata_fields if key in item}
        items.append(RankingItem(
            label=_row_label(item, source),
            values=values,
            group=_row_group(item, source),
            metadata=metadata or None,
        ))
    return items


async def load_ranking_data(
    source_id: str,
    cache: Optional[DataFileCache] = None,
) -> Optional[RankingData]:
    """
    Load every row of a ranking source.

    `rows` sources yield one item per array element; `by_category` sources
    (an object of category -> rows) yield one item per category with values
    aggregated per field (row COUNT or SUM of a row key). Items come back in
    file order; use apply_ranking_view for sorting and limits.
    """
    source = _resolve_categorical(source_id, CategoricalDataType.RANKING)
    if source is None:
        return None

    try:
        raw = await _fetch(source.file, cache)
    except Exception as e:
        logger.error(f"Failed to load ranking {source_id}: {e}")
        return None

    data = _get_nested_value(raw, source.data_path)

    if source.data_layout == DataLayout.BY_CATEGORY:
        items = _ranking_by_category(data, source)
    else:
        if not isinstance(data, list):
            logger.error(f"Data is not an array for source {source_id}")
            return None
        items = _ranking_rows(data, source)

    groups = sorted({item.group for item in items if item.group is not None})

    return RankingData(
        sourceId=source.id,
        label=source.label,
        lastUpdated=_last_updated(raw, source),
        items=items,
        fields=[
            RankingFieldInfo(id=f.id, label=f.label, type=f.value_type)
            for f in source.ranking_fields
        ],
        groups=groups,
    )


def apply_ranking_view(
    data: RankingData,
    sort: Optional[str] = None,
    sort_dir: SortDirection = SortDirection.DESC,
    group: Optional[str] = None,
    limit: Optional[int] = None,
) -> RankingData:
    """
    Sort, filter and truncate a ranking for display.

    An unknown or missing sort field falls back to the first ranking field.
    `group` keeps only items in that group. Ties keep file order.
    """
    field_ids = [f.id for f in data.fields]
    sort_key = sort if sort in field_ids else (field_ids[0] if field_ids else None)

    items = [item for item in data.items if group is None or item.group == group]
    if sort_key is not None:
        items = sorted(
            items,
            key=lambda item: item.values.get(sort_key, 0.0),
            reverse=SortDirection(sort_dir) == SortDirection.DESC,
        )
    if limit is not None:
        items = items[:limit]

    return data.model_copy(update={"items": items})


# =============================================================================
# Categorical: Correlation
# =============================================================================


async def load_correlation_data(
    source_id: str,
    x_field_id: str,
    y_field_id: str,
    cache: Optional[DataFileCache] = None,
) -> Optional[CorrelationData]:
    """
    Project a correlation source's rows onto two numeric fields.

    Rows where either coordinate is missing or not a finite number are
    dropped. The payload carries the Pearson coefficient (0 when undefined)
    and, when a regression can be fitted, rSquared and a two-point trend
    line spanning the x-range.
    """
    source = _resolve_categorical(source_id, CategoricalDataType.CORRELATION)
    if source is None:
        return None

    x_field = source.get_correlation_field(x_field_id)
    y_field = source.get_correlation_field(y_field_id)
    if x_field is None or y_field is None:
        logger.error(f"Unknown fields: {x_field_id}, {y_field_id} in source {source_id}")
        return None

    try:
        raw = await _fetch(source.file, cache)
    except Exception as e:
        logger.error(f"Failed to load correlation {source_id}: {e}")
        return None

    rows = _get_nested_value(raw, source.data_path)
    if not isinstance(rows, list):
        logger.error(f"Data is not an array for source {source_id}")
        return None

    points: List[CorrelationPoint] = []
    for item in rows:
        if not isinstance(item, dict):
            continue
        x = _safe_float(_get_nested_value(item, x_field.path))
        y = _safe_float(_get_nested_value(item, y_field.path))
        if x is None or y is None:
            continue
        points.append(CorrelationPoint(
            x=x,
            y=y,
            label=_row_label(item, source),
            group=_row_group(item, source),
        ))

    xs = [p.x for p in points]
    ys = [p.y for p in points]
    fit = linear_regression(list(zip(xs, ys)))

    return CorrelationData(
        sourceId=source.id,
        label=source.label,
        lastUpdated=_last_updated(raw, source),
        xField=CorrelationAxis(id=x_field.id, label=x_field.label),
        yField=CorrelationAxis(id=y_field.id, label=y_field.label),
        points=points,
        groups=sorted({p.group for p in points if p.group is not None}),
        pearson=pearson_correlation(xs, ys),
        rSquared=fit.r_squared if fit else None,
        trendLine=[TrendPoint(x=px, y=py) for px, py in fit.trend_line(min(xs), max(xs))] if fit else None,
    )


# =============================================================================
# Load Hints
# =============================================================================


def should_eager_load(source_id: str) -> bool:
    """True only for categorical sources declared with size hint 'small'."""
    source = get_categorical_source_by_id(source_id)
    return source is not None and source.size_hint == SizeHint.SMALL
