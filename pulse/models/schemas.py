"""
Pydantic request/response models for the n8n Pulse analytics backend.

This module provides type-safe validation and serialization for every API
contract: loaded time series, categorical datasets (distribution, ranking,
correlation), milestone predictions, registry listings and the playground
URL state.

Field names are camelCase to match the chart front-end, which consumes these
payloads as-is.

All models use Pydantic v2 syntax.
"""

from datetime import date as DateType
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from pulse.models.enums import (
    CategoricalDataType,
    ChartType,
    Confidence,
    DataMode,
    DistributionScale,
    Granularity,
    RangePreset,
    RankingValueType,
    SizeHint,
    SortDirection,
    SourceType,
)


# Maximum number of metrics selectable at once in timeseries mode
MAX_SELECTED_METRICS: int = 4


# =============================================================================
# Time Series Models
# =============================================================================


class TimeSeriesPoint(BaseModel):
    """
    One (date, value) observation.

    `date` stays an opaque sortable string in one of the canonical forms
    `YYYY-MM-DD`, `YYYY-MM` or `YYYY-Www`. `value` is None only on raw
    extracted points whose source element carried no usable number; loaders
    drop such points before returning.
    """
    model_config = ConfigDict(frozen=True)

    date: str
    value: Optional[float] = None


class DateRange(BaseModel):
    """Inclusive [start, end] window of date strings."""
    model_config = ConfigDict(frozen=True)

    start: str
    end: str


class LoadedMetricData(BaseModel):
    """
    A metric's realized series as returned by the loader.

    `excludeZero` and `measuredSince` are carried through from the registry
    so display consumers can hide sentinel zeros and mark backfilled history.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "metricId": "github-stars",
                "label": "GitHub Stars",
                "color": "#f0c14b",
                "granularity": "monthly",
                "excludeZero": True,
                "measuredSince": "2026-01-08",
                "data": [{"date": "2024-01", "value": 100}],
            }
        }
    )

    metricId: str
    label: str
    color: str
    granularity: Granularity
    excludeZero: bool = False
    measuredSince: Optional[str] = None
    data: List[TimeSeriesPoint] = Field(default_factory=list)


class SeriesResponse(BaseModel):
    """
    Multi-metric chart payload.

    Produced by the /series endpoint and by the timeseries branch of the
    playground view. `range` is the preset filter window that was applied,
    `overlap` the window shared by every dataset after filtering.
    """
    datasets: List[LoadedMetricData] = Field(default_factory=list)
    range: Optional[DateRange] = None
    overlap: Optional[DateRange] = None
    dualAxis: bool = False
    dataMode: DataMode = DataMode.CUMULATIVE
    percent: bool = False


# =============================================================================
# Categorical Models
# =============================================================================


class DistributionBin(BaseModel):
    """One histogram bar: display label, lower edge (or bin value) and count."""
    label: str
    value: float
    count: int


class DistributionStats(BaseModel):
    """Aggregate statistics shown next to a histogram."""
    average: float = 0
    median: float = 0
    max: float = 0
    total: int = 0


class DistributionData(BaseModel):
    """Histogram payload for one distribution field."""
    sourceId: str
    fieldId: str
    label: str
    lastUpdated: Optional[str] = None
    bins: List[DistributionBin] = Field(default_factory=list)
    stats: DistributionStats = Field(default_factory=DistributionStats)


class RankingFieldInfo(BaseModel):
    """A rankable field and how its values are displayed."""
    id: str
    label: str
    type: RankingValueType = RankingValueType.NUMBER


class RankingItem(BaseModel):
    """One ranked row: label, per-field numeric values, optional group."""
    label: str
    values: Dict[str, float] = Field(default_factory=dict)
    group: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class RankingData(BaseModel):
    """Ranking payload for bar charts and tables."""
    sourceId: str
    label: str
    lastUpdated: Optional[str] = None
    items: List[RankingItem] = Field(default_factory=list)
    fields: List[RankingFieldInfo] = Field(default_factory=list)
    groups: List[str] = Field(default_factory=list)


class CorrelationPoint(BaseModel):
    """One scatter point."""
    x: float
    y: float
    label: str
    group: Optional[str] = None


class CorrelationAxis(BaseModel):
    """Identifier and label of a scatter axis."""
    id: str
    label: str


class TrendPoint(BaseModel):
    """End point of a regression trend line."""
    x: float
    y: float


class CorrelationData(BaseModel):
    """
    Scatter payload for two correlation fields.

    `pearson` is 0 when undefined (fewer than 2 points or zero variance).
    `trendLine`/`rSquared` are None when no regression can be fitted.
    """
    sourceId: str
    label: str
    lastUpdated: Optional[str] = None
    xField: CorrelationAxis
    yField: CorrelationAxis
    points: List[CorrelationPoint] = Field(default_factory=list)
    groups: List[str] = Field(default_factory=list)
    pearson: float = 0.0
    rSquared: Optional[float] = None
    trendLine: Optional[List[TrendPoint]] = None


# =============================================================================
# Prediction Models
# =============================================================================


class MilestonePrediction(BaseModel):
    """
    Result of fitting a trend to a series and solving for a target value.

    predictedDate/daysUntil are None when the milestone is already reached,
    unreachable under the current trend, or too far out to display.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "milestone": 200000,
                "predictedDate": "2026-11-03",
                "daysUntil": 17,
                "confidence": "high",
                "growthPerDay": 85.2,
                "currentValue": 198550,
            }
        }
    )

    milestone: float
    predictedDate: Optional[DateType] = None
    daysUntil: Optional[int] = None
    confidence: Confidence = Confidence.LOW
    growthPerDay: float = 0.0
    currentValue: float = 0.0


class MilestoneForecast(BaseModel):
    """A prediction plus its display labels."""
    metricId: str
    prediction: MilestonePrediction
    milestoneLabel: str
    predictedDateLabel: str
    daysUntilLabel: str


# =============================================================================
# Registry Listing Models
# =============================================================================


class MetricInfo(BaseModel):
    """Registry metric annotated with its owning source."""
    id: str
    label: str
    color: str
    path: str
    valueKey: Optional[str] = None
    dateKey: Optional[str] = None
    excludeZero: bool = False
    file: str
    measuredSince: str
    sourceId: str
    sourceLabel: str


class SourceInfo(BaseModel):
    """Timeseries source with its metrics."""
    id: str
    label: str
    shortLabel: str
    file: str
    type: SourceType
    granularities: List[Granularity]
    defaultGranularity: Granularity
    historyStart: str
    measuredSince: str
    metrics: List[MetricInfo] = Field(default_factory=list)


class CategoricalFieldInfo(BaseModel):
    """A selectable field of a categorical source."""
    id: str
    label: str


class CategoricalSourceInfo(BaseModel):
    """Categorical source summary for source pickers."""
    id: str
    label: str
    file: str
    dataType: CategoricalDataType
    sizeHint: SizeHint
    eagerLoad: bool
    fields: List[CategoricalFieldInfo] = Field(default_factory=list)


# =============================================================================
# Playground State (discriminated union on `mode`)
# =============================================================================


class TimeSeriesState(BaseModel):
    """Selected metrics, range preset, chart style and value mode."""
    model_config = ConfigDict(frozen=True)

    mode: Literal["timeseries"] = "timeseries"
    metrics: List[str] = Field(default_factory=list, max_length=MAX_SELECTED_METRICS)
    range: RangePreset = RangePreset.ONE_YEAR
    chartType: ChartType = ChartType.LINE
    dataMode: DataMode = DataMode.CUMULATIVE


class DistributionState(BaseModel):
    """Selected distribution source, field and y-axis scale."""
    model_config = ConfigDict(frozen=True)

    mode: Literal["distribution"] = "distribution"
    source: Optional[str] = None
    field: Optional[str] = None
    scale: DistributionScale = DistributionScale.LINEAR


class RankingState(BaseModel):
    """Selected ranking source, sort field and direction, group filter and limit."""
    model_config = ConfigDict(frozen=True)

    mode: Literal["ranking"] = "ranking"
    source: Optional[str] = None
    sort: Optional[str] = None
    sortDir: SortDirection = SortDirection.DESC
    filter: Optional[str] = None
    limit: int = Field(default=20, ge=1, le=100)


class CorrelationState(BaseModel):
    """Selected correlation source, axes, grouping field and trend toggle."""
    model_config = ConfigDict(frozen=True)

    mode: Literal["correlation"] = "correlation"
    source: Optional[str] = None
    x: Optional[str] = None
    y: Optional[str] = None
    color: Optional[str] = None
    trend: bool = False


PlaygroundState = Annotated[
    Union[TimeSeriesState, DistributionState, RankingState, CorrelationState],
    Field(discriminator="mode"),
]


class EncodedState(BaseModel):
    """Canonical query string for a state (`""` when everything is default)."""
    query: str


class DecodedState(BaseModel):
    """A decoded state together with its canonical re-encoding."""
    state: PlaygroundState
    query: str


class PlaygroundView(BaseModel):
    """
    Everything the playground needs to render one URL.

    `data` holds the payload matching `state.mode`; it is None when the
    state does not select anything loadable yet (e.g. no source chosen)
    or the backing file could not be loaded.
    """
    state: PlaygroundState
    query: str
    data: Optional[Union[SeriesResponse, DistributionData, RankingData, CorrelationData]] = None


class EncodeRequest(BaseModel):
    """
    Body of POST /playground/encode.

    `state.mode` selects the state model; it must be present.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {"state": {"mode": "ranking", "source": "node-usage", "limit": 10}}
        }
    )

    state: PlaygroundState
