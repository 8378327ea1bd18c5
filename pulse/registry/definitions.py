"""
Record types for the source registry.

Plain frozen dataclasses: the registry is data interpreted by one generic
loader, so these carry descriptors (file, path, keys) and no behaviour
beyond small lookups.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from pulse.models.enums import (
    CategoricalDataType,
    DataLayout,
    FieldAggregate,
    Granularity,
    RankingValueType,
    SizeHint,
    SourceType,
)


# =============================================================================
# Timeseries Records
# =============================================================================


@dataclass(frozen=True)
class MetricDefinition:
    """
    One numeric time series available to the playground.

    Attributes:
        id: Globally unique metric key (used in URLs).
        label: Display name.
        color: Display colour hint.
        path: Field name read from each element of `raw[granularity]`, or a
            dotted path (e.g. 'timeline.monthly') to a nested array.
        value_key: Element key holding the value when `path` is dotted.
        date_key: Element key holding the date (default 'date').
        exclude_zero: Treat 0 as "not yet measured" rather than a real zero.
        file: Overrides the owning source's file.
        measured_since: Overrides the owning source's measured_since.
    """
    id: str
    label: str
    color: str
    path: str
    value_key: Optional[str] = None
    date_key: Optional[str] = None
    exclude_zero: bool = False
    file: Optional[str] = None
    measured_since: Optional[str] = None


@dataclass(frozen=True)
class DataSource:
    """
    A group of related metrics backed by one default history file.

    `history_start` is the earliest date with any data (possibly estimated);
    `measured_since` the earliest date considered reliably measured.
    """
    id: str
    label: str
    short_label: str
    file: str
    granularities: Tuple[Granularity, ...]
    default_granularity: Granularity
    history_start: str
    measured_since: str
    metrics: Tuple[MetricDefinition, ...] = ()
    type: SourceType = SourceType.TIMESERIES


@dataclass(frozen=True)
class RegisteredMetric:
    """A metric annotated with its owning source, as listed by get_all_metrics()."""
    metric: MetricDefinition
    source_id: str
    source_label: str


@dataclass(frozen=True)
class ResolvedMetric:
    """A metric together with its owning DataSource."""
    metric: MetricDefinition
    source: DataSource

    @property
    def file(self) -> str:
        return self.metric.file or self.source.file

    @property
    def measured_since(self) -> str:
        return self.metric.measured_since or self.source.measured_since


# =============================================================================
# Categorical Records
# =============================================================================


@dataclass(frozen=True)
class DistributionField:
    """
    A histogram-able array inside a categorical source.

    When `count_key` is set the array is already binned: each element
    carries a bin value (`value_key`), a count (`count_key`) and optionally
    a display label (`label_key`).
    """
    id: str
    label: str
    data_path: str
    value_key: str
    label_key: Optional[str] = None
    count_key: Optional[str] = None


@dataclass(frozen=True)
class RankingField:
    """
    A numeric row attribute a ranking can be sorted by.

    For the by_category layout `aggregate` says how the per-category value
    is derived: COUNT of rows, or SUM of `source_key` across rows.
    """
    id: str
    label: str
    value_type: RankingValueType = RankingValueType.NUMBER
    source_key: Optional[str] = None
    aggregate: Optional[FieldAggregate] = None


@dataclass(frozen=True)
class CorrelationField:
    """A numeric row attribute (dotted path) usable as a scatter axis."""
    id: str
    label: str
    path: str


DEFAULT_METADATA_FIELDS: Tuple[str, ...] = (
    'username', 'avatar', 'verified', 'bio', 'category', 'type',
)


@dataclass(frozen=True)
class CategoricalSource:
    """
    A non-time-series dataset living in one JSON file.

    `data_path` of None means the file root holds the rows. Only the field
    list matching `data_type` is consulted.
    """
    id: str
    label: str
    file: str
    data_type: CategoricalDataType
    size_hint: SizeHint = SizeHint.MEDIUM
    data_path: Optional[str] = None
    data_layout: DataLayout = DataLayout.ROWS
    label_field: str = 'name'
    group_by_field: Optional[str] = None
    last_updated_path: Optional[str] = 'lastUpdated'
    metadata_fields: Tuple[str, ...] = DEFAULT_METADATA_FIELDS
    distribution_fields: Tuple[DistributionField, ...] = ()
    ranking_fields: Tuple[RankingField, ...] = ()
    correlation_fields: Tuple[CorrelationField, ...] = ()
    type: SourceType = field(default=SourceType.CATEGORICAL)

    def get_distribution_field(self, field_id: str) -> Optional[DistributionField]:
        return next((f for f in self.distribution_fields if f.id == field_id), None)

    def get_correlation_field(self, field_id: str) -> Optional[CorrelationField]:
        return next((f for f in self.correlation_fields if f.id == field_id), None)
