"""
Registry lookups.

Pure, total-or-absent accessors over the source catalogs. None of these
functions raise on unknown ids; callers handle a None result.
"""

from typing import Iterable, List, Optional

from pulse.models.enums import CategoricalDataType
from pulse.registry.categorical import CATEGORICAL_SOURCES
from pulse.registry.definitions import (
    CategoricalSource,
    DataSource,
    RegisteredMetric,
    ResolvedMetric,
)
from pulse.registry.sources import DATA_SOURCES


def get_all_metrics(
    sources: Iterable[DataSource] = DATA_SOURCES,
) -> List[RegisteredMetric]:
    """
    Flatten every source's metrics into one list for metric pickers.

    Order is stable: source declaration order, then metric declaration order.
    """
    return [
        RegisteredMetric(metric=metric, source_id=source.id, source_label=source.label)
        for source in sources
        for metric in source.metrics
    ]


def get_metric_by_id(
    metric_id: str,
    sources: Iterable[DataSource] = DATA_SOURCES,
) -> Optional[ResolvedMetric]:
    """Return the metric with its owning source, or None if the id is unknown."""
    for source in sources:
        for metric in source.metrics:
            if metric.id == metric_id:
                return ResolvedMetric(metric=metric, source=source)
    return None


def get_source_by_id(
    source_id: str,
    sources: Iterable[DataSource] = DATA_SOURCES,
) -> Optional[DataSource]:
    return next((s for s in sources if s.id == source_id), None)


def get_categorical_source_by_id(
    source_id: str,
    sources: Iterable[CategoricalSource] = CATEGORICAL_SOURCES,
) -> Optional[CategoricalSource]:
    return next((s for s in sources if s.id == source_id), None)


def get_categorical_sources_by_type(
    data_type: CategoricalDataType,
    sources: Iterable[CategoricalSource] = CATEGORICAL_SOURCES,
) -> List[CategoricalSource]:
    return [s for s in sources if s.data_type == data_type]


def validate_registry(
    sources: Iterable[DataSource] = DATA_SOURCES,
    categorical_sources: Iterable[CategoricalSource] = CATEGORICAL_SOURCES,
) -> List[str]:
    """
    Check catalog invariants and return a list of problems (empty when valid).

    Invariants:
        - metric ids are unique across all sources
        - source ids are unique within each catalog
        - every default granularity is one of the source's granularities
        - every categorical source declares fields for its data type
    """
    problems: List[str] = []
    sources = list(sources)
    categorical_sources = list(categorical_sources)

    seen_metrics: set = set()
    seen_sources: set = set()
    for source in sources:
        if source.id in seen_sources:
            problems.append(f"duplicate source id: {source.id}")
        seen_sources.add(source.id)

        if source.default_granularity not in source.granularities:
            problems.append(
                f"source {source.id}: default granularity "
                f"{source.default_granularity.value} not in granularities"
            )

        for metric in source.metrics:
            if metric.id in seen_metrics:
                problems.append(f"duplicate metric id: {metric.id}")
            seen_metrics.add(metric.id)

    seen_categorical: set = set()
    for source in categorical_sources:
        if source.id in seen_categorical:
            problems.append(f"duplicate categorical source id: {source.id}")
        seen_categorical.add(source.id)

        fields = {
            CategoricalDataType.DISTRIBUTION: source.distribution_fields,
            CategoricalDataType.RANKING: source.ranking_fields,
            CategoricalDataType.CORRELATION: source.correlation_fields,
        }[source.data_type]
        if not fields:
            problems.append(
                f"categorical source {source.id}: no {source.data_type.value} fields"
            )

    return problems
