"""
Source registry package.

Declarative catalog mapping "a metric the user can pick" to "where its
numbers live": which file backs it, which JSON path holds each value, units,
granularities and colours. One generic loader (pulse.services.loaders)
interprets these records; there is no per-source code.

Modules:
    - definitions: record dataclasses
    - sources: timeseries catalog (DATA_SOURCES)
    - categorical: distribution/ranking/correlation catalog (CATEGORICAL_SOURCES)
    - lookup: total-or-absent accessors
"""

from pulse.registry.definitions import (
    MetricDefinition,
    DataSource,
    RegisteredMetric,
    ResolvedMetric,
    DistributionField,
    RankingField,
    CorrelationField,
    CategoricalSource,
)
from pulse.registry.sources import DATA_SOURCES, COLORS
from pulse.registry.categorical import CATEGORICAL_SOURCES
from pulse.registry.lookup import (
    get_all_metrics,
    get_metric_by_id,
    get_source_by_id,
    get_categorical_source_by_id,
    get_categorical_sources_by_type,
    validate_registry,
)

__all__ = [
    # Records
    'MetricDefinition',
    'DataSource',
    'RegisteredMetric',
    'ResolvedMetric',
    'DistributionField',
    'RankingField',
    'CorrelationField',
    'CategoricalSource',
    # Catalogs
    'DATA_SOURCES',
    'CATEGORICAL_SOURCES',
    'COLORS',
    # Lookups
    'get_all_metrics',
    'get_metric_by_id',
    'get_source_by_id',
    'get_categorical_source_by_id',
    'get_categorical_sources_by_type',
    'validate_registry',
]
