"""
Package initialization file for pulse models.

Re-exports all Pydantic schemas and enumerations so other modules can import
them from `pulse.models` directly.

Usage:
    from pulse.models import (
        Granularity,
        LoadedMetricData,
        TimeSeriesState,
        # ... etc
    )
"""

# =============================================================================
# Enums
# =============================================================================

from pulse.models.enums import (
    # Registry enums
    Granularity,
    SourceType,
    CategoricalDataType,
    SizeHint,
    DataLayout,
    RankingValueType,
    FieldAggregate,
    # Playground enums
    PlaygroundMode,
    RangePreset,
    ChartType,
    DataMode,
    DistributionScale,
    SortDirection,
    # Prediction enums
    Confidence,
    MilestoneKind,
)

# =============================================================================
# Schemas
# =============================================================================

from pulse.models.schemas import (
    MAX_SELECTED_METRICS,
    # Time series
    TimeSeriesPoint,
    DateRange,
    LoadedMetricData,
    SeriesResponse,
    # Categorical
    DistributionBin,
    DistributionStats,
    DistributionData,
    RankingFieldInfo,
    RankingItem,
    RankingData,
    CorrelationPoint,
    CorrelationAxis,
    TrendPoint,
    CorrelationData,
    # Predictions
    MilestonePrediction,
    MilestoneForecast,
    # Registry listings
    MetricInfo,
    SourceInfo,
    CategoricalFieldInfo,
    CategoricalSourceInfo,
    # Playground state
    TimeSeriesState,
    DistributionState,
    RankingState,
    CorrelationState,
    PlaygroundState,
    EncodeRequest,
    EncodedState,
    DecodedState,
    PlaygroundView,
)

__all__ = [
    # Enums
    'Granularity',
    'SourceType',
    'CategoricalDataType',
    'SizeHint',
    'DataLayout',
    'RankingValueType',
    'FieldAggregate',
    'PlaygroundMode',
    'RangePreset',
    'ChartType',
    'DataMode',
    'DistributionScale',
    'SortDirection',
    'Confidence',
    'MilestoneKind',
    # Schemas
    'MAX_SELECTED_METRICS',
    'TimeSeriesPoint',
    'DateRange',
    'LoadedMetricData',
    'SeriesResponse',
    'DistributionBin',
    'DistributionStats',
    'DistributionData',
    'RankingFieldInfo',
    'RankingItem',
    'RankingData',
    'CorrelationPoint',
    'CorrelationAxis',
    'TrendPoint',
    'CorrelationData',
    'MilestonePrediction',
    'MilestoneForecast',
    'MetricInfo',
    'SourceInfo',
    'CategoricalFieldInfo',
    'CategoricalSourceInfo',
    'TimeSeriesState',
    'DistributionState',
    'RankingState',
    'CorrelationState',
    'PlaygroundState',
    'EncodeRequest',
    'EncodedState',
    'DecodedState',
    'PlaygroundView',
]
