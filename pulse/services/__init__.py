"""
Services package: the analytics core behind the API.

Services:
- dates: series date parsing and month coarsening
- statistics: regression, correlation, descriptive stats, histogram bins
- predictions: milestone forecasting
- transforms: range filtering, overlap, percent/period change, dual axis
- url_state: playground state <-> query string codec
- loaders: registry-driven data loading and reshaping
- formatters: display labels for numbers and forecasts

Everything except loaders is pure; loaders read files through the shared
DataFileCache (pulse.core.data_store).
"""

# =============================================================================
# Statistics
# =============================================================================

from pulse.services.statistics import (
    LinearRegressionResult,
    DescriptiveStats,
    HistogramBin,
    linear_regression,
    pearson_correlation,
    calculate_stats,
    create_histogram_bins,
)

# =============================================================================
# Milestone Predictions
# =============================================================================

from pulse.services.predictions import (
    MILESTONE_LADDER,
    predict_milestone,
    get_next_milestones,
)

# =============================================================================
# Transforms
# =============================================================================

from pulse.services.transforms import (
    normalize_date_format,
    find_overlapping_range,
    filter_by_date_range,
    normalize_to_percent_change,
    to_period_change,
    needs_dual_axis,
    apply_exclude_zero,
)

# =============================================================================
# URL State
# =============================================================================

from pulse.services.url_state import (
    BrowserEnvironment,
    decode_state,
    encode_state,
    canonicalize,
    get_date_range_filter,
    update_url,
    get_shareable_url,
    copy_shareable_url,
)

# =============================================================================
# Loaders
# =============================================================================

from pulse.services.loaders import (
    extract_time_series,
    load_metric_data,
    load_multiple_metrics,
    load_series,
    load_distribution_data,
    load_ranking_data,
    apply_ranking_view,
    load_correlation_data,
    should_eager_load,
)

# =============================================================================
# Formatters
# =============================================================================

from pulse.services.formatters import (
    format_number,
    format_predicted_date,
    format_days_until,
)

__all__ = [
    # Statistics
    'LinearRegressionResult',
    'DescriptiveStats',
    'HistogramBin',
    'linear_regression',
    'pearson_correlation',
    'calculate_stats',
    'create_histogram_bins',
    # Predictions
    'MILESTONE_LADDER',
    'predict_milestone',
    'get_next_milestones',
    # Transforms
    'normalize_date_format',
    'find_overlapping_range',
    'filter_by_date_range',
    'normalize_to_percent_change',
    'to_period_change',
    'needs_dual_axis',
    'apply_exclude_zero',
    # URL state
    'BrowserEnvironment',
    'decode_state',
    'encode_state',
    'canonicalize',
    'get_date_range_filter',
    'update_url',
    'get_shareable_url',
    'copy_shareable_url',
    # Loaders
    'extract_time_series',
    'load_metric_data',
    'load_multiple_metrics',
    'load_series',
    'load_distribution_data',
    'load_ranking_data',
    'apply_ranking_view',
    'load_correlation_data',
    'should_eager_load',
    # Formatters
    'format_number',
    'format_predicted_date',
    'format_days_until',
]
