"""
Enumeration definitions for the n8n Pulse analytics backend.

All enums inherit from both `str` and `Enum` so they serialize as plain
strings in Pydantic models and can be compared directly against URL
parameter values.

Groups:
- Registry enums: Granularity, SourceType, CategoricalDataType, SizeHint,
  DataLayout, RankingValueType, FieldAggregate
- Playground enums: PlaygroundMode, RangePreset, ChartType, DataMode,
  DistributionScale, SortDirection
- Prediction enums: Confidence, MilestoneKind
"""

from enum import Enum


# =============================================================================
# Registry Enums
# =============================================================================


class Granularity(str, Enum):
    """
    Time bucket size of a history array.

    History files expose one top-level array per granularity
    (`daily`, `weekly`, `monthly`). A DataSource lists the subset
    its backing file actually provides.
    """
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class SourceType(str, Enum):
    """Kind of data a DataSource exposes."""
    TIMESERIES = "timeseries"
    CATEGORICAL = "categorical"


class CategoricalDataType(str, Enum):
    """
    Shape of a categorical dataset.

    - distribution: values binned into a histogram
    - ranking: rows ordered by one numeric field
    - correlation: rows projected onto two numeric axes
    """
    DISTRIBUTION = "distribution"
    RANKING = "ranking"
    CORRELATION = "correlation"


class SizeHint(str, Enum):
    """Approximate backing file size. Only `small` files are eager-loaded."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class DataLayout(str, Enum):
    """
    Layout of the rows under a categorical source's data path.

    - rows: a flat array of row objects
    - by_category: an object keyed by category name mapping to row arrays
    """
    ROWS = "rows"
    BY_CATEGORY = "by_category"


class RankingValueType(str, Enum):
    """Display type of a ranking field."""
    NUMBER = "number"
    PERCENTAGE = "percentage"


class FieldAggregate(str, Enum):
    """Per-category aggregation used by the by_category layout."""
    COUNT = "count"
    SUM = "sum"


# =============================================================================
# Playground Enums
# =============================================================================


class PlaygroundMode(str, Enum):
    """
    Chart mode of the playground.

    Discriminator of PlaygroundState. `timeseries` is the default
    and is never written to the URL.
    """
    TIMESERIES = "timeseries"
    DISTRIBUTION = "distribution"
    RANKING = "ranking"
    CORRELATION = "correlation"


class RangePreset(str, Enum):
    """Relative date range presets, counted back from now."""
    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"
    TWO_YEARS = "2y"
    ALL = "all"


class ChartType(str, Enum):
    """Time series chart style."""
    LINE = "line"
    AREA = "area"


class DataMode(str, Enum):
    """
    Time series value mode.

    - cumulative: values as stored (running totals for counters)
    - change: period-over-period deltas
    """
    CUMULATIVE = "cumulative"
    CHANGE = "change"


class DistributionScale(str, Enum):
    """Y-axis scale of a histogram."""
    LINEAR = "linear"
    LOG = "log"


class SortDirection(str, Enum):
    """Ranking sort direction."""
    ASC = "asc"
    DESC = "desc"


# =============================================================================
# Prediction Enums
# =============================================================================


class Confidence(str, Enum):
    """
    Confidence rating of a milestone prediction.

    - high: R² >= 0.9 with at least 8 points, or milestone already reached
    - medium: R² >= 0.7 with at least 5 points
    - low: anything else, including "no prediction"
    """
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MilestoneKind(str, Enum):
    """Kind of counter a milestone ladder is requested for."""
    STARS = "stars"
    USERS = "users"
    CREATORS = "creators"
    GENERIC = "generic"
