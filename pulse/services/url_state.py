"""
Playground URL State Codec.

Round-trips the playground selection to a compact, shareable query string.
Each mode owns one parameter group:

    timeseries    m (comma-separated metric ids), r, t, d
    distribution  ds, df, dscale
    ranking       rs, rsort, rdir, rfilter, rlimit
    correlation   cs, cx, cy, ccolor, ctrend

plus `mode`, emitted only when it is not the default `timeseries`.

Decoding never raises: missing, malformed or out-of-enum values fall back to
their defaults and unknown parameters are ignored. Encoding omits defaults and
writes parameters in a fixed order, so equal states always encode to the same
string and `decode_state(encode_state(s)) == s` for every valid state.

Browser-side effects (address bar, clipboard) go through a BrowserEnvironment
passed by the caller; without one those helpers are no-ops.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Tuple, Type, TypeVar
from urllib.parse import parse_qsl, urlencode

from pulse.models.enums import (
    ChartType,
    DataMode,
    DistributionScale,
    PlaygroundMode,
    RangePreset,
    SortDirection,
)
from pulse.models.schemas import (
    MAX_SELECTED_METRICS,
    CorrelationState,
    DateRange,
    DistributionState,
    PlaygroundState,
    RankingState,
    TimeSeriesState,
)
from pulse.services.dates import format_month, shift_months

logger = logging.getLogger(__name__)

E = TypeVar('E')

# Months counted back from "now" for each range preset; 'all' has no filter
RANGE_MONTHS: Dict[RangePreset, int] = {
    RangePreset.ONE_MONTH: 1,
    RangePreset.THREE_MONTHS: 3,
    RangePreset.SIX_MONTHS: 6,
    RangePreset.ONE_YEAR: 12,
    RangePreset.TWO_YEARS: 24,
}

TRUE_FLAGS = ('1', 'true')

DEFAULT_TIMESERIES = TimeSeriesState()
DEFAULT_DISTRIBUTION = DistributionState()
DEFAULT_RANKING = RankingState()
DEFAULT_CORRELATION = CorrelationState()


class BrowserEnvironment(Protocol):
    """The slice of a browser page the share/update helpers need."""

    origin: str
    pathname: str

    def replace_state(self, url: str) -> None:
        ...

    async def write_clipboard(self, text: str) -> None:
        ...


# =============================================================================
# Decoding
# =============================================================================


def _first_values(query: str) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip('?'), keep_blank_values=True):
        params.setdefault(key, value)
    return params


def _enum_param(params: Dict[str, str], key: str, enum_type: Type[E], default: E) -> E:
    raw = params.get(key)
    if raw is None:
        return default
    try:
        return enum_type(raw)
    except ValueError:
        return default


def _text_param(params: Dict[str, str], key: str) -> Optional[str]:
    return params.get(key) or None


def _limit_param(params: Dict[str, str]) -> int:
    raw = params.get('rlimit')
    if raw is None:
        return DEFAULT_RANKING.limit
    try:
        limit = int(raw)
    except ValueError:
        return DEFAULT_RANKING.limit
    if not 1 <= limit <= 100:
        return DEFAULT_RANKING.limit
    return limit


def decode_state(query: str) -> PlaygroundState:
    """
    Parse a query string (with or without leading '?') into a playground state.

    For repeated keys the first occurrence wins. `m` is split on commas with
    blanks dropped and clamped to the first MAX_SELECTED_METRICS ids.

    Example:
        >>> decode_state("?m=github-stars,,discord-members&r=bogus").metrics
        ['github-stars', 'discord-members']
    """
    params = _first_values(query or '')
    mode = _enum_param(params, 'mode', PlaygroundMode, PlaygroundMode.TIMESERIES)

    if mode == PlaygroundMode.DISTRIBUTION:
        return DistributionState(
            source=_text_param(params, 'ds'),
            field=_text_param(params, 'df'),
            scale=_enum_param(params, 'dscale', DistributionScale, DEFAULT_DISTRIBUTION.scale),
        )

    if mode == PlaygroundMode.RANKING:
        return RankingState(
            source=_text_param(params, 'rs'),
            sort=_text_param(params, 'rsort'),
            sortDir=_enum_param(params, 'rdir', SortDirection, DEFAULT_RANKING.sortDir),
            filter=_text_param(params, 'rfilter'),
            limit=_limit_param(params),
        )

    if mode == PlaygroundMode.CORRELATION:
        return CorrelationState(
            source=_text_param(params, 'cs'),
            x=_text_param(params, 'cx'),
            y=_text_param(params, 'cy'),
            color=_text_param(params, 'ccolor'),
            trend=params.get('ctrend', '').lower() in TRUE_FLAGS,
        )

    metrics = [m for m in params.get('m', '').split(',') if m]
    return TimeSeriesState(
        metrics=metrics[:MAX_SELECTED_METRICS],
        range=_enum_param(params, 'r', RangePreset, DEFAULT_TIMESERIES.range),
        chartType=_enum_param(params, 't', ChartType, DEFAULT_TIMESERIES.chartType),
        dataMode=_enum_param(params, 'd', DataMode, DEFAULT_TIMESERIES.dataMode),
    )


# =============================================================================
# Encoding
# =============================================================================


def _changed(pairs: List[Tuple[str, object, object]]) -> List[Tuple[str, str]]:
    """Keep (key, value) for every value that differs from its default."""
    encoded: List[Tuple[str, str]] = []
    for key, value, default in pairs:
        if value is None or value == default:
            continue
        encoded.append((key, value.value if hasattr(value, 'value') else str(value)))
    return encoded


def encode_state(state: PlaygroundState) -> str:
    """
    Encode a state as '?key=value&...', or '' when everything is default.

    Example:
        >>> encode_state(RankingState(source='node-usage', limit=10))
        '?mode=ranking&rs=node-usage&rlimit=10'
    """
    params: List[Tuple[str, str]] = []

    if isinstance(state, DistributionState):
        params.append(('mode', PlaygroundMode.DISTRIBUTION.value))
        params += _changed([
            ('ds', state.source, None),
            ('df', state.field, None),
            ('dscale', state.scale, DEFAULT_DISTRIBUTION.scale),
        ])
    elif isinstance(state, RankingState):
        params.append(('mode', PlaygroundMode.RANKING.value))
        params += _changed([
            ('rs', state.source, None),
            ('rsort', state.sort, None),
            ('rdir', state.sortDir, DEFAULT_RANKING.sortDir),
            ('rfilter', state.filter, None),
            ('rlimit', state.limit, DEFAULT_RANKING.limit),
        ])
    elif isinstance(state, CorrelationState):
        params.append(('mode', PlaygroundMode.CORRELATION.value))
        params += _changed([
            ('cs', state.source, None),
            ('cx', state.x, None),
            ('cy', state.y, None),
            ('ccolor', state.color, None),
        ])
        if state.trend:
            params.append(('ctrend', '1'))
    else:
        if state.metrics:
            params.append(('m', ','.join(state.metrics)))
        params += _changed([
            ('r', state.range, DEFAULT_TIMESERIES.range),
            ('t', state.chartType, DEFAULT_TIMESERIES.chartType),
            ('d', state.dataMode, DEFAULT_TIMESERIES.dataMode),
        ])

    if not params:
        return ''
    return '?' + urlencode(params, safe=',')


def canonicalize(query: str) -> Tuple[PlaygroundState, str]:
    """Decode a query and return the state with its canonical encoding."""
    state = decode_state(query)
    return state, encode_state(state)


# =============================================================================
# Date Range Presets
# =============================================================================


def get_date_range_filter(
    range_preset: RangePreset,
    now: Optional[datetime] = None,
) -> Optional[DateRange]:
    """
    Month window for a range preset, counted back from `now`.

    Returns:
        DateRange with YYYY-MM bounds, or None for 'all'.

    Example:
        >>> get_date_range_filter(RangePreset.THREE_MONTHS, now=datetime(2024, 5, 31))
        DateRange(start='2024-02', end='2024-05')
    """
    months = RANGE_MONTHS.get(RangePreset(range_preset))
    if months is None:
        return None

    reference = now or datetime.now()
    return DateRange(
        start=format_month(shift_months(reference, -months)),
        end=format_month(reference),
    )


# =============================================================================
# Browser Environment Helpers
# =============================================================================


def update_url(state: PlaygroundState, env: Optional[BrowserEnvironment] = None) -> Optional[str]:
    """Replace the address bar with the encoded state; returns the new URL."""
    if env is None:
        return None
    url = f"{env.pathname}{encode_state(state)}"
    env.replace_state(url)
    return url


def get_shareable_url(state: PlaygroundState, env: Optional[BrowserEnvironment] = None) -> str:
    """Absolute URL (origin + path + query) for the state, or '' without an environment."""
    if env is None:
        return ''
    return f"{env.origin}{env.pathname}{encode_state(state)}"


async def copy_shareable_url(state: PlaygroundState, env: Optional[BrowserEnvironment] = None) -> bool:
    """Copy the shareable URL to the clipboard; False when unavailable or denied."""
    if env is None:
        return False
    try:
        await env.write_clipboard(get_shareable_url(state, env))
    except Exception as e:
        logger.warning(f"Clipboard write failed: {e}")
        return False
    return True
