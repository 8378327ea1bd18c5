"""
FastAPI router for the playground URL state.

Endpoints:
- GET /playground/state: decode the request's own query string into a state
  plus its canonical re-encoding (defaults dropped, parameters reordered)
- POST /playground/encode: encode a state body into a query string
- GET /playground/view: decode the query and load the data the state selects

The query parameters are the playground's URL parameters verbatim, e.g.

    GET /playground/view?mode=ranking&rs=node-usage&rlimit=10

Decoding never fails: malformed values fall back to defaults.
"""

import logging
from typing import Optional, Union

from fastapi import APIRouter, HTTPException, Request

from pulse.core.data_store import DataFileCache
from pulse.core.dependencies import DataStoreDep
from pulse.models.schemas import (
    CorrelationData,
    CorrelationState,
    DecodedState,
    DistributionData,
    DistributionState,
    EncodedState,
    EncodeRequest,
    PlaygroundState,
    PlaygroundView,
    RankingData,
    RankingState,
    SeriesResponse,
    TimeSeriesState,
)
from pulse.services.loaders import (
    apply_ranking_view,
    load_correlation_data,
    load_distribution_data,
    load_ranking_data,
    load_series,
)
from pulse.services.url_state import canonicalize, encode_state

logger = logging.getLogger(__name__)

router = APIRouter()

ViewData = Union[SeriesResponse, DistributionData, RankingData, CorrelationData]


async def _load_view_data(state: PlaygroundState, store: DataFileCache) -> Optional[ViewData]:
    """Load the payload a state selects; None until the selection is complete."""
    if isinstance(state, TimeSeriesState):
        if not state.metrics:
            return None
        return await load_series(
            state.metrics,
            range_preset=state.range,
            data_mode=state.dataMode,
            cache=store,
        )

    if isinstance(state, DistributionState):
        if not (state.source and state.field):
            return None
        return await load_distribution_data(state.source, state.field, cache=store)

    if isinstance(state, RankingState):
        if not state.source:
            return None
        data = await load_ranking_data(state.source, cache=store)
        if data is None:
            return None
        return apply_ranking_view(
            data,
            sort=state.sort,
            sort_dir=state.sortDir,
            group=state.filter,
            limit=state.limit,
        )

    if isinstance(state, CorrelationState):
        if not (state.source and state.x and state.y):
            return None
        data = await load_correlation_data(state.source, state.x, state.y, cache=store)
        if data is not None and not state.trend:
            data = data.model_copy(update={"trendLine": None})
        return data

    return None


@router.get(
    "/state",
    response_model=DecodedState,
    summary="Decode Playground State",
)
async def decode_playground_state(request: Request) -> DecodedState:
    state, query = canonicalize(request.url.query)
    return DecodedState(state=state, query=query)


@router.post(
    "/encode",
    response_model=EncodedState,
    summary="Encode Playground State",
    description="Encode a state into its canonical query string (`\"\"` when every value is default).",
)
async def encode_playground_state(body: EncodeRequest) -> EncodedState:
    return EncodedState(query=encode_state(body.state))


@router.get(
    "/view",
    response_model=PlaygroundView,
    summary="Resolve Playground View",
    description="""
    Decode the query string and load the data the state selects in one call.

    `data` is null when the state does not select anything loadable yet
    (no metrics, no source chosen) or the backing file could not be loaded.
    """,
)
async def get_playground_view(request: Request, store: DataStoreDep) -> PlaygroundView:
    state, query = canonicalize(request.url.query)
    logger.info(f"Resolving playground view for mode={state.mode} query={query!r}")

    try:
        data = await _load_view_data(state, store)
    except Exception as e:
        logger.error(f"Error resolving playground view {query!r}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to resolve view: {str(e)}")

    return PlaygroundView(state=state, query=query, data=data)
