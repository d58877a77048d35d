from typing import List, Optional, Tuple

from ..config import settings
from ..config.llm import LLMClient
from ..schemas.ai import AIQueryResponse, ConversationContext, QueryType
from ..schemas.parking import Coordinates, ParkingSpot, ParsedQuery
from ..utils import logger
from .classifier import classify_query
from .context_store import ContextStore
from .filters import apply_filters
from .follow_up import answer_follow_up
from .geoapify import GeoapifyService, with_distances
from .query_parser import parse_query
from .responses import generate_response

SUGGESTIONS = [
    "Find me the cheapest parking near SJSU",
    "Where can I park overnight near the library?",
    "Find the safest parking near me",
    "Show me covered parking with EV charging",
    "Find parking with disabled access near downtown",
    "Give me the top 5 parking spots around San Jose",
]


async def run_new_search(
    query: str, llm: Optional[LLMClient], geoapify: GeoapifyService
) -> Tuple[ParsedQuery, List[ParkingSpot], Optional[Coordinates]]:
    """Parse, hit the places provider, then filter around the search centre."""
    parsed: ParsedQuery = await parse_query(query, llm)
    if parsed.location:
        lookup = await geoapify.search_by_address(parsed.location, parsed.limit)
        center = lookup.coordinates
        results = lookup.results
    else:
        center = Coordinates(
            latitude=settings.DEFAULT_LATITUDE, longitude=settings.DEFAULT_LONGITUDE
        )
        results = await geoapify.search_parking(
            center.latitude, center.longitude, parsed.max_distance, parsed.limit
        )
    results = apply_filters(with_distances(results, center), parsed)
    return parsed, results, center


async def process_query(
    query: str,
    session_id: Optional[str],
    store: ContextStore,
    llm: Optional[LLMClient],
    geoapify: GeoapifyService,
) -> AIQueryResponse:
    """One turn of the parking assistant conversation.

    Follow-ups and refinements only ever work on the results returned in the
    previous turn of the same session; the provider is queried again only for
    a new search.
    """
    context: Optional[ConversationContext] = store.get(session_id)
    classification = await classify_query(query, context, llm)
    logger.info(
        f"🧭 Query classified as {classification.type.value} | "
        f"Session: {session_id} | Reason: {classification.reason}"
    )

    query_type = classification.type
    parsed: Optional[ParsedQuery] = None
    center: Optional[Coordinates] = context.last_coordinates if context else None
    results: List[ParkingSpot]
    ai_response: str

    if query_type == QueryType.follow_up:
        follow_up = await answer_follow_up(query, context.last_results, context, llm)
        if follow_up.needs_new_search:
            query_type = QueryType.new_search
        else:
            results, ai_response = follow_up.results, follow_up.answer

    if query_type == QueryType.refine:
        parsed = await parse_query(query, llm)
        results = apply_filters(context.last_results, parsed)
        ai_response = await generate_response(query, results, llm)

    if query_type == QueryType.new_search:
        parsed, results, center = await run_new_search(query, llm, geoapify)
        ai_response = await generate_response(query, results, llm)

    if session_id:
        store.set(
            session_id,
            last_query=query,
            last_results=results,
            last_response=ai_response,
            last_coordinates=center,
        )

    return AIQueryResponse(
        type=query_type,
        query=query,
        parsed=parsed,
        ai_response=ai_response,
        count=len(results),
        data=results,
    )
