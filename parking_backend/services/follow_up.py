import re
from typing import Callable, List, Optional, Tuple

from ..config.llm import LLMClient
from ..schemas.ai import ConversationContext, FollowUpAnswer
from ..schemas.parking import ParkingSpot, SortKey
from ..utils import logger
from .filters import sort_results
from .responses import digest

NO_RESULTS_ANSWER = (
    "I don't have any previous results to discuss. What kind of parking are you looking for?"
)
APOLOGY_ANSWER = (
    "Sorry, I couldn't answer that right now. Here are the results from your last search."
)
FOLLOW_UP_SYSTEM_PROMPT = (
    "You are a helpful parking assistant. Answer the user's question about the "
    "parking spots listed below in a short, conversational way. Only use the "
    "information provided."
)
TOP_N = 5
DIGEST_SIZE = 10


def _top(sort_by: SortKey) -> Callable[[List[ParkingSpot]], List[ParkingSpot]]:
    return lambda spots: sort_results(spots, sort_by)[:TOP_N]


def _having(predicate: Callable[[ParkingSpot], bool]) -> Callable[[List[ParkingSpot]], List[ParkingSpot]]:
    return lambda spots: [s for s in spots if predicate(s)]


# First matching rule wins.
FOLLOW_UP_RULES: List[Tuple[re.Pattern, Callable[[List[ParkingSpot]], List[ParkingSpot]]]] = [
    (re.compile(r"cheapest|lowest price", re.I), _top(SortKey.price)),
    (re.compile(r"most available", re.I), _top(SortKey.availability)),
    (re.compile(r"safest", re.I), _top(SortKey.safety)),
    (re.compile(r"closest", re.I), _top(SortKey.distance)),
    (re.compile(r"covered", re.I), _having(lambda s: s.features.covered)),
    (re.compile(r"\bev\b|electric", re.I), _having(lambda s: s.features.ev_charging)),
    (re.compile(r"\bfree\b", re.I), _having(lambda s: s.pricing.hourly == 0)),
]


def filter_for_follow_up(query: str, results: List[ParkingSpot]) -> List[ParkingSpot]:
    for pattern, select in FOLLOW_UP_RULES:
        if pattern.search(query):
            return select(results)
    return list(results)


async def answer_follow_up(
    query: str,
    results: List[ParkingSpot],
    context: Optional[ConversationContext],
    llm: Optional[LLMClient],
) -> FollowUpAnswer:
    """Answer a question about previously shown results."""
    if not results:
        return FollowUpAnswer(answer=NO_RESULTS_ANSWER, results=[], needs_new_search=True)

    selected = filter_for_follow_up(query, results)
    if llm is None:
        return FollowUpAnswer(
            answer=f"From your last search, here are {len(selected)} matching spot(s).",
            results=selected,
        )

    previous = context.last_query if context and context.last_query else "unknown"
    prompt = (
        f'Previous search: "{previous}"\n'
        f"Parking spots ({len(results)} total, first {min(len(results), DIGEST_SIZE)} shown):\n"
        f"{digest(results, DIGEST_SIZE, detailed=True)}\n\n"
        f'Question: "{query}"'
    )
    try:
        answer = await llm.complete(
            FOLLOW_UP_SYSTEM_PROMPT, prompt, temperature=0.7, max_tokens=250
        )
    except Exception as e:
        logger.warning(f"Follow-up answer failed: {e!r}")
        answer = APOLOGY_ANSWER

    return FollowUpAnswer(answer=answer, results=selected, needs_new_search=False)
