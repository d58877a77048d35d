import re
from typing import Optional

from ..config.llm import LLMClient
from ..schemas.ai import ConversationContext, QueryClassification, QueryType
from ..utils import logger, parse_json_object

CLASSIFIER_SYSTEM_PROMPT = """You classify messages sent to a parking search assistant.
Decide how the new message relates to the previous search:
- "new_search": the user wants a different search (new place, new kind of parking).
- "follow_up": the user asks a question about the results already shown.
- "refine": the user wants to narrow down or re-order the results already shown.

Respond with ONLY a JSON object: {"type": "new_search|follow_up|refine", "reason": "short explanation"}"""

NEW_SEARCH_PATTERN = re.compile(
    r"\b(near|around)\s+\w+|\b(find|search|look for|looking for)\b.*\bparking\b",
    re.IGNORECASE,
)
FOLLOW_UP_PATTERN = re.compile(
    r"^\s*(which|what|how|is|are|does|do|can|tell me)\b|\?\s*$"
    r"|\b(cheapest|safest|closest|nearest|most available|lowest price)\b",
    re.IGNORECASE,
)
REFINE_PATTERN = re.compile(
    r"\b(only|just|filter|instead|cheaper|closer|safer|with|without|under|sort)\b",
    re.IGNORECASE,
)


def classify_by_rules(query: str) -> QueryClassification:
    """Keyword classification used when no language model is configured."""
    if NEW_SEARCH_PATTERN.search(query):
        return QueryClassification(
            type=QueryType.new_search, reason="Query names a place or asks for a new search"
        )
    if FOLLOW_UP_PATTERN.search(query):
        return QueryClassification(
            type=QueryType.follow_up, reason="Question about the results already shown"
        )
    if REFINE_PATTERN.search(query):
        return QueryClassification(
            type=QueryType.refine, reason="Narrows down the results already shown"
        )
    return QueryClassification(type=QueryType.new_search, reason="No reference to earlier results")


async def classify_query(
    query: str,
    context: Optional[ConversationContext],
    llm: Optional[LLMClient],
) -> QueryClassification:
    """Decide whether ``query`` starts a new search or works on earlier results."""
    if context is None or not context.last_results:
        return QueryClassification(
            type=QueryType.new_search, reason="No previous results in this session"
        )

    if llm is None:
        return classify_by_rules(query)

    prompt = (
        f'Previous query: "{context.last_query or ""}"\n'
        f"Previous result count: {len(context.last_results)}\n"
        f'Current query: "{query}"'
    )
    try:
        text = await llm.complete(
            CLASSIFIER_SYSTEM_PROMPT,
            prompt,
            temperature=0.1,
            max_tokens=100,
            json_mode=True,
        )
        data = parse_json_object(text)
        return QueryClassification(
            type=QueryType(data["type"]), reason=str(data.get("reason", ""))
        )
    except Exception as e:
        logger.warning(f"Query classification failed, treating as new search: {e!r}")
        return QueryClassification(
            type=QueryType.new_search, reason="Classification unavailable"
        )
