from typing import List, Optional, Sequence

from ..config.llm import LLMClient
from ..schemas.parking import ParkingSpot
from ..utils import logger

SUMMARY_SYSTEM_PROMPT = (
    "You are a helpful parking assistant. "
    "Provide brief, friendly summaries of parking search results."
)
NO_RESULTS_MESSAGE = (
    "I couldn't find any parking spots matching your criteria. Try adjusting your search."
)


def describe_spot(spot: ParkingSpot, detailed: bool = False) -> str:
    """One-line description of a spot for use inside a model prompt."""
    parts = [
        spot.name,
        spot.address,
        f"${spot.pricing.hourly:.2f}/hr",
        f"{spot.availability:.0f}% available",
        f"safety {spot.safety_rating.score:.1f}/5",
    ]
    if detailed:
        features = [name for name, on in spot.features.model_dump().items() if on]
        parts.append("features: " + (", ".join(features) if features else "none"))
        parts.append(
            f"{spot.distance:.0f} m away" if spot.distance is not None else "distance unknown"
        )
    return " | ".join(parts)


def digest(spots: Sequence[ParkingSpot], limit: int, detailed: bool = False) -> str:
    return "\n".join(
        f"{i}. {describe_spot(spot, detailed)}" for i, spot in enumerate(spots[:limit], 1)
    )


def fallback_response(results: List[ParkingSpot]) -> str:
    if not results:
        return NO_RESULTS_MESSAGE
    count = len(results)
    plural = "s" if count > 1 else ""
    return f"I found {count} parking spot{plural} for you. Check the map to see locations and details."


async def generate_response(
    query: str, results: List[ParkingSpot], llm: Optional[LLMClient]
) -> str:
    """Natural-language summary of a result set."""
    if llm is None or not results:
        return fallback_response(results)

    prompt = (
        f'User asked: "{query}"\n'
        f"Found {len(results)} parking spots. Summarize the top options briefly.\n"
        f"Top options:\n{digest(results, 5)}"
    )
    try:
        return await llm.complete(
            SUMMARY_SYSTEM_PROMPT, prompt, temperature=0.7, max_tokens=150
        )
    except Exception as e:
        logger.warning(f"Response generation failed, using fallback: {e!r}")
        return fallback_response(results)
