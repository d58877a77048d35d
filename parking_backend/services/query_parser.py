import math
import re
from typing import Any, Dict, List, Optional

from ..config.llm import LLMClient
from ..schemas.parking import FeatureKey, ParsedQuery, PricePreference, SortKey
from ..utils import logger, parse_json_object

DEFAULT_MAX_DISTANCE = 5000
DEFAULT_LIMIT = 20
MAX_LIMIT = 50

PARSER_SYSTEM_PROMPT = """You are a parking search assistant. Parse user queries into structured JSON.
Extract: location (address/place), price preference (cheap/moderate/expensive),
features (overnight, safe/secure, covered, EV charging, disabled access),
distance preference, and any other constraints.

Return ONLY valid JSON in this format:
{
  "location": "string or null",
  "pricePreference": "cheap|moderate|expensive|any",
  "features": ["feature1", "feature2"],
  "maxDistance": number in meters or null,
  "sortBy": "price|distance|availability|safety",
  "limit": number (default 20)
}"""

# Order matters: the first pattern that matches supplies the location.
LOCATION_PATTERNS = [
    re.compile(r"near\s+(.+?)(?:\s|$)", re.IGNORECASE),
    re.compile(r"around\s+(.+?)(?:\s|$)", re.IGNORECASE),
    re.compile(r"at\s+(.+?)(?:\s|$)", re.IGNORECASE),
    re.compile(r"in\s+(.+?)(?:\s|$)", re.IGNORECASE),
]
LIMIT_PATTERN = re.compile(r"top\s+(\d+)", re.IGNORECASE)

FEATURE_KEYWORDS = [
    (FeatureKey.overnight, ("overnight", "24 hour")),
    (FeatureKey.safe, ("safe", "secure")),
    (FeatureKey.covered, ("covered", "garage")),
    (FeatureKey.ev_charging, ("ev", "electric")),
    (FeatureKey.disabled_access, ("disabled", "accessible")),
]

FEATURE_ALIASES = {
    "ev": FeatureKey.ev_charging,
    "electric": FeatureKey.ev_charging,
    "ev_charger": FeatureKey.ev_charging,
    "accessible": FeatureKey.disabled_access,
    "disabled": FeatureKey.disabled_access,
    "24_hour": FeatureKey.overnight,
    "garage": FeatureKey.covered,
}


def fallback_parser(query: str) -> Dict[str, Any]:
    """Keyword and regex parsing used when the language model is unavailable."""
    lower_query = query.lower()
    parsed: Dict[str, Any] = {
        "location": None,
        "pricePreference": PricePreference.any.value,
        "features": [],
        "maxDistance": DEFAULT_MAX_DISTANCE,
        "sortBy": SortKey.distance.value,
        "limit": DEFAULT_LIMIT,
    }

    for pattern in LOCATION_PATTERNS:
        match = pattern.search(query)
        if match:
            parsed["location"] = match.group(1).strip()
            break

    if "cheap" in lower_query or "affordable" in lower_query:
        parsed["pricePreference"] = PricePreference.cheap.value
        parsed["sortBy"] = SortKey.price.value
    elif "expensive" in lower_query or "premium" in lower_query:
        parsed["pricePreference"] = PricePreference.expensive.value

    for feature, keywords in FEATURE_KEYWORDS:
        if any(keyword in lower_query for keyword in keywords):
            parsed["features"].append(feature.value)
            if feature == FeatureKey.safe:
                parsed["sortBy"] = SortKey.safety.value

    limit_match = LIMIT_PATTERN.search(query)
    if limit_match:
        parsed["limit"] = int(limit_match.group(1))

    return parsed


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def normalize_features(raw: Any) -> List[FeatureKey]:
    """Map raw feature names onto FeatureKey, dropping anything unknown."""
    if not isinstance(raw, list):
        return []
    features: List[FeatureKey] = []
    for item in raw:
        if not isinstance(item, str):
            continue
        key = item.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            feature = FeatureKey(key)
        except ValueError:
            feature = FEATURE_ALIASES.get(key)
        if feature is None:
            logger.warning(f"Dropping unrecognized feature '{item}'")
            continue
        if feature not in features:
            features.append(feature)
    return features


def validate_parsed_query(parsed: Dict[str, Any]) -> ParsedQuery:
    """Clamp and default every field so the result is always a valid query."""
    location = parsed.get("location")
    if not isinstance(location, str) or not location.strip():
        location = None

    price = parsed.get("pricePreference")
    price_values = [p.value for p in PricePreference]
    price_preference = price if price in price_values else PricePreference.any.value

    sort_by = parsed.get("sortBy")
    sort_values = [s.value for s in SortKey]
    sort_by = sort_by if sort_by in sort_values else SortKey.distance.value

    max_distance = parsed.get("maxDistance")
    if not _is_number(max_distance):
        max_distance = DEFAULT_MAX_DISTANCE

    limit = parsed.get("limit")
    if _is_number(limit) and limit >= 1:
        limit = min(int(limit), MAX_LIMIT)
    else:
        limit = DEFAULT_LIMIT

    return ParsedQuery(
        location=location.strip() if location else None,
        price_preference=price_preference,
        features=normalize_features(parsed.get("features")),
        max_distance=max_distance,
        sort_by=sort_by,
        limit=limit,
    )


async def parse_query(query: str, llm: Optional[LLMClient]) -> ParsedQuery:
    """Turn a natural-language query into search parameters.

    The language model is tried first; any failure (provider error, timeout,
    unparseable output) silently switches to ``fallback_parser``.
    """
    if llm is None:
        logger.warning("⚠️  LLM not configured, using fallback parser")
        return validate_parsed_query(fallback_parser(query))

    try:
        text = await llm.complete(
            PARSER_SYSTEM_PROMPT,
            query,
            temperature=0.3,
            max_tokens=300,
            json_mode=True,
        )
        return validate_parsed_query(parse_json_object(text))
    except Exception as e:
        logger.error(f"AI parsing error ({llm.name}): {e!r}")
        return validate_parsed_query(fallback_parser(query))
