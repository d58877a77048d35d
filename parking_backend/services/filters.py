"""Pure filtering and sorting of parking spot collections.

Nothing here mutates its input: every function returns a new list, and
ordering uses the stable ``sorted`` so equal keys keep their incoming order.
"""
from typing import Callable, Dict, Iterable, List, Optional, Union

from ..schemas.parking import (
    FeatureKey,
    ParkingFilters,
    ParkingSpot,
    ParsedQuery,
    PricePreference,
    SortKey,
    SpotFeatures,
)

CHEAP_MAX_HOURLY = 3.0
MODERATE_MAX_HOURLY = 6.0
SAFE_MIN_SCORE = 4.0
OVERNIGHT_ACCESS = ("public", "permissive")


def matches_price(spot: ParkingSpot, preference: PricePreference) -> bool:
    hourly = spot.pricing.hourly
    if preference == PricePreference.cheap:
        return hourly <= CHEAP_MAX_HOURLY
    if preference == PricePreference.moderate:
        return CHEAP_MAX_HOURLY < hourly <= MODERATE_MAX_HOURLY
    if preference == PricePreference.expensive:
        return hourly > MODERATE_MAX_HOURLY
    return True


def has_feature(spot: ParkingSpot, feature: Union[FeatureKey, str]) -> bool:
    """Whether a spot satisfies one requested feature.

    Keys that are not spot amenities (and not safe/secure/overnight) are
    treated as missing, so the spot does not match.
    """
    key = feature.value if isinstance(feature, FeatureKey) else str(feature)
    if key in (FeatureKey.safe.value, FeatureKey.secure.value):
        return spot.safety_rating.score >= SAFE_MIN_SCORE
    if key == FeatureKey.overnight.value:
        return spot.access in OVERNIGHT_ACCESS
    return _flag(spot, key)


def _flag(spot: ParkingSpot, key: str) -> bool:
    if key not in SpotFeatures.model_fields:
        return False
    return bool(getattr(spot.features, key))


_SORT_KEYS: Dict[SortKey, Callable[[ParkingSpot], float]] = {
    SortKey.price: lambda s: s.pricing.hourly,
    SortKey.availability: lambda s: -s.availability,
    SortKey.safety: lambda s: -s.safety_rating.score,
    SortKey.distance: lambda s: s.distance or 0,
}


def sort_results(
    spots: Iterable[ParkingSpot], sort_by: Optional[Union[SortKey, str]]
) -> List[ParkingSpot]:
    """Return spots ordered by ``sort_by``; unknown keys keep the input order."""
    try:
        key = SortKey(sort_by) if sort_by is not None else None
    except ValueError:
        key = None
    if key is None:
        return list(spots)
    return sorted(spots, key=_SORT_KEYS[key])


def apply_filters(spots: Iterable[ParkingSpot], parsed: ParsedQuery) -> List[ParkingSpot]:
    """Filter by price bracket and features (all must hold), then sort."""
    filtered = [s for s in spots if matches_price(s, parsed.price_preference)]
    if parsed.features:
        filtered = [
            s for s in filtered if all(has_feature(s, f) for f in parsed.features)
        ]
    return sort_results(filtered, parsed.sort_by)


def filter_parking(spots: Iterable[ParkingSpot], filters: ParkingFilters) -> List[ParkingSpot]:
    """Explicit client-side filter criteria used by ``POST /api/parking/filter``."""
    filtered = list(spots)
    if filters.price_max:
        filtered = [s for s in filtered if s.pricing.hourly <= filters.price_max]
    if filters.features:
        filtered = [
            s
            for s in filtered
            if all(_flag(s, f) for f in filters.features)
        ]
    if filters.min_availability:
        filtered = [s for s in filtered if s.availability >= filters.min_availability]
    if filters.access:
        filtered = [s for s in filtered if s.access == filters.access]
    if filters.sort_by:
        filtered = sort_results(filtered, filters.sort_by)
    return filtered
