from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class Pricing(BaseModel):
    hourly: float = 0.0
    daily: float = 0.0
    monthly: float = 0.0
    currency: str = "USD"


class SpotFeatures(BaseModel):
    """Boolean amenity flags attached to a parking spot."""

    covered: bool = False
    security: bool = False
    ev_charging: bool = False
    disabled_access: bool = False
    bike_parking: bool = False


class SafetyRating(BaseModel):
    score: float = Field(default=0.0, ge=0, le=5)
    lighting: bool = False
    security_cameras: bool = False
    security_patrol: bool = False


class ParkingSpot(BaseModel):
    """A single parking location as returned to the client."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str = "Parking Area"
    address: str = "Address not available"
    coordinates: Coordinates
    type: str = "surface"
    capacity: int = 50
    available_spots: int = Field(default=0, alias="availableSpots")
    availability: float = 0  # percentage of free spots
    pricing: Pricing = Field(default_factory=Pricing)
    features: SpotFeatures = Field(default_factory=SpotFeatures)
    access: str = "public"
    fee: bool = True
    safety_rating: SafetyRating = Field(
        default_factory=SafetyRating, alias="safetyRating"
    )
    distance: Optional[float] = None


class PricePreference(str, Enum):
    cheap = "cheap"
    moderate = "moderate"
    expensive = "expensive"
    any = "any"


class SortKey(str, Enum):
    price = "price"
    distance = "distance"
    availability = "availability"
    safety = "safety"


class FeatureKey(str, Enum):
    """Feature keys a query may ask for."""

    overnight = "overnight"
    safe = "safe"
    secure = "secure"
    covered = "covered"
    security = "security"
    ev_charging = "ev_charging"
    disabled_access = "disabled_access"
    bike_parking = "bike_parking"


class ParsedQuery(BaseModel):
    """Structured search parameters extracted from a natural-language query."""

    model_config = ConfigDict(populate_by_name=True)

    location: Optional[str] = None
    price_preference: PricePreference = Field(
        default=PricePreference.any, alias="pricePreference"
    )
    features: List[FeatureKey] = Field(default_factory=list)
    max_distance: float = Field(default=5000, alias="maxDistance")
    sort_by: SortKey = Field(default=SortKey.distance, alias="sortBy")
    limit: int = Field(default=20, gt=0, le=50)


class ParkingFilters(BaseModel):
    """Criteria accepted by the explicit filter endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    price_max: Optional[float] = Field(default=None, alias="priceMax")
    features: List[str] = Field(default_factory=list)
    min_availability: Optional[float] = Field(default=None, alias="minAvailability")
    access: Optional[str] = None
    sort_by: Optional[str] = Field(default=None, alias="sortBy")


class FilterRequest(BaseModel):
    results: List[ParkingSpot]
    filters: ParkingFilters = Field(default_factory=ParkingFilters)


class AddressSearchResult(BaseModel):
    coordinates: Optional[Coordinates] = None
    results: List[ParkingSpot] = Field(default_factory=list)


class ParkingListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[ParkingSpot]
    coordinates: Optional[Coordinates] = None
