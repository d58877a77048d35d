import math
import random
from typing import Any, Dict, Iterable, List, Optional, Sequence

import httpx

from ..config import settings
from ..schemas.parking import AddressSearchResult, Coordinates, ParkingSpot
from ..utils import logger
from .mock_data import MOCK_PARKING_FEATURES

METERS_PER_DEGREE = 111320
EARTH_RADIUS_METERS = 6371000.0


def _safe_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def with_distances(spots: Iterable[ParkingSpot], center: Optional[Coordinates]) -> List[ParkingSpot]:
    """Copies of ``spots`` with ``distance`` measured from ``center``."""
    if center is None:
        return list(spots)
    return [
        spot.model_copy(
            update={
                "distance": round(
                    haversine_meters(
                        center.latitude,
                        center.longitude,
                        spot.coordinates.latitude,
                        spot.coordinates.longitude,
                    )
                )
            }
        )
        for spot in spots
    ]


def bbox_around(lat: float, lon: float, radius: float) -> List[float]:
    """[west, south, east, north] box approximating a radius in meters."""
    radius_in_degrees = radius / METERS_PER_DEGREE
    return [
        lon - radius_in_degrees,
        lat - radius_in_degrees,
        lon + radius_in_degrees,
        lat + radius_in_degrees,
    ]


class GeoapifyService:
    """Places/geocoding provider adapter.

    Provider failures never escape: they are logged and answered with the
    bundled mock lots so the app keeps working offline or without a key.
    Prices, safety ratings and availability are not supplied by Geoapify and
    are generated per request.
    """

    def __init__(
        self,
        api_key: Optional[str] = settings.GEOAPIFY_API_KEY,
        timeout: float = settings.GEOAPIFY_TIMEOUT_SECONDS,
        rng: Optional[random.Random] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.rng = rng or random.Random()
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    def _require_key(self) -> str:
        if not self.api_key:
            raise ValueError("GEOAPIFY_API_KEY not configured")
        return self.api_key

    async def search_parking(
        self, lat: float, lon: float, radius: float = 5000, limit: int = 20
    ) -> List[ParkingSpot]:
        return await self.search_parking_by_bbox(bbox_around(lat, lon, radius), limit)

    async def search_parking_by_bbox(
        self, bbox: Sequence[float], limit: int = 20
    ) -> List[ParkingSpot]:
        lon1, lat1, lon2, lat2 = bbox
        rect_filter = f"rect:{lon1},{lat1},{lon2},{lat2}"
        logger.info(f"🔍 Searching parking with filter: {rect_filter}")
        try:
            async with self._client() as client:
                response = await client.get(
                    settings.GEOAPIFY_PLACES_URL,
                    params={
                        "categories": "parking.cars",
                        "filter": rect_filter,
                        "limit": limit,
                        "apiKey": self._require_key(),
                    },
                )
                response.raise_for_status()
                features = response.json().get("features") or []
            logger.info(f"✅ Geoapify response: {len(features)} results")
            return self.format_parking_data(features)
        except Exception as e:
            logger.warning(f"⚠️  Geoapify API error, using mock data: {e}")
            return self.format_parking_data(MOCK_PARKING_FEATURES)

    async def geocode(self, address: str) -> Coordinates:
        async with self._client() as client:
            response = await client.get(
                settings.GEOAPIFY_GEOCODE_URL,
                params={"text": address, "apiKey": self._require_key()},
            )
            response.raise_for_status()
            features = response.json().get("features") or []
        if not features:
            raise LookupError(f"Address not found: {address}")
        props = features[0]["properties"]
        return Coordinates(latitude=props["lat"], longitude=props["lon"])

    async def search_by_address(self, address: str, limit: int = 20) -> AddressSearchResult:
        try:
            coordinates = await self.geocode(address)
        except Exception as e:
            logger.warning(f"⚠️  Address search error, using mock data: {e}")
            return AddressSearchResult(
                coordinates=None,
                results=self.format_parking_data(MOCK_PARKING_FEATURES),
            )
        results = await self.search_parking(
            coordinates.latitude, coordinates.longitude, 5000, limit
        )
        return AddressSearchResult(coordinates=coordinates, results=results)

    def format_parking_data(self, features: Iterable[Dict[str, Any]]) -> List[ParkingSpot]:
        spots = []
        for index, feature in enumerate(features):
            props = feature.get("properties") or {}
            parking = props.get("parking") or {}
            geometry = (feature.get("geometry") or {}).get("coordinates") or [0, 0]
            parking_type = parking.get("type") or "surface"
            capacity = _safe_int(parking.get("capacity")) or 50
            capacity_details = parking.get("capacity_details") or {}
            availability = self.generate_availability(capacity)

            spots.append(
                ParkingSpot(
                    id=str(props.get("place_id") or f"parking_{index}"),
                    name=props.get("name") or "Parking Area",
                    address=props.get("formatted")
                    or props.get("address_line1")
                    or "Address not available",
                    coordinates=Coordinates(
                        latitude=props.get("lat") or geometry[1],
                        longitude=props.get("lon") or geometry[0],
                    ),
                    type=parking_type,
                    capacity=capacity,
                    available_spots=availability["available"],
                    availability=availability["percentage"],
                    pricing=self.generate_mock_price(parking),
                    features={
                        "covered": parking_type in ("multi-storey", "underground"),
                        "security": parking_type == "multi-storey",
                        "ev_charging": self.rng.random() > 0.7,
                        "disabled_access": (_safe_int(capacity_details.get("disabled")) or 0) > 0
                        or self.rng.random() > 0.5,
                        "bike_parking": (_safe_int(capacity_details.get("bike_rack")) or 0) > 0
                        or self.rng.random() > 0.6,
                    },
                    access=parking.get("access")
                    or (props.get("restrictions") or {}).get("access")
                    or "public",
                    fee=parking.get("fee") is not False,
                    safety_rating=self.generate_safety_rating(),
                    distance=None,
                )
            )
        return spots

    def generate_mock_price(self, parking: Dict[str, Any]) -> Dict[str, Any]:
        if parking.get("fee") is False:
            return {"hourly": 0, "daily": 0, "monthly": 0, "currency": "USD"}
        parking_type = parking.get("type")
        base_price = 3 if parking_type == "multi-storey" else 4 if parking_type == "underground" else 2
        return {
            "hourly": round(base_price + self.rng.random() * 2, 2),
            "daily": round((base_price + self.rng.random() * 2) * 8, 2),
            "monthly": round((base_price + self.rng.random() * 2) * 160, 2),
            "currency": "USD",
        }

    def generate_safety_rating(self) -> Dict[str, Any]:
        return {
            "score": round(3.5 + self.rng.random() * 1.5, 1),
            "lighting": self.rng.random() > 0.3,
            "security_cameras": self.rng.random() > 0.4,
            "security_patrol": self.rng.random() > 0.6,
        }

    def generate_availability(self, capacity: int = 50) -> Dict[str, int]:
        occupied = self.rng.randrange(capacity) if capacity > 0 else 0
        available = capacity - occupied
        return {
            "available": available,
            "occupied": occupied,
            "percentage": round(available / capacity * 100) if capacity else 0,
        }
