from typing import List, Optional

from fastapi import APIRouter, Depends

from ..dependencies import get_geoapify
from ..exceptions import ParkingAPIError
from ..schemas.parking import Coordinates, FilterRequest, ParkingListResponse
from ..services.filters import filter_parking
from ..services.geoapify import GeoapifyService, with_distances
from ..utils import logger

router = APIRouter(prefix="/api/parking", tags=["parking"])


def parse_bbox(raw: str) -> List[float]:
    """Parse ``west,south,east,north``; raises ParkingAPIError on bad input."""
    try:
        bbox = [float(part) for part in raw.split(",")]
    except ValueError:
        bbox = []
    if len(bbox) != 4 or not (bbox[0] < bbox[2] and bbox[1] < bbox[3]):
        raise ParkingAPIError(
            400,
            "Invalid bbox: expected west,south,east,north with west < east and south < north",
        )
    return bbox


@router.get("/search", response_model=ParkingListResponse)
async def search_endpoint(
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    radius: float = 5000,
    bbox: Optional[str] = None,
    limit: int = 20,
    geoapify: GeoapifyService = Depends(get_geoapify),
):
    """Search by centre and radius, or by bounding box."""
    if bbox:
        box = parse_bbox(bbox)
        center = None
    elif lat is not None and lon is not None:
        box = None
        center = Coordinates(latitude=lat, longitude=lon)
    else:
        raise ParkingAPIError(400, "Missing required parameters: lat and lon (or bbox)")

    try:
        if box is not None:
            results = await geoapify.search_parking_by_bbox(box, limit)
        else:
            results = await geoapify.search_parking(lat, lon, radius, limit)
    except Exception as e:
        logger.exception(f"Search error: {e}")
        raise ParkingAPIError(500, "Failed to search parking", str(e)) from e

    results = with_distances(results, center)
    return ParkingListResponse(count=len(results), data=results, coordinates=center)


@router.get("/search-by-address", response_model=ParkingListResponse)
async def search_by_address_endpoint(
    address: Optional[str] = None,
    limit: int = 20,
    geoapify: GeoapifyService = Depends(get_geoapify),
):
    if not address:
        raise ParkingAPIError(400, "Missing required parameter: address")
    try:
        lookup = await geoapify.search_by_address(address, limit)
    except Exception as e:
        logger.exception(f"Address search error: {e}")
        raise ParkingAPIError(500, "Failed to search parking by address", str(e)) from e

    results = with_distances(lookup.results, lookup.coordinates)
    return ParkingListResponse(
        count=len(results), data=results, coordinates=lookup.coordinates
    )


@router.post("/filter", response_model=ParkingListResponse)
async def filter_endpoint(request: FilterRequest):
    try:
        filtered = filter_parking(request.results, request.filters)
    except Exception as e:
        logger.exception(f"Filter error: {e}")
        raise ParkingAPIError(500, "Failed to filter parking", str(e)) from e
    return ParkingListResponse(count=len(filtered), data=filtered)
