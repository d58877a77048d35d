# Parking lots around SJSU in the Geoapify Places feature shape, served
# whenever the live provider cannot be reached.


def _feature(name, formatted, lon, lat, parking_type, access, capacity, fee, **extra):
    parking = {
        "type": parking_type,
        "access": access,
        "capacity": capacity,
        "fee": fee,
        **extra,
    }
    return {
        "type": "Feature",
        "properties": {
            "name": name,
            "formatted": formatted,
            "categories": ["parking", "parking.cars"],
            "lon": lon,
            "lat": lat,
            "parking": parking,
            "restrictions": {"access": access},
        },
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
    }


MOCK_PARKING_FEATURES = [
    _feature(
        "VTA Park and Ride - SJSU North",
        "850 N 4th Street, San Jose, CA 95112",
        -121.878924,
        37.339386,
        "surface",
        "permissive",
        150,
        False,
        park_and_ride=True,
    ),
    _feature(
        "SJSU 7th Street Garage",
        "330 S 7th Street, San Jose, CA 95112",
        -121.882214,
        37.334512,
        "multi-storey",
        "public",
        800,
        True,
        levels=10,
    ),
    _feature(
        "City Hall Parking",
        "200 E Santa Clara St, San Jose, CA 95113",
        -121.885422,
        37.337702,
        "underground",
        "public",
        500,
        True,
    ),
    _feature(
        "Plaza Parking Lot",
        "88 S 4th St, San Jose, CA 95112",
        -121.880556,
        37.334888,
        "surface",
        "public",
        75,
        True,
    ),
    _feature(
        "Japantown Parking",
        "565 N 6th St, San Jose, CA 95112",
        -121.879234,
        37.352891,
        "surface",
        "public",
        120,
        False,
    ),
]
