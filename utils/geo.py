"""Геометрия для ленты: расстояние по эллипсоиду и ограничивающий прямоугольник."""
import math
from typing import NamedTuple

from geopy.distance import geodesic

EARTH_RADIUS_KM = 6371.0
BOX_MARGIN = 1.01


class BoundingBox(NamedTuple):
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Return the geodesic (WGS-84) distance in kilometers between two coordinates."""
    return geodesic((lat1, lng1), (lat2, lng2)).kilometers


def bounding_box(lat: float, lng: float, radius_km: float) -> BoundingBox:
    """Прямоугольник, покрывающий круг радиуса radius_km вокруг точки.

    Считается на сфере с запасом BOX_MARGIN, точное расстояние проверяет distance_km.
    """
    angular = radius_km / EARTH_RADIUS_KM
    lat_delta = math.degrees(angular) * BOX_MARGIN
    min_lat = max(-90.0, lat - lat_delta)
    max_lat = min(90.0, lat + lat_delta)

    # Круг накрывает полюс — берём все долготы
    if max_lat >= 90.0 or min_lat <= -90.0:
        return BoundingBox(min_lat, max_lat, -180.0, 180.0)
    ratio = math.sin(angular) / math.cos(math.radians(lat))
    if ratio >= 1.0:
        return BoundingBox(min_lat, max_lat, -180.0, 180.0)
    lng_delta = math.degrees(math.asin(ratio)) * BOX_MARGIN
    return BoundingBox(min_lat, max_lat, lng - lng_delta, lng + lng_delta)
