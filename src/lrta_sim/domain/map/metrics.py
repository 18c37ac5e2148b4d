import math

import numpy as np

from lrta_sim.app.protocols import DistanceMetric
from lrta_sim.domain.entities.geography import Position

EARTH_RADIUS_KM = 6371.0


class HaversineMetric(DistanceMetric):
    """Great-circle distance in kilometres between (lat, lon) degree pairs."""

    unit = "km"

    def distance(self, a: Position, b: Position) -> float:
        phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
        dphi = phi2 - phi1
        dlmb = math.radians(b.lon - a.lon)
        s = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
        return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(s)))

    def distances(self, p: Position, lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
        phi1 = math.radians(p.lat)
        phi2 = np.radians(lats)
        dphi = phi2 - phi1
        dlmb = np.radians(lons - p.lon)
        s = np.sin(dphi / 2) ** 2 + math.cos(phi1) * np.cos(phi2) * np.sin(dlmb / 2) ** 2
        return 2 * EARTH_RADIUS_KM * np.arcsin(np.minimum(1.0, np.sqrt(s)))


class PlanarMetric(DistanceMetric):
    """Euclidean distance treating lon as x and lat as y (projected coordinates)."""

    unit = ""

    def distance(self, a: Position, b: Position) -> float:
        return math.hypot(b.lon - a.lon, b.lat - a.lat)

    def distances(self, p: Position, lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
        return np.hypot(lons - p.lon, lats - p.lat)
