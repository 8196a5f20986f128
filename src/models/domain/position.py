"""Spatial models used by proximity triggers and audio playback"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Position:
    """Point in space coordinates (y is up)"""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def distance_to(self, other: "Position") -> float:
        """Straight-line (Euclidean) distance"""
        dx = other.x - self.x
        dy = other.y - self.y
        dz = other.z - self.z
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    @classmethod
    def from_object_fields(cls, fields: Dict[str, Any]) -> "Position":
        """
        Build position from host object fields.

        Host objects store ground coordinates in `x`/`y` and elevation in
        `height`, so object `y` becomes the z axis here.
        """
        def _num(key: str) -> float:
            try:
                return float(fields.get(key) or 0)
            except (TypeError, ValueError):
                return 0.0

        return cls(x=_num("x"), y=_num("height"), z=_num("y"))


@dataclass(frozen=True)
class NearbyUser:
    """Another user reported by the host, with distance to the current user"""
    user_id: str
    distance: Optional[float] = None

    def is_within(self, radius: float) -> bool:
        # Users without a numeric distance are never counted
        return self.distance is not None and self.distance <= radius
