# waygeo/domain/constants.py
from typing import Final

from waygeo.domain.entities.geometry import Vector

# Mean earth radius (spherical approximation), meters
EARTH_RADIUS_M: Final[float] = 6_371_000.0

# Arc containment: |θ(s,i) + θ(i,e) - θ(s,e)| must stay below this, radians.
# acos resolves ~1.5e-8 rad next to 1.0, so a crossing at an arc end still counts.
ANGULAR_TOLERANCE: Final[float] = 1e-7

# |course delta ∓ 360| below this counts as a simple ring, degrees
COURSE_DELTA_TOLERANCE_DEG: Final[float] = 1e-6

# Cross products / vector sums (per point) shorter than this are treated as zero
VECTOR_DEGENERACY_EPS: Final[float] = 1e-12

# Planar parallelism guard
PLANAR_EPS: Final[float] = 1e-12

NORTH_POLE: Final[Vector] = Vector(0.0, 0.0, 1.0)
SOUTH_POLE: Final[Vector] = Vector(0.0, 0.0, -1.0)
