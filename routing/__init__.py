#Marks routing as a package.
#Re-exports the distance scorer so other modules import from routing
#without knowing internal file names.
#No business logic.

from .geo import distance_km, EARTH_RADIUS_KM

__all__ = [
    "distance_km",
    "EARTH_RADIUS_KM",
]
