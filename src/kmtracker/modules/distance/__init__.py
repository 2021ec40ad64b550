from .accumulator import DistanceAccumulator, haversine_km, fix_distance_km
