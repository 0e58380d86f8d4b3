from .haversine import haversine

__all__ = [
    "haversine"
]
