from rayfield.raymarch.config import RayMarchConfig, RayMarchResult
from rayfield.raymarch.intersect import (
    nearest_barrier_distance,
    nearest_barrier_distances,
    segment_intersect_distance,
)
from rayfield.raymarch.marcher import BatchMarcher, RayMarcher, march

__all__ = [
    "BatchMarcher",
    "RayMarchConfig",
    "RayMarchResult",
    "RayMarcher",
    "march",
    "nearest_barrier_distance",
    "nearest_barrier_distances",
    "segment_intersect_distance",
]
