from rayfield.field.buffer import RayBuffer, RayFrame, TriangleBuffer, TriangleFrame
from rayfield.field.config import FieldConfig
from rayfield.field.evaluator import RayFieldEvaluator, merge_groups, partition
from rayfield.field.modes import RadialField, TriangleFanField

__all__ = [
    "FieldConfig",
    "RadialField",
    "RayBuffer",
    "RayFieldEvaluator",
    "RayFrame",
    "TriangleBuffer",
    "TriangleFanField",
    "TriangleFrame",
    "merge_groups",
    "partition",
]
