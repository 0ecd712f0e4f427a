"""Constraint catalog: residuals, gradients and step limits."""

from .builders import (
    difference,
    ellipse_tangent_line,
    equal,
    internal_alignment_point2ellipse,
    l2l_angle,
    midpoint_on_line,
    p2l_distance,
    p2p_angle,
    p2p_distance,
    parallel,
    perpendicular,
    point_on_ellipse,
    point_on_line,
    point_on_perp_bisector,
    tangent_circumf,
)
from .config import StepLimitConfig, get_step_limit_config, set_step_limit_config
from .model import Constraint
from .types import (
    ALIGNMENT_TYPES,
    CONSTRAINT_TYPES,
    AlignmentType,
    ConstraintDefinitionError,
    ConstraintOptions,
    ConstraintType,
    Direction,
    Redirection,
)

__all__ = [
    "ALIGNMENT_TYPES",
    "AlignmentType",
    "CONSTRAINT_TYPES",
    "Constraint",
    "ConstraintDefinitionError",
    "ConstraintOptions",
    "ConstraintType",
    "Direction",
    "Redirection",
    "StepLimitConfig",
    "difference",
    "ellipse_tangent_line",
    "equal",
    "get_step_limit_config",
    "internal_alignment_point2ellipse",
    "l2l_angle",
    "midpoint_on_line",
    "p2l_distance",
    "p2p_angle",
    "p2p_distance",
    "parallel",
    "perpendicular",
    "point_on_ellipse",
    "point_on_line",
    "point_on_perp_bisector",
    "set_step_limit_config",
    "tangent_circumf",
]
