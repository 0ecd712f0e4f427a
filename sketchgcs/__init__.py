import logging

from .assembly import (
    GradientMismatch,
    check_gradients,
    jacobian,
    limit_step,
    numeric_gradient,
    rescale_all,
    residual_vector,
)
from .constraints import (
    ALIGNMENT_TYPES,
    CONSTRAINT_TYPES,
    Constraint,
    ConstraintDefinitionError,
    ConstraintOptions,
    StepLimitConfig,
    difference,
    ellipse_tangent_line,
    equal,
    get_step_limit_config,
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
    set_step_limit_config,
    tangent_circumf,
)
from .params import Ellipse, Line, ParameterError, ParameterPool, Point

if not logging.getLogger().handlers:  # pragma: no cover - depends on host application
    logging.basicConfig(level=logging.INFO)

__all__ = [
    'ALIGNMENT_TYPES',
    'CONSTRAINT_TYPES',
    'Constraint',
    'ConstraintDefinitionError',
    'ConstraintOptions',
    'Ellipse',
    'GradientMismatch',
    'Line',
    'ParameterError',
    'ParameterPool',
    'Point',
    'StepLimitConfig',
    'check_gradients',
    'difference',
    'ellipse_tangent_line',
    'equal',
    'get_step_limit_config',
    'internal_alignment_point2ellipse',
    'jacobian',
    'l2l_angle',
    'limit_step',
    'midpoint_on_line',
    'numeric_gradient',
    'p2l_distance',
    'p2p_angle',
    'p2p_distance',
    'parallel',
    'perpendicular',
    'point_on_ellipse',
    'point_on_line',
    'point_on_perp_bisector',
    'rescale_all',
    'residual_vector',
    'set_step_limit_config',
    'tangent_circumf',
]
