from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Mapping, Optional, Tuple, get_args

import numpy as np

from ..params import ParamHandle

Direction = Mapping[ParamHandle, float]
Redirection = Mapping[ParamHandle, ParamHandle]

ConstraintType = Literal[
    "none",
    "equal",
    "difference",
    "p2p_distance",
    "p2p_angle",
    "p2l_distance",
    "point_on_line",
    "point_on_perp_bisector",
    "parallel",
    "perpendicular",
    "l2l_angle",
    "midpoint_on_line",
    "tangent_circumf",
    "point_on_ellipse",
    "ellipse_tangent_line",
    "internal_alignment_point2ellipse",
]

AlignmentType = Literal[
    "positive_major_x",
    "positive_major_y",
    "negative_major_x",
    "negative_major_y",
    "positive_minor_x",
    "positive_minor_y",
    "negative_minor_x",
    "negative_minor_y",
    "focus2_x",
    "focus2_y",
]

CONSTRAINT_TYPES: Tuple[str, ...] = get_args(ConstraintType)
ALIGNMENT_TYPES: Tuple[str, ...] = get_args(AlignmentType)


class ConstraintDefinitionError(ValueError):
    """Raised when a constraint cannot be built from the given parameters."""


@dataclass(frozen=True)
class ConstraintOptions:
    """Non-parameter data that some constraint kinds carry."""

    angle_offset: float = 0.0
    internal: bool = False
    alignment: Optional[AlignmentType] = None


ResidualFunc = Callable[[np.ndarray, ConstraintOptions], float]
PartialsFunc = Callable[[np.ndarray, ConstraintOptions], np.ndarray]
RescaleFunc = Callable[[np.ndarray, float, ConstraintOptions], float]
MaxStepFunc = Callable[[np.ndarray, np.ndarray, float, ConstraintOptions], float]


@dataclass(frozen=True)
class ConstraintKernel:
    """Evaluation routines for one constraint kind.

    ``residual`` and ``partials`` receive the values of the constraint's
    slots in layout order and return the *unscaled* residual and its
    derivative with respect to each slot. ``max_step`` additionally receives
    the proposed step of each slot (zero where the direction is silent).
    """

    kind: ConstraintType
    arity: Optional[int]
    residual: ResidualFunc
    partials: PartialsFunc
    rescale: RescaleFunc
    max_step: Optional[MaxStepFunc] = None


__all__ = [
    "ALIGNMENT_TYPES",
    "AlignmentType",
    "CONSTRAINT_TYPES",
    "ConstraintDefinitionError",
    "ConstraintKernel",
    "ConstraintOptions",
    "ConstraintType",
    "Direction",
    "MaxStepFunc",
    "PartialsFunc",
    "Redirection",
    "RescaleFunc",
    "ResidualFunc",
]
