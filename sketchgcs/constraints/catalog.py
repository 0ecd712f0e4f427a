"""Residual and gradient formulas for the point, line and circle constraints.

Every residual works on the constraint's slot values in layout order and
returns the *unscaled* value; the owning :class:`~sketchgcs.constraints.model.Constraint`
multiplies by its conditioning scale. Partials are returned as an array
aligned with the slots.
"""

from __future__ import annotations

from typing import Dict

import numpy as np

from .ellipse import ELLIPSE_KERNELS
from .math_utils import (
    _direction_angle_partials,
    _hypot,
    _line_offset,
    _relative_angle,
    _signed_area2,
    _unit_rescale,
)
from .step_limits import (
    l2l_angle_max_step,
    p2l_distance_max_step,
    p2p_angle_max_step,
    p2p_distance_max_step,
)
from .types import ConstraintKernel, ConstraintOptions, ConstraintType


# --- none: base contract, contributes nothing ---
def _none_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    return 0.0


def _none_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    return np.zeros(values.shape[0], dtype=float)


# --- equal: p1 - p2 ---
def _equal_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    p1, p2 = values
    return p1 - p2


def _equal_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    return np.array([1.0, -1.0], dtype=float)


# --- difference: (p2 - p1) - d ---
def _difference_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    p1, p2, diff = values
    return p2 - p1 - diff


def _difference_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    return np.array([-1.0, 1.0, -1.0], dtype=float)


# --- p2p_distance: |P1 - P2| - d ---
def _p2p_distance_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    x1, y1, x2, y2, dist = values
    return _hypot(x1 - x2, y1 - y2) - dist


def _p2p_distance_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    x1, y1, x2, y2, _ = values
    dx = x1 - x2
    dy = y1 - y2
    d = _hypot(dx, dy)
    return np.array([dx / d, dy / d, -dx / d, -dy / d, -1.0], dtype=float)


# --- p2p_angle: direction of P1->P2 relative to (angle + offset) ---
def _p2p_angle_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    x1, y1, x2, y2, angle = values
    return _relative_angle(x2 - x1, y2 - y1, angle + options.angle_offset)


def _p2p_angle_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    x1, y1, x2, y2, _ = values
    gx, gy = _direction_angle_partials(x2 - x1, y2 - y1)
    return np.array([-gx, -gy, gx, gy, -1.0], dtype=float)


# --- p2l_distance: |area2| / |L| - d ---
def _p2l_distance_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    x0, y0, x1, y1, x2, y2, dist = values
    area = _signed_area2(x0, y0, x1, y1, x2, y2)
    return np.abs(area) / _hypot(x2 - x1, y2 - y1) - dist


def _p2l_distance_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    x0, y0, x1, y1, x2, y2, _ = values
    area, _, offset_partials = _line_offset(x0, y0, x1, y1, x2, y2)
    if area < 0:
        offset_partials = -offset_partials
    return np.append(offset_partials, -1.0)


# --- point_on_line: signed area2 / |L| ---
def _point_on_line_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    x0, y0, x1, y1, x2, y2 = values
    return _signed_area2(x0, y0, x1, y1, x2, y2) / _hypot(x2 - x1, y2 - y1)


def _point_on_line_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    return _line_offset(*values)[2]


# --- point_on_perp_bisector: |P - L1| - |P - L2| ---
def _perp_bisector_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    x0, y0, x1, y1, x2, y2 = values
    return _hypot(x1 - x0, y1 - y0) - _hypot(x2 - x0, y2 - y0)


def _perp_bisector_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    x0, y0, x1, y1, x2, y2 = values
    dx1 = x1 - x0
    dy1 = y1 - y0
    dx2 = x2 - x0
    dy2 = y2 - y0
    d1 = _hypot(dx1, dy1)
    d2 = _hypot(dx2, dy2)
    return np.array(
        [
            -dx1 / d1 + dx2 / d2,
            -dy1 / d1 + dy2 / d2,
            dx1 / d1,
            dy1 / d1,
            -dx2 / d2,
            -dy2 / d2,
        ],
        dtype=float,
    )


def _line_pair_directions(values: np.ndarray):
    l1p1x, l1p1y, l1p2x, l1p2y, l2p1x, l2p1y, l2p2x, l2p2y = values[:8]
    return l1p1x - l1p2x, l1p1y - l1p2y, l2p1x - l2p2x, l2p1y - l2p2y


def _inverse_length_product_rescale(values: np.ndarray, coef: float, options: ConstraintOptions) -> float:
    dx1, dy1, dx2, dy2 = _line_pair_directions(values)
    return coef / np.sqrt((dx1 * dx1 + dy1 * dy1) * (dx2 * dx2 + dy2 * dy2))


# --- parallel: cross(d1, d2) ---
def _parallel_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    dx1, dy1, dx2, dy2 = _line_pair_directions(values)
    return dx1 * dy2 - dy1 * dx2


def _parallel_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    dx1, dy1, dx2, dy2 = _line_pair_directions(values)
    return np.array([dy2, -dx2, -dy2, dx2, -dy1, dx1, dy1, -dx1], dtype=float)


# --- perpendicular: dot(d1, d2) ---
def _perpendicular_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    dx1, dy1, dx2, dy2 = _line_pair_directions(values)
    return dx1 * dx2 + dy1 * dy2


def _perpendicular_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    dx1, dy1, dx2, dy2 = _line_pair_directions(values)
    return np.array([dx2, dy2, -dx2, -dy2, dx1, dy1, -dx1, -dy1], dtype=float)


# --- l2l_angle: direction of line2 relative to (direction of line1 + angle) ---
def _l2l_angle_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    l1p1x, l1p1y, l1p2x, l1p2y, l2p1x, l2p1y, l2p2x, l2p2y, angle = values
    dx1 = l1p2x - l1p1x
    dy1 = l1p2y - l1p1y
    base = np.arctan2(dy1, dx1) + angle
    return _relative_angle(l2p2x - l2p1x, l2p2y - l2p1y, base)


def _l2l_angle_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    l1p1x, l1p1y, l1p2x, l1p2y, l2p1x, l2p1y, l2p2x, l2p2y, _ = values
    g1x, g1y = _direction_angle_partials(l1p2x - l1p1x, l1p2y - l1p1y)
    g2x, g2y = _direction_angle_partials(l2p2x - l2p1x, l2p2y - l2p1y)
    # residual = dir(line2) - dir(line1) - angle
    return np.array([g1x, g1y, -g1x, -g1y, -g2x, -g2y, g2x, g2y, -1.0], dtype=float)


# --- midpoint_on_line: offset of midpoint(line1) from line2 ---
def _midpoint_on_line_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    l1p1x, l1p1y, l1p2x, l1p2y, x1, y1, x2, y2 = values
    x0 = (l1p1x + l1p2x) / 2
    y0 = (l1p1y + l1p2y) / 2
    return _signed_area2(x0, y0, x1, y1, x2, y2) / _hypot(x2 - x1, y2 - y1)


def _midpoint_on_line_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    l1p1x, l1p1y, l1p2x, l1p2y, x1, y1, x2, y2 = values
    x0 = (l1p1x + l1p2x) / 2
    y0 = (l1p1y + l1p2y) / 2
    partials = _line_offset(x0, y0, x1, y1, x2, y2)[2]
    gx = partials[0] / 2
    gy = partials[1] / 2
    return np.concatenate(([gx, gy, gx, gy], partials[2:]))


# --- tangent_circumf: |C1 - C2| - (r1 + r2) or |C1 - C2| - |r1 - r2| ---
def _tangent_circumf_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    c1x, c1y, c2x, c2y, r1, r2 = values
    d = _hypot(c1x - c2x, c1y - c2y)
    if options.internal:
        return d - np.abs(r1 - r2)
    return d - (r1 + r2)


def _tangent_circumf_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    c1x, c1y, c2x, c2y, r1, r2 = values
    dx = c1x - c2x
    dy = c1y - c2y
    d = _hypot(dx, dy)
    if options.internal:
        dr1 = -1.0 if r1 > r2 else 1.0
        dr2 = -dr1
    else:
        dr1 = dr2 = -1.0
    return np.array([dx / d, dy / d, -dx / d, -dy / d, dr1, dr2], dtype=float)


KERNELS: Dict[ConstraintType, ConstraintKernel] = {
    "none": ConstraintKernel("none", None, _none_residual, _none_partials, _unit_rescale),
    "equal": ConstraintKernel("equal", 2, _equal_residual, _equal_partials, _unit_rescale),
    "difference": ConstraintKernel(
        "difference", 3, _difference_residual, _difference_partials, _unit_rescale
    ),
    "p2p_distance": ConstraintKernel(
        "p2p_distance",
        5,
        _p2p_distance_residual,
        _p2p_distance_partials,
        _unit_rescale,
        p2p_distance_max_step,
    ),
    "p2p_angle": ConstraintKernel(
        "p2p_angle",
        5,
        _p2p_angle_residual,
        _p2p_angle_partials,
        _unit_rescale,
        p2p_angle_max_step,
    ),
    "p2l_distance": ConstraintKernel(
        "p2l_distance",
        7,
        _p2l_distance_residual,
        _p2l_distance_partials,
        _unit_rescale,
        p2l_distance_max_step,
    ),
    "point_on_line": ConstraintKernel(
        "point_on_line", 6, _point_on_line_residual, _point_on_line_partials, _unit_rescale
    ),
    "point_on_perp_bisector": ConstraintKernel(
        "point_on_perp_bisector", 6, _perp_bisector_residual, _perp_bisector_partials, _unit_rescale
    ),
    "parallel": ConstraintKernel(
        "parallel", 8, _parallel_residual, _parallel_partials, _inverse_length_product_rescale
    ),
    "perpendicular": ConstraintKernel(
        "perpendicular",
        8,
        _perpendicular_residual,
        _perpendicular_partials,
        _inverse_length_product_rescale,
    ),
    "l2l_angle": ConstraintKernel(
        "l2l_angle",
        9,
        _l2l_angle_residual,
        _l2l_angle_partials,
        _unit_rescale,
        l2l_angle_max_step,
    ),
    "midpoint_on_line": ConstraintKernel(
        "midpoint_on_line", 8, _midpoint_on_line_residual, _midpoint_on_line_partials, _unit_rescale
    ),
    "tangent_circumf": ConstraintKernel(
        "tangent_circumf", 6, _tangent_circumf_residual, _tangent_circumf_partials, _unit_rescale
    ),
}
KERNELS.update(ELLIPSE_KERNELS)


__all__ = ["KERNELS"]
