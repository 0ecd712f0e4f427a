"""Ellipse constraints in the centre / first focus / minor radius parameterisation.

An ellipse is stored as its centre ``C``, one focus ``F1`` and the minor
radius ``b``. Derived quantities used throughout::

    f  = F1 - C          (focal vector, |f| = c)
    F2 = 2C - F1         (second focus)
    a  = sqrt(b^2 + c^2) (major radius)

The residuals below are closed forms in these quantities, so no root of a
tangency condition has to be picked while iterating.
"""

from __future__ import annotations

from typing import Dict, Tuple

import numpy as np

from .math_utils import _PERP_MATRIX, _unit_rescale
from .types import ConstraintKernel, ConstraintOptions, ConstraintType

_IDENTITY = np.eye(2)


# --- point_on_ellipse ---
# With d1 = |P - F1| and d2 = |P - F2| the focal definition d1 + d2 = 2a gives
# d2 = (4a^2 + d2^2 - d1^2) / (4a); squaring removes every square root.
def _point_on_ellipse_terms(values: np.ndarray):
    px, py, cx, cy, fx, fy, b = values
    p = np.array([px, py], dtype=float)
    c = np.array([cx, cy], dtype=float)
    f1 = np.array([fx, fy], dtype=float)
    focal = f1 - c
    to_f2 = p - (2.0 * c - f1)
    to_f1 = p - f1
    s = float(np.dot(to_f2, to_f2))
    t = float(np.dot(to_f1, to_f1))
    a2 = b * b + float(np.dot(focal, focal))
    q = 4.0 * a2 + s - t
    return focal, to_f2, to_f1, s, t, a2, q, b


def _point_on_ellipse_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    _, _, _, s, _, a2, q, _ = _point_on_ellipse_terms(values)
    return s - q * q / (16.0 * np.float64(a2))


def _point_on_ellipse_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    focal, to_f2, to_f1, _, _, a2, q, b = _point_on_ellipse_terms(values)
    a2 = np.float64(a2)
    k_s = 1.0 - q / (8.0 * a2)
    k_t = q / (8.0 * a2)
    k_a = q * q / (16.0 * a2 * a2) - q / (2.0 * a2)

    d_p = k_s * 2.0 * to_f2 + k_t * 2.0 * to_f1
    d_c = k_s * -4.0 * to_f2 + k_a * -2.0 * focal
    d_f1 = k_s * 2.0 * to_f2 + k_t * -2.0 * to_f1 + k_a * 2.0 * focal
    d_b = k_a * 2.0 * b
    return np.concatenate((d_p, d_c, d_f1, [d_b]))


# --- ellipse_tangent_line ---
# A line is tangent to the ellipse exactly when the foot H of the
# perpendicular from a focus onto the line lies on the auxiliary circle
# |H - C| = a. The residual is 4 (|H - C|^2 - a^2).
def _tangent_line_terms(values: np.ndarray):
    x1, y1, x2, y2, cx, cy, fx, fy, b = values
    p1 = np.array([x1, y1], dtype=float)
    p2 = np.array([x2, y2], dtype=float)
    c = np.array([cx, cy], dtype=float)
    f1 = np.array([fx, fy], dtype=float)
    d = p2 - p1
    length2 = np.float64(np.dot(d, d))
    r = f1 - p1
    alpha = np.dot(r, d) / length2
    foot = p1 + alpha * d
    w = foot - c
    focal = f1 - c
    return d, length2, r, alpha, w, focal, b


def _ellipse_tangent_line_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    _, _, _, _, w, focal, b = _tangent_line_terms(values)
    return 4.0 * (np.dot(w, w) - b * b - np.dot(focal, focal))


def _ellipse_tangent_line_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    d, length2, r, alpha, w, focal, b = _tangent_line_terms(values)
    wd = np.dot(w, d)
    g1 = (1.0 - alpha) * w - wd * (r + (1.0 - 2.0 * alpha) * d) / length2
    g2 = alpha * w + wd * (r - 2.0 * alpha * d) / length2
    d_f1 = 8.0 * wd * d / length2 - 8.0 * focal
    d_c = -8.0 * w + 8.0 * focal
    return np.concatenate((8.0 * g1, 8.0 * g2, d_c, d_f1, [-8.0 * b]))


# --- internal_alignment_point2ellipse ---
_ALIGNMENTS: Dict[str, Tuple[str, float, int]] = {
    "positive_major_x": ("major", 1.0, 0),
    "positive_major_y": ("major", 1.0, 1),
    "negative_major_x": ("major", -1.0, 0),
    "negative_major_y": ("major", -1.0, 1),
    "positive_minor_x": ("minor", 1.0, 0),
    "positive_minor_y": ("minor", 1.0, 1),
    "negative_minor_x": ("minor", -1.0, 0),
    "negative_minor_y": ("minor", -1.0, 1),
    "focus2_x": ("focus2", 1.0, 0),
    "focus2_y": ("focus2", 1.0, 1),
}


def _landmark(values: np.ndarray, options: ConstraintOptions) -> Tuple[float, np.ndarray]:
    """Return one coordinate of the landmark and its partials.

    The partials are taken with respect to ``cx, cy, fx, fy, b``.
    """

    landmark, sign, axis = _ALIGNMENTS[options.alignment]
    _, _, cx, cy, fx, fy, b = values
    c = np.array([cx, cy], dtype=float)
    focal = np.array([fx - cx, fy - cy], dtype=float)

    if landmark == "focus2":
        position = 2.0 * c - (c + focal)
        d_c = 2.0 * _IDENTITY
        d_f1 = -_IDENTITY
        d_b = np.zeros(2)
    else:
        c_len = np.sqrt(np.dot(focal, focal))
        if landmark == "major":
            a = np.sqrt(b * b + c_len * c_len)
            ratio = a / c_len
            position = c + sign * ratio * focal
            d_f1 = sign * (ratio * _IDENTITY - (b * b / (a * c_len**3)) * np.outer(focal, focal))
            d_b = sign * focal * b / (a * c_len)
        else:
            unit = focal / c_len
            position = c + sign * b * (_PERP_MATRIX @ unit)
            d_f1 = sign * b * (_PERP_MATRIX @ (_IDENTITY - np.outer(unit, unit))) / c_len
            d_b = sign * (_PERP_MATRIX @ unit)
        d_c = _IDENTITY - d_f1

    partials = np.concatenate((d_c[axis], d_f1[axis], [d_b[axis]]))
    return position[axis], partials


def _alignment_residual(values: np.ndarray, options: ConstraintOptions) -> float:
    position, _ = _landmark(values, options)
    return values[_ALIGNMENTS[options.alignment][2]] - position


def _alignment_partials(values: np.ndarray, options: ConstraintOptions) -> np.ndarray:
    _, landmark_partials = _landmark(values, options)
    axis = _ALIGNMENTS[options.alignment][2]
    point_partials = np.zeros(2)
    point_partials[axis] = 1.0
    return np.concatenate((point_partials, -landmark_partials))


ELLIPSE_KERNELS: Dict[ConstraintType, ConstraintKernel] = {
    "point_on_ellipse": ConstraintKernel(
        "point_on_ellipse", 7, _point_on_ellipse_residual, _point_on_ellipse_partials, _unit_rescale
    ),
    "ellipse_tangent_line": ConstraintKernel(
        "ellipse_tangent_line",
        9,
        _ellipse_tangent_line_residual,
        _ellipse_tangent_line_partials,
        _unit_rescale,
    ),
    "internal_alignment_point2ellipse": ConstraintKernel(
        "internal_alignment_point2ellipse",
        7,
        _alignment_residual,
        _alignment_partials,
        _unit_rescale,
    ),
}

__all__ = ["ELLIPSE_KERNELS"]
