from __future__ import annotations

from typing import Tuple

import numpy as np


def _hypot(dx: float, dy: float) -> float:
    return np.sqrt(dx * dx + dy * dy)


def _signed_area2(x0: float, y0: float, x1: float, y1: float, x2: float, y2: float) -> float:
    # twice the signed area of triangle (P0, P1, P2)
    dx = x2 - x1
    dy = y2 - y1
    return -x0 * dy + y0 * dx + x1 * y2 - x2 * y1


def _area2_partials(x0: float, y0: float, x1: float, y1: float, x2: float, y2: float) -> np.ndarray:
    return np.array([y1 - y2, x2 - x1, y2 - y0, x0 - x2, y0 - y1, x1 - x0], dtype=float)


def _line_offset(
    x0: float, y0: float, x1: float, y1: float, x2: float, y2: float
) -> Tuple[float, float, np.ndarray]:
    """Return ``(area2, length, d(area2 / length))`` for point P0 and line P1-P2.

    ``area2 / length`` is the signed perpendicular offset of P0 from the
    line; the partials are ordered ``x0, y0, x1, y1, x2, y2``.
    """

    dx = x2 - x1
    dy = y2 - y1
    length = _hypot(dx, dy)
    area = _signed_area2(x0, y0, x1, y1, x2, y2)
    d_area = _area2_partials(x0, y0, x1, y1, x2, y2)
    d_length = np.array([0.0, 0.0, -dx, -dy, dx, dy], dtype=float) / length
    partials = d_area / length - area * d_length / (length * length)
    return area, length, partials


def _relative_angle(dx: float, dy: float, angle: float) -> float:
    """Angle of ``(dx, dy)`` measured from direction ``angle``, in (-pi, pi]."""

    ca = np.cos(angle)
    sa = np.sin(angle)
    return np.arctan2(-dx * sa + dy * ca, dx * ca + dy * sa)


def _direction_angle_partials(dx: float, dy: float) -> Tuple[float, float]:
    # d atan2(dy, dx) / d(dx), d atan2(dy, dx) / d(dy)
    r2 = dx * dx + dy * dy
    return -dy / r2, dx / r2


def _unit_rescale(values: np.ndarray, coef: float, options) -> float:
    return coef * 1.0


_PERP_MATRIX = np.array([[0.0, -1.0], [1.0, 0.0]], dtype=float)

__all__ = [
    "_PERP_MATRIX",
    "_area2_partials",
    "_direction_angle_partials",
    "_hypot",
    "_line_offset",
    "_relative_angle",
    "_signed_area2",
    "_unit_rescale",
]
