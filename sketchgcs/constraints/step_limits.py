"""Step-limiting policies applied before the solver commits a step.

A step computed from the linearised system can leave a constraint's domain
of validity (a negative distance, an angle residual jumping across the
``atan2`` branch cut, a point crossing to the other side of a line). Each
``max_step`` receives the slot values, the proposed step of every slot and
the incoming scale-factor bound, and returns a bound that is never larger.
"""

from __future__ import annotations

import numpy as np

from . import config as _config
from .math_utils import _area2_partials, _hypot, _signed_area2
from .types import ConstraintOptions


def limit_nonnegative(value: float, step: float, limit: float) -> float:
    """Clamp ``limit`` so that ``value + limit * step`` stays at or above zero."""

    if step < 0.0:
        limit = min(limit, max(0.0, -value / step))
    return limit


def limit_angle_step(step: float, limit: float) -> float:
    """Clamp ``limit`` so an angle unknown moves by at most the configured angle."""

    max_angle = _config.active_step_limit_config().max_angle_step
    magnitude = abs(step)
    if magnitude > max_angle:
        limit = min(limit, max_angle / magnitude)
    return limit


def limit_relative_change(change: float, bound: float, limit: float) -> float:
    """Clamp ``limit`` so that ``limit * |change|`` does not exceed ``bound``.

    A non-positive ``bound`` carries no length scale and leaves ``limit``
    untouched.
    """

    change = abs(change)
    if bound > 0.0 and change > bound:
        limit = min(limit, bound / change)
    return limit


def p2p_distance_max_step(
    values: np.ndarray, steps: np.ndarray, limit: float, options: ConstraintOptions
) -> float:
    x1, y1, x2, y2, dist = values
    limit = limit_nonnegative(dist, steps[4], limit)
    dd = _hypot(steps[0] - steps[2], steps[1] - steps[3])
    if dd > 0.0:
        current = _hypot(x1 - x2, y1 - y2)
        limit = limit_relative_change(dd, max(current, dist), limit)
    return limit


def p2l_distance_max_step(
    values: np.ndarray, steps: np.ndarray, limit: float, options: ConstraintOptions
) -> float:
    x0, y0, x1, y1, x2, y2, dist = values
    limit = limit_nonnegative(dist, steps[6], limit)
    # first-order change of the (doubled) triangle area
    darea = abs(float(np.dot(_area2_partials(x0, y0, x1, y1, x2, y2), steps[:6])))
    if darea > 0.0:
        fraction = _config.active_step_limit_config().area_change_fraction
        length = _hypot(x2 - x1, y2 - y1)
        area = abs(_signed_area2(x0, y0, x1, y1, x2, y2))
        bound = max(fraction * dist * length, fraction * area)
        limit = limit_relative_change(darea, bound, limit)
    return limit


def p2p_angle_max_step(
    values: np.ndarray, steps: np.ndarray, limit: float, options: ConstraintOptions
) -> float:
    return limit_angle_step(steps[4], limit)


def l2l_angle_max_step(
    values: np.ndarray, steps: np.ndarray, limit: float, options: ConstraintOptions
) -> float:
    return limit_angle_step(steps[8], limit)


__all__ = [
    "l2l_angle_max_step",
    "limit_angle_step",
    "limit_nonnegative",
    "limit_relative_change",
    "p2l_distance_max_step",
    "p2p_angle_max_step",
    "p2p_distance_max_step",
]
