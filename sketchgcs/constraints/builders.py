"""Factories creating constraints from points, lines and ellipses."""

from __future__ import annotations

from typing import Optional, Sequence

from ..params import Ellipse, Line, ParameterPool, ParamHandle, Point
from .model import Constraint
from .types import AlignmentType, ConstraintOptions, ConstraintType


def _make(
    kind: ConstraintType,
    pool: ParameterPool,
    handles: Sequence[ParamHandle],
    options: Optional[ConstraintOptions] = None,
    tag: int = 0,
) -> Constraint:
    return Constraint(kind, pool, tuple(handles), options or ConstraintOptions(), tag)


def _line_handles(line: Line) -> tuple:
    return (line.p1.x, line.p1.y, line.p2.x, line.p2.y)


def _ellipse_handles(ellipse: Ellipse) -> tuple:
    return (ellipse.center.x, ellipse.center.y, ellipse.focus1.x, ellipse.focus1.y, ellipse.radmin)


def equal(pool: ParameterPool, p1: ParamHandle, p2: ParamHandle, *, tag: int = 0) -> Constraint:
    return _make("equal", pool, (p1, p2), tag=tag)


def difference(
    pool: ParameterPool, p1: ParamHandle, p2: ParamHandle, d: ParamHandle, *, tag: int = 0
) -> Constraint:
    return _make("difference", pool, (p1, p2, d), tag=tag)


def p2p_distance(pool: ParameterPool, p1: Point, p2: Point, d: ParamHandle, *, tag: int = 0) -> Constraint:
    return _make("p2p_distance", pool, (p1.x, p1.y, p2.x, p2.y, d), tag=tag)


def p2p_angle(
    pool: ParameterPool,
    p1: Point,
    p2: Point,
    angle: ParamHandle,
    offset: float = 0.0,
    *,
    tag: int = 0,
) -> Constraint:
    """Direction of ``p1 -> p2`` equals ``angle + offset`` (radians)."""

    return _make(
        "p2p_angle",
        pool,
        (p1.x, p1.y, p2.x, p2.y, angle),
        ConstraintOptions(angle_offset=float(offset)),
        tag,
    )


def p2l_distance(pool: ParameterPool, p: Point, line: Line, d: ParamHandle, *, tag: int = 0) -> Constraint:
    return _make("p2l_distance", pool, (p.x, p.y) + _line_handles(line) + (d,), tag=tag)


def point_on_line(pool: ParameterPool, p: Point, line: Line, *, tag: int = 0) -> Constraint:
    return _make("point_on_line", pool, (p.x, p.y) + _line_handles(line), tag=tag)


def point_on_perp_bisector(pool: ParameterPool, p: Point, line: Line, *, tag: int = 0) -> Constraint:
    return _make("point_on_perp_bisector", pool, (p.x, p.y) + _line_handles(line), tag=tag)


def parallel(pool: ParameterPool, l1: Line, l2: Line, *, tag: int = 0) -> Constraint:
    return _make("parallel", pool, _line_handles(l1) + _line_handles(l2), tag=tag)


def perpendicular(pool: ParameterPool, l1: Line, l2: Line, *, tag: int = 0) -> Constraint:
    return _make("perpendicular", pool, _line_handles(l1) + _line_handles(l2), tag=tag)


def l2l_angle(pool: ParameterPool, l1: Line, l2: Line, angle: ParamHandle, *, tag: int = 0) -> Constraint:
    return _make("l2l_angle", pool, _line_handles(l1) + _line_handles(l2) + (angle,), tag=tag)


def midpoint_on_line(pool: ParameterPool, l1: Line, l2: Line, *, tag: int = 0) -> Constraint:
    """Midpoint of ``l1`` lies on ``l2``."""

    return _make("midpoint_on_line", pool, _line_handles(l1) + _line_handles(l2), tag=tag)


def tangent_circumf(
    pool: ParameterPool,
    c1: Point,
    c2: Point,
    r1: ParamHandle,
    r2: ParamHandle,
    internal: bool = False,
    *,
    tag: int = 0,
) -> Constraint:
    return _make(
        "tangent_circumf",
        pool,
        (c1.x, c1.y, c2.x, c2.y, r1, r2),
        ConstraintOptions(internal=bool(internal)),
        tag,
    )


def point_on_ellipse(pool: ParameterPool, p: Point, ellipse: Ellipse, *, tag: int = 0) -> Constraint:
    return _make("point_on_ellipse", pool, (p.x, p.y) + _ellipse_handles(ellipse), tag=tag)


def ellipse_tangent_line(pool: ParameterPool, line: Line, ellipse: Ellipse, *, tag: int = 0) -> Constraint:
    return _make("ellipse_tangent_line", pool, _line_handles(line) + _ellipse_handles(ellipse), tag=tag)


def internal_alignment_point2ellipse(
    pool: ParameterPool,
    ellipse: Ellipse,
    p: Point,
    alignment: AlignmentType,
    *,
    tag: int = 0,
) -> Constraint:
    """Tie one coordinate of ``p`` to a landmark of ``ellipse``."""

    return _make(
        "internal_alignment_point2ellipse",
        pool,
        (p.x, p.y) + _ellipse_handles(ellipse),
        ConstraintOptions(alignment=alignment),
        tag,
    )


__all__ = [
    "difference",
    "ellipse_tangent_line",
    "equal",
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
    "tangent_circumf",
]
