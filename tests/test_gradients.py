import math

import pytest

from sketchgcs import (
    ParameterPool,
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
from sketchgcs.constraints import ALIGNMENT_TYPES


def _central_difference(constraint, handle, h=1e-6):
    pool = constraint.pool
    x = pool[handle]
    step = h * max(1.0, abs(x))
    pool[handle] = x + step
    forward = constraint.error()
    pool[handle] = x - step
    backward = constraint.error()
    pool[handle] = x
    return (forward - backward) / (2.0 * step)


def _ellipse(pool):
    return pool.ellipse(0.2, -0.1, 1.9, 0.6, 1.4)


def _build_cases():
    def _equal(pool):
        return equal(pool, pool.add(3.0), pool.add(5.0))

    def _difference(pool):
        return difference(pool, pool.add(1.0), pool.add(4.0), pool.add(2.5))

    def _p2p_distance(pool):
        return p2p_distance(pool, pool.point(0.3, -1.2), pool.point(2.1, 0.7), pool.add(1.5))

    def _p2p_angle(pool):
        return p2p_angle(pool, pool.point(0.5, 0.2), pool.point(1.7, 2.3), pool.add(0.4), 0.3)

    def _p2l_distance_above(pool):
        return p2l_distance(pool, pool.point(0.4, 2.0), pool.line(-1.0, 0.2, 3.0, 0.9), pool.add(1.2))

    def _p2l_distance_below(pool):
        return p2l_distance(pool, pool.point(0.4, -2.0), pool.line(-1.0, 0.2, 3.0, 0.9), pool.add(1.2))

    def _point_on_line(pool):
        return point_on_line(pool, pool.point(0.4, 2.0), pool.line(-1.0, 0.2, 3.0, 0.9))

    def _perp_bisector(pool):
        return point_on_perp_bisector(pool, pool.point(0.3, 1.9), pool.line(-1.0, 0.2, 2.5, -0.4))

    def _parallel(pool):
        return parallel(pool, pool.line(0.0, 0.0, 2.0, 0.5), pool.line(0.3, 1.0, 2.2, 1.9))

    def _perpendicular(pool):
        return perpendicular(pool, pool.line(0.0, 0.0, 2.0, 0.5), pool.line(0.3, 1.0, 0.9, 2.8))

    def _l2l_angle(pool):
        return l2l_angle(pool, pool.line(0.0, 0.0, 2.0, 0.5), pool.line(0.3, 1.0, 1.0, 2.9), pool.add(0.9))

    def _midpoint_on_line(pool):
        return midpoint_on_line(pool, pool.line(0.0, 0.0, 2.0, 1.5), pool.line(-1.0, 0.3, 3.0, 0.8))

    def _tangent_external(pool):
        return tangent_circumf(pool, pool.point(0.0, 0.0), pool.point(3.0, 1.0), pool.add(1.1), pool.add(0.7))

    def _tangent_internal_r1_larger(pool):
        return tangent_circumf(
            pool, pool.point(0.0, 0.0), pool.point(0.4, 0.3), pool.add(2.1), pool.add(0.7), internal=True
        )

    def _tangent_internal_r2_larger(pool):
        return tangent_circumf(
            pool, pool.point(0.0, 0.0), pool.point(0.4, 0.3), pool.add(0.6), pool.add(1.9), internal=True
        )

    def _point_on_ellipse(pool):
        return point_on_ellipse(pool, pool.point(1.3, 2.2), _ellipse(pool))

    def _ellipse_tangent_line(pool):
        return ellipse_tangent_line(pool, pool.line(-2.0, 2.5, 3.0, 3.1), _ellipse(pool))

    cases = [
        ("equal", _equal),
        ("difference", _difference),
        ("p2p_distance", _p2p_distance),
        ("p2p_angle", _p2p_angle),
        ("p2l_distance_above", _p2l_distance_above),
        ("p2l_distance_below", _p2l_distance_below),
        ("point_on_line", _point_on_line),
        ("point_on_perp_bisector", _perp_bisector),
        ("parallel", _parallel),
        ("perpendicular", _perpendicular),
        ("l2l_angle", _l2l_angle),
        ("midpoint_on_line", _midpoint_on_line),
        ("tangent_circumf_external", _tangent_external),
        ("tangent_circumf_internal_r1", _tangent_internal_r1_larger),
        ("tangent_circumf_internal_r2", _tangent_internal_r2_larger),
        ("point_on_ellipse", _point_on_ellipse),
        ("ellipse_tangent_line", _ellipse_tangent_line),
    ]
    for alignment in ALIGNMENT_TYPES:
        def _alignment(pool, alignment=alignment):
            return internal_alignment_point2ellipse(pool, _ellipse(pool), pool.point(1.0, 0.5), alignment)

        cases.append((f"alignment_{alignment}", _alignment))
    return cases


_CASES = _build_cases()


@pytest.mark.parametrize("build", [case[1] for case in _CASES], ids=[case[0] for case in _CASES])
def test_analytic_gradient_matches_central_difference(build):
    pool = ParameterPool()
    constraint = build(pool)

    assert math.isfinite(constraint.error())
    for handle in set(constraint.pvec):
        analytic = constraint.grad(handle)
        numeric = _central_difference(constraint, handle)
        assert analytic == pytest.approx(numeric, rel=1e-6, abs=1e-7), f"slot handle {handle}"


@pytest.mark.parametrize("build", [case[1] for case in _CASES], ids=[case[0] for case in _CASES])
def test_gradient_is_zero_outside_dependency_set(build):
    pool = ParameterPool()
    constraint = build(pool)
    stranger = pool.add(42.0)

    assert constraint.grad(stranger) == 0.0
    assert stranger not in constraint.gradient()


@pytest.mark.parametrize("build", [case[1] for case in _CASES], ids=[case[0] for case in _CASES])
def test_gradient_mapping_agrees_with_single_queries(build):
    pool = ParameterPool()
    constraint = build(pool)

    gradient = constraint.gradient()
    assert set(gradient) == set(constraint.pvec)
    for handle, partial in gradient.items():
        assert partial == pytest.approx(constraint.grad(handle), rel=1e-12, abs=1e-15)


def test_parallel_scale_is_applied_to_residual_and_gradient():
    pool = ParameterPool()
    l1 = pool.line(0.0, 0.0, 2.0, 0.0)
    l2 = pool.line(0.0, 1.0, 0.0, 4.0)
    constraint = parallel(pool, l1, l2)

    # cross product of (-2, 0) and (0, -3) normalised by 2 * 3
    assert constraint.scale == pytest.approx(1.0 / 6.0)
    assert constraint.error() == pytest.approx(1.0)
    assert constraint.grad(l1.p1.x) == pytest.approx(-3.0 / 6.0)

    constraint.rescale(2.0)
    assert constraint.error() == pytest.approx(2.0)
