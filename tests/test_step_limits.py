import math

import pytest

from sketchgcs import (
    ParameterPool,
    StepLimitConfig,
    equal,
    get_step_limit_config,
    l2l_angle,
    midpoint_on_line,
    p2l_distance,
    p2p_angle,
    p2p_distance,
    set_step_limit_config,
)
from sketchgcs.constraints.step_limits import (
    limit_angle_step,
    limit_nonnegative,
    limit_relative_change,
)


@pytest.fixture
def restore_step_config():
    saved = get_step_limit_config()
    yield
    set_step_limit_config(saved)


def _p2p(dist=5.0):
    pool = ParameterPool()
    p1 = pool.point(0.0, 0.0)
    p2 = pool.point(3.0, 4.0)
    d = pool.add(dist)
    return pool, p2p_distance(pool, p1, p2, d), p1, p2, d


def test_p2p_distance_keeps_distance_nonnegative():
    _, constraint, _, _, d = _p2p(dist=2.0)

    assert constraint.max_step({d: -4.0}) == pytest.approx(0.5)
    assert constraint.max_step({d: 4.0}) == 1.0


def test_p2p_distance_limits_relative_displacement():
    _, constraint, p1, _, _ = _p2p()

    # a 20 unit move against a 5 unit separation
    assert constraint.max_step({p1.x: 20.0}) == pytest.approx(0.25)
    assert constraint.max_step({p1.x: 2.0}) == 1.0


def test_p2p_distance_never_returns_negative_step():
    _, constraint, _, _, d = _p2p(dist=-1.0)

    assert constraint.max_step({d: -1.0}) == 0.0


def test_p2p_distance_without_length_scale_does_not_freeze():
    pool = ParameterPool()
    p1 = pool.point(1.0, 1.0)
    p2 = pool.point(1.0, 1.0)
    d = pool.add(0.0)
    constraint = p2p_distance(pool, p1, p2, d)

    assert constraint.max_step({p1.x: 3.0}) == 1.0


def test_p2p_angle_limits_angle_step():
    pool = ParameterPool()
    angle = pool.add(0.2)
    constraint = p2p_angle(pool, pool.point(0.0, 0.0), pool.point(1.0, 1.0), angle)

    assert constraint.max_step({angle: math.pi / 6}) == pytest.approx(1.0 / 3.0)
    assert constraint.max_step({angle: -math.pi / 6}) == pytest.approx(1.0 / 3.0)
    assert constraint.max_step({angle: math.pi / 36}) == 1.0


def test_incoming_limit_is_never_raised():
    pool = ParameterPool()
    angle = pool.add(0.2)
    constraint = p2p_angle(pool, pool.point(0.0, 0.0), pool.point(1.0, 1.0), angle)

    assert constraint.max_step({angle: math.pi / 6}, 0.2) == pytest.approx(0.2)
    assert constraint.max_step({angle: math.pi / 36}, 0.2) == pytest.approx(0.2)


def test_l2l_angle_limits_angle_step():
    pool = ParameterPool()
    angle = pool.add(0.5)
    constraint = l2l_angle(pool, pool.line(0.0, 0.0, 1.0, 0.0), pool.line(0.0, 0.0, 0.0, 1.0), angle)

    assert constraint.max_step({angle: math.pi / 3}) == pytest.approx(1.0 / 6.0)


def test_p2l_distance_keeps_distance_nonnegative():
    pool = ParameterPool()
    d = pool.add(3.0)
    constraint = p2l_distance(pool, pool.point(0.0, 3.0), pool.line(0.0, 0.0, 4.0, 0.0), d)

    assert constraint.max_step({d: -6.0}) == pytest.approx(0.5)


def test_p2l_distance_limits_area_change():
    pool = ParameterPool()
    p = pool.point(0.0, 3.0)
    constraint = p2l_distance(pool, p, pool.line(0.0, 0.0, 4.0, 0.0), pool.add(3.0))

    # area2 changes by 4 * 10, allowed 0.3 * 3 * 4
    assert constraint.max_step({p.y: -10.0}) == pytest.approx(0.09)
    assert constraint.max_step({p.x: 100.0}) == 1.0


@pytest.mark.parametrize("limit", [1.0, 0.7, 0.0])
def test_kinds_without_policy_return_limit(limit):
    pool = ParameterPool()
    a = pool.add(1.0)
    b = pool.add(2.0)
    midpoint = midpoint_on_line(pool, pool.line(0.0, 0.0, 2.0, 0.0), pool.line(1.0, -1.0, 1.0, 1.0))

    assert equal(pool, a, b).max_step({a: 1e6}, limit) == limit
    assert midpoint.max_step({a: 1e6}, limit) == limit


def test_configured_max_angle_step_is_used(restore_step_config):
    pool = ParameterPool()
    angle = pool.add(0.0)
    constraint = p2p_angle(pool, pool.point(0.0, 0.0), pool.point(1.0, 0.0), angle)

    set_step_limit_config(StepLimitConfig(max_angle_step=math.pi / 36))

    assert constraint.max_step({angle: math.pi / 6}) == pytest.approx(1.0 / 6.0)


def test_configured_area_fraction_is_used(restore_step_config):
    pool = ParameterPool()
    p = pool.point(0.0, 3.0)
    constraint = p2l_distance(pool, p, pool.line(0.0, 0.0, 4.0, 0.0), pool.add(3.0))

    set_step_limit_config(StepLimitConfig(area_change_fraction=0.6))

    assert constraint.max_step({p.y: -10.0}) == pytest.approx(0.18)


def test_step_config_is_copied(restore_step_config):
    config = get_step_limit_config()
    config.max_angle_step = 1.0
    assert get_step_limit_config().max_angle_step == pytest.approx(math.pi / 18)

    update = StepLimitConfig(max_angle_step=0.5)
    set_step_limit_config(update)
    update.max_angle_step = 2.0
    assert get_step_limit_config().max_angle_step == pytest.approx(0.5)


@pytest.mark.parametrize(
    "config",
    [StepLimitConfig(max_angle_step=0.0), StepLimitConfig(area_change_fraction=-0.1)],
)
def test_invalid_step_config_is_rejected(config, restore_step_config):
    with pytest.raises(ValueError):
        set_step_limit_config(config)


def test_policy_helpers():
    assert limit_nonnegative(2.0, -4.0, 1.0) == pytest.approx(0.5)
    assert limit_nonnegative(2.0, 4.0, 1.0) == 1.0
    assert limit_nonnegative(-1.0, -1.0, 1.0) == 0.0
    assert limit_relative_change(10.0, 2.0, 1.0) == pytest.approx(0.2)
    assert limit_relative_change(-10.0, 2.0, 1.0) == pytest.approx(0.2)
    assert limit_relative_change(10.0, 0.0, 1.0) == 1.0
    assert limit_angle_step(-math.pi / 9, 1.0) == pytest.approx(0.5)
