import pytest

from sketchgcs import ParameterError, ParameterPool, equal, p2p_distance


def _equal_with_spare():
    pool = ParameterPool()
    a = pool.add(3.0)
    b = pool.add(5.0)
    spare = pool.add(7.0)
    return pool, equal(pool, a, b), a, b, spare


def test_redirect_then_revert_restores_original_layout():
    _, constraint, a, b, spare = _equal_with_spare()
    original = constraint.origpvec

    constraint.redirect_params({a: spare})
    assert constraint.is_redirected
    assert constraint.pvec == (spare, b)
    assert constraint.origpvec == original

    constraint.revert_params()
    assert constraint.pvec == original
    assert not constraint.is_redirected


def test_redirected_constraint_reads_substitute_value():
    _, constraint, a, b, spare = _equal_with_spare()

    constraint.redirect_params({a: spare})

    assert constraint.error() == pytest.approx(2.0)
    assert constraint.grad(spare) == 1.0
    assert constraint.grad(a) == 0.0

    constraint.revert_params()
    assert constraint.error() == pytest.approx(-2.0)


def test_explicit_redirect_does_not_mutate_constraint():
    _, constraint, a, b, spare = _equal_with_spare()

    assert constraint.error({a: spare}) == pytest.approx(2.0)
    assert constraint.gradient({a: spare}) == {spare: 1.0, b: -1.0}
    assert constraint.pvec == constraint.origpvec
    assert constraint.error() == pytest.approx(-2.0)


def test_redirects_accumulate_until_reverted():
    pool, constraint, a, b, spare = _equal_with_spare()
    other = pool.add(1.0)

    constraint.redirect_params({a: spare})
    constraint.redirect_params({b: other})

    assert constraint.pvec == (spare, other)
    assert constraint.error() == pytest.approx(6.0)


def test_redirect_keys_are_canonical_handles():
    pool, constraint, a, b, spare = _equal_with_spare()
    other = pool.add(1.0)

    constraint.redirect_params({a: spare})
    # the current handle is not a key; only the canonical one is
    constraint.redirect_params({spare: other})
    assert constraint.pvec == (spare, b)

    constraint.redirect_params({a: other})
    assert constraint.pvec == (other, b)


def test_redirect_onto_shared_handle_sums_partials():
    _, constraint, a, b, _ = _equal_with_spare()

    constraint.redirect_params({b: a})

    assert constraint.error() == 0.0
    assert constraint.grad(a) == 0.0
    assert constraint.gradient() == {a: 0.0}


def test_redirect_to_unknown_handle_is_rejected():
    _, constraint, a, _, _ = _equal_with_spare()

    with pytest.raises(ParameterError):
        constraint.redirect_params({a: 1000})
    assert not constraint.is_redirected


def test_max_step_honours_redirect():
    pool = ParameterPool()
    p1 = pool.point(0.0, 0.0)
    p2 = pool.point(3.0, 4.0)
    d = pool.add(5.0)
    substitute = pool.add(2.0)
    constraint = p2p_distance(pool, p1, p2, d)

    direction = {substitute: -4.0}
    assert constraint.max_step(direction) == 1.0
    assert constraint.max_step(direction, redirect={d: substitute}) == pytest.approx(0.5)

    constraint.redirect_params({d: substitute})
    assert constraint.max_step(direction) == pytest.approx(0.5)


@pytest.mark.parametrize("target", [-1, 1000])
def test_per_call_redirect_to_unknown_handle_is_rejected(target):
    _, constraint, a, _, _ = _equal_with_spare()

    with pytest.raises(ParameterError):
        constraint.error({a: target})
    with pytest.raises(ParameterError):
        constraint.grad(a, {a: target})
    with pytest.raises(ParameterError):
        constraint.gradient({a: target})
    with pytest.raises(ParameterError):
        constraint.max_step({a: 1.0}, redirect={a: target})
