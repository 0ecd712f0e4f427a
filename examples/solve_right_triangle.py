"""Example driver: damped Newton iteration on a right triangle.

The constraints only evaluate residuals, gradients and step limits; the loop
below is the part a real solver would own.
"""

import math

import numpy as np

from sketchgcs import (
    Line,
    ParameterPool,
    jacobian,
    limit_step,
    p2p_angle,
    p2p_distance,
    perpendicular,
    residual_vector,
)


def build():
    pool = ParameterPool()
    a = pool.point(0.0, 0.0)
    b = pool.point(3.6, 0.4)
    c = pool.point(0.3, 2.5)
    ab = pool.add(4.0)
    ac = pool.add(3.0)
    base_angle = pool.add(0.0)
    constraints = [
        p2p_distance(pool, a, b, ab),
        p2p_distance(pool, a, c, ac),
        p2p_angle(pool, a, b, base_angle),
        perpendicular(pool, Line(a, b), Line(a, c)),
    ]
    unknowns = [b.x, b.y, c.x, c.y]
    return pool, constraints, unknowns, (a, b, c)


def main(max_iterations: int = 50, tol: float = 1e-12) -> None:
    pool, constraints, unknowns, (a, b, c) = build()
    for iteration in range(max_iterations):
        residuals = residual_vector(constraints)
        if float(np.dot(residuals, residuals)) < tol:
            break
        step, *_ = np.linalg.lstsq(jacobian(constraints, unknowns), -residuals, rcond=None)
        direction = dict(zip(unknowns, step))
        factor = limit_step(constraints, direction)
        pool.apply_step(direction, factor)
    print("Iterations:", iteration)
    print("Max residual:", float(np.max(np.abs(residual_vector(constraints)))))
    for name, point in zip("ABC", (a, b, c)):
        print(f"{name}: ({pool[point.x]:.6f}, {pool[point.y]:.6f})")
    print("Hypotenuse:", math.hypot(pool[b.x] - pool[c.x], pool[b.y] - pool[c.y]))


if __name__ == "__main__":
    main()
