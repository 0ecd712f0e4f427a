"""Example pipeline: fit a horizontal line tangent to an ellipse with scipy."""

import numpy as np
from scipy.optimize import least_squares

from sketchgcs import ParameterPool, ellipse_tangent_line, equal, jacobian, residual_vector


def main() -> None:
    pool = ParameterPool()
    ellipse = pool.ellipse(0.0, 0.0, 3.0, 0.0, 4.0)
    line = pool.line(-2.0, 5.5, 2.0, 5.0)
    constraints = [
        ellipse_tangent_line(pool, line, ellipse),
        equal(pool, line.p1.y, line.p2.y),
    ]
    unknowns = [line.p1.y, line.p2.y]

    def load(x: np.ndarray) -> None:
        for handle, value in zip(unknowns, x):
            pool[handle] = value

    def fun(x: np.ndarray) -> np.ndarray:
        load(x)
        return residual_vector(constraints)

    def jac(x: np.ndarray) -> np.ndarray:
        load(x)
        return jacobian(constraints, unknowns)

    result = least_squares(fun, pool.take(unknowns), jac=jac, method="trf")
    load(result.x)
    print("Success:", result.success)
    print("Line height:", pool[line.p1.y], pool[line.p2.y])


if __name__ == "__main__":
    main()
