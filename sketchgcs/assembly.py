"""System-level helpers for a solver driving many constraints.

These functions assemble what an external Newton or Levenberg-Marquardt
iteration consumes (residual vector, Jacobian, common step limit) from the
per-constraint contract. They do not iterate themselves.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
from scipy import sparse

from .constraints.model import Constraint
from .constraints.types import Direction, Redirection
from .logging_utils import apply_debug_logging
from .params import ParamHandle

logger = logging.getLogger(__name__)


@dataclass
class GradientMismatch:
    """An analytic partial that disagrees with its finite-difference estimate."""

    constraint: Constraint
    param: ParamHandle
    analytic: float
    numeric: float

    @property
    def abs_error(self) -> float:
        return abs(self.analytic - self.numeric)


def residual_vector(
    constraints: Sequence[Constraint], redirect: Optional[Redirection] = None
) -> np.ndarray:
    return np.array([constraint.error(redirect) for constraint in constraints], dtype=float)


def jacobian(
    constraints: Sequence[Constraint],
    params: Sequence[ParamHandle],
    redirect: Optional[Redirection] = None,
    *,
    sparse_output: bool = False,
) -> Union[np.ndarray, sparse.csr_matrix]:
    """Return d(residual_i)/d(params_j); handles outside ``params`` are ignored."""

    columns: Dict[ParamHandle, int] = {handle: j for j, handle in enumerate(params)}
    rows: List[int] = []
    cols: List[int] = []
    data: List[float] = []
    for i, constraint in enumerate(constraints):
        for handle, partial in constraint.gradient(redirect).items():
            j = columns.get(handle)
            if j is None or partial == 0.0:
                continue
            rows.append(i)
            cols.append(j)
            data.append(partial)

    shape = (len(constraints), len(columns))
    matrix = sparse.csr_matrix((data, (rows, cols)), shape=shape, dtype=float)
    if sparse_output:
        return matrix
    return matrix.toarray()


def limit_step(
    constraints: Sequence[Constraint], direction: Direction, limit: float = 1.0
) -> float:
    """Return the smallest ``max_step`` over ``constraints`` for ``direction``."""

    for constraint in constraints:
        tightened = constraint.max_step(direction, limit)
        if tightened < limit:
            logger.debug("Step limit %.6g -> %.6g by %r", limit, tightened, constraint)
            limit = tightened
        if limit <= 0.0:
            break
    return limit


def rescale_all(constraints: Sequence[Constraint], coef: float = 1.0) -> None:
    for constraint in constraints:
        constraint.rescale(coef)
    logger.debug("Rescaled %d constraints with coef=%s", len(constraints), coef)


def numeric_gradient(constraint: Constraint, param: ParamHandle, eps: float = 1e-6) -> float:
    """Central-difference estimate of ``constraint.grad(param)``.

    The parameter is perturbed in place and restored before returning.
    """

    pool = constraint.pool
    original = pool[param]
    step = eps * max(1.0, abs(original))
    try:
        pool[param] = original + step
        forward = constraint.error()
        pool[param] = original - step
        backward = constraint.error()
    finally:
        pool[param] = original
    return (forward - backward) / (2.0 * step)


def check_gradients(
    constraint: Constraint,
    *,
    rtol: float = 1e-6,
    atol: float = 1e-8,
    eps: float = 1e-6,
) -> List[GradientMismatch]:
    """Compare every analytic partial of ``constraint`` with a numeric one."""

    mismatches: List[GradientMismatch] = []
    for handle in dict.fromkeys(constraint.pvec):
        analytic = constraint.grad(handle)
        numeric = numeric_gradient(constraint, handle, eps)
        if not math.isclose(analytic, numeric, rel_tol=rtol, abs_tol=atol):
            mismatches.append(GradientMismatch(constraint, handle, analytic, numeric))
    if mismatches:
        logger.warning(
            "%d gradient mismatches for %r (worst abs error %.3g)",
            len(mismatches),
            constraint,
            max(item.abs_error for item in mismatches),
        )
    return mismatches


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "GradientMismatch",
    "check_gradients",
    "jacobian",
    "limit_step",
    "numeric_gradient",
    "rescale_all",
    "residual_vector",
]
