"""The tagged constraint record and its evaluation contract."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

from ..params import ParameterPool, ParamHandle
from .catalog import KERNELS
from .types import (
    ALIGNMENT_TYPES,
    ConstraintDefinitionError,
    ConstraintKernel,
    ConstraintOptions,
    ConstraintType,
    Direction,
    Redirection,
)

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Constraint:
    """A geometric constraint over handles of a :class:`ParameterPool`.

    ``origpvec`` is the canonical slot layout fixed at construction.
    ``pvec`` has the same length and starts equal to it; position ``i`` of
    ``pvec`` is always the (possibly redirected) counterpart of position
    ``i`` of ``origpvec``. Constraints never write parameter values.

    Every evaluation accepts an optional ``redirect`` mapping keyed by
    canonical handles. It is applied on top of the current ``pvec`` for that
    call only, which lets diagnostic code evaluate against substitute
    unknowns without touching the constraint.
    """

    kind: ConstraintType
    pool: ParameterPool
    origpvec: Tuple[ParamHandle, ...]
    options: ConstraintOptions = field(default_factory=ConstraintOptions)
    tag: int = 0
    pvec: Tuple[ParamHandle, ...] = field(init=False)
    scale: float = field(init=False, default=1.0)

    def __post_init__(self) -> None:
        kernel = KERNELS.get(self.kind)
        if kernel is None:
            raise ConstraintDefinitionError(f"unknown constraint kind '{self.kind}'")
        self.origpvec = tuple(int(handle) for handle in self.origpvec)
        if kernel.arity is not None and len(self.origpvec) != kernel.arity:
            raise ConstraintDefinitionError(
                f"{self.kind} expects {kernel.arity} parameters, got {len(self.origpvec)}"
            )
        if self.kind == "internal_alignment_point2ellipse" and self.options.alignment not in ALIGNMENT_TYPES:
            raise ConstraintDefinitionError(f"unknown alignment type {self.options.alignment!r}")
        for handle in self.origpvec:
            self.pool.validate(handle)
        self._kernel: ConstraintKernel = kernel
        self.pvec = self.origpvec
        self.rescale()
        logger.debug("Created %s constraint over %d parameters", self.kind, len(self.origpvec))

    def __repr__(self) -> str:
        redirected = " redirected" if self.is_redirected else ""
        return f"Constraint(kind={self.kind!r}, tag={self.tag}, pvec={self.pvec}{redirected})"

    @property
    def type_id(self) -> ConstraintType:
        return self.kind

    def get_type_id(self) -> ConstraintType:
        return self.kind

    @property
    def is_redirected(self) -> bool:
        return self.pvec != self.origpvec

    def handles(self, redirect: Optional[Redirection] = None) -> Tuple[ParamHandle, ...]:
        """Return the handles evaluated for each slot, honouring ``redirect``."""

        if not redirect:
            return self.pvec
        for target in redirect.values():
            self.pool.validate(target)
        return tuple(
            redirect.get(orig, current) for orig, current in zip(self.origpvec, self.pvec)
        )

    def _values(self, handles: Tuple[ParamHandle, ...]) -> np.ndarray:
        return self.pool.take(handles)

    def error(self, redirect: Optional[Redirection] = None) -> float:
        values = self._values(self.handles(redirect))
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(self.scale * self._kernel.residual(values, self.options))

    def _slot_partials(self, handles: Tuple[ParamHandle, ...]) -> np.ndarray:
        values = self._values(handles)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return self.scale * np.asarray(self._kernel.partials(values, self.options), dtype=float)

    def grad(self, param: ParamHandle, redirect: Optional[Redirection] = None) -> float:
        handles = self.handles(redirect)
        if param not in handles:
            return 0.0
        partials = self._slot_partials(handles)
        # a handle may fill several slots; its derivative is the sum
        return float(sum(partials[i] for i, handle in enumerate(handles) if handle == param))

    def gradient(self, redirect: Optional[Redirection] = None) -> Dict[ParamHandle, float]:
        """Return the partial derivative for every handle the constraint reads."""

        handles = self.handles(redirect)
        partials = self._slot_partials(handles)
        result: Dict[ParamHandle, float] = {}
        for handle, partial in zip(handles, partials):
            result[handle] = result.get(handle, 0.0) + float(partial)
        return result

    def rescale(self, coef: float = 1.0) -> None:
        values = self._values(self.pvec)
        with np.errstate(divide="ignore", invalid="ignore"):
            self.scale = float(self._kernel.rescale(values, coef, self.options))

    def max_step(
        self,
        direction: Direction,
        limit: float = 1.0,
        redirect: Optional[Redirection] = None,
    ) -> float:
        """Return a scale factor in ``[0, limit]`` keeping the step valid."""

        handles = self.handles(redirect)
        if self._kernel.max_step is None:
            return limit
        values = self._values(handles)
        steps = np.array([direction.get(handle, 0.0) for handle in handles], dtype=float)
        with np.errstate(divide="ignore", invalid="ignore"):
            result = float(self._kernel.max_step(values, steps, limit, self.options))
        result = min(max(result, 0.0), limit)
        if result < limit:
            logger.debug("%s tightened step limit %.6g -> %.6g", self.kind, limit, result)
        return result

    def redirect_params(self, mapping: Redirection) -> None:
        """Point every slot whose canonical handle is in ``mapping`` at its substitute."""

        self.pvec = self.handles(mapping)

    def revert_params(self) -> None:
        self.pvec = self.origpvec


__all__ = ["Constraint"]
