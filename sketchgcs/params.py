"""Parameter arena holding the scalar unknowns referenced by constraints."""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, NamedTuple, Sequence

import numpy as np

logger = logging.getLogger(__name__)

ParamHandle = int

_INITIAL_CAPACITY = 16


class ParameterError(KeyError):
    """Raised when a handle does not refer to a parameter of the pool."""


class Point(NamedTuple):
    x: ParamHandle
    y: ParamHandle


class Line(NamedTuple):
    p1: Point
    p2: Point


class Ellipse(NamedTuple):
    center: Point
    focus1: Point
    radmin: ParamHandle


class ParameterPool:
    """Contiguous ``float64`` storage addressed by stable integer handles.

    Handles are plain indices into the buffer, so they stay valid when the
    buffer grows. Arrays returned by :attr:`values` are views and must be
    refetched after :meth:`add` reallocates.
    """

    def __init__(self, values: Iterable[float] = ()) -> None:
        initial = np.asarray(list(values), dtype=float)
        capacity = max(_INITIAL_CAPACITY, initial.size)
        self._data = np.zeros(capacity, dtype=float)
        self._data[: initial.size] = initial
        self._size = int(initial.size)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, handle: object) -> bool:
        if isinstance(handle, (bool, np.bool_)):
            return False
        return isinstance(handle, (int, np.integer)) and 0 <= int(handle) < self._size

    def __getitem__(self, handle: ParamHandle) -> float:
        self.validate(handle)
        return float(self._data[handle])

    def __setitem__(self, handle: ParamHandle, value: float) -> None:
        self.validate(handle)
        self._data[handle] = value

    def __repr__(self) -> str:
        return f"ParameterPool(size={self._size})"

    @property
    def values(self) -> np.ndarray:
        return self._data[: self._size]

    def validate(self, handle: object) -> None:
        if handle not in self:
            raise ParameterError(f"unknown parameter handle {handle!r} (pool size {self._size})")

    def add(self, value: float = 0.0) -> ParamHandle:
        if self._size == self._data.size:
            self._grow(self._size + 1)
        handle = self._size
        self._data[handle] = value
        self._size += 1
        return handle

    def add_many(self, values: Iterable[float]) -> List[ParamHandle]:
        return [self.add(value) for value in values]

    def point(self, x: float, y: float) -> Point:
        return Point(self.add(x), self.add(y))

    def line(self, x1: float, y1: float, x2: float, y2: float) -> Line:
        return Line(self.point(x1, y1), self.point(x2, y2))

    def ellipse(self, cx: float, cy: float, fx: float, fy: float, radmin: float) -> Ellipse:
        return Ellipse(self.point(cx, cy), self.point(fx, fy), self.add(radmin))

    def take(self, handles: Sequence[ParamHandle]) -> np.ndarray:
        """Return a copy of the values stored at ``handles`` (in order)."""

        index = np.asarray(handles, dtype=np.intp).reshape(-1)
        if index.size and (index.min() < 0 or index.max() >= self._size):
            bad = index[(index < 0) | (index >= self._size)]
            raise ParameterError(f"unknown parameter handle {int(bad[0])!r} (pool size {self._size})")
        return self._data[index]

    def apply_step(self, direction: Mapping[ParamHandle, float], factor: float = 1.0) -> None:
        """Move every parameter in ``direction`` by ``factor`` times its delta."""

        for handle in direction:
            self.validate(handle)
        for handle, delta in direction.items():
            self._data[handle] += factor * delta

    def _grow(self, required: int) -> None:
        capacity = max(required, 2 * self._data.size)
        grown = np.zeros(capacity, dtype=float)
        grown[: self._size] = self._data[: self._size]
        self._data = grown
        logger.debug("Grew parameter pool capacity to %d", capacity)


__all__ = [
    "Ellipse",
    "Line",
    "ParamHandle",
    "ParameterError",
    "ParameterPool",
    "Point",
]
