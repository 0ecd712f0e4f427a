from __future__ import annotations

import inspect
import logging
import reprlib
import time
from functools import wraps
from typing import Any, Callable, Iterable, MutableMapping, Optional, Sequence, Set, TypeVar, cast

import numpy as np

F = TypeVar("F", bound=Callable[..., Any])

_repr = reprlib.Repr()
_repr.maxother = 120
_repr.maxlist = 8
_repr.maxtuple = 8
_repr.maxdict = 8


def _summarize(value: Any, *, max_items: int = 6, max_length: int = 300) -> str:
    """Render ``value`` compactly for DEBUG traces."""

    if isinstance(value, np.ndarray):
        parts = [f"ndarray(shape={tuple(value.shape)})"]
        if 0 < value.size <= max_items:
            parts.append(f"values={_repr.repr(value.tolist())}")
        elif value.size > max_items:
            finite = value[np.isfinite(value)] if value.dtype.kind == "f" else value
            if finite.size:
                parts.append(f"min={float(finite.min()):.6g}")
                parts.append(f"max={float(finite.max()):.6g}")
            if finite.size != value.size:
                parts.append(f"non_finite={value.size - finite.size}")
        return ", ".join(parts)

    if hasattr(value, "shape") and hasattr(value, "nnz"):
        # scipy.sparse matrices
        return f"{type(value).__name__}(shape={value.shape}, nnz={value.nnz})"

    if isinstance(value, dict):
        items = []
        for idx, (key, item) in enumerate(value.items()):
            if idx >= max_items:
                items.append("...")
                break
            items.append(f"{_summarize(key)}: {_summarize(item)}")
        return "{" + ", ".join(items) + "}"

    if isinstance(value, (list, tuple)) and len(value) > max_items:
        head = ", ".join(_summarize(item) for item in value[:max_items])
        return f"[{head}, ... ({len(value)} items)]"

    rendered = _repr.repr(value)
    if len(rendered) > max_length:
        return rendered[:max_length] + "... (truncated)"
    return rendered


def _format_call(args: Sequence[Any], kwargs: MutableMapping[str, Any]) -> str:
    parts = [_summarize(arg) for arg in args]
    parts.extend(f"{key}={_summarize(value)}" for key, value in kwargs.items())
    return ", ".join(parts) if parts else "no-args"


def _traced(logger: logging.Logger, name: str, func: F) -> F:
    """Wrap ``func`` so calls are traced at DEBUG with timing.

    Array results holding nan/inf (a singular configuration) get an extra
    line.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        if not logger.isEnabledFor(logging.DEBUG):
            return func(*args, **kwargs)
        logger.debug("Entering %s (%s)", name, _format_call(args, kwargs))
        started = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception:
            logger.exception("Exception in %s", name)
            raise
        elapsed_ms = 1000.0 * (time.perf_counter() - started)
        logger.debug("Exiting %s after %.3f ms -> %s", name, elapsed_ms, _summarize(result))
        if isinstance(result, np.ndarray) and result.dtype.kind == "f" and not np.isfinite(result).all():
            logger.debug("%s produced non-finite values", name)
        return result

    setattr(wrapper, "_debug_logging_wrapped", True)
    return cast(F, wrapper)


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
) -> None:
    """Trace the public module-level functions of ``namespace`` at DEBUG level."""

    module_name = namespace.get("__name__")
    logger = logger or logging.getLogger(str(module_name))
    skip_set: Set[str] = set(skip or [])

    for name, value in list(namespace.items()):
        if name.startswith("_") or name in skip_set:
            continue
        if getattr(value, "_debug_logging_wrapped", False):
            continue
        if inspect.isfunction(value) and value.__module__ == module_name:
            namespace[name] = _traced(logger, name, value)


__all__ = ["apply_debug_logging"]
