"""Configuration helpers for step limiting."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass


@dataclass
class StepLimitConfig:
    """Tunables used by the ``max_step`` policies."""

    # largest change of an angle unknown per iteration (10 degrees)
    max_angle_step: float = math.pi / 18.0
    area_change_fraction: float = 0.3


_STEP_LIMIT_CONFIG = StepLimitConfig()


def get_step_limit_config() -> StepLimitConfig:
    return copy.deepcopy(_STEP_LIMIT_CONFIG)


def set_step_limit_config(config: StepLimitConfig) -> None:
    global _STEP_LIMIT_CONFIG
    if config.max_angle_step <= 0.0:
        raise ValueError("max_angle_step must be positive")
    if config.area_change_fraction <= 0.0:
        raise ValueError("area_change_fraction must be positive")
    _STEP_LIMIT_CONFIG = copy.deepcopy(config)


def active_step_limit_config() -> StepLimitConfig:
    """Return the live configuration object without copying it."""

    return _STEP_LIMIT_CONFIG
