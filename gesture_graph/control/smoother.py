# gesture_graph/control/smoother.py
"""
Low-pass filtering of the gesture control signal.

Samples arrive at an irregular rate (a few per second) from the gesture
recognizer. Each sample moves the state halfway toward it:

    state' = clamp(state + (clamp(sample) - state) * ALPHA)

so a constant sample c is approached geometrically:
|s_n - c| = |s_0 - c| * (1 - ALPHA)^n.

ControlState is a frozen value and update() swaps it in one assignment,
so the render loop can read it without locking.
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ..logging import get_logger

logger = get_logger(__name__)

# Smoothing factor
ALPHA = 0.5


def clamp_unit(value: float) -> float:
    """Clamp to [0, 1]."""
    return min(1.0, max(0.0, value))


def coerce_number(value: Any) -> float:
    """
    Read a raw sample field as a float.

    Missing, non-numeric, boolean or non-finite values become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


@dataclass(frozen=True)
class ControlState:
    """Smoothed control values, always within [0, 1]."""
    expansion: float = 0.0
    tension: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "expansion", clamp_unit(coerce_number(self.expansion)))
        object.__setattr__(self, "tension", clamp_unit(coerce_number(self.tension)))

    def to_dict(self) -> dict:
        return {"expansion": self.expansion, "tension": self.tension}


@dataclass(frozen=True)
class ControlSample:
    """One raw reading from the gesture recognizer."""
    expansion: float = 0.0
    tension: float = 0.0

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "ControlSample":
        """Parse {expansion?, tension?}; anything unusable defaults to 0."""
        if not isinstance(payload, Mapping):
            return cls()
        return cls(
            expansion=coerce_number(payload.get("expansion")),
            tension=coerce_number(payload.get("tension")),
        )


SampleInput = Union[ControlSample, Mapping[str, Any], None]


class ControlSmoother:
    """
    Exponential moving average over gesture samples.

    Usage:
        smoother = ControlSmoother()
        state = smoother.update({"expansion": 0.9, "tension": 0.2})
    """

    def __init__(self, initial: Optional[ControlState] = None, alpha: float = ALPHA):
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self._initial = initial or ControlState()
        self._state = self._initial

    @property
    def state(self) -> ControlState:
        return self._state

    def update(self, sample: SampleInput) -> ControlState:
        """Apply one sample and return the new state."""
        if not isinstance(sample, ControlSample):
            sample = ControlSample.from_payload(sample)

        current = self._state
        target_expansion = clamp_unit(sample.expansion)
        target_tension = clamp_unit(sample.tension)

        new_state = ControlState(
            expansion=current.expansion + (target_expansion - current.expansion) * self.alpha,
            tension=current.tension + (target_tension - current.tension) * self.alpha,
        )
        self._state = new_state

        logger.debug(
            "control_sample_applied",
            sample_expansion=sample.expansion,
            sample_tension=sample.tension,
            expansion=new_state.expansion,
            tension=new_state.tension,
        )
        return new_state

    def reset(self, state: Optional[ControlState] = None) -> ControlState:
        """Return to the initial state (or to `state`)."""
        self._state = state or self._initial
        return self._state


_smoother: Optional[ControlSmoother] = None


def get_control_smoother() -> ControlSmoother:
    """Get or create the process-wide smoother, starting from the configured state."""
    global _smoother
    if _smoother is None:
        from ..settings import settings
        _smoother = ControlSmoother(
            initial=ControlState(
                expansion=settings.initial_expansion,
                tension=settings.initial_tension,
            )
        )
    return _smoother
