# Control module - smoothing of the gesture control signal
from .smoother import ControlState, ControlSample, ControlSmoother, get_control_smoother

__all__ = ["ControlState", "ControlSample", "ControlSmoother", "get_control_smoother"]
