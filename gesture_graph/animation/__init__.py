# Animation module - per-tick node poses
from .engine import Pose, Frame, SceneCues, TransformEngine, link_segments, get_transform_engine

__all__ = ["Pose", "Frame", "SceneCues", "TransformEngine", "link_segments", "get_transform_engine"]
