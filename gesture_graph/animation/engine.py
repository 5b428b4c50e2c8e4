# gesture_graph/animation/engine.py
"""
Per-frame pose computation.

For each node, every tick:
1. expand = normalize(original) * expansion * EXPANSION_DISTANCE
   (zero vector for a node at the origin)
2. position = original + expand, plus per-axis jitter in
   [-0.5, 0.5] * tension when tension > JITTER_THRESHOLD
3. pulse = 1 + sin(elapsed * PULSE_FREQUENCY) * tension * PULSE_AMPLITUDE
4. scale = val * (1 + expansion) * (pulse if tension > PULSE_THRESHOLD else 1)

The engine holds no per-tick state. It only reads the base position
fixed on each node at ingestion. No I/O, no blocking.
"""

import math
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..control.smoother import ControlState
from ..graph.models import GraphModel, GraphNode, Vector3

EXPANSION_DISTANCE = 20.0
JITTER_THRESHOLD = 0.1
PULSE_THRESHOLD = 0.5
PULSE_FREQUENCY = 5.0
PULSE_AMPLITUDE = 0.3

# Scene lighting
AUTO_ROTATE_THRESHOLD = 0.1
BASE_LIGHT_INTENSITY = 1.0
LIGHT_TENSION_GAIN = 2.0
BASE_EMISSIVE_INTENSITY = 0.5


@dataclass(frozen=True)
class Pose:
    """Rendered placement of one node for one tick."""
    position: Vector3
    scale: float

    def to_dict(self) -> Dict[str, float]:
        x, y, z = self.position
        return {"x": x, "y": y, "z": z, "scale": self.scale}


@dataclass(frozen=True)
class SceneCues:
    """Frame-wide rendering hints derived from the control state."""
    light_intensity: float
    emissive_intensity: float
    auto_rotate: bool
    high_tension: bool

    @classmethod
    def from_state(cls, state: ControlState) -> "SceneCues":
        return cls(
            light_intensity=BASE_LIGHT_INTENSITY + state.tension * LIGHT_TENSION_GAIN,
            emissive_intensity=BASE_EMISSIVE_INTENSITY + state.tension,
            auto_rotate=state.tension < AUTO_ROTATE_THRESHOLD,
            high_tension=state.tension > PULSE_THRESHOLD,
        )


@dataclass
class Frame:
    """Everything the renderer needs for one tick."""
    elapsed: float
    state: ControlState
    cues: SceneCues
    poses: Dict[str, Pose] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "elapsed": self.elapsed,
            "control": self.state.to_dict(),
            "cues": {
                "light_intensity": self.cues.light_intensity,
                "emissive_intensity": self.cues.emissive_intensity,
                "auto_rotate": self.cues.auto_rotate,
                "high_tension": self.cues.high_tension,
            },
            "poses": {node_id: pose.to_dict() for node_id, pose in self.poses.items()},
        }


def normalize(vector: Vector3) -> Vector3:
    """Unit vector in the same direction; the zero vector maps to itself."""
    length = math.sqrt(sum(c * c for c in vector))
    if length == 0.0 or not math.isfinite(length):
        return (0.0, 0.0, 0.0)
    return (vector[0] / length, vector[1] / length, vector[2] / length)


def pulse_factor(elapsed: float, tension: float) -> float:
    return 1.0 + math.sin(elapsed * PULSE_FREQUENCY) * tension * PULSE_AMPLITUDE


class TransformEngine:
    """
    Turns base node positions plus the control state into poses.

    Usage:
        engine = TransformEngine()
        frame = engine.compute_frame(store.snapshot, smoother.state, elapsed)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        # Jitter source; seed it for reproducible frames
        self.rng = rng or random.Random()

    def expand_vector(self, original: Vector3, expansion: float) -> Vector3:
        direction = normalize(original)
        distance = expansion * EXPANSION_DISTANCE
        return (direction[0] * distance, direction[1] * distance, direction[2] * distance)

    def compute_pose(self, node: GraphNode, state: ControlState, elapsed: float) -> Pose:
        """Pose for one node at time `elapsed` (seconds on the renderer clock)."""
        original = node.position
        expand = self.expand_vector(original, state.expansion)
        x = original[0] + expand[0]
        y = original[1] + expand[1]
        z = original[2] + expand[2]

        tension = state.tension
        if tension > JITTER_THRESHOLD:
            x += (self.rng.random() - 0.5) * tension
            y += (self.rng.random() - 0.5) * tension
            z += (self.rng.random() - 0.5) * tension

        val = node.val if node.val > 0 else 1.0
        scale = val * (1.0 + state.expansion)
        if tension > PULSE_THRESHOLD:
            scale *= pulse_factor(elapsed, tension)

        return Pose(position=(x, y, z), scale=scale)

    def compute_frame(self, model: GraphModel, state: ControlState, elapsed: float) -> Frame:
        """Poses for every node in `model`, plus scene cues, for one tick."""
        poses = {
            node_id: self.compute_pose(node, state, elapsed)
            for node_id, node in model.nodes.items()
        }
        return Frame(
            elapsed=elapsed,
            state=state,
            cues=SceneCues.from_state(state),
            poses=poses,
        )


def link_segments(model: GraphModel) -> List[Tuple[Vector3, Vector3]]:
    """
    Line segments for every link, drawn between base positions.

    Links are not animated with the nodes.
    """
    segments = []
    for link in model.links:
        source = model.get_node(link.source)
        target = model.get_node(link.target)
        if source is not None and target is not None:
            segments.append((source.position, target.position))
    return segments


_engine: Optional[TransformEngine] = None


def get_transform_engine() -> TransformEngine:
    """Get or create the process-wide engine."""
    global _engine
    if _engine is None:
        _engine = TransformEngine()
    return _engine
