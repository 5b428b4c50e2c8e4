# simulation/demo_graph.py
"""
Demo graph generator.

Produces a random graph in the renderer shape so the visualization has
something to show before (or without) a live query service:
- N nodes "node-{i}" at uniform positions in [-10, 10]^3
- val in [0.5, 2.5), group in {0, 1, 2}
- one random outgoing link per node, skipped when it would be a self-link
"""

import random
from typing import Any, Dict, List, Optional

DEMO_HALF_WIDTH = 10.0
DEMO_GROUP_COUNT = 3


class DemoGraphGenerator:
    """
    Seedable random graph generator.

    Usage:
        data = DemoGraphGenerator(seed=42).generate(100)
        model = GraphModel.from_dict(data)
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = random.Random(seed)

    def generate(self, count: int) -> Dict[str, List[Dict[str, Any]]]:
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        h = DEMO_HALF_WIDTH
        nodes = [
            {
                "id": f"node-{i}",
                "x": self.rng.uniform(-h, h),
                "y": self.rng.uniform(-h, h),
                "z": self.rng.uniform(-h, h),
                "val": self.rng.random() * 2 + 0.5,
                "group": self.rng.randrange(DEMO_GROUP_COUNT),
            }
            for i in range(count)
        ]

        links = []
        for i in range(count):
            target = self.rng.randrange(count)
            if target != i:
                links.append({"source": f"node-{i}", "target": f"node-{target}"})

        return {"nodes": nodes, "links": links}


def generate_demo_graph(count: int, seed: Optional[int] = None) -> Dict[str, List[Dict[str, Any]]]:
    """Convenience wrapper around DemoGraphGenerator."""
    return DemoGraphGenerator(seed=seed).generate(count)
