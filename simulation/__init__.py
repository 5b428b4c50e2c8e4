# simulation/__init__.py
"""
Simulation module for Gesture Graph.

Generates demo graphs so the renderer and the animation engine can be
exercised without a live query service.

Usage:
    from simulation import generate_demo_graph
    from gesture_graph.graph.models import GraphModel
    model = GraphModel.from_dict(generate_demo_graph(100, seed=42))
"""

from .demo_graph import DemoGraphGenerator, generate_demo_graph

__all__ = [
    "DemoGraphGenerator",
    "generate_demo_graph",
]
