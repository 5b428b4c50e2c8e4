"""Gesture Graph - graph ingestion and gesture-driven animation engine."""

__version__ = "0.1.0"
