"""Adapters for the lifecycle engine's ports."""
