"""E-File backend: document lifecycle, routing and audit engine."""

__version__ = "0.1.0"
