"""Domain layer: pure lifecycle rules and ports, no persistence."""
