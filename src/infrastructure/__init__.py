"""Infrastructure Layer.

Concrete adapters for the domain ports: terrain oracles backed by DEM
grids, simulator telemetry sources, and logging presentation/audio
collaborators. This layer handles I/O; domain logic stays in `domain`.
"""
