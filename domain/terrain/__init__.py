"""Terrain Bounded Context.

Responsible for physical geography and spatial calculations:
- Value Objects: GeoPoint, GroundVelocity, VehicleState, TerrainSample,
  BoundingBox, TerrainGrid
- Ports: VehicleStateSource, TerrainOracle, TerrainRepository
- Services: project_position (Geodesic Projector), geodesic_distance,
  bilinear_interpolate, elevation_at
- Adapters: TerrainOracleAdapter
"""
