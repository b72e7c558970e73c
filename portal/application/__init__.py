"""Application layer: DTOs, ports, and services."""
