"""HTTP API: routers, endpoints and dependency wiring."""
