"""Host-facing services: binary discovery and process execution."""
