"""API-specific utilities: orjson-backed response classes."""
