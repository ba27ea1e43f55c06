"""HTTP API layer built on FastAPI.

- **main**: Application factory and lifecycle management
- **pipes**: Request body validation as FastAPI dependencies
- **routes**: Per-entity create-resource routers
- **middleware**: Correlation IDs and centralized error handling
- **schemas**: Pydantic models for error and resource documents
- **utils**: orjson-backed response classes
"""
