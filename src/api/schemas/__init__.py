"""Pydantic schema models for API responses and OpenAPI documentation.

- **errors**: Error envelope and JSON:API error objects
- **resource**: JSON:API resource documents
"""
