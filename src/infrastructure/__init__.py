"""Infrastructure layer: persistence and schema validation backends.

- **database**: Async PostgreSQL with SQLAlchemy 2.0+, entity metadata
- **schema**: JSON Schema generation and compiled validator registry
"""
