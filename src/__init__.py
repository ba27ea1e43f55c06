"""JSON:API Bridge - JSON:API resource creation for FastAPI and SQLAlchemy.

Architecture Overview:
- **API Layer**: FastAPI routes, the body validation pipe and error handlers
- **Core Layer**: Configuration, logging, exceptions and domain constraints
- **Infrastructure Layer**: Entity metadata, persistence and JSON Schema
  registry

A create request flows through the layers in one direction: the route's
pipe validates the document against the entity's schema and constraints,
the repository persists the normalized payload, and errors surface as
unprocessable-entity responses listing every violation.
"""
