"""JSON Schema generation and the registry of compiled input validators.

- **builder**: Derives the create-document schema from entity metadata
- **registry**: Stores compiled ``jsonschema`` validators keyed by name
"""

from src.infrastructure.schema.builder import build_input_body_post_schema
from src.infrastructure.schema.registry import (
    SchemaRegistry,
    input_body_post_schema_key,
)

__all__ = [
    "SchemaRegistry",
    "build_input_body_post_schema",
    "input_body_post_schema_key",
]
