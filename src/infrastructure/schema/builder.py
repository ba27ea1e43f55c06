"""JSON Schema generation for JSON:API create documents.

The schema mirrors an entity's mapper: writable columns become
``data.attributes`` members, relationships become ``data.relationships``
members holding resource identifiers. Every object level rejects unknown
members so typos surface as ``additionalProperties`` violations.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Final

from src.core.types import JsonObject
from src.infrastructure.database.metadata import ColumnInfo, EntityMetadata, RelationInfo

DRAFT7_URI: Final[str] = "http://json-schema.org/draft-07/schema#"
ID_PATTERN: Final[str] = r"^\d+$"


def _json_type(column: ColumnInfo) -> JsonObject:
    """Map a column's declared Python type onto a JSON Schema fragment."""
    if column.enum_values is not None:
        return {"type": "string", "enum": list(column.enum_values)}

    python_type = column.python_type
    if python_type is None:
        return {}
    # bool before int: bool is an int subclass
    if issubclass(python_type, bool):
        return {"type": "boolean"}
    if issubclass(python_type, int):
        return {"type": "integer"}
    if issubclass(python_type, (float, Decimal)):
        return {"type": "number"}
    if issubclass(python_type, datetime):
        return {"type": "string", "format": "date-time"}
    if issubclass(python_type, date):
        return {"type": "string", "format": "date"}
    if issubclass(python_type, str):
        fragment: JsonObject = {"type": "string"}
        if column.max_length:
            fragment["maxLength"] = column.max_length
        return fragment
    if issubclass(python_type, dict):
        return {"type": "object"}
    if issubclass(python_type, list):
        return {"type": "array"}
    return {}


def _nullable(fragment: JsonObject) -> JsonObject:
    """Widen a fragment so it also accepts ``null``."""
    if not fragment:
        return fragment
    fragment = dict(fragment)
    fragment["type"] = [fragment["type"], "null"]
    if "enum" in fragment:
        fragment["enum"] = [*fragment["enum"], None]
    return fragment


def attribute_schema(column: ColumnInfo) -> JsonObject:
    """Build the schema of one attribute member."""
    fragment = _json_type(column)
    return _nullable(fragment) if column.nullable else fragment


def identifier_schema(resource_type: str) -> JsonObject:
    """Build the schema of a resource identifier object of ``resource_type``."""
    return {
        "type": "object",
        "properties": {
            "type": {"type": "string", "enum": [resource_type]},
            "id": {"type": "string", "pattern": ID_PATTERN},
        },
        "required": ["type", "id"],
        "additionalProperties": False,
    }


def relationship_schema(relation: RelationInfo) -> JsonObject:
    """Build the schema of one relationship member: ``{"data": ...}``."""
    identifier = identifier_schema(relation.resource_type)
    data: JsonObject
    if relation.to_many:
        data = {"type": "array", "items": identifier}
    elif relation.nullable:
        data = {"oneOf": [{"type": "null"}, identifier]}
    else:
        data = identifier
    return {
        "type": "object",
        "properties": {"data": data},
        "required": ["data"],
        "additionalProperties": False,
    }


def build_input_body_post_schema(metadata: EntityMetadata) -> JsonObject:
    """Build the Draft-7 schema a create document of ``metadata`` must satisfy.

    Args:
        metadata: Metadata of the entity being created.

    Returns:
        JsonObject: The JSON Schema, ready for ``SchemaRegistry.add_schema``.
    """
    columns = metadata.writable_columns
    attributes: dict[str, Any] = {
        "type": "object",
        "properties": {column.name: attribute_schema(column) for column in columns},
        "additionalProperties": False,
    }
    required = [column.name for column in columns if column.required]
    if required:
        attributes["required"] = required

    relationships = {
        "type": "object",
        "properties": {
            name: relationship_schema(relation)
            for name, relation in metadata.relations.items()
        },
        "additionalProperties": False,
    }

    return {
        "$schema": DRAFT7_URI,
        "type": "object",
        "properties": {
            "data": {
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": [metadata.resource_type]},
                    "attributes": attributes,
                    "relationships": relationships,
                },
                "required": ["type", "attributes"],
                "additionalProperties": False,
            },
            "meta": {"type": "object"},
        },
        "required": ["data"],
        "additionalProperties": False,
    }
