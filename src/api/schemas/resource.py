"""JSON:API document shapes used for OpenAPI documentation and responses.

Incoming create documents are validated by the entity's JSON Schema, not by
these models; ``ResourceRequestObject`` only documents the expected shape.
"""

from typing import Any

from pydantic import BaseModel, Field


class ResourceIdentifier(BaseModel):
    """Resource identifier object: type + id."""

    type: str = Field(..., examples=["users"])
    id: str = Field(..., examples=["1"])


class RelationshipObject(BaseModel):
    """Relationship member wrapping its linkage."""

    data: ResourceIdentifier | list[ResourceIdentifier] | None


class ResourceRequestData(BaseModel):
    """``data`` member of a create document."""

    type: str
    attributes: dict[str, Any]
    relationships: dict[str, RelationshipObject] | None = None


class ResourceRequestObject(BaseModel):
    """Create-resource request document."""

    data: ResourceRequestData


class ResourceObject(BaseModel):
    """Resource object as returned after creation."""

    type: str
    id: str
    attributes: dict[str, Any] = Field(default_factory=dict)
    relationships: dict[str, RelationshipObject] = Field(default_factory=dict)


class ResourceDocument(BaseModel):
    """Top-level document holding a single resource."""

    data: ResourceObject
