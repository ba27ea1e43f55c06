"""Create-resource endpoints generated per entity.

``build_resource_router`` wires the pieces for one mapped entity: it makes
sure the entity's input schema is registered, builds the validation pipe
once, and exposes ``POST /<resource type>`` which persists the validated
``data`` member and echoes the created resource as a JSON:API document.
"""

from collections.abc import Mapping
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from loguru import logger

from src.api.pipes.body_input_post import BodyInputPostPipe
from src.api.schemas.errors import ErrorResponse
from src.api.schemas.resource import ResourceDocument, ResourceObject
from src.api.utils.responses import JsonApiResponse
from src.infrastructure.database.base import ResourceModel
from src.infrastructure.database.dependencies import DatabaseSession
from src.infrastructure.database.metadata import EntityMetadata
from src.infrastructure.database.repository import ResourceRepository
from src.infrastructure.schema.registry import (
    SchemaRegistry,
    input_body_post_schema_key,
)


def to_resource_object(
    instance: ResourceModel,
    metadata: EntityMetadata,
    relationships: Mapping[str, Any],
) -> ResourceObject:
    """Render a persisted entity as a JSON:API resource object.

    Relationship linkage is echoed from the request rather than read from
    the instance, which would trigger lazy loads outside the session's
    greenlet.

    Args:
        instance: The persisted entity.
        metadata: Metadata of the entity.
        relationships: ``relationships`` member of the validated request.

    Returns:
        ResourceObject: The resource object.
    """
    attributes = {
        column.name: getattr(instance, column.name)
        for column in metadata.columns.values()
        if not (column.primary_key or column.foreign_key)
    }
    return ResourceObject.model_validate(
        {
            "type": metadata.resource_type,
            "id": str(instance.id),
            "attributes": attributes,
            "relationships": dict(relationships),
        }
    )


def build_resource_router(
    model: type[ResourceModel], registry: SchemaRegistry
) -> APIRouter:
    """Build the router exposing resource creation for ``model``.

    Args:
        model: The mapped entity class.
        registry: Schema registry; the entity's schema is added if missing.

    Returns:
        APIRouter: Router with the ``POST /<resource type>`` route.
    """
    metadata = EntityMetadata.from_model(model)
    if input_body_post_schema_key(metadata.entity_name) not in registry:
        registry.register_entity(metadata)
    pipe = BodyInputPostPipe(metadata, registry)

    router = APIRouter(tags=[metadata.resource_type])

    @router.post(
        f"/{metadata.resource_type}",
        name=f"create_{metadata.resource_type}",
        status_code=status.HTTP_201_CREATED,
        response_class=JsonApiResponse,
        response_model=ResourceDocument,
        responses={
            status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
            status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse},
        },
    )
    async def create_resource(
        data: Annotated[dict[str, Any], Depends(pipe)],
        session: DatabaseSession,
    ) -> JsonApiResponse:
        repository = ResourceRepository(session, model)
        instance = await repository.create_from_payload(data)
        document = ResourceDocument(
            data=to_resource_object(
                instance, metadata, data.get("relationships") or {}
            )
        )
        return JsonApiResponse(
            status_code=status.HTTP_201_CREATED,
            content=document.model_dump(mode="json"),
        )

    logger.debug(
        "Built create route for {} at /{}",
        metadata.entity_name,
        metadata.resource_type,
    )
    return router
