"""Repository implementations for persisting JSON:API resources.

``BaseRepository`` provides the shared create operation; ``ResourceRepository``
turns the normalized ``data`` member returned by the validation pipe into a
persisted entity, resolving relationship linkage to mapped instances.
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError
from src.infrastructure.database.base import ResourceModel
from src.infrastructure.database.metadata import EntityMetadata, RelationInfo


class BaseRepository[T: ResourceModel]:
    """Base repository class providing the shared create operation.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class
        logger.debug("Initialized repository for {}", model_class.__name__)

    async def create(self, obj: T) -> T:
        """Persist a new model instance.

        Args:
            obj: The model instance to create.

        Returns:
            T: The created model instance with populated ID and timestamps.
        """
        logger.debug("Creating new {} instance", self.model_class.__name__)

        self.session.add(obj)
        await self.session.flush()

        # Pull server-generated values (ID, timestamps)
        await self.session.refresh(obj)

        logger.info(
            "Created {} instance with ID: {}", self.model_class.__name__, obj.id
        )

        return obj


class ResourceRepository[T: ResourceModel](BaseRepository[T]):
    """Creates entities from validated create-resource ``data`` members.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        super().__init__(session, model_class)
        self.metadata = EntityMetadata.from_model(model_class)

    async def _load_related(
        self, relation: RelationInfo, identifier: Mapping[str, Any]
    ) -> object:
        related = await self.session.get(relation.target, int(identifier["id"]))
        if related is None:
            raise NotFoundError(
                f"Resource '{relation.resource_type}' with id "
                f"'{identifier['id']}' does not exist",
                context={"pointer": f"/data/relationships/{relation.name}"},
            )
        return related

    async def create_from_payload(self, data: Mapping[str, Any]) -> T:
        """Build, link and persist an entity from a validated ``data`` member.

        Args:
            data: Output of ``BodyInputPostPipe.transform``.

        Returns:
            T: The persisted entity.

        Raises:
            NotFoundError: If a relationship references a missing resource.
        """
        instance = self.model_class(**data["attributes"])

        for name, relationship in (data.get("relationships") or {}).items():
            relation = self.metadata.relations[name]
            linkage = relationship["data"]
            if relation.to_many:
                related: object = [
                    await self._load_related(relation, identifier)
                    for identifier in linkage
                ]
            elif linkage is None:
                related = None
            else:
                related = await self._load_related(relation, linkage)
            setattr(instance, name, related)

        return await self.create(instance)
