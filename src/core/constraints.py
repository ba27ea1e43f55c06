"""Per-entity domain constraints expressed as pydantic models.

A constraint set is a pydantic ``BaseModel`` registered for an entity type
with the ``constraints_for`` decorator. Field declarations and
``field_validator`` decorators on that model state the business rules a new
resource has to satisfy; ``check_constraints`` runs them against a plain
mapping and reports the failing properties.

Example:
    @constraints_for(Book)
    class BookConstraints(BaseModel):
        title: str = Field(min_length=3)
        author: dict[str, str]

Missing properties are validated (a required field that is absent fails),
unknown properties are ignored.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

_registry: dict[type, type[BaseModel]] = {}


@dataclass(frozen=True)
class ConstraintViolation:
    """All messages reported for one top-level property."""

    property: str
    messages: list[str] = field(default_factory=list)


def constraints_for[M: BaseModel](
    entity: type,
) -> Callable[[type[M]], type[M]]:
    """Register the decorated pydantic model as the constraints of ``entity``.

    Args:
        entity: The entity class the constraints apply to.

    Returns:
        Callable: Class decorator returning the model unchanged.
    """

    def decorator(model: type[M]) -> type[M]:
        if model.model_config.get("extra") == "forbid":
            msg = f"{model.__name__} must not forbid unknown properties"
            raise TypeError(msg)
        _registry[entity] = model
        logger.debug(
            "Registered constraints {} for {}", model.__name__, entity.__name__
        )
        return model

    return decorator


def get_constraints(entity: type) -> type[BaseModel] | None:
    """Return the constraint model registered for ``entity``, if any."""
    return _registry.get(entity)


def unregister_constraints(entity: type) -> None:
    """Drop the constraints registered for ``entity``."""
    _registry.pop(entity, None)


def check_constraints(
    entity: type, candidate: Mapping[str, Any]
) -> list[ConstraintViolation]:
    """Validate ``candidate`` against the constraints of ``entity``.

    Args:
        entity: Entity class whose constraint model should be used.
        candidate: Property values of the entity being created.

    Returns:
        list[ConstraintViolation]: One entry per failing property, in the order
            pydantic reported them. Empty when valid or when no constraints
            are registered.
    """
    model = get_constraints(entity)
    if model is None:
        return []

    try:
        model.model_validate(dict(candidate))
    except PydanticValidationError as exc:
        violations: dict[str, ConstraintViolation] = {}
        for error in exc.errors(include_url=False):
            loc = error["loc"]
            prop = str(loc[0]) if loc else ""
            violations.setdefault(prop, ConstraintViolation(prop)).messages.append(
                error["msg"]
            )
        return list(violations.values())
    return []

