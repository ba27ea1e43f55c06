"""Validation pipe for JSON:API create-resource documents.

``BodyInputPostPipe`` turns a decoded request body into the ``data`` member
a repository can persist, in three ordered passes:

1. **Structural validation** against the entity's compiled JSON Schema.
   Every violation becomes one error object whose ``source.parameter`` is
   the JSON pointer of the offending instance. Any violation stops here.
2. **Domain validation** of the candidate entity (attributes plus the
   unwrapped relationship data) against the constraints registered for the
   entity. Errors point at ``/data/attributes/<name>`` or, for relations,
   ``/data/relationships/<name>``.
3. **Date coercion** of date and datetime attributes, in place.

Both validation passes fail with ``UnprocessableEntityError``.

The pipe instance is a FastAPI dependency::

    pipe = BodyInputPostPipe.for_model(Book, registry)

    @router.post("/books")
    async def create(data: Annotated[dict[str, Any], Depends(pipe)]) -> ...
"""

import json
import re
from collections.abc import Iterable
from datetime import date, datetime
from typing import Annotated, Any, Final

from fastapi import Body
from jsonschema import ValidationError as SchemaViolation
from loguru import logger
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.core.constraints import check_constraints
from src.core.exceptions import UnprocessableEntityError
from src.core.types import JsonObject, ValidationErrorObject
from src.infrastructure.database.metadata import EntityMetadata
from src.infrastructure.schema.registry import (
    SchemaRegistry,
    input_body_post_schema_key,
)

_DATE_ADAPTER: Final = TypeAdapter(date)
_DATETIME_ADAPTER: Final = TypeAdapter(datetime)


def upper_first_letter(text: str) -> str:
    """Upper-case the first character, leaving the rest untouched."""
    return text[:1].upper() + text[1:]


def instance_path(path: Iterable[Any]) -> str:
    """Render a jsonschema path deque as an RFC 6901 JSON pointer.

    The document root renders as the empty string.
    """
    return "".join(
        "/" + str(part).replace("~", "~0").replace("/", "~1") for part in path
    )


def _join_allowed_values(values: list[Any]) -> str:
    return ",".join(v if isinstance(v, str) else json.dumps(v) for v in values)


def _additional_properties(instance: Any, schema: JsonObject) -> list[str]:
    """List the members of ``instance`` its schema does not declare."""
    if not isinstance(instance, dict):
        return []
    properties = schema.get("properties", {})
    patterns = schema.get("patternProperties", {})
    return [
        name
        for name in instance
        if name not in properties
        and not any(re.search(pattern, name) for pattern in patterns)
    ]


def schema_violation_errors(violation: SchemaViolation) -> list[ValidationErrorObject]:
    """Convert one jsonschema violation into JSON:API error objects.

    ``additionalProperties`` violations yield one error per unexpected
    member; every other violation yields exactly one error.
    """
    detail = upper_first_letter(violation.message)
    parameter = instance_path(violation.absolute_path)

    if violation.validator == "enum":
        allowed = _join_allowed_values(list(violation.validator_value))
        return [
            {
                "source": {"parameter": parameter},
                "detail": f'{detail}. Allowed values are: "{allowed}"',
            }
        ]

    if violation.validator == "additionalProperties":
        extras = _additional_properties(violation.instance, violation.schema)
        if extras:
            return [
                {
                    "source": {"parameter": parameter},
                    "detail": (
                        "Additional properties are not allowed "
                        f"('{extra}' was unexpected). "
                        f'Additional Property is: "{extra}"'
                    ),
                }
                for extra in extras
            ]

    return [{"source": {"parameter": parameter}, "detail": detail}]


class BodyInputPostPipe:
    """Validate and normalize the body of a create-resource request.

    Args:
        metadata: Metadata of the entity being created.
        registry: Registry holding the entity's compiled input schema.

    Raises:
        SchemaNotFoundError: If the registry has no schema for the entity.
    """

    def __init__(self, metadata: EntityMetadata, registry: SchemaRegistry) -> None:
        self.metadata = metadata
        self.relation_names = metadata.relation_names
        self.validate_function = registry.get_schema(
            input_body_post_schema_key(metadata.entity_name)
        )

    @classmethod
    def for_model(cls, model: type, registry: SchemaRegistry) -> "BodyInputPostPipe":
        return cls(EntityMetadata.from_model(model), registry)

    async def __call__(self, body: Annotated[dict[str, Any], Body()]) -> JsonObject:
        return await self.transform(body)

    async def transform(self, value: JsonObject) -> JsonObject:
        """Run the validation passes and return the normalized ``data`` member.

        Args:
            value: The decoded create-resource document.

        Returns:
            JsonObject: ``value["data"]`` with date attributes coerced.

        Raises:
            UnprocessableEntityError: If schema or constraint validation fails.
        """
        entity = self.metadata.entity_name

        error_result: list[ValidationErrorObject] = []
        for violation in self.validate_function.iter_errors(value):
            error_result.extend(schema_violation_errors(violation))

        if error_result:
            logger.info(
                "Rejected {} document: {} schema violation(s)",
                entity,
                len(error_result),
                entity=entity,
            )
            raise UnprocessableEntityError(error_result, context={"entity": entity})

        data: JsonObject = value["data"]
        attributes: JsonObject = data["attributes"]

        error_result.extend(self._constraint_errors(attributes, data))
        if error_result:
            logger.info(
                "Rejected {} document: {} constraint violation(s)",
                entity,
                len(error_result),
                entity=entity,
            )
            raise UnprocessableEntityError(error_result, context={"entity": entity})

        self._coerce_dates(attributes)
        return data

    def _constraint_errors(
        self, attributes: JsonObject, data: JsonObject
    ) -> list[ValidationErrorObject]:
        candidate = dict(attributes)
        for key, relationship in (data.get("relationships") or {}).items():
            candidate[key] = relationship["data"]

        errors: list[ValidationErrorObject] = []
        for violation in check_constraints(self.metadata.model, candidate):
            section = (
                "relationships"
                if violation.property in self.relation_names
                else "attributes"
            )
            pointer = f"/data/{section}"
            if violation.property:
                pointer += f"/{violation.property}"
            errors.extend(
                {"source": {"pointer": pointer}, "detail": upper_first_letter(message)}
                for message in violation.messages
            )
        return errors

    def _coerce_dates(self, attributes: JsonObject) -> None:
        errors: list[ValidationErrorObject] = []
        for name in self.metadata.date_fields(list(attributes)):
            raw = attributes[name]
            if raw is None:
                continue
            python_type = self.metadata.columns[name].python_type
            adapter = (
                _DATETIME_ADAPTER
                if python_type is not None and issubclass(python_type, datetime)
                else _DATE_ADAPTER
            )
            try:
                attributes[name] = adapter.validate_python(raw)
            except PydanticValidationError as exc:
                errors.extend(
                    {
                        "source": {"pointer": f"/data/attributes/{name}"},
                        "detail": upper_first_letter(error["msg"]),
                    }
                    for error in exc.errors(include_url=False)
                )
        if errors:
            raise UnprocessableEntityError(
                errors, context={"entity": self.metadata.entity_name}
            )
