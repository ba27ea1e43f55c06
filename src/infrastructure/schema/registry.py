"""Registry of compiled JSON Schema validators keyed by name.

Schemas are checked against the Draft-7 metaschema and compiled once, when
they are added; lookups hand out the shared ``Draft7Validator`` instance,
which is safe for concurrent use because validation keeps no state on it.
"""

from collections.abc import Iterator

from jsonschema import Draft7Validator
from loguru import logger

from src.core.config import get_settings
from src.core.exceptions import SchemaNotFoundError
from src.core.types import JsonObject
from src.infrastructure.database.metadata import EntityMetadata
from src.infrastructure.schema.builder import build_input_body_post_schema


def input_body_post_schema_key(entity_name: str, prefix: str | None = None) -> str:
    """Return the registry key of an entity's create-document schema.

    Args:
        entity_name: Entity class name.
        prefix: Key prefix; defaults to the configured ``post_schema_prefix``.

    Returns:
        str: Key in the form ``<prefix>-<EntityName>``.
    """
    if prefix is None:
        prefix = get_settings().jsonapi_config.post_schema_prefix
    return f"{prefix}-{entity_name}"


class SchemaRegistry:
    """Compiled validators keyed by schema name."""

    def __init__(self) -> None:
        self._validators: dict[str, Draft7Validator] = {}

    def add_schema(self, key: str, schema: JsonObject) -> Draft7Validator:
        """Check, compile and store ``schema`` under ``key``.

        Args:
            key: Name the schema is looked up by.
            schema: A Draft-7 JSON Schema.

        Returns:
            Draft7Validator: The compiled validator.

        Raises:
            jsonschema.exceptions.SchemaError: If the schema itself is invalid.
        """
        Draft7Validator.check_schema(schema)
        validator = Draft7Validator(
            schema, format_checker=Draft7Validator.FORMAT_CHECKER
        )
        if key in self._validators:
            logger.warning("Replacing schema registered under {}", key)
        self._validators[key] = validator
        logger.debug("Registered schema {}", key)
        return validator

    def get_schema(self, key: str) -> Draft7Validator:
        """Return the validator stored under ``key``.

        Raises:
            SchemaNotFoundError: If nothing is registered under ``key``.
        """
        try:
            return self._validators[key]
        except KeyError:
            raise SchemaNotFoundError(key) from None

    def register_entity(self, metadata: EntityMetadata) -> str:
        """Build and add the create-document schema of an entity.

        Args:
            metadata: Metadata of the entity.

        Returns:
            str: The key the schema was registered under.
        """
        key = input_body_post_schema_key(metadata.entity_name)
        self.add_schema(key, build_input_body_post_schema(metadata))
        return key

    def keys(self) -> list[str]:
        return list(self._validators)

    def __contains__(self, key: object) -> bool:
        return key in self._validators

    def __iter__(self) -> Iterator[str]:
        return iter(self._validators)

    def __len__(self) -> int:
        return len(self._validators)
