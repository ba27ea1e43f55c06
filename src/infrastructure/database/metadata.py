"""Read-only entity metadata derived from SQLAlchemy mappers.

``EntityMetadata`` is the single view of an ORM entity the JSON:API layer
relies on: which properties are relations, which columns are writable, what
Python type each column declares. It is computed once per model and shared
by the schema builder, the validation pipe and the repository.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from functools import cache
from types import MappingProxyType
from typing import Any, cast

from sqlalchemy import Column, Table, inspect
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapper, RelationshipDirection, RelationshipProperty
from sqlalchemy.types import TypeEngine


@dataclass(frozen=True)
class ColumnInfo:
    """Description of one column attribute of an entity."""

    name: str
    python_type: type | None
    nullable: bool
    has_default: bool
    primary_key: bool
    server_generated: bool
    foreign_key: bool
    enum_values: tuple[str, ...] | None = None
    max_length: int | None = None

    @property
    def writable(self) -> bool:
        """Whether a create document may carry this column as an attribute."""
        return not (self.primary_key or self.server_generated or self.foreign_key)

    @property
    def required(self) -> bool:
        """Whether a create document must carry this column."""
        return self.writable and not self.nullable and not self.has_default


@dataclass(frozen=True)
class RelationInfo:
    """Description of one relationship property of an entity."""

    name: str
    target: type
    resource_type: str
    to_many: bool
    nullable: bool


def _python_type(column_type: TypeEngine[Any]) -> type | None:
    try:
        return column_type.python_type
    except NotImplementedError:
        return None


def _column_info(key: str, column: Column[Any]) -> ColumnInfo:
    column_type = column.type
    is_enum = isinstance(column_type, SAEnum)
    return ColumnInfo(
        name=key,
        python_type=_python_type(column_type),
        nullable=bool(column.nullable),
        has_default=column.default is not None,
        primary_key=column.primary_key,
        server_generated=(
            column.server_default is not None or column.server_onupdate is not None
        ),
        foreign_key=bool(column.foreign_keys),
        enum_values=tuple(column_type.enums) if is_enum else None,
        max_length=None if is_enum else getattr(column_type, "length", None),
    )


def _relation_info(relationship: RelationshipProperty[Any]) -> RelationInfo:
    target_mapper = relationship.mapper
    to_many = bool(relationship.uselist)
    if relationship.direction is RelationshipDirection.MANYTOONE:
        nullable = all(column.nullable for column in relationship.local_columns)
    else:
        nullable = not to_many
    return RelationInfo(
        name=relationship.key,
        target=target_mapper.class_,
        resource_type=str(cast("Table", target_mapper.local_table).name),
        to_many=to_many,
        nullable=nullable,
    )


@dataclass(frozen=True)
class EntityMetadata:
    """Metadata of one mapped entity.

    Attributes:
        model: The mapped class.
        entity_name: Class name, used to key the input schema.
        resource_type: Table name, used as the JSON:API ``type`` member.
        columns: Column attributes keyed by attribute name.
        relations: Relationship properties keyed by attribute name.
    """

    model: type
    entity_name: str
    resource_type: str
    columns: Mapping[str, ColumnInfo]
    relations: Mapping[str, RelationInfo]

    @classmethod
    def from_model(cls, model: type) -> "EntityMetadata":
        """Inspect a mapped class. Results are cached per class."""
        return _inspect_model(model)

    @property
    def relation_names(self) -> frozenset[str]:
        return frozenset(self.relations)

    @property
    def writable_columns(self) -> list[ColumnInfo]:
        return [column for column in self.columns.values() if column.writable]

    def is_date_field(self, name: str) -> bool:
        """Whether ``name`` is a column declared as a date or datetime."""
        column = self.columns.get(name)
        if column is None or column.python_type is None:
            return False
        return issubclass(column.python_type, date)

    def date_fields(self, names: Iterable[str]) -> list[str]:
        """Filter ``names`` down to the date-typed columns, preserving order."""
        return [name for name in names if self.is_date_field(name)]


@cache
def _inspect_model(model: type) -> EntityMetadata:
    mapper: Mapper[Any] = inspect(model)
    columns = {
        attr.key: _column_info(attr.key, cast("Column[Any]", attr.columns[0]))
        for attr in mapper.column_attrs
    }
    relations = {rel.key: _relation_info(rel) for rel in mapper.relationships}
    return EntityMetadata(
        model=model,
        entity_name=model.__name__,
        resource_type=str(cast("Table", mapper.local_table).name),
        columns=MappingProxyType(columns),
        relations=MappingProxyType(relations),
    )
