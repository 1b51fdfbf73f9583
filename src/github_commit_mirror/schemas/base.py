"""Base schema class with factory pattern for ORM conversion."""

from collections.abc import Iterable
from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class SchemaBase(BaseModel):
    """Base class for internal Pydantic schemas with ORM conversion support.

    GitHub payload schemas in ``github_api`` derive from plain BaseModel
    instead: they parse untrusted input and must not strip or coerce it.
    """

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )

    @classmethod
    def from_orm(cls, obj: Any) -> Self:
        """
        Factory method to create a schema instance from a SQLAlchemy model.

        Args:
            obj: SQLAlchemy model instance

        Returns:
            Pydantic schema instance
        """
        return cls.model_validate(obj)

    @classmethod
    def from_orm_list(cls, objs: Iterable[Any]) -> list[Self]:
        """
        Factory method to create schema instances from SQLAlchemy models.

        Args:
            objs: SQLAlchemy model instances

        Returns:
            List of Pydantic schema instances
        """
        return [cls.from_orm(obj) for obj in objs]
