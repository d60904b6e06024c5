from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from django.db import models

from .interfaces import Record


@lru_cache(maxsize=None)
def concrete_fields_by_name(model: type[models.Model]) -> dict[str, models.Field]:
    """Column lookup for a model class, built once per class."""
    by_name: dict[str, models.Field] = {}
    for f in model._meta.concrete_fields:
        by_name[f.name] = f
        by_name[f.attname] = f  # "author_id" next to "author"
    return by_name


@dataclass(frozen=True, slots=True)
class ModelRecord:
    """Field access on a Django model instance, limited to its concrete columns."""

    instance: models.Model
    _fields: dict[str, models.Field] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_fields", concrete_fields_by_name(type(self.instance)))

    def has_field(self, name: str) -> bool:
        return name == "pk" or name in self._fields

    def get_field(self, name: str) -> Any:
        if name == "pk":
            return self.instance.pk
        try:
            f = self._fields[name]
        except KeyError:
            # not a column, but let properties and the like through
            return getattr(self.instance, name)
        return f.value_from_object(self.instance)


@dataclass(frozen=True, slots=True)
class MappingRecord:
    data: Mapping[str, Any]

    def has_field(self, name: str) -> bool:
        return name in self.data

    def get_field(self, name: str) -> Any:
        return self.data[name]


@dataclass(frozen=True, slots=True)
class ObjectRecord:
    obj: Any

    def has_field(self, name: str) -> bool:
        return hasattr(self.obj, name)

    def get_field(self, name: str) -> Any:
        return getattr(self.obj, name)


def as_record(obj: Any) -> Record:
    """Wrap ``obj`` in the adapter matching its kind."""
    if isinstance(obj, Record):
        return obj
    if isinstance(obj, models.Model):
        return ModelRecord(obj)
    if isinstance(obj, Mapping):
        return MappingRecord(obj)
    return ObjectRecord(obj)
