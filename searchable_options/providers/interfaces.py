from typing import Any, Protocol, TypedDict, runtime_checkable


class Pagination(TypedDict):
    more: bool


class PageResponse(TypedDict):
    results: list[dict[str, Any]]
    pagination: Pagination


@runtime_checkable
class Record(Protocol):
    # Field access used when projecting a record to an option
    def has_field(self, name: str) -> bool: ...
    def get_field(self, name: str) -> Any: ...


class Query(Protocol):
    # QuerySet-facing subset: derived filter, limit/offset slicing, materialize
    def filter(self, *args: Any, **lookups: Any) -> "Query": ...
    def __getitem__(self, key: slice) -> Any: ...
    def __iter__(self): ...

