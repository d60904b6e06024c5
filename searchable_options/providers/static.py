from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

import jmespath

from searchable_options.client import fetch_json
from searchable_options.exceptions import ConfigurationError

logger = logging.getLogger("searchable_options.providers.static")

LOOKUPS = ("exact", "iexact", "contains", "icontains")


@dataclass(frozen=True, slots=True)
class StaticQuery:
    """
    In-memory stand-in for a QuerySet over a fixed list of items.

    Supports the subset an option collection needs:

      - ``filter(name__icontains=term)`` and the other LOOKUPS, where the field
        part is a JMESPath expression evaluated against each item
      - slicing (``query[10:21]``), iteration, ``len()`` and ``count()``
      - ``order_by("name")`` / ``order_by("-name")``

    Items may be mappings or plain objects; objects are matched on attributes.
    Every operation returns a new StaticQuery, so one instance can serve as a
    fixed scope for concurrent requests.
    """

    items: tuple[Any, ...] = ()

    @classmethod
    def of(cls, items: Iterable[Any]) -> StaticQuery:
        return cls(tuple(items))

    @classmethod
    def from_source(cls, url: str, items_path: str = "@") -> StaticQuery:
        """Load items from a JSON document (http(s)://, file://, static:// or a plain path)."""
        doc = fetch_json(url)
        if isinstance(doc, dict) and doc.get("errors"):
            raise ConfigurationError(f"cannot load options from {url}: {'; '.join(map(str, doc['errors']))}")

        items = jmespath.search(items_path, doc) if items_path else doc
        if items is None:
            items = []
        if not isinstance(items, list):
            raise ConfigurationError(f"items_path {items_path!r} did not yield a list for {url}, got {type(items)!r}")

        logger.info("static: loaded %d item(s) from %s", len(items), url)
        return cls(tuple(items))

    # ------------------------------------------------------------------ #
    # QuerySet-like API
    # ------------------------------------------------------------------ #
    def all(self) -> StaticQuery:
        return self

    def filter(self, **lookups: Any) -> StaticQuery:
        predicates = [self._parse_lookup(key, value) for key, value in lookups.items()]
        return StaticQuery(tuple(it for it in self.items if all(self._matches(it, *p) for p in predicates)))

    def search(self, term: str, paths: Sequence[str]) -> StaticQuery:
        """Case-insensitive substring match of ``term`` on any of ``paths``."""
        q = (term or "").lower()
        return StaticQuery(
            tuple(it for it in self.items if any(self._matches(it, path, "icontains", q) for path in paths))
        )

    def order_by(self, path: str) -> StaticQuery:
        reverse = path.startswith("-")
        expr = path.lstrip("-")
        # None sorts first when ascending
        return StaticQuery(
            tuple(sorted(self.items, key=lambda it: self._sort_key(self._value(it, expr)), reverse=reverse))
        )

    def count(self) -> int:
        return len(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __getitem__(self, key: int | slice) -> Any:
        if isinstance(key, slice):
            return StaticQuery(self.items[key])
        return self.items[key]

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    @staticmethod
    def _parse_lookup(key: str, value: Any) -> tuple[str, str, Any]:
        path, sep, lookup = key.rpartition("__")
        if not sep or lookup not in LOOKUPS:
            path, lookup = key, "exact"
        return path, lookup, value

    @staticmethod
    def _value(item: Any, path: str) -> Any:
        if isinstance(item, dict):
            return jmespath.search(path, item)
        return getattr(item, path, None)

    @classmethod
    def _matches(cls, item: Any, path: str, lookup: str, expected: Any) -> bool:
        val = cls._value(item, path)
        values = val if isinstance(val, list) else [val]
        for v in values:
            if v is None:
                continue
            if lookup == "exact" and v == expected:
                return True
            if lookup == "iexact" and str(v).lower() == str(expected).lower():
                return True
            if lookup == "contains" and str(expected) in str(v):
                return True
            if lookup == "icontains" and str(expected).lower() in str(v).lower():
                return True
        return False

    @staticmethod
    def _sort_key(value: Any) -> tuple[bool, Any]:
        if isinstance(value, str):
            value = value.lower()
        return (value is not None, value if value is not None else 0)
