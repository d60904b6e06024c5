from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from searchable_options.config_utils import get_default_per_page
from searchable_options.exceptions import ConfigurationError, InvalidRequestError

from .interfaces import PageResponse, Query
from .records import as_record
from .scope import RequestContext, ScopeSource, build_scope_source

logger = logging.getLogger("searchable_options.providers.collection")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

_EMPTY_PARAMS: Mapping[str, Any] = {}

# largest LIMIT/OFFSET the SQLite and PostgreSQL backends accept (signed 64-bit)
MAX_ROW_BOUND = 2**63 - 1


def parse_page_index(raw: Any, per_page: int = 1) -> int:
    """
    Read a page index the way a lenient client sends it: ``3``, ``"3"``,
    ``"3abc"`` -> 3. Raises InvalidRequestError for missing or non-numeric
    input, and for pages whose rows lie beyond MAX_ROW_BOUND at ``per_page``;
    negative values clamp to 0.
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidRequestError(f"invalid page {raw!r}")
    if isinstance(raw, int):
        page = max(raw, 0)
    else:
        match = _LEADING_INT.match(str(raw))
        if not match:
            raise InvalidRequestError(f"invalid page {raw!r}")
        try:
            page = max(int(match.group(1)), 0)
        except ValueError as e:  # more digits than int() will parse
            raise InvalidRequestError(f"invalid page {raw!r}") from e
    if (page + 1) * per_page + 1 > MAX_ROW_BOUND:
        raise InvalidRequestError(f"page {raw!r} out of range")
    return page


@dataclass(frozen=True, slots=True)
class OptionCollection:
    """
    One named, searchable option list.

    Answers "page N of the records matching term T" with the payload an
    autocomplete widget expects::

        {"results": [{"id": ..., "text": ...}, ...], "pagination": {"more": bool}}

    Built once (see ``from_options``) and shared read-only between requests.
    """

    name: str
    scope_source: ScopeSource = field(repr=False)
    display_text_fn: Callable[[Any], str] = field(repr=False)
    filter_fn: Callable[[str, Any], Any] = field(repr=False)
    per_page: int = 10
    id_field: str = "id"
    additional_attributes: tuple[str, ...] = ()
    additional_payload_source: Callable[[Any], Mapping[str, Any]] | Mapping[str, Any] | None = field(
        default=None, repr=False
    )

    # ------------------------------------------------------------------ #
    # Construction from options
    # ------------------------------------------------------------------ #
    @classmethod
    def from_options(cls, name: str, options: Mapping[str, Any]) -> OptionCollection:
        """
        Build from an options mapping. Recognised keys:

          scope (required), display_text, text_attribute, filter, per_page,
          id_field, additional_attributes, additional_payload
        """
        if not name or not isinstance(name, str):
            raise ConfigurationError(f"collection name must be a non-empty string, got {name!r}")

        per_page = options.get("per_page")
        if per_page is None:
            per_page = get_default_per_page()
        if isinstance(per_page, bool) or not isinstance(per_page, int) or per_page <= 0:
            raise ConfigurationError(f"[{name}] per_page must be a positive integer, got {per_page!r}")

        payload = options.get("additional_payload")
        if payload is not None and not callable(payload) and not isinstance(payload, Mapping):
            raise ConfigurationError(f"[{name}] additional_payload must be a callable or a mapping")

        return cls(
            name=name,
            scope_source=_extract_scope_option(name, options),
            display_text_fn=_extract_display_text_option(name, options),
            filter_fn=_extract_filter_option(name, options),
            per_page=per_page,
            id_field=str(options.get("id_field") or "id"),
            additional_attributes=tuple(str(a) for a in options.get("additional_attributes") or ()),
            additional_payload_source=payload,
        )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def scope(self, context: RequestContext | None, params: Mapping[str, Any] | None = None) -> Query:
        return self.scope_source.resolve(
            context if context is not None else RequestContext(),
            params if params is not None else _EMPTY_PARAMS,
        )

    def display_text(self, record: Any) -> str:
        return self.display_text_fn(record)

    def collection_action_name(self) -> str:
        return f"{self.name}_options"

    def as_json(self, context: RequestContext | None, params: Mapping[str, Any] | None = None) -> PageResponse:
        params = params if params is not None else _EMPTY_PARAMS
        t0 = time.perf_counter()

        term = params.get("term")
        records, more = self.paginate(self.filter(self.scope(context, params), term), params.get("page"))

        results: list[dict[str, Any]] = []
        for record in records:
            item = self.record_as_json(record)
            payload = self.additional_payload(record)
            if payload:
                item.update(payload)
            results.append(item)

        dur_ms = int((time.perf_counter() - t0) * 1000)
        logger.debug(
            "options: collection=%s term=%r page=%r results=%d more=%s duration_ms=%d",
            self.name,
            term,
            params.get("page"),
            len(results),
            more,
            dur_ms,
        )
        return {"results": results, "pagination": {"more": more}}

    def record_as_json(self, record: Any) -> dict[str, Any]:
        rec = as_record(record)
        item: dict[str, Any] = {
            "id": rec.get_field(self.id_field),
            "text": self.display_text(record),
        }
        for attr_name in self.additional_attributes:
            if rec.has_field(attr_name):
                item[attr_name] = rec.get_field(attr_name)
        return item

    def filter(self, query: Query, term: str | None) -> Query:
        # "" is still a term
        if term is None:
            return query
        return self.filter_fn(term, query)

    def paginate(self, query: Query, page_index: Any) -> tuple[list[Any], bool]:
        try:
            page = parse_page_index(page_index, self.per_page)
        except InvalidRequestError as e:
            logger.debug("options: collection=%s falling back to page 0: %s", self.name, e)
            page = 0

        offset = page * self.per_page
        # one extra row tells us whether another page exists
        rows = list(query[offset : offset + self.per_page + 1])
        return rows[: self.per_page], len(rows) > self.per_page

    def additional_payload(self, record: Any) -> dict[str, Any] | None:
        source = self.additional_payload_source
        if source is None:
            return None
        if callable(source):
            return dict(source(record) or {})
        if not source:
            return None
        return dict(source)


# ---------------------------------------------------------------------- #
# Option extraction
# ---------------------------------------------------------------------- #
def _extract_scope_option(name: str, options: Mapping[str, Any]) -> ScopeSource:
    if options.get("scope") is None:
        raise ConfigurationError(
            f"[{name}] Missing option: scope. Pass the collection of items to render options for."
        )
    return build_scope_source(name, options["scope"])


def _extract_display_text_option(name: str, options: Mapping[str, Any]) -> Callable[[Any], str]:
    display_text = options.get("display_text")
    if display_text is not None:
        if not callable(display_text):
            raise ConfigurationError(f"[{name}] display_text must be callable")
        return display_text

    text_attribute = options.get("text_attribute")
    if not text_attribute:
        raise ConfigurationError(
            f"[{name}] Missing option: display_text or text_attribute. "
            "Either pass a callable to determine the display text for a record "
            "or set the text_attribute option."
        )

    def read_text_attribute(record: Any) -> str:
        return as_record(record).get_field(text_attribute)

    return read_text_attribute


def _extract_filter_option(name: str, options: Mapping[str, Any]) -> Callable[[str, Any], Any]:
    filter_fn = options.get("filter")
    if filter_fn is not None:
        if not callable(filter_fn):
            raise ConfigurationError(f"[{name}] filter must be callable")
        return filter_fn

    text_attribute = options.get("text_attribute")
    if not text_attribute:
        raise ConfigurationError(
            f"[{name}] Missing option: filter or text_attribute. "
            "Either pass a callable which filters the scope according to a given term "
            "or set the text_attribute option to apply a default icontains filter."
        )

    lookup = f"{text_attribute}__icontains"

    def filter_on_text_attribute(term: str, query: Any) -> Any:
        return query.filter(**{lookup: term})

    return filter_on_text_attribute
