from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from django.db import models

from searchable_options.exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Ambient values a scope resolver may need (current request, user, tenant, ...)."""

    request: Any = None
    user: Any = None
    extras: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_request(cls, request, **extras) -> RequestContext:
        return cls(request=request, user=getattr(request, "user", None), extras=extras)

    def __getitem__(self, key: str) -> Any:
        return self.extras[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.extras.get(key, default)


@dataclass(frozen=True, slots=True)
class FixedScope:
    query: Any

    def resolve(self, context: RequestContext, params: Mapping[str, Any]) -> Any:
        return self.query


@dataclass(frozen=True, slots=True)
class ContextScope:
    resolver: Callable[[RequestContext], Any]

    def resolve(self, context: RequestContext, params: Mapping[str, Any]) -> Any:
        return self.resolver(context)


@dataclass(frozen=True, slots=True)
class ParamsScope:
    resolver: Callable[[RequestContext, Mapping[str, Any]], Any]

    def resolve(self, context: RequestContext, params: Mapping[str, Any]) -> Any:
        return self.resolver(context, params)


ScopeSource = FixedScope | ContextScope | ParamsScope


def _positional_arity(fn: Callable) -> int | None:
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    kinds = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    params = list(sig.parameters.values())
    if any(p.kind is inspect.Parameter.KEYWORD_ONLY and p.default is inspect.Parameter.empty for p in params):
        # never passed by keyword, so it could not be satisfied per request
        return None
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        return 2
    return sum(1 for p in params if p.kind in kinds and p.default is inspect.Parameter.empty)


def build_scope_source(name: str, value: Any) -> ScopeSource:
    """
    Classify a ``scope`` option once, at registration:

      - FixedScope / ContextScope / ParamsScope instances are kept as given
      - a model class or a manager resolves to ``all()`` per request
      - callables by positional arity: 0 -> fn(), 1 -> fn(params), 2 -> fn(context, params)
      - anything else is a fixed query

    Resolvers that only need the context are passed as ``ContextScope(fn)``.
    """
    if isinstance(value, (FixedScope, ContextScope, ParamsScope)):
        return value

    if isinstance(value, type) and issubclass(value, models.Model):
        model = value
        return ContextScope(lambda _context: model._default_manager.all())

    if isinstance(value, models.Manager):
        manager = value
        return ContextScope(lambda _context: manager.all())

    if callable(value):
        arity = _positional_arity(value)
        if arity == 0:
            fn = value
            return ContextScope(lambda _context: fn())
        if arity == 1:
            fn = value
            return ParamsScope(lambda _context, params: fn(params))
        if arity == 2:
            return ParamsScope(value)
        raise ConfigurationError(
            f"[{name}] scope callable must accept (), (params) or (context, params) "
            f"and no required keyword-only arguments; got {value!r}"
        )

    return FixedScope(value)
