from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from django.apps import apps
from django.utils.module_loading import import_string

from searchable_options.config_utils import load_config_from_settings
from searchable_options.exceptions import ConfigurationError, UnknownCollectionError

from .collection import OptionCollection
from .static import StaticQuery

logger = logging.getLogger("searchable_options.providers.factory")

CONFIG_COLLECTIONS = "collections"

# options that may be given as "pkg.mod:attr" / "pkg.mod.attr" in settings
DOTTED_OPTIONS = ("scope", "display_text", "filter", "additional_payload")

# keyed by collection_action_name(); filled at startup, read-only afterwards
_REGISTRY: dict[str, OptionCollection] = {}


def register(name: str, **options: Any) -> OptionCollection:
    """Build a collection and make it addressable by ``"<name>_options"``."""
    collection = OptionCollection.from_options(name, options)
    action_name = collection.collection_action_name()
    if action_name in _REGISTRY:
        raise ConfigurationError(f"Duplicate collection name={name!r}")
    _REGISTRY[action_name] = collection
    logger.debug("registered collection name=%s action=%s", name, action_name)
    return collection


def unregister(name: str) -> None:
    _REGISTRY.pop(f"{name}_options", None)


def get_collection(action_name: str) -> OptionCollection:
    try:
        return _REGISTRY[action_name]
    except KeyError as e:
        raise UnknownCollectionError(action_name) from e


def registered_collections() -> dict[str, OptionCollection]:
    return dict(_REGISTRY)


def _resolve_dotted(name: str, key: str, dotted: str) -> Any:
    """Resolve "pkg.mod:attr" or "pkg.mod.attr"."""
    try:
        return import_string(dotted.replace(":", "."))
    except ImportError as e:
        raise ConfigurationError(f"[{name}] cannot import {key}={dotted!r}: {e}") from e


def _resolve_scope(name: str, scope: Any) -> Any:
    if isinstance(scope, str):
        return _resolve_dotted(name, "scope", scope)

    if isinstance(scope, Mapping):
        if scope.get("model"):
            try:
                return apps.get_model(scope["model"])
            except (LookupError, ValueError) as e:
                raise ConfigurationError(f"[{name}] unknown scope.model={scope['model']!r}") from e
        if scope.get("source"):
            return StaticQuery.from_source(scope["source"], scope.get("items_path") or "@")
        raise ConfigurationError(f"[{name}] scope table needs either 'model' or 'source'")

    return scope


def _resolve_options(name: str, entry: Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"[{name}] collection options must be a dict")

    options = dict(entry)
    if "scope" in options:
        options["scope"] = _resolve_scope(name, options["scope"])
    for key in DOTTED_OPTIONS[1:]:
        if isinstance(options.get(key), str):
            options[key] = _resolve_dotted(name, key, options[key])
    return options


def build_collections() -> dict[str, OptionCollection]:
    """
    Register every collection declared in settings:

      SEARCHABLE_OPTIONS = {
          "collections": {
              "author": {"scope": {"model": "library.Author"}, "text_attribute": "name"},
              "country": {"scope": {"source": "static://countries.json", "items_path": "data"},
                          "text_attribute": "name", "id_field": "code"},
              "book": {"scope": "library.scopes:visible_books", "display_text": "library.scopes:book_label",
                       "filter": "library.scopes:filter_books", "additional_attributes": ["isbn"]},
          },
      }
    """
    entries = load_config_from_settings().get(CONFIG_COLLECTIONS) or {}
    if not isinstance(entries, Mapping):
        raise ConfigurationError("SEARCHABLE_OPTIONS['collections'] must be a dict of collection options")

    built: dict[str, OptionCollection] = {}
    for name, entry in entries.items():
        collection = register(name, **_resolve_options(name, entry))
        built[collection.collection_action_name()] = collection

    logger.info("searchable-options: loaded %d collection(s) from settings", len(built))
    return built
