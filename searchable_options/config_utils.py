import logging
import os
from typing import Any

from django.conf import settings

from searchable_options.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SETTINGS_NAME = "SEARCHABLE_OPTIONS"
PER_PAGE_ENV = "SEARCHABLE_OPTIONS_PER_PAGE"
DEFAULT_PER_PAGE = 10


def load_config_from_settings() -> dict[str, Any]:
    """
    Read the SEARCHABLE_OPTIONS setting:

      SEARCHABLE_OPTIONS = {
          "per_page": 10,
          "user_agent_contact": "ops@example.org",
          "collections": {
              "author": {"scope": "library.scopes:authors", "text_attribute": "name"},
          },
      }

    Not cached, so ``override_settings`` and reloads are picked up.
    """
    config = getattr(settings, SETTINGS_NAME, None) or {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"{SETTINGS_NAME} must be a dict, got {type(config).__name__}")
    return config


def get_default_per_page() -> int:
    """Default page size: env var, then setting, then 10."""
    raw = os.getenv(PER_PAGE_ENV, load_config_from_settings().get("per_page", DEFAULT_PER_PAGE))
    try:
        per_page = int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"invalid default per_page {raw!r}") from e
    if per_page <= 0:
        raise ConfigurationError(f"default per_page must be positive, got {per_page}")
    return per_page
