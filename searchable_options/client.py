import json
import logging
from pathlib import Path
from urllib.parse import urlparse

from django.conf import settings
from django.contrib.staticfiles import finders

import requests

from searchable_options import __version__
from searchable_options.config_utils import load_config_from_settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


def fetch_json(url: str, *, timeout: float = DEFAULT_TIMEOUT) -> dict | list:
    """
    Fetch JSON from either:
      * HTTP/HTTPS URLs (via requests)
      * Django staticfiles when using 'static://relative/path.json'
      * Local filesystem when using:
          - 'file:///abs/path/to/file.json'
          - plain paths like '/path/to/file.json' or 'data/file.json'

    Failures are logged and reported as ``{"errors": [...]}``.
    """
    if not url:
        return {}

    parsed = urlparse(url)

    if parsed.scheme == "static":
        rel_path = (parsed.netloc + parsed.path).lstrip("/")
        abs_path = finders.find(rel_path) or rel_path
        return _load_local_json(abs_path, source=f"static://{rel_path}")

    if parsed.scheme == "file":
        return _load_local_json(parsed.path or "", source=url)

    if not parsed.scheme:
        return _load_local_json(url, source=url)

    logger.info("Fetching json from %s", url)
    try:
        response = requests.get(url, headers={"User-Agent": get_user_agent()}, timeout=timeout)
        response.raise_for_status()
        json_data = response.json()
        if not json_data:
            logger.debug("Fetched data is empty %s: %s", url, response)
        return json_data
    except requests.exceptions.RequestException as e:
        logger.error("Request failed for %s: %s", url, e)
        return {"errors": [str(e)]}
    except ValueError as e:
        logger.error("Invalid JSON from %s: %s", url, e)
        return {"errors": [f"invalid json: {url}: {e}"]}


def _load_local_json(path: str | Path, *, source: str) -> dict | list:
    """Helper: read JSON from local filesystem path."""
    path = Path(path)
    logger.info("Loading local JSON from %s (resolved=%s)", source, path)
    try:
        with path.open(encoding="utf-8") as fh:
            data = json.load(fh)
        if not data:
            logger.debug("Local JSON is empty from %s", path)
    except FileNotFoundError as e:
        logger.error("Local JSON not found: %s (%s)", path, e)
        return {"errors": [f"file not found: {path}"]}
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in %s: %s", path, e)
        return {"errors": [f"invalid json: {path}: {e}"]}
    except OSError as e:
        logger.error("Error reading %s: %s", path, e)
        return {"errors": [str(e)]}
    else:
        return data


def get_user_agent() -> str:
    """
    Build the User-Agent sent with remote option sources. Contact, in priority:
      1) SEARCHABLE_OPTIONS["user_agent_contact"]
      2) Django settings (DEFAULT_FROM_EMAIL)
    """
    base = f"django-searchable-options/{__version__}"

    config = load_config_from_settings()
    contact = config.get("user_agent_contact") or getattr(settings, "DEFAULT_FROM_EMAIL", None)

    return base + (f" (+{contact})" if contact else "")
