"""Pytest configuration for searchable_options.

Configures a minimal Django project (no database access is needed: model
instances are built unsaved and views are called through RequestFactory).
"""

from pathlib import Path

import django
import pytest
from django.conf import settings

TESTS_DIR = Path(__file__).resolve().parent


def pytest_configure() -> None:
    if settings.configured:
        return
    settings.configure(
        SECRET_KEY="test-secret-key",
        INSTALLED_APPS=[
            "django.contrib.contenttypes",
            "django.contrib.auth",
            "django.contrib.staticfiles",
            "searchable_options",
        ],
        DATABASES={"default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}},
        ROOT_URLCONF="tests.urls",
        STATIC_URL="/static/",
        STATICFILES_DIRS=[str(TESTS_DIR / "static")],
        DEFAULT_FROM_EMAIL="ops@example.org",
        USE_TZ=True,
        SEARCHABLE_OPTIONS={
            "per_page": 10,
            "collections": {
                "country": {
                    "scope": {"source": "static://countries.json", "items_path": "data"},
                    "text_attribute": "name",
                    "id_field": "code",
                    "additional_attributes": ["region", "capital"],
                },
                "staff": {
                    "scope": {"model": "auth.User"},
                    "text_attribute": "username",
                },
                "tag": {
                    "scope": "tests.scopes:tags_for_owner",
                    "display_text": "tests.scopes:tag_label",
                    "filter": "tests.scopes.filter_tags",
                    "additional_payload": "tests.scopes:tag_payload",
                    "per_page": 5,
                },
            },
        },
    )
    django.setup()


@pytest.fixture
def items():
    """25 records named "Item 00" .. "Item 24"."""
    from searchable_options.providers.static import StaticQuery

    return StaticQuery.of({"id": i, "name": f"Item {i:02d}", "kind": "odd" if i % 2 else "even"} for i in range(25))


@pytest.fixture
def registered():
    """Register collections for one test and remove them afterwards."""
    from searchable_options.providers.factory import register, unregister

    names: list[str] = []

    def _register(name, **options):
        collection = register(name, **options)
        names.append(name)
        return collection

    yield _register
    for name in names:
        unregister(name)


@pytest.fixture
def rf():
    """Django RequestFactory."""
    from django.test import RequestFactory

    return RequestFactory()
