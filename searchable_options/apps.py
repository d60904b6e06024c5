from django.apps import AppConfig


class SearchableOptionsConfig(AppConfig):
    name = "searchable_options"
    label = "searchable_options"
    verbose_name = "Searchable Options"
    collections = None

    def ready(self):
        from .providers.factory import build_collections

        # misconfigured collections fail here, not on first request
        self.collections = build_collections()
