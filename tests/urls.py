from django.urls import include, path

urlpatterns = [
    path("options/", include("searchable_options.urls")),
]
