from django.urls import path

from searchable_options.views import options_view

app_name = "searchable_options"

urlpatterns = [
    path("<slug:action_name>/", options_view, name="options"),
]
