import logging

from django.http import Http404, JsonResponse
from django.views.decorators.http import require_GET

from searchable_options.exceptions import UnknownCollectionError
from searchable_options.providers.factory import get_collection
from searchable_options.providers.scope import RequestContext

logger = logging.getLogger(__name__)


@require_GET
def options_view(request, action_name: str):
    """Serve ``?term=...&page=...`` for the collection registered as ``action_name``."""
    try:
        collection = get_collection(action_name)
    except UnknownCollectionError as e:
        logger.debug("Unknown collection action=%s", action_name)
        raise Http404(f"No option collection {action_name!r}") from e

    context = RequestContext.from_request(request)
    return JsonResponse(collection.as_json(context, request.GET))
