"""Create-or-update of a resource by slug, routed by an existence probe"""

from typing import Any

from cmspub.core.errors import APIError
from cmspub.core.logging import get_logger
from cmspub.core.models import endpoint_for
from cmspub.core.transport import Transport

logger = get_logger(__name__)


def upsert(transport: Transport, resource: str, slug: str, payload: Any) -> dict[str, Any]:
    """PUT payload to the item endpoint if the slug exists, else POST it to the collection.

    Only a 404 probe leads to a create; any other probe failure propagates
    unchanged. Nothing guards against the slug being created between the probe
    and the POST.
    """
    endpoint = endpoint_for(resource, slug)
    try:
        transport.get(endpoint)
    except APIError as e:
        if not e.not_found:
            raise
        logger.info("upsert_create", resource=resource, slug=slug)
        return transport.post(endpoint_for(resource), payload)

    logger.info("upsert_update", resource=resource, slug=slug)
    return transport.put(endpoint, payload)
