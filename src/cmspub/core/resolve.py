"""Slug-to-id resolution for categories and tags, creating tags on first use"""

from typing import Any, Iterable

from cmspub.core.errors import APIError, TransportError
from cmspub.core.logging import get_logger
from cmspub.core.models import ResolvedReference, endpoint_for
from cmspub.core.transport import Transport
from cmspub.core.utils.slug import humanize_slug

logger = get_logger(__name__)


def extract_id(response: dict[str, Any]) -> int:
    """Return response['data']['id'] as an int.

    The id may arrive as a JSON integer, a float, or a numeric string.
    """
    data = response.get("data")
    if not isinstance(data, dict):
        raise TransportError("response missing data object", code="invalid_response", details=response)
    if "id" not in data:
        raise TransportError("response missing id field", code="invalid_response", details=response)

    value = data["id"]
    if isinstance(value, bool):
        raise TransportError("unsupported id type: bool", code="invalid_response", details=response)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        try:
            return int(value)
        except (ValueError, OverflowError) as e:
            raise TransportError(f"invalid id value: {value!r}", code="invalid_response") from e
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as e:
            raise TransportError(f"invalid id value: {value!r}", code="invalid_response") from e
    raise TransportError(f"unsupported id type: {type(value).__name__}", code="invalid_response")


def resolve_category(transport: Transport, slug: str) -> int:
    """Return the id of an existing category. Categories are never created here."""
    category_id = extract_id(transport.get(endpoint_for("category", slug)))
    logger.info("category_resolved", slug=slug, id=category_id)
    return category_id


def resolve_tag(transport: Transport, slug: str) -> ResolvedReference:
    """Look up a tag by slug, creating it when the lookup answers 404."""
    try:
        response = transport.get(endpoint_for("tag", slug))
    except APIError as e:
        if not e.not_found:
            raise
        created = transport.post(endpoint_for("tag"), {"slug": slug, "name": humanize_slug(slug)})
        ref = ResolvedReference(slug, extract_id(created), created=True)
        logger.info("tag_created", slug=slug, id=ref.id)
        return ref
    return ResolvedReference(slug, extract_id(response))


def resolve_tag_references(transport: Transport, slugs: Iterable[str]) -> list[ResolvedReference]:
    """Resolve slugs in order, skipping blanks and keeping duplicates.

    The first failure aborts; tags created before it are left in place.
    """
    return [resolve_tag(transport, slug) for slug in slugs if slug.strip()]


def resolve_tags(transport: Transport, slugs: Iterable[str]) -> list[int]:
    """Return tag ids for slugs, in input order."""
    return [ref.id for ref in resolve_tag_references(transport, slugs)]
