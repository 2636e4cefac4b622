"""Pipeline step functions: post import, upsert from file, listing, media upload"""

import json
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlencode

from cmspub.core.errors import ParseError, ValidationError
from cmspub.core.logging import get_logger
from cmspub.core.models import API_PREFIX, ParsedDocument, endpoint_for
from cmspub.core.parse import DEFAULT_PRESET, parse_file
from cmspub.core.payload import DEFAULT_LOCALES, build_bilingual_payload, check_same_entity
from cmspub.core.resolve import resolve_category, resolve_tags
from cmspub.core.transport import Transport
from cmspub.core.upsert import upsert

logger = get_logger(__name__)

MEDIA_ENDPOINT = f"{API_PREFIX}/media"


def _parse_role(path: Path, role: str, preset: str) -> ParsedDocument:
    try:
        return parse_file(path, preset)
    except ParseError as e:
        raise ParseError(
            f"failed to parse {role} markdown: {e.message}",
            details={"file": str(path), "document": role, "reason": e.code},
        ) from e


def run_import(
    transport: Transport,
    primary_path: Path,
    secondary_path: Path,
    locales: tuple[str, str] = DEFAULT_LOCALES,
    preset: str = DEFAULT_PRESET,
    upsert_existing: bool = True,
    ) -> dict[str, Any]:
    """Parse a primary/secondary Markdown pair and send it as one bilingual post.

    Both files are parsed and checked against each other before any request;
    the category and tags come from the primary document. With upsert_existing
    False the post is always created.
    """
    primary = _parse_role(primary_path, "primary", preset)
    secondary = _parse_role(secondary_path, "secondary", preset)
    check_same_entity(primary, secondary)

    front_matter = primary.front_matter
    category_id = resolve_category(transport, front_matter.category_slug)
    tag_ids = resolve_tags(transport, front_matter.tags)
    payload = build_bilingual_payload(primary, secondary, category_id, tag_ids, locales)

    logger.info("post_import", slug=front_matter.slug, category_id=category_id, tags=tag_ids)
    if upsert_existing:
        return upsert(transport, "post", front_matter.slug, payload)
    return transport.post(endpoint_for("post"), payload)


def load_payload_file(path: Path) -> dict[str, Any]:
    """Read a JSON object from path."""
    try:
        with Path(path).open(encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        raise ValidationError("failed to read payload file", code="invalid_payload_file", details=str(e)) from e
    if not isinstance(payload, dict):
        raise ValidationError(
            "failed to read payload file",
            code="invalid_payload_file",
            details=f"expected a JSON object, got {type(payload).__name__}",
        )
    return payload


def run_upsert(
    transport: Transport,
    resource: str,
    payload_path: Path,
    slug: Optional[str] = None,
    ) -> dict[str, Any]:
    """Upsert a JSON payload file; slug defaults to the payload's own 'slug' field."""
    payload = load_payload_file(payload_path)
    slug = (slug or "").strip()
    if not slug and isinstance(payload.get("slug"), str):
        slug = payload["slug"]
    if not slug:
        raise ValidationError("slug is required in --slug or JSON payload", code="missing_slug")
    return upsert(transport, resource, slug, payload)


def list_endpoint(
    resource: str,
    per_page: int = 15,
    search: str = "",
    status: str = "",
    type_: str = "",
    ) -> str:
    """Return the collection endpoint with its filter query string."""
    query: dict[str, Any] = {"per_page": per_page}
    for key, value in (("search", search), ("status", status), ("type", type_)):
        if value:
            query[key] = value
    return f"{endpoint_for(resource)}?{urlencode(query)}"


def parse_setting_value(text: str) -> Any:
    """Decode text as a JSON literal, falling back to the trimmed string."""
    trimmed = text.strip()
    if not trimmed:
        return ""
    try:
        return json.loads(trimmed)
    except ValueError:
        return trimmed


def upload_image(
    transport: Transport,
    file_path: Path,
    alt_texts: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
    """Upload an image with optional per-locale alt text (sent as alt_text[<locale>])."""
    fields = {
        f"alt_text[{locale}]": text
        for locale, text in (alt_texts or {}).items()
        if text and text.strip()
    }
    return transport.upload(MEDIA_ENDPOINT, file_path, fields)
