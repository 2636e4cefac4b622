"""Bilingual post payload assembly from a pair of parsed Markdown documents"""

from typing import Any, Optional, Sequence

from cmspub.core.errors import ValidationError
from cmspub.core.models import ParsedDocument


DEFAULT_LOCALES = ("vi", "en")
DEFAULT_STATUS = "draft"

# payload key -> FrontMatter attribute; body comes from the rendered HTML
LOCALIZED_FIELDS = {
    "title":            "title",
    "excerpt":          "excerpt",
    "meta_title":       "meta_title",
    "meta_description": "meta_description",
}
OPTIONAL_FIELDS = ("published_at", "scheduled_at", "is_featured")


def _first_non_blank(*values: str) -> str:
    for value in values:
        if value and value.strip():
            return value
    return ""


def _first_present(*values: Any) -> Optional[Any]:
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def check_same_entity(primary: ParsedDocument, secondary: ParsedDocument) -> None:
    """Fail unless both documents describe the same post in the same category."""
    a, b = primary.front_matter, secondary.front_matter
    if a.slug != b.slug:
        raise ValidationError(
            "slug mismatch between primary and secondary markdown files",
            code="invalid_import_payload",
            details={"primary": a.slug, "secondary": b.slug},
        )
    if a.category_slug != b.category_slug:
        raise ValidationError(
            "category_slug mismatch between primary and secondary markdown files",
            code="invalid_import_payload",
            details={"primary": a.category_slug, "secondary": b.category_slug},
        )


def build_bilingual_payload(
    primary: ParsedDocument,
    secondary: ParsedDocument,
    category_id: int,
    tag_ids: Sequence[int],
    locales: tuple[str, str] = DEFAULT_LOCALES,
    ) -> dict[str, Any]:
    """Merge two locale variants of one post into a single API payload.

    Locale-sensitive fields become {primary_locale: ..., secondary_locale: ...};
    published_at / scheduled_at / is_featured are emitted only when one of the
    documents sets them, the primary document taking precedence.
    """
    check_same_entity(primary, secondary)
    a, b = primary.front_matter, secondary.front_matter
    first, second = locales

    payload: dict[str, Any] = {
        "slug": a.slug,
        "category_id": category_id,
        "status": _first_non_blank(a.status, b.status) or DEFAULT_STATUS,
        "tags": list(tag_ids),
        "body": {first: primary.body_html, second: secondary.body_html},
        "featured_image": _first_non_blank(a.featured_image, b.featured_image),
        "og_image": _first_non_blank(a.og_image, b.og_image),
    }
    for key, attr in LOCALIZED_FIELDS.items():
        payload[key] = {first: getattr(a, attr), second: getattr(b, attr)}

    for key in OPTIONAL_FIELDS:
        value = _first_present(getattr(a, key), getattr(b, key))
        if value is not None:
            payload[key] = value
    return payload
