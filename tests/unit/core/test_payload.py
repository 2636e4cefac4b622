"""Unit tests for core/payload.py"""

import pytest

from cmspub.core.errors import ValidationError
from cmspub.core.models import FrontMatter, ParsedDocument
from cmspub.core.parse import parse_file
from cmspub.core.payload import build_bilingual_payload, check_same_entity


def _doc(html: str = "<p>x</p>", **fields) -> ParsedDocument:
    data = {"slug": "post", "title": "T", "category_slug": "news", **fields}
    return ParsedDocument(front_matter=FrontMatter(**data), body_markdown="x", body_html=html)


def test_build_from_parsed_pair(md_pair):
    """A consistent pair yields one payload with {primary, secondary} locale maps."""
    vi, en = (parse_file(p) for p in md_pair)
    payload = build_bilingual_payload(vi, en, category_id=7, tag_ids=[3, 9])

    assert payload["slug"] == "ai-agents"
    assert payload["title"] == {"vi": "Tác tử AI", "en": "AI Agents"}
    assert list(payload["title"]) == ["vi", "en"]
    assert payload["excerpt"] == {"vi": "Giới thiệu", "en": "An introduction"}
    assert payload["meta_title"] == {"vi": "Tác tử AI | Blog", "en": "AI Agents | Blog"}
    assert payload["meta_description"] == {"vi": "Mô tả", "en": "Description"}
    assert payload["body"]["vi"].startswith("<h1>Tác tử AI</h1>")
    assert "<strong>bold</strong>" in payload["body"]["en"]
    assert payload["category_id"] == 7
    assert payload["tags"] == [3, 9]
    assert payload["featured_image"] == "/media/cover.png"
    assert payload["og_image"] == "/media/og.png"
    assert payload["published_at"] == "2026-01-15T09:00:00Z"
    assert payload["is_featured"] is True
    assert "scheduled_at" not in payload


def test_status_from_primary_when_set():
    payload = build_bilingual_payload(_doc(status="scheduled"), _doc(status="published"), 1, [])
    assert payload["status"] == "scheduled"


def test_status_parsed_default_wins_over_secondary(md_pair):
    """The primary document's parsed default 'draft' is non-blank, so it is used."""
    vi, en = (parse_file(p) for p in md_pair)
    assert build_bilingual_payload(vi, en, 1, [])["status"] == "draft"


def test_slug_mismatch_fails():
    with pytest.raises(ValidationError, match="slug mismatch") as exc:
        build_bilingual_payload(_doc(), _doc(slug="other"), 1, [])
    assert exc.value.code == "invalid_import_payload"


@pytest.mark.parametrize("other", [{"title": "X"}, {"status": "published"}, {"category_slug": "news"}])
def test_slug_mismatch_fails_regardless_of_other_fields(other):
    with pytest.raises(ValidationError, match="slug mismatch"):
        check_same_entity(_doc(**other), _doc(slug="different", **other))


def test_category_mismatch_fails():
    with pytest.raises(ValidationError, match="category_slug mismatch"):
        build_bilingual_payload(_doc(), _doc(category_slug="sports"), 1, [])


def test_images_fall_back_to_secondary():
    payload = build_bilingual_payload(_doc(og_image="  "), _doc(featured_image="/f.png", og_image="/o.png"), 1, [])
    assert payload["featured_image"] == "/f.png"
    assert payload["og_image"] == "/o.png"


def test_images_blank_when_neither_sets_them():
    payload = build_bilingual_payload(_doc(), _doc(), 1, [])
    assert payload["featured_image"] == ""
    assert payload["og_image"] == ""


def test_optional_fields_omitted_when_absent():
    """Absent schedule / feature fields are left out instead of sent as null."""
    payload = build_bilingual_payload(_doc(), _doc(), 1, [])
    for key in ("published_at", "scheduled_at", "is_featured"):
        assert key not in payload


def test_optional_fields_prefer_primary():
    payload = build_bilingual_payload(
        _doc(scheduled_at="2026-03-01", is_featured=False),
        _doc(scheduled_at="2026-04-01", is_featured=True, published_at="2026-02-01"),
        1, [],
    )
    assert payload["scheduled_at"] == "2026-03-01"
    assert payload["is_featured"] is False
    assert payload["published_at"] == "2026-02-01"


def test_custom_locales_and_body_html():
    payload = build_bilingual_payload(_doc("<p>fr</p>"), _doc("<p>de</p>"), 1, [], locales=("fr", "de"))
    assert payload["body"] == {"fr": "<p>fr</p>", "de": "<p>de</p>"}
    assert set(payload["excerpt"]) == {"fr", "de"}


def test_tag_ids_passed_through_in_order():
    payload = build_bilingual_payload(_doc(), _doc(), 5, [4, 2, 4])
    assert payload["tags"] == [4, 2, 4]
    assert payload["category_id"] == 5
