"""Front matter extraction, validation, and Markdown-to-HTML rendering"""

from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt
from pydantic import ValidationError as PydanticValidationError

from cmspub.core.errors import ParseError
from cmspub.core.models import FrontMatter, ParsedDocument


DELIMITER = "---"
DEFAULT_PRESET = "commonmark"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps dates and timestamps as the text they were written as."""


_FrontMatterLoader.yaml_implicit_resolvers = {
    first: [r for r in resolvers if r[0] != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def split_front_matter(text: str) -> tuple[str, str]:
    """Return (front_matter_yaml, body) for a document that opens with a --- block."""
    trimmed = text.strip()
    if not trimmed.startswith(DELIMITER):
        raise ParseError("missing YAML front matter (---)", code="missing_front_matter")

    lines = trimmed.split("\n")
    if len(lines) < 3:
        raise ParseError("invalid markdown front matter", code="invalid_front_matter")
    if lines[0].strip() != DELIMITER:
        raise ParseError("front matter must start with ---", code="invalid_front_matter")

    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == DELIMITER:
            return "\n".join(lines[1:end]), "\n".join(lines[end + 1:]).strip()
    raise ParseError("front matter closing delimiter not found", code="invalid_front_matter")


def _load_front_matter(raw: str) -> dict[str, Any]:
    try:
        data = yaml.load(raw, Loader=_FrontMatterLoader) or {}
    except yaml.YAMLError as e:
        raise ParseError(f"invalid front matter: {e}", code="invalid_front_matter") from e
    if not isinstance(data, dict):
        raise ParseError(
            f"invalid front matter: expected a mapping, got {type(data).__name__}",
            code="invalid_front_matter",
        )
    return data


def _describe(error: PydanticValidationError) -> str:
    """Flatten pydantic errors into one line, naming the offending field where known."""
    parts = []
    for err in error.errors():
        msg = err["msg"].removeprefix("Value error, ")
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def render_html(markdown: str, preset: str = DEFAULT_PRESET) -> str:
    """Render Markdown to an HTML fragment with surrounding whitespace trimmed."""
    try:
        return _make_parser(preset).render(markdown).strip()
    except Exception as e:
        raise ParseError(f"failed to render markdown: {e}", code="render_failed") from e


def parse_document(text: str, preset: str = DEFAULT_PRESET) -> ParsedDocument:
    """Parse Markdown text with front matter into a validated ParsedDocument."""
    raw_front_matter, body = split_front_matter(text)
    try:
        front_matter = FrontMatter.model_validate(_load_front_matter(raw_front_matter))
    except PydanticValidationError as e:
        raise ParseError(_describe(e), code="invalid_front_matter") from e
    return ParsedDocument(
        front_matter=front_matter,
        body_markdown=body,
        body_html=render_html(body, preset),
    )


def parse_file(path: Path, preset: str = DEFAULT_PRESET) -> ParsedDocument:
    """Read and parse a single Markdown file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"cannot read {path}: {e}", code="invalid_markdown") from e
    return parse_document(text, preset)
