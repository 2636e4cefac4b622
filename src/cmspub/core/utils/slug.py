"""Slug helpers for tag display names"""


def humanize_slug(slug: str) -> str:
    """Turn a hyphenated slug into a display name (e.g. 'ai-agents' -> 'Ai Agents').

    Empty segments are kept, so 'a--b' becomes 'A  B'.
    """
    parts = slug.split("-")
    return " ".join(p[:1].upper() + p[1:] if p else p for p in parts)
