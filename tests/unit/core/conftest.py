"""Shared fixtures for core unit tests"""

import pytest


PRIMARY_MD = """\
---
slug: ai-agents
title: Tác tử AI
excerpt: Giới thiệu
category_slug: technology
tags: [ai, machine-learning]
meta_title: Tác tử AI | Blog
meta_description: Mô tả
featured_image: /media/cover.png
published_at: 2026-01-15T09:00:00Z
---

# Tác tử AI

Nội dung **đậm**.
"""

SECONDARY_MD = """\
---
slug: ai-agents
title: AI Agents
excerpt: An introduction
category_slug: technology
status: published
tags: [ai]
meta_title: AI Agents | Blog
meta_description: Description
og_image: /media/og.png
is_featured: true
---

# AI Agents

Some **bold** content.
"""


@pytest.fixture(name="write_md")
def write_md_fixture(tmp_path):
    """Write text to a file under tmp_path and return its path."""
    def _write(name: str, text: str):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture(name="md_pair")
def md_pair_fixture(write_md):
    return write_md("post.vi.md", PRIMARY_MD), write_md("post.en.md", SECONDARY_MD)
