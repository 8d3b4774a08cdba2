"""Slug generation for documents that carry no explicit slug"""

import re
from pathlib import PurePosixPath


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def slug_from_path(path: str) -> str:
    """Derive a slug from a relative source path.

    'index' files take their directory name: 'about/index.md' -> 'about'.
    """
    p = PurePosixPath(path)
    stem = p.stem
    if stem.lower() in ('index', 'readme') and p.parent.name:
        stem = p.parent.name
    return slugify(stem)
