"""Unit tests for core/utils/slug.py"""

import pytest

from postmatter.core.utils.slug import slug_from_path, slugify


@pytest.mark.parametrize("text,expected", [
    ("Hello World", "hello-world"),
    ("my_file_name", "my-file-name"),
    ("  leading and trailing  ", "leading-and-trailing"),
    ("multiple---hyphens", "multiple-hyphens"),
    ("Special! Ch@rs#", "special-chrs"),
    ("", ""),
])
def test_slugify_basic(text, expected):
    """slugify converts text to lowercase hyphenated slug."""
    assert slugify(text) == expected


@pytest.mark.parametrize("path,expected", [
    ("pages/about/index.md", "about"),
    ("posts/My First Post.md", "my-first-post"),
    ("index.md", "index"),
    ("notes/README.md", "notes"),
])
def test_slug_from_path(path, expected):
    """Index files take their directory name; other files use their stem."""
    assert slug_from_path(path) == expected
