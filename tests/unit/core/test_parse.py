"""Unit tests for core/parse.py"""

import pytest

from postmatter.core.errors import DocumentRejected, FrontmatterError
from postmatter.core.models import Page, ParsedDoc, Post
from postmatter.core.parse import discover_files, load_document, parse_file, split_frontmatter
from postmatter.core.utils.hashing import sha256


def test_split_frontmatter_with_yaml():
    """split_frontmatter extracts YAML header and returns body."""
    fm, body = split_frontmatter("---\ntitle: Hello\n---\n# Body\n")
    assert fm == {"title": "Hello"}
    assert body == "# Body\n"


def test_split_frontmatter_no_frontmatter():
    """No header means empty metadata and the full text as body."""
    text = "# No frontmatter\n"
    assert split_frontmatter(text) == ({}, text)


def test_split_frontmatter_empty_block():
    """An empty block yields empty metadata."""
    assert split_frontmatter("---\n---\nBody") == ({}, "Body")


def test_split_frontmatter_body_untouched():
    """The body keeps code fences, HTML, and later '---' rules exactly as written."""
    body = "\n```go\nfunc main() {}\n```\n\n---\n\n<b>x</b> & y\n"
    _, parsed = split_frontmatter("---\ntitle: T\n---\n" + body)
    assert parsed == body


def test_split_frontmatter_strips_bom():
    """A UTF-8 byte order mark before the block is tolerated."""
    fm, _ = split_frontmatter("\ufeff---\ntitle: T\n---\nBody")
    assert fm == {"title": "T"}


def test_split_frontmatter_invalid_yaml():
    with pytest.raises(FrontmatterError, match="Invalid YAML"):
        split_frontmatter("---\ntags: [unclosed\n---\nBody")


def test_split_frontmatter_not_a_mapping():
    with pytest.raises(FrontmatterError, match="expected a mapping"):
        split_frontmatter("---\n- a\n- b\n---\nBody")


def test_discover_files(tmp_path):
    """discover_files finds .md and .markdown files recursively, sorted, skipping others."""
    (tmp_path / "b.md").write_text("b")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "a.markdown").write_text("a")
    (tmp_path / "notes.txt").write_text("text")
    assert discover_files(tmp_path) == [tmp_path / "b.md", sub / "a.markdown"]


def test_discover_files_single(tmp_path):
    f = tmp_path / "doc.md"
    f.write_text("# Hello")
    assert discover_files(f) == [f]


def test_parse_file(tmp_path):
    """parse_file stores the root-relative path and hashes the raw file."""
    raw = "---\ntitle: T\n---\n# Body\n"
    f = tmp_path / "posts" / "t.md"
    f.parent.mkdir()
    f.write_text(raw)
    parsed = parse_file(f, tmp_path)
    assert isinstance(parsed, ParsedDoc)
    assert parsed.rel_path == "posts/t.md"
    assert parsed.hash == sha256(raw)
    assert parsed.markdown == "# Body\n"


def test_load_document_post(blog_dir):
    doc = load_document(blog_dir / "posts/2020-06-01---jwt-auth/index.md", blog_dir)
    assert isinstance(doc, Post)
    assert doc.slug == "/posts/jwt-auth/"
    assert doc.tags == ["Go", "JWT"]
    assert doc.path == "posts/2020-06-01---jwt-auth/index.md"


def test_load_document_missing_required_fields(tmp_path):
    """Missing title and slug reject the document with one message per field."""
    f = tmp_path / "bad.md"
    f.write_text("---\ntemplate: post\ndate: 2020-01-01\n---\nBody\n")
    with pytest.raises(DocumentRejected) as exc:
        load_document(f, tmp_path)
    assert exc.value.path == "bad.md"
    assert "missing field title" in exc.value.errors
    assert "missing field slug" in exc.value.errors


def test_load_document_missing_template(tmp_path):
    f = tmp_path / "bad.md"
    f.write_text("---\ntitle: T\nslug: t\n---\nBody\n")
    with pytest.raises(DocumentRejected) as exc:
        load_document(f, tmp_path)
    assert exc.value.errors == ["missing field template"]


def test_load_document_page_without_slug_rejected(blog_dir):
    """The about page has no slug; by default that is an error."""
    with pytest.raises(DocumentRejected) as exc:
        load_document(blog_dir / "pages/about/index.md", blog_dir)
    assert exc.value.errors == ["missing field slug"]


def test_load_document_slug_fallback(blog_dir):
    """With slug fallback the about page takes its directory name."""
    doc = load_document(blog_dir / "pages/about/index.md", blog_dir, slug_fallback=True)
    assert isinstance(doc, Page)
    assert doc.slug == "about"


def test_load_document_explicit_slug_beats_fallback(blog_dir):
    doc = load_document(blog_dir / "posts/2020-06-01---jwt-auth/index.md", blog_dir, slug_fallback=True)
    assert doc.slug == "/posts/jwt-auth/"


def test_load_document_invalid_yaml(tmp_path):
    f = tmp_path / "bad.md"
    f.write_text("---\nis this even: [a key\n---\nBody\n")
    with pytest.raises(FrontmatterError):
        load_document(f, tmp_path)


def test_split_frontmatter_impossible_date():
    """A timestamp that is not a calendar date is a front-matter error, not a crash."""
    with pytest.raises(FrontmatterError, match="Invalid YAML"):
        split_frontmatter("---\ntitle: T\ndate: 2020-13-45\n---\nBody")


def test_parse_file_not_utf8(tmp_path):
    f = tmp_path / "latin1.md"
    f.write_bytes(b"\xff\xfe---\ntitle: caf\xe9\n---\n")
    with pytest.raises(FrontmatterError, match="not valid UTF-8"):
        parse_file(f, tmp_path)


def test_load_document_no_frontmatter_lists_every_required_field(tmp_path):
    f = tmp_path / "plain.md"
    f.write_text("# Just a heading\n")
    with pytest.raises(DocumentRejected) as exc:
        load_document(f, tmp_path)
    assert exc.value.errors == ["missing field title", "missing field slug", "missing field template"]


def test_load_document_unknown_template_reports_missing_title(tmp_path):
    f = tmp_path / "odd.md"
    f.write_text("---\ntemplate: gallery\nslug: odd\n---\nBody\n")
    with pytest.raises(DocumentRejected) as exc:
        load_document(f, tmp_path)
    assert exc.value.errors[0] == "missing field title"
    assert len(exc.value.errors) == 2
