"""File discovery, front-matter extraction, and document validation"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from postmatter.core.errors import DocumentRejected, FrontmatterError
from postmatter.core.models import ParsedDoc, Post, Page, document_from_frontmatter
from postmatter.core.utils.hashing import sha256
from postmatter.core.utils.slug import slug_from_path


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r'\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)', re.DOTALL | re.MULTILINE)
MD_EXTENSIONS = {'.md', '.markdown'}
REQUIRED_FIELDS = ('title', 'slug', 'template')


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with the YAML header removed."""
    text = text.removeprefix('\ufeff')
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    # Impossible timestamps such as 2020-13-45 surface as a plain ValueError
    try:
        fm = yaml.safe_load(m.group(1)) or {}
    except (yaml.YAMLError, ValueError) as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(fm, dict):
        raise FrontmatterError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
    return fm, text[m.end():]


def discover_files(path: Path) -> list[Path]:
    """Return sorted markdown files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix in MD_EXTENSIONS)


def relative_path(path: Path, root: Path) -> str:
    if root.is_file():
        root = root.parent
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def parse_file(path: Path, root: Path | None = None) -> ParsedDoc:
    """Read a single markdown file and split off its front-matter."""
    try:
        raw = path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise FrontmatterError(f"File is not valid UTF-8: {e}") from e
    frontmatter, body = split_frontmatter(raw)
    return ParsedDoc(
        path=path,
        rel_path=relative_path(path, root) if root else path.name,
        raw_markdown=raw,
        markdown=body,
        frontmatter=frontmatter,
        hash=sha256(raw),
    )


def _format_errors(exc: ValidationError) -> list[str]:
    """Flatten pydantic errors into 'field: message' strings.

    The first loc element of a discriminated union is the template tag.
    """
    messages = []
    for err in exc.errors():
        loc = err['loc'][1:] if len(err['loc']) > 1 else err['loc']
        field = ".".join(str(p) for p in loc) or "template"
        if err['type'] in ('missing', 'union_tag_not_found'):
            messages.append(f"missing field {field}")
        else:
            messages.append(f"{field}: {err['msg']}")
    return messages


def validate_parsed(parsed: ParsedDoc, slug_fallback: bool = False) -> Post | Page:
    """Validate a ParsedDoc against the front-matter contract. Raises DocumentRejected."""
    frontmatter = dict(parsed.frontmatter)
    if slug_fallback and not frontmatter.get('slug'):
        frontmatter['slug'] = slug_from_path(parsed.rel_path)
        logger.info(f"Derived slug '{frontmatter['slug']}' for {parsed.rel_path}")
    try:
        return document_from_frontmatter(frontmatter, parsed.markdown, parsed.rel_path, parsed.hash)
    except ValidationError as e:
        # An unknown or missing template stops validation before the other fields
        missing = [f"missing field {key}" for key in REQUIRED_FIELDS if key not in frontmatter]
        errors = missing + [m for m in _format_errors(e) if m not in missing]
        raise DocumentRejected(parsed.rel_path, errors) from e


def load_document(path: Path, root: Path | None = None, slug_fallback: bool = False) -> Post | Page:
    """Parse and validate one file.

    Raises FrontmatterError for malformed YAML and DocumentRejected for contract violations.
    """
    return validate_parsed(parse_file(path, root), slug_fallback)
