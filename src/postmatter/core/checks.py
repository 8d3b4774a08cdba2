"""Content-integrity checks over a loaded collection"""

import logging
from collections import defaultdict
from pathlib import Path, PurePosixPath
from typing import Literal
from urllib.parse import urlsplit

from pydantic import BaseModel

from postmatter.core.collection import Collection
from postmatter.core.export import INDEX_FILE, is_reserved
from postmatter.core.models import Page, Post
from postmatter.core.render import image_refs


logger = logging.getLogger(__name__)


class Issue(BaseModel):
    """A single content defect found by a check."""
    code:     str
    path:     str
    message:  str
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        return f"{self.severity}: {self.path}: [{self.code}] {self.message}"


def check_rejections(collection: Collection) -> list[Issue]:
    """Every file the loader could not validate."""
    return [
        Issue(code="rejected", path=r.path, message=msg)
        for r in collection.rejections
        for msg in r.errors
    ]


def check_duplicate_slugs(documents: list[Post | Page]) -> list[Issue]:
    """Slugs must be unique across the full set; '/about/' and 'about' collide."""
    by_slug: dict[str, list[Post | Page]] = defaultdict(list)
    for doc in documents:
        by_slug[doc.slug.strip("/")].append(doc)

    issues = []
    for slug, docs in by_slug.items():
        if len(docs) < 2:
            continue
        for doc in docs:
            others = ", ".join(d.path for d in docs if d is not doc)
            issues.append(Issue(code="duplicate-slug", path=doc.path,
                                message=f"slug '{slug}' is also used by {others}"))
    return issues


def check_reserved_slugs(documents: list[Post | Page]) -> list[Issue]:
    """Slugs that would be exported over the published listing."""
    return [
        Issue(code="reserved-slug", path=d.path, message=f"slug '{d.slug}' would overwrite {INDEX_FILE}")
        for d in documents if is_reserved(d.slug)
    ]


def _collection_key(path: str) -> str | None:
    """Return the top-level directory of a path, or None for root-level files."""
    parts = PurePosixPath(path).parts
    return parts[0] if len(parts) > 1 else None


def check_templates(documents: list[Post | Page], collections: dict[str, str]) -> list[Issue]:
    """A document's template must match the kind its directory holds."""
    issues = []
    for doc in documents:
        expected = collections.get(_collection_key(doc.path) or "")
        if expected and expected != doc.template:
            issues.append(Issue(
                code="template-mismatch", path=doc.path,
                message=f"template '{doc.template}' in a '{expected}' collection",
            ))
    return issues


def _is_external(ref: str) -> bool:
    parts = urlsplit(ref)
    return bool(parts.scheme or parts.netloc)


def _image_exists(ref: str, doc_dir: Path, media_dir: Path) -> bool:
    """Look for a reference beside the document, then under the media directory."""
    clean = urlsplit(ref).path
    candidates = [media_dir / clean.lstrip("/"), media_dir / PurePosixPath(clean).name]
    if not clean.startswith("/"):
        candidates.insert(0, doc_dir / clean)
    return any(c.is_file() for c in candidates)


def check_images(collection: Collection, media_dir: Path | None, preset: str = "gfm-like") -> list[Issue]:
    """Relative image references must resolve. Skipped when no media directory is configured."""
    if media_dir is None:
        return []
    root = collection.base_dir

    issues = []
    for doc in collection.documents:
        refs = image_refs(doc.body, preset)
        if isinstance(doc, Page) and doc.social_image:
            refs.append(doc.social_image)
        doc_dir = (root / doc.path).parent
        for ref in refs:
            if _is_external(ref) or _image_exists(ref, doc_dir, media_dir):
                continue
            issues.append(Issue(code="missing-image", path=doc.path, severity="warning",
                                message=f"image '{ref}' not found"))
    return issues


def check_bodies(documents: list[Post | Page]) -> list[Issue]:
    return [
        Issue(code="empty-body", path=d.path, severity="warning", message="document has no body")
        for d in documents if not d.body.strip()
    ]


def check_collection(
    collection: Collection,
    collections: dict[str, str] | None = None,
    media_dir: Path | None = None,
    preset: str = "gfm-like",
    ) -> list[Issue]:
    """Run every check. Issues are ordered by path, then code."""
    issues = (
        check_rejections(collection)
        + check_duplicate_slugs(collection.documents)
        + check_reserved_slugs(collection.documents)
        + check_templates(collection.documents, collections or {})
        + check_images(collection, media_dir, preset)
        + check_bodies(collection.documents)
    )
    issues.sort(key=lambda i: (i.path, i.code))
    logger.info(f"{len(issues)} issue(s) in {collection.root}")
    return issues


def has_errors(issues: list[Issue]) -> bool:
    return any(i.severity == "error" for i in issues)
