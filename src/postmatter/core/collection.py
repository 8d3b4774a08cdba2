"""Loading a content tree into a document collection, plus published listings"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from postmatter.core.errors import DocumentRejected, FrontmatterError
from postmatter.core.models import Page, Post
from postmatter.core.parse import discover_files, parse_file, relative_path, validate_parsed
from postmatter.core.utils.dates import utc_naive


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rejection:
    """A file that could not be turned into a document."""
    path: str
    errors: list[str]


@dataclass
class Collection:
    """Every document under a content root, valid or not."""
    root: Path
    documents: list[Post | Page] = field(default_factory=list)
    rejections: list[Rejection] = field(default_factory=list)

    @property
    def base_dir(self) -> Path:
        """Directory that document paths are relative to."""
        return self.root.parent if self.root.is_file() else self.root

    @property
    def posts(self) -> list[Post]:
        return [d for d in self.documents if isinstance(d, Post)]

    @property
    def pages(self) -> list[Page]:
        return [d for d in self.documents if isinstance(d, Page)]

    @property
    def paths(self) -> list[str]:
        """Relative paths of every discovered file, including rejected ones."""
        return sorted([d.path for d in self.documents] + [r.path for r in self.rejections])

    def get(self, slug: str) -> Post | Page | None:
        """Return the first document with the given slug, or None."""
        return next((d for d in self.documents if d.slug == slug), None)


def load_collection(root: Path, slug_fallback: bool = False) -> Collection:
    """Load every markdown file under root. Contract violations become Rejections."""
    collection = Collection(root=root)
    for path in discover_files(root):
        try:
            parsed = parse_file(path, root)
        except FrontmatterError as e:
            rel = relative_path(path, root)
            logger.warning(f"Rejected {rel}: {e}")
            collection.rejections.append(Rejection(path=rel, errors=[str(e)]))
            continue
        try:
            collection.documents.append(validate_parsed(parsed, slug_fallback))
        except DocumentRejected as e:
            logger.warning(f"Rejected {e}")
            collection.rejections.append(Rejection(path=e.path, errors=e.errors))

    logger.info(
        f"Loaded {len(collection.documents)} document(s) from {root} "
        f"({len(collection.rejections)} rejected)"
    )
    return collection


def published_posts(documents: Iterable[Post | Page]) -> list[Post]:
    """Non-draft posts, newest first; ties ordered by slug."""
    posts = [d for d in documents if isinstance(d, Post) and not d.draft]
    posts.sort(key=lambda p: p.slug)
    posts.sort(key=lambda p: utc_naive(p.date), reverse=True)
    return posts


def by_tag(documents: Iterable[Post | Page], tag: str) -> list[Post]:
    """Published posts carrying tag."""
    return [p for p in published_posts(documents) if tag in p.tag_set]


def by_category(documents: Iterable[Post | Page], category: str) -> list[Post]:
    """Published posts in category."""
    return [p for p in published_posts(documents) if p.category == category]


def tag_counts(documents: Iterable[Post | Page]) -> dict[str, int]:
    """Tag usage across published posts, in first-seen order."""
    counts: dict[str, int] = {}
    for post in published_posts(documents):
        for tag in post.tags:
            counts[tag] = counts.get(tag, 0) + 1
    return counts
