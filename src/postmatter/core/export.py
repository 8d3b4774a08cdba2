"""Export pipeline: rendered HTML fragments, sidecar JSON, and the published index"""

import json
import logging
from pathlib import Path

from postmatter.core.collection import published_posts
from postmatter.core.models import Page, Post
from postmatter.core.render import RenderedDocument, render_document, url_for


logger = logging.getLogger(__name__)

INDEX_FILE = "_index.json"
# Top-level slugs whose sidecar would overwrite the listing
RESERVED_SLUGS = {Path(INDEX_FILE).stem}


def is_reserved(slug: str) -> bool:
    return slug.strip("/").lower() in RESERVED_SLUGS


def build_sidecar(doc: Post | Page, rendered: RenderedDocument) -> dict:
    """Build the sidecar JSON dict: slug, url, path, hash, template, and front-matter."""
    return {
        "slug": doc.slug,
        "url": rendered.url,
        "path": doc.path,
        "content_hash": doc.content_hash,
        "template": doc.template,
        "frontmatter": rendered.metadata,
    }


def build_index(posts: list[Post], urls: dict[str, str]) -> list[dict]:
    """Summaries of published posts in listing order."""
    return [
        {
            "slug": p.slug,
            "url": urls[p.slug],
            "title": p.title,
            "date": p.date.isoformat(),
            "category": p.category,
            "tags": p.tags,
            "description": p.description,
        }
        for p in posts
    ]


def write_doc(doc: Post | Page, output_dir: Path, preset: str = 'gfm-like') -> tuple[Path, Path]:
    """Write the HTML fragment + sidecar JSON for a single document.

    Output path mirrors the slug:
      output_dir / slug.{html|json}

    Returns (html_path, json_path).
    """
    rendered = render_document(doc, preset)
    stem = output_dir / doc.slug.strip("/")
    stem.parent.mkdir(parents=True, exist_ok=True)

    html_path = stem.with_name(f"{stem.name}.html")
    json_path = stem.with_name(f"{stem.name}.json")
    html_path.write_text(rendered.html, encoding='utf-8')
    json_path.write_text(json.dumps(build_sidecar(doc, rendered), indent=2, ensure_ascii=False), encoding='utf-8')
    return html_path, json_path


def export_collection(
    documents: list[Post | Page],
    output_dir: Path,
    preset: str = 'gfm-like',
    ) -> list[tuple[str, Path]]:
    """Write every published post and every page, then the listing index. Drafts are skipped.

    Returns (slug, html_path) pairs. Raises ValueError if a document would overwrite the listing.
    """
    posts = published_posts(documents)
    pages = [d for d in documents if isinstance(d, Page)]
    reserved = [d.path for d in [*posts, *pages] if is_reserved(d.slug)]
    if reserved:
        raise ValueError(f"Slug reserved for {INDEX_FILE}: " + ", ".join(reserved))
    output_dir.mkdir(parents=True, exist_ok=True)

    results = []
    urls = {}
    for doc in [*posts, *pages]:
        html_path, _ = write_doc(doc, output_dir, preset)
        urls[doc.slug] = url_for(doc)
        results.append((doc.slug, html_path))
        logger.debug(f"Exported {doc.path} -> {html_path}")

    skipped = sum(1 for d in documents if isinstance(d, Post) and d.draft)
    if skipped:
        logger.info(f"Skipped {skipped} draft post(s)")

    (output_dir / INDEX_FILE).write_text(
        json.dumps(build_index(posts, urls), indent=2, ensure_ascii=False), encoding='utf-8'
    )
    return results
