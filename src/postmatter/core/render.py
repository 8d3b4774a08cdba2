"""Markdown rendering and image reference extraction via markdown-it"""

from functools import lru_cache
from typing import Any

from markdown_it import MarkdownIt
from pydantic import BaseModel

from postmatter.core.models import Page, Post


class RenderedDocument(BaseModel):
    """A document ready to be written out by a site generator."""
    slug:     str
    url:      str
    template: str
    html:     str
    metadata: dict[str, Any]


@lru_cache(maxsize=8)
def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def render_markdown(body: str, preset: str = 'gfm-like') -> str:
    """Convert a markdown body to an HTML fragment."""
    return _make_parser(preset).render(body)


def image_refs(body: str, preset: str = 'gfm-like') -> list[str]:
    """Return markdown image sources in document order. Raw <img> HTML is not inspected."""
    refs = []
    for tok in _make_parser(preset).parse(body):
        if tok.type != 'inline' or not tok.children:
            continue
        for child in tok.children:
            if child.type == 'image':
                src = child.attrGet('src')
                if src:
                    refs.append(str(src))
    return refs


def url_for(doc: Post | Page) -> str:
    return f"/{doc.slug.strip('/')}/"


def render_document(doc: Post | Page, preset: str = 'gfm-like') -> RenderedDocument:
    """Render the body and bundle it with the document's front-matter."""
    return RenderedDocument(
        slug=doc.slug,
        url=url_for(doc),
        template=doc.template,
        html=render_markdown(doc.body, preset),
        metadata=doc.metadata(),
    )
