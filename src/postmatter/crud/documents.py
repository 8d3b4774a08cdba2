"""Document index persistence: upsert, tag replacement, pruning, and listing queries"""

from datetime import datetime
from pathlib import Path
from typing import Iterable

from sqlmodel import Session, select

from postmatter.core.models import Page, Post
from postmatter.core.utils.dates import utc_naive
from postmatter.crud.models import DocumentRow, DocumentTag, Tag


def get_by_path(session: Session, path: str, root: str | None = None) -> DocumentRow | None:
    """Return the row with the given source path, or None if not found."""
    query = select(DocumentRow).where(DocumentRow.path == path)
    if root is not None:
        query = query.where(DocumentRow.root == root)
    return session.exec(query).first()


def get_by_slug(session: Session, slug: str) -> DocumentRow | None:
    """Return the row with the given slug, or None if not found."""
    return session.exec(select(DocumentRow).where(DocumentRow.slug == slug)).one_or_none()


def list_all(session: Session) -> list[DocumentRow]:
    """Return every indexed document ordered by path."""
    return list(session.exec(select(DocumentRow).order_by(DocumentRow.path)).all())


def row_tags(session: Session, row: DocumentRow) -> list[str]:
    """Tags of a row in the order they were written."""
    links = session.exec(
        select(DocumentTag)
        .where(DocumentTag.document_id == row.id)
        .order_by(DocumentTag.position)
    ).all()
    return [link.tag_name for link in links]


def list_published(
    session: Session,
    tag: str | None = None,
    category: str | None = None,
    ) -> list[DocumentRow]:
    """Non-draft posts, newest first, optionally narrowed to a tag or category."""
    query = (
        select(DocumentRow)
        .where(DocumentRow.template == "post")
        .where(DocumentRow.draft == False)  # noqa: E712
    )
    if category is not None:
        query = query.where(DocumentRow.category == category)
    if tag is not None:
        query = query.join(DocumentTag, DocumentTag.document_id == DocumentRow.id).where(DocumentTag.tag_name == tag)
    query = query.order_by(DocumentRow.date.desc(), DocumentRow.slug.asc())
    return list(session.exec(query).all())


def _delete_row(session: Session, row: DocumentRow) -> None:
    for link in session.exec(select(DocumentTag).where(DocumentTag.document_id == row.id)).all():
        session.delete(link)
    session.delete(row)
    session.flush()


def _replace_tags(session: Session, row: DocumentRow, tags: list[str]) -> None:
    """Delete all existing tag links for a row and insert the new ones in order."""
    for link in session.exec(select(DocumentTag).where(DocumentTag.document_id == row.id)).all():
        session.delete(link)
    session.flush()

    for position, name in enumerate(tags):
        if not session.get(Tag, name):
            session.add(Tag(name=name))
            session.flush()
        session.add(DocumentTag(document_id=row.id, tag_name=name, position=position))
    session.flush()


def _apply(row: DocumentRow, doc: Post | Page, root: str) -> None:
    row.slug = doc.slug
    row.path = doc.path
    row.root = root
    row.template = doc.template
    row.title = doc.title
    row.date = utc_naive(doc.date) if doc.date else None
    row.draft = doc.draft
    row.category = doc.category if isinstance(doc, Post) else None
    row.description = doc.description
    row.social_image = doc.social_image if isinstance(doc, Page) else None
    row.body = doc.body
    row.hash = doc.content_hash


def upsert_document(session: Session, doc: Post | Page, root: str = "") -> tuple[DocumentRow, str]:
    """Insert or update the row for a document, matched by slug, then by path.

    root is the content directory doc.path is relative to.

    Returns (row, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; caller controls the transaction.
    """
    row = get_by_slug(session, doc.slug) or get_by_path(session, doc.path, root)
    tags = doc.tags if isinstance(doc, Post) else []

    if row is None:
        row = DocumentRow(
            slug=doc.slug, path=doc.path, template=doc.template,
            title=doc.title, body=doc.body, hash=doc.content_hash,
        )
        _apply(row, doc, root)
        session.add(row)
        session.flush()
        _replace_tags(session, row, tags)
        return row, 'created'

    if row.hash == doc.content_hash and row.path == doc.path and row.slug == doc.slug and row.root == root:
        return row, 'unchanged'

    # The file moved onto a path still held by another row
    if (row.root, row.path) != (root, doc.path):
        stale = get_by_path(session, doc.path, root)
        if stale is not None and stale.id != row.id:
            _delete_row(session, stale)

    _apply(row, doc, root)
    row.updated_at = datetime.now()
    session.add(row)
    session.flush()
    _replace_tags(session, row, tags)
    return row, 'updated'


def _under(path: Path, scope: Path) -> bool:
    return path == scope or scope in path.parents


def remove_missing(session: Session, paths: Iterable[str], scope: Path | None = None) -> list[str]:
    """Delete rows whose source file is no longer present. Returns the removed slugs.

    Without a scope every row not in paths goes. With one, paths are relative to the
    scope's directory and only rows whose file lies inside the scope are considered.
    """
    if scope is None:
        keep = set(paths)
        gone = [row for row in list_all(session) if row.path not in keep]
    else:
        base = scope.parent if scope.is_file() else scope
        keep = {base / p for p in paths}
        gone = [
            row for row in list_all(session)
            if _under(Path(row.root) / row.path, scope) and Path(row.root) / row.path not in keep
        ]

    removed = []
    for row in gone:
        removed.append(row.slug)
        _delete_row(session, row)
    return removed
