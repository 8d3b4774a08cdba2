"""Pipeline step functions: check, export, and index orchestration"""

import logging
from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import Session

from postmatter.config import Settings
from postmatter.core.checks import Issue, check_collection, check_duplicate_slugs
from postmatter.core.collection import Collection, load_collection
from postmatter.core.export import export_collection
from postmatter.crud.documents import remove_missing, upsert_document


logger = logging.getLogger(__name__)


def run_check(path: str, settings: Settings) -> tuple[Collection, list[Issue]]:
    """Load path and run every integrity check against it."""
    root = Path(path)
    if not root.exists():
        raise RuntimeError(f"Path not found: {path}")
    collection = load_collection(root, settings.slug_fallback)
    media_dir = Path(settings.media_dir) if settings.media_dir else None
    issues = check_collection(collection, settings.collections, media_dir, settings.parser_preset)
    return collection, issues


def run_export(collection: Collection, output_dir: Path, preset: str) -> list[tuple[str, Path]]:
    """Write published documents to output_dir. Returns (slug, html_path) pairs."""
    try:
        return export_collection(collection.documents, output_dir, preset)
    except ValueError as e:
        raise RuntimeError(str(e)) from e
    except OSError as e:
        raise RuntimeError(f"Failed to write to {output_dir}: {e}") from e


def run_index(engine: Engine, collection: Collection) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Upsert every valid document and prune rows whose file is gone, in one transaction.

    Only rows whose file lies under the collection root are pruned, so indexing a
    subdirectory leaves the rest of the index intact.

    Returns (counts, changes) where changes is a list of (status, slug) for
    created/updated/removed docs. Refuses to index a set with duplicate slugs.
    """
    duplicates = check_duplicate_slugs(collection.documents)
    if duplicates:
        raise ValueError("Duplicate slugs: " + ", ".join(sorted({i.path for i in duplicates})))

    scope = collection.root.resolve()
    root = collection.base_dir.resolve().as_posix()
    counts = {"created": 0, "updated": 0, "unchanged": 0, "removed": 0}
    changes = []
    with Session(engine) as session:
        for doc in collection.documents:
            _, status = upsert_document(session, doc, root)
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, doc.slug))

        # Rejected files keep their last good row until fixed or deleted.
        # Rows from outside the indexed root are left alone.
        for slug in remove_missing(session, collection.paths, scope):
            counts["removed"] += 1
            changes.append(("removed", slug))
        session.commit()

    logger.info(f"Indexed {len(collection.documents)} document(s): {counts}")
    return counts, changes
