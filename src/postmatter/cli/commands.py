"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from postmatter.config import Settings, load_config
from postmatter.core.checks import Issue, has_errors
from postmatter.core.collection import published_posts
from postmatter.core.pipeline import run_check, run_export, run_index
from postmatter.core.utils.dates import utc_naive
from postmatter.crud.database import init_db, make_engine, reset_db
from postmatter.crud.documents import list_published


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def load_settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _check(path: str, settings: Settings):
    try:
        return run_check(path, settings)
    except RuntimeError as e:
        _fail(str(e))


def _echo_issues(issues: list[Issue]) -> None:
    for issue in issues:
        typer.echo(f"  {issue}")
    errors = sum(1 for i in issues if i.severity == "error")
    typer.echo(f"{errors} error(s), {len(issues) - errors} warning(s)")


def _echo_post(date: str, slug: str, title: str) -> None:
    typer.echo(f"  {date}  {slug}  {title}")


def check_cmd(
    path: Annotated[str, typer.Argument(help="Content file or directory")],
    media: Annotated[Optional[str], typer.Option("--media-dir", help="Directory image references resolve against")] = None,
    slug_fallback: Annotated[bool, typer.Option("--slug-fallback", help="Derive missing slugs from file paths")] = False,
    ):
    """Validate front-matter and run content-integrity checks."""
    settings = load_settings(overrides={"media_dir": media, "slug_fallback": slug_fallback or None})
    collection, issues = _check(path, settings)
    typer.echo(f"Checked {len(collection.documents) + len(collection.rejections)} document(s)")
    _echo_issues(issues)
    if has_errors(issues):
        raise typer.Exit(1)


def list_cmd(
    path: Annotated[str, typer.Argument(help="Content file or directory")],
    tag: Annotated[Optional[str], typer.Option("--tag", help="Only posts with this tag")] = None,
    category: Annotated[Optional[str], typer.Option("--category", help="Only posts in this category")] = None,
    drafts: Annotated[bool, typer.Option("--drafts", help="Include draft posts")] = False,
    ):
    """List published posts, newest first."""
    settings = load_settings()
    collection, _ = _check(path, settings)

    posts = published_posts(collection.documents)
    if drafts:
        posts += sorted((p for p in collection.posts if p.draft), key=lambda p: p.slug)
    if tag:
        posts = [p for p in posts if tag in p.tag_set]
    if category:
        posts = [p for p in posts if p.category == category]

    if not posts:
        typer.echo("No posts found.")
        raise typer.Exit(1)
    for post in posts:
        marker = " [draft]" if post.draft else ""
        # Same UTC day the index stores, so list and published agree
        _echo_post(utc_naive(post.date).date().isoformat(), post.slug, post.title + marker)


def build_cmd(
    path: Annotated[str, typer.Argument(help="Content file or directory")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    media: Annotated[Optional[str], typer.Option("--media-dir", help="Directory image references resolve against")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-preset", help="MarkdownIt preset name")] = None,
    ):
    """Check the content, then write rendered HTML + sidecar JSON for published documents."""
    settings = load_settings(overrides={"output_dir": out, "media_dir": media, "parser_preset": parser})
    collection, issues = _check(path, settings)
    if issues:
        _echo_issues(issues)
    if has_errors(issues):
        _fail("Content has errors; nothing exported.")

    output_dir = Path(settings.output_dir)
    try:
        results = run_export(collection, output_dir, settings.parser_preset)
    except RuntimeError as e:
        _fail("Export failed", e)
    for slug, html_path in results:
        typer.echo(f"  {slug} -> {html_path}")
    typer.echo(f"Exported {len(results)} document(s) to {output_dir}/")


def index_cmd(
    path: Annotated[str, typer.Argument(help="Content file or directory")],
    ):
    """Load valid documents into the SQLite index and prune deleted ones."""
    settings = load_settings()
    collection, issues = _check(path, settings)
    for issue in issues:
        if issue.code == "rejected":
            typer.echo(f"  skipped {issue.path}: {issue.message}")

    engine = make_engine(settings.db_url)
    init_db(engine)
    try:
        counts, changes = run_index(engine, collection)
    except ValueError as e:
        _fail("Index failed", e)
    for status, slug in changes:
        typer.echo(f"  {status}: {slug}")
    typer.echo(
        f"Index complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged, "
        f"{counts['removed']} removed"
    )


def published_cmd(
    tag: Annotated[Optional[str], typer.Option("--tag", help="Only posts with this tag")] = None,
    category: Annotated[Optional[str], typer.Option("--category", help="Only posts in this category")] = None,
    ):
    """List published posts from the index."""
    settings = load_settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        rows = list_published(session, tag=tag, category=category)
        if not rows:
            typer.echo("No posts found in the index.")
            raise typer.Exit(1)
        for row in rows:
            _echo_post(row.date.date().isoformat() if row.date else "-", row.slug, row.title)


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the index schema. Use --reset to clear existing data."""
    settings = load_settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")
