from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from pathlib import Path

from .config import SiteContext
from .content import slug_for
from .errors import OutputWriteError, SourceReadError, WeaverError
from .render import render_post, write_text

POST_GLOB = "*.md"
RESERVED_SLUGS = {"index", "archive"}

TagIndex = dict[str, list[int]]


@dataclass(frozen=True)
class PostRecord:
    """A post as seen by the listing pages.

    ``output_path`` is relative to the output root, so listing pages at the
    root can link to it directly.
    """

    output_path: str
    title: str
    tags: tuple[str, ...]
    date: dt.datetime


def list_posts(posts_dir: Path) -> list[Path]:
    if not posts_dir.is_dir():
        raise SourceReadError(f"Posts directory not found: {posts_dir}")
    return [path for path in posts_dir.glob(POST_GLOB) if path.is_file()]


def build_post(md_file: Path, ctx: SiteContext) -> PostRecord:
    slug = slug_for(md_file)
    if slug in RESERVED_SLUGS:
        raise OutputWriteError(f"{slug}.html is reserved for the {slug} page")

    try:
        raw_text = md_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"cannot read {md_file}: {exc}") from exc

    html_doc, front_matter = render_post(raw_text, ctx.templates, highlight=ctx.highlight)
    output_path = f"{slug}.html"
    write_text(ctx.output_dir / output_path, html_doc)

    return PostRecord(
        output_path=output_path,
        title=front_matter.title,
        tags=front_matter.tags,
        date=front_matter.date,
    )


def build_posts(ctx: SiteContext) -> tuple[list[PostRecord], TagIndex]:
    """Render every post page and return the sorted corpus with its tag index.

    The first failing post aborts the build. Pages already written stay on
    disk.
    """
    corpus = []
    for md_file in list_posts(ctx.posts_dir):
        try:
            corpus.append(build_post(md_file, ctx))
        except WeaverError as exc:
            exc.add_stage(md_file.name)
            raise

    corpus = sort_index(corpus)
    return corpus, build_tag_index(corpus)


def sort_index(corpus: list[PostRecord]) -> list[PostRecord]:
    # sorted() is stable with reverse=True, so posts sharing a date keep their order
    return sorted(corpus, key=lambda post: post.date, reverse=True)


def build_tag_index(corpus: list[PostRecord]) -> TagIndex:
    """Map each tag to the corpus positions of the posts carrying it.

    Must run on the sorted corpus: position lists inherit its date order.
    """
    tags: TagIndex = {}
    for position, post in enumerate(corpus):
        for tag in post.tags:
            tags.setdefault(tag, []).append(position)
    return tags


def resolve_tag(corpus: list[PostRecord], positions: list[int]) -> list[PostRecord]:
    return [corpus[position] for position in positions]
