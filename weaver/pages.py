from __future__ import annotations

from pathlib import Path

from .config import SiteContext
from .corpus import PostRecord, TagIndex, resolve_tag
from .errors import OutputWriteError
from .render import ARCHIVE_TEMPLATE, INDEX_TEMPLATE, TAG_TEMPLATE, write_text

UNSAFE_TAG_CHARS = ("/", "\\", "\0")


def build_index(ctx: SiteContext, posts: list[PostRecord]) -> Path:
    most_recent = posts[: min(ctx.index_size, len(posts))]
    html_doc = ctx.templates.render(INDEX_TEMPLATE, {"posts": most_recent, "flash": ""})
    path = ctx.output_dir / "index.html"
    write_text(path, html_doc)
    return path


def build_archive(ctx: SiteContext, posts: list[PostRecord]) -> Path:
    html_doc = ctx.templates.render(ARCHIVE_TEMPLATE, {"posts": posts, "flash": ""})
    path = ctx.output_dir / "archive.html"
    write_text(path, html_doc)
    return path


def tag_page_path(tag_dir: Path, tag: str) -> Path:
    """Return ``tag_dir/<tag>.html`` using the label verbatim.

    Labels that would not name a single file directly inside ``tag_dir`` are
    rejected; they are never rewritten into something else.
    """
    if not tag or tag in {".", ".."} or any(char in tag for char in UNSAFE_TAG_CHARS):
        raise OutputWriteError(f"unsafe tag label for a file name: {tag!r}")
    return tag_dir / f"{tag}.html"


def build_tags(ctx: SiteContext, posts: list[PostRecord], tags: TagIndex) -> list[Path]:
    paths = []
    for tag, positions in tags.items():
        path = tag_page_path(ctx.tag_dir, tag)
        data = {"posts": resolve_tag(posts, positions), "flash": "", "tag": tag}
        html_doc = ctx.templates.render(TAG_TEMPLATE, data)
        write_text(path, html_doc)
        paths.append(path)
    return paths
