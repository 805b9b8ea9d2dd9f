from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Protocol, TextIO

import markdown
from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, select_autoescape
from markupsafe import Markup

from .content import FrontMatter, parse_front_matter
from .errors import OutputWriteError, RenderError

POST_TEMPLATE = "post.html"
INDEX_TEMPLATE = "index.html"
ARCHIVE_TEMPLATE = "archive.html"
TAG_TEMPLATE = "tag.html"

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]


class Renderer(Protocol):
    def render(self, name: str, data: dict) -> str: ...


class TemplateService:
    """Jinja2 templates loaded from one directory.

    Every page template extends ``base.html``. Undefined fields are errors
    rather than empty strings.
    """

    def __init__(self, templates_dir: Path) -> None:
        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            undefined=StrictUndefined,
            autoescape=select_autoescape(["html"]),
            keep_trailing_newline=True,
        )

    def render(self, name: str, data: dict) -> str:
        try:
            return self.env.get_template(name).render(**data)
        except TemplateError as exc:
            raise RenderError(f"{name}: {exc}") from exc

    def execute_template(self, sink: TextIO, name: str, data: dict) -> None:
        sink.write(self.render(name, data))


def markdown_to_html(text: str, highlight: bool = True) -> str:
    extensions = list(MARKDOWN_EXTENSIONS)
    extension_configs = {}
    if highlight:
        extensions.append("codehilite")
        extension_configs["codehilite"] = {"css_class": "codehilite", "guess_lang": False}
    md = markdown.Markdown(extensions=extensions, extension_configs=extension_configs)
    return md.convert(text)


def render_post(text: str, templates: Renderer, highlight: bool = True) -> tuple[str, FrontMatter]:
    front_matter, body = parse_front_matter(text)
    html_content = markdown_to_html(body, highlight=highlight)
    data = {
        "front_matter": front_matter,
        "content": Markup(html_content),
        "flash": "",
    }
    return templates.render(POST_TEMPLATE, data), front_matter


def write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(f"cannot write {path}: {exc}") from exc


def link_static(static_dir: Path, output_dir: Path, hard_link: bool = True) -> list[Path]:
    if not static_dir.exists():
        return []
    written = []
    for item in sorted(static_dir.glob("*.css")):
        dest = output_dir / item.name
        try:
            if dest.exists():
                dest.unlink()
            if hard_link:
                os.link(item, dest)
            else:
                shutil.copy2(item, dest)
        except OSError as exc:
            raise OutputWriteError(f"cannot place {item.name} in {output_dir}: {exc}") from exc
        written.append(dest)
    return written
