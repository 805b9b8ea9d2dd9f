"""Shared fixtures: a throwaway site tree using the bundled templates."""

import shutil
from pathlib import Path

import pytest

from weaver.config import SiteContext
from weaver.render import TemplateService

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def _make_post(title: str, date: str, tags: list[str], body: str = "Body text.\n") -> str:
    tag_list = ", ".join(tags)
    return f"---\ntitle: {title}\ndate: {date}\ntags: [{tag_list}]\nlayout: post\n---\n{body}"


@pytest.fixture
def make_post():
    """Build the text of a post with a full front matter header."""
    return _make_post


@pytest.fixture
def templates() -> TemplateService:
    return TemplateService(TEMPLATES_DIR)


@pytest.fixture
def site(tmp_path: Path) -> SiteContext:
    """A site rooted at tmp_path with empty posts/ and static/ directories."""
    templates_dir = tmp_path / "templates"
    shutil.copytree(TEMPLATES_DIR, templates_dir)
    (tmp_path / "posts").mkdir()
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    (static_dir / "style.css").write_text("body { color: black; }\n", encoding="utf-8")
    output_dir = tmp_path / "output"
    (output_dir / "tag").mkdir(parents=True)
    return SiteContext(
        posts_dir=tmp_path / "posts",
        output_dir=output_dir,
        static_dir=static_dir,
        templates=TemplateService(templates_dir),
        project_root=tmp_path,
        highlight=False,
    )


@pytest.fixture
def write_post(site: SiteContext):
    def _write(name: str, text: str) -> Path:
        path = site.posts_dir / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
