from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path
from typing import Callable, TypeVar

from .config import INDEX_SIZE, SiteContext, load_config
from .corpus import PostRecord, TagIndex, build_posts
from .errors import ConfigError, WeaverError
from .pages import build_archive, build_index, build_tags
from .render import TemplateService, link_static
from .serve import DEFAULT_HOST, DEFAULT_PORT, serve
from .utils import clean_output_dir, parse_bool, parse_int, prepare_output_dir

DEV_ENV = "WEAVER_DEV"

T = TypeVar("T")


def make_context(args: argparse.Namespace) -> SiteContext:
    templates_dir = Path(args.templates)
    if not templates_dir.is_dir():
        raise ConfigError(f"Templates directory not found: {templates_dir}")
    return SiteContext(
        posts_dir=Path(args.posts),
        output_dir=Path(args.output),
        static_dir=Path(args.static),
        templates=TemplateService(templates_dir),
        index_size=max(0, args.index_size),
        link_static=args.link_static,
        highlight=args.highlight,
    )


def build_site(ctx: SiteContext, clean: bool = False) -> tuple[list[PostRecord], TagIndex]:
    """Run one full build: post pages, index, archive, tag pages, stylesheets."""
    if clean:
        clean_output_dir(ctx.output_dir, ctx.project_root)
    prepare_output_dir(ctx.output_dir)

    posts, tags = run_stage("build_posts", lambda: build_posts(ctx))
    run_stage("build_index", lambda: build_index(ctx, posts))
    run_stage("build_archive", lambda: build_archive(ctx, posts))
    run_stage("build_tags", lambda: build_tags(ctx, posts, tags))
    run_stage("link_static", lambda: link_static(ctx.static_dir, ctx.output_dir, hard_link=ctx.link_static))
    return posts, tags


def run_stage(name: str, step: Callable[[], T]) -> T:
    try:
        return step()
    except WeaverError as exc:
        exc.add_stage(name)
        raise


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    def cfg_value(key: str, default: object) -> object:
        value = config.get(key)
        return default if value is None else value

    def cfg_str(key: str, default: str) -> str:
        return str(cfg_value(key, default))

    def cfg_bool(key: str, default: bool) -> bool:
        return parse_bool(cfg_value(key, default))

    def cfg_int(key: str, default: int) -> int:
        return parse_int(cfg_value(key, default), default)

    parser = argparse.ArgumentParser(description="Build a static blog from Markdown posts with YAML front matter.")
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--posts", default=cfg_str("posts", "posts"), help="Directory containing Markdown posts.")
    parser.add_argument("--output", default=cfg_str("output", "output"), help="Output directory for the site.")
    parser.add_argument("--static", default=cfg_str("static", "static"), help="Directory containing CSS files.")
    parser.add_argument(
        "--templates",
        default=cfg_str("templates", "templates"),
        help="Directory containing the Jinja2 page templates.",
    )
    parser.add_argument(
        "--index-size",
        default=cfg_int("index_size", INDEX_SIZE),
        type=int,
        help="Number of most recent posts on the index page.",
    )
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean", True),
        help="Clean output directory before build.",
    )
    parser.add_argument(
        "--link-static",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("link_static", True),
        help="Hard-link CSS files into the output instead of copying them.",
    )
    parser.add_argument(
        "--highlight",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("highlight", True),
        help="Highlight fenced code blocks with Pygments.",
    )
    parser.add_argument(
        "--serve",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("serve", False),
        help=f"Serve the output directory after building (also enabled by {DEV_ENV}).",
    )
    parser.add_argument("--host", default=cfg_str("host", DEFAULT_HOST), help="Host for --serve.")
    parser.add_argument("--port", default=cfg_int("port", DEFAULT_PORT), type=int, help="Port for --serve.")
    args = parser.parse_args(argv)
    if DEV_ENV in os.environ:
        args.serve = True
    return args


def main(argv: list[str] | None = None) -> None:
    try:
        args = parse_args(argv)
        ctx = make_context(args)
        start = time.perf_counter()
        posts, tags = build_site(ctx, clean=args.clean)
    except WeaverError as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Built {len(posts)} posts and {len(tags)} tag pages.")
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {ctx.output_dir}")
    if args.serve:
        serve(ctx.output_dir, args.host, args.port)
