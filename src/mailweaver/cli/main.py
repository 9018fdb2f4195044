"""Mailweaver CLI entry point: Click group with subcommands."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from mailweaver import __version__
from mailweaver.config import MailConfig
from mailweaver.errors import MailweaverError
from mailweaver.model.tree import Page
from mailweaver.pipeline import MailPipeline


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


async def _run(pipeline: MailPipeline, page: Page, render: bool) -> str:
    try:
        if render:
            return await pipeline.render(page)
        return await pipeline.to_mjml(page)
    finally:
        await pipeline.aclose()


def _page_options(fn):
    fn = click.argument("page", type=click.Path(exists=True, dir_okay=False))(fn)
    fn = click.option(
        "--code-base",
        default=".",
        show_default=True,
        help="Directory or URL holding /styles and /blocks.",
    )(fn)
    fn = click.option("--page-url", default="", help="URL used to resolve relative images.")(fn)
    fn = click.option(
        "--last-section-span",
        type=int,
        default=2,
        show_default=True,
        help="Sections within this distance of the end are marked mj-last.",
    )(fn)
    fn = click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")(fn)
    return fn


def _execute(page: str, code_base: str, page_url: str, last_section_span: int, verbose: bool, render: bool) -> None:
    _configure_logging(verbose)
    config = MailConfig(code_base=code_base, page_url=page_url, last_section_span=last_section_span)
    try:
        pipeline = MailPipeline(config)
        html = Path(page).read_text(encoding="utf-8")
        output = asyncio.run(_run(pipeline, Page.from_html(html), render))
    except (MailweaverError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(output)


@click.group()
@click.version_option(version=__version__, prog_name="mailweaver")
def cli() -> None:
    """Mailweaver - turn decorated pages and stylesheets into MJML email."""


@cli.command()
@_page_options
def mjml(page: str, code_base: str, page_url: str, last_section_span: int, verbose: bool) -> None:
    """Assemble PAGE and print the MJML document."""
    _execute(page, code_base, page_url, last_section_span, verbose, render=False)


@cli.command()
@_page_options
def render(page: str, code_base: str, page_url: str, last_section_span: int, verbose: bool) -> None:
    """Assemble PAGE, render it with mjml and print the HTML."""
    _execute(page, code_base, page_url, last_section_span, verbose, render=True)
