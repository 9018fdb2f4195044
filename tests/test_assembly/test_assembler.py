"""Tests for document assembly."""

import asyncio
from types import SimpleNamespace

import pytest

from mailweaver.assembly.assembler import DocumentAssembler, block_markup
from mailweaver.assembly.template import wrap_document
from mailweaver.blocks.modules import MappingModuleLoader
from mailweaver.blocks.resolver import BlockResolver
from mailweaver.config import MailConfig
from mailweaver.errors import ServiceUnavailableError
from mailweaver.events import AssemblyCompleted, AssemblyStarted, SectionAssembled
from mailweaver.loader.fetch import FileFetcher
from mailweaver.stylesheet.syntax import SYNTAX_SERVICE_KEY
from tests.helpers import (
    DictFetcher,
    block_wrapper,
    default_wrapper,
    make_context,
    page_html,
    section,
)


def _slow_block(text, delay):
    async def decorate(element):
        await asyncio.sleep(delay)
        return f"<mj-text>{text}</mj-text>"

    return SimpleNamespace(decorate=decorate, styles=[])


def _assemble(context, modules=None):
    resolver = BlockResolver(context, MappingModuleLoader(modules or {}))
    return asyncio.run(DocumentAssembler(context, resolver).assemble())


class TestBlockMarkup:
    def test_none_is_empty(self):
        assert block_markup(None) == ""

    def test_other_values_are_stringified(self):
        assert block_markup("<mj-text>x</mj-text>") == "<mj-text>x</mj-text>"


class TestOrdering:
    def test_blocks_fold_in_source_order(self):
        html = page_html(
            section(block_wrapper("first"), block_wrapper("second")),
            section(block_wrapper("third")),
        )
        modules = {
            "first": _slow_block("one", 0.05),
            "second": _slow_block("two", 0.0),
            "third": _slow_block("three", 0.02),
        }
        body = _assemble(make_context(html=html), modules).body
        assert body.index("one") < body.index("two") < body.index("three")

    def test_block_heads_follow_source_order(self):
        html = page_html(section(block_wrapper("alpha"), block_wrapper("beta")))
        files = {
            "/blocks/alpha/alpha.css": "h1 { color: red; }",
            "/blocks/beta/beta.css": "h2 { color: blue; }",
        }
        fetcher = DictFetcher(files, delays={"/blocks/alpha/alpha.css": 0.05})
        modules = {"alpha": SimpleNamespace(decorate=lambda el: ""), "beta": SimpleNamespace(decorate=lambda el: "")}
        head = _assemble(make_context(html=html, fetcher=fetcher), modules).head
        assert head.index("h1 {") < head.index("h2 {")

    def test_global_head_comes_first(self):
        files = {
            "/styles/email-styles.css": "body { margin: 0; }",
            "/blocks/promo/promo.css": "h2 { color: blue; }",
        }
        html = page_html(section(block_wrapper("promo")))
        head = _assemble(
            make_context(html=html, files=files), {"promo": SimpleNamespace(decorate=lambda el: "")}
        ).head
        assert head.index("body { margin: 0; }") < head.index("h2 { color: blue; }")


class TestIsolation:
    def test_missing_decorate_does_not_affect_siblings(self):
        html = page_html(section(block_wrapper("broken"), block_wrapper("good")))
        modules = {"broken": SimpleNamespace(styles=[]), "good": _slow_block("fine", 0)}
        body = _assemble(make_context(html=html), modules).body
        assert "<mj-text>fine</mj-text>" in body

    def test_raising_decorate_contributes_nothing(self):
        def decorate(element):
            raise RuntimeError("bad")

        html = page_html(section(block_wrapper("bad"), block_wrapper("good")))
        modules = {"bad": SimpleNamespace(decorate=decorate, styles=[]), "good": _slow_block("fine", 0)}
        body = _assemble(make_context(html=html), modules).body
        assert body == '<mj-wrapper mj-class="mj-content-wrapper mj-first mj-last"><mj-text>fine</mj-text></mj-wrapper>'

    def test_undecodable_global_stylesheet_is_skipped(self, tmp_path):
        (tmp_path / "styles").mkdir()
        (tmp_path / "styles" / "email-styles.css").write_bytes(b"p { content: '\xff\xfe'; }")
        context = make_context(
            html=page_html(section(default_wrapper("<p>Hello</p>"))),
            fetcher=FileFetcher(tmp_path),
        )
        result = _assemble(context)
        assert "<p>Hello</p>" in result.body
        assert result.head == ""

    def test_unavailable_syntax_service_is_fatal(self):
        context = make_context(
            html=page_html(section(default_wrapper("<p>x</p>"))),
            files={"/styles/email-styles.css": "p { margin: 0; }"},
        )

        async def broken():
            raise ServiceUnavailableError("no css", service="css-syntax")

        async def run():
            with pytest.raises(ServiceUnavailableError):
                await context.scripts.load(SYNTAX_SERVICE_KEY, broken)
            resolver = BlockResolver(context, MappingModuleLoader({}))
            await DocumentAssembler(context, resolver).assemble()

        with pytest.raises(ServiceUnavailableError):
            asyncio.run(run())


class TestSections:
    def test_default_section_markup(self):
        html = page_html(section(default_wrapper("<p>Hello</p>"), classes="dark"))
        body = _assemble(make_context(html=html)).body
        assert body.startswith('<mj-wrapper mj-class="mj-content-wrapper mj-first mj-last">')
        assert (
            '<mj-section mj-class="mj-first mj-content-section mj-section mj-dark">'
            '<mj-column mj-class="mj-content-column">'
            '<mj-text mj-class="mj-content-text"><p>Hello</p></mj-text>'
            "</mj-column></mj-section><mj-divider" in body
        )

    def test_unknown_wrappers_are_skipped(self):
        html = page_html(section("<div>stray</div>", default_wrapper("<p>kept</p>")))
        body = _assemble(make_context(html=html)).body
        assert "stray" not in body
        assert "kept" in body

    @pytest.mark.parametrize(
        ("span", "expected"),
        [
            (2, [(0, True, False), (1, False, False), (2, False, True), (3, False, True)]),
            (1, [(0, True, False), (1, False, False), (2, False, False), (3, False, True)]),
        ],
    )
    def test_first_and_last_markers(self, span, expected):
        html = page_html(*(section(default_wrapper(f"<p>{i}</p>")) for i in range(4)))
        context = make_context(html=html, config=MailConfig(last_section_span=span))
        _assemble(context)
        seen = sorted((e.index, e.first, e.last) for e in context.events.of_type(SectionAssembled))
        assert seen == expected

    def test_assembly_events(self):
        context = make_context(html=page_html(section(default_wrapper("<p>x</p>"))))
        result = _assemble(context)
        assert context.events.of_type(AssemblyStarted)[0].section_count == 1
        completed = context.events.of_type(AssemblyCompleted)[0]
        assert completed.body_length == len(result.body)

    def test_page_without_main(self):
        context = make_context(html="<html><body><p>nothing</p></body></html>")
        assert _assemble(context).body == ""


class TestTemplate:
    def test_wrap_document(self):
        doc = wrap_document("<mj-style>x</mj-style>", "<mj-wrapper/>", ["newsletter", "dark"], 600)
        assert doc.startswith("<mjml>\n  <mj-head>\n    <mj-style>x</mj-style>")
        assert '<mj-body width="600" css-class="newsletter dark">' in doc
        assert doc.rstrip().endswith("</mjml>")
