"""Tests for the stylesheet loader."""

import asyncio

import pytest

from mailweaver.config import MailConfig
from mailweaver.errors import ServiceUnavailableError
from mailweaver.events import StylesheetFailed, StylesheetLoaded
from mailweaver.loader.fetch import FileFetcher
from mailweaver.loader.styles import StylesheetLoader
from mailweaver.stylesheet.syntax import SYNTAX_SERVICE_KEY
from tests.helpers import DictFetcher, make_context, page_html

FILES = {
    "/a.css": "mj-text { color: red; }",
    "/b.css": "p { margin: 0; }",
    "/c.css": "mj-button { background-color: blue; }\nh1 { font-size: 20px; }",
}


def _load(context, paths, inline=False):
    return asyncio.run(StylesheetLoader(context).load(paths, inline))


# ---------------------------------------------------------------------------
# Single stylesheets
# ---------------------------------------------------------------------------


class TestSingleStylesheet:
    def test_semantic_only_sheet_has_no_style_block(self):
        out = _load(make_context(files=FILES), ["/a.css"])
        assert out == '<mj-attributes>\n<mj-text color="red"/>\n</mj-attributes>\n'

    def test_plain_sheet_has_only_style_block(self):
        out = _load(make_context(files=FILES), ["/b.css"])
        assert "<mj-attributes>" not in out
        assert "<mj-style>" in out
        assert "p { margin: 0; }" in out

    def test_inline_flag_marks_style_block(self):
        out = _load(make_context(files=FILES), ["/c.css"], inline=True)
        assert out.index("<mj-attributes>") < out.index('<mj-style inline="inline">')
        assert "h1 { font-size: 20px; }" in out
        assert "mj-button {" not in out

    def test_blank_sheet_contributes_nothing(self):
        assert _load(make_context(files={"/blank.css": "  \n "}), ["/blank.css"]) == ""

    def test_root_scope_uses_page_body(self):
        context = make_context(
            html=page_html(body_class="newsletter"),
            files={"/s.css": ".newsletter mj-text { color: red; }"},
        )
        assert '<mj-text color="red"/>' in _load(context, ["/s.css"])


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------


class TestBatches:
    def test_failed_fetch_is_skipped_in_order(self):
        context = make_context(files=FILES)
        expected = _load(context, ["/a.css"]) + _load(context, ["/c.css"])
        assert _load(context, ["/a.css", "/missing.css", "/c.css"]) == expected

    def test_transport_error_is_skipped(self, caplog):
        fetcher = DictFetcher(FILES, broken={"/b.css"})
        context = make_context(fetcher=fetcher)
        out = _load(context, ["/a.css", "/b.css"])
        assert out == _load(make_context(files=FILES), ["/a.css"])
        assert "Failed to load stylesheet /b.css" in caplog.text

    def test_undecodable_file_is_skipped(self, tmp_path):
        (tmp_path / "bad.css").write_bytes(b"p { content: '\xff\xfe'; }")
        (tmp_path / "good.css").write_text("mj-text { color: red; }", encoding="utf-8")
        context = make_context(fetcher=FileFetcher(tmp_path))
        out = _load(context, ["/bad.css", "/good.css"])
        assert out == '<mj-attributes>\n<mj-text color="red"/>\n</mj-attributes>\n'
        assert [e.path for e in context.events.of_type(StylesheetFailed)] == ["/bad.css"]

    def test_order_follows_input_not_completion(self):
        fetcher = DictFetcher(FILES, delays={"/a.css": 0.05})
        out = _load(make_context(fetcher=fetcher), ["/a.css", "/b.css"])
        assert out.index("mj-text") < out.index("p { margin: 0; }")

    def test_fetches_run_concurrently(self):
        fetcher = DictFetcher(FILES, delays={"/a.css": 0.05, "/b.css": 0.05, "/c.css": 0.05})
        context = make_context(fetcher=fetcher)

        async def timed():
            loop = asyncio.get_running_loop()
            start = loop.time()
            await StylesheetLoader(context).load(["/a.css", "/b.css", "/c.css"])
            return loop.time() - start

        assert asyncio.run(timed()) < 0.14

    def test_declared_styles_then_inline_styles(self):
        context = make_context(files=FILES)
        out = asyncio.run(StylesheetLoader(context).load_declared(["/b.css"], ["/c.css"]))
        assert out.index("<mj-style>") < out.index('<mj-style inline="inline">')

    def test_empty_batch(self):
        assert _load(make_context(), []) == ""


# ---------------------------------------------------------------------------
# Events and services
# ---------------------------------------------------------------------------


class TestEventsAndServices:
    def test_events_are_emitted(self):
        context = make_context(files=FILES)
        _load(context, ["/a.css", "/nope.css"])
        loaded = context.events.of_type(StylesheetLoaded)
        failed = context.events.of_type(StylesheetFailed)
        assert [(e.path, e.attribute_count) for e in loaded] == [("/a.css", 1)]
        assert [(e.path, e.error) for e in failed] == [("/nope.css", "HTTP 404")]

    def test_syntax_service_is_loaded_once(self):
        context = make_context(files=FILES)
        _load(context, ["/a.css", "/b.css", "/c.css"])
        assert SYNTAX_SERVICE_KEY in context.scripts
        assert len(context.scripts) == 1

    def test_unavailable_syntax_service_is_fatal(self):
        context = make_context(files=FILES)

        async def broken():
            raise ServiceUnavailableError("gone", service="css-syntax")

        async def run():
            with pytest.raises(ServiceUnavailableError):
                await context.scripts.load(SYNTAX_SERVICE_KEY, broken)
            await StylesheetLoader(context).load(["/a.css"])

        with pytest.raises(ServiceUnavailableError):
            asyncio.run(run())

    def test_custom_prefix_from_config(self):
        context = make_context(
            files={"/x.css": "em-text { color: red; }"},
            config=MailConfig(semantic_prefix="em-", wildcard_tag="em-all"),
        )
        assert '<em-text color="red"/>' in _load(context, ["/x.css"])
