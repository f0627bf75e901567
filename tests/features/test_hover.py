"""Tests for hover."""

import sys

import pytest
from lsprotocol.types import MarkupKind, Position

from ti_lsp.features import hover
from ti_lsp.features.hover import render_markdown
from ti_lsp.oracle import HoverInfo


class TestRenderMarkdown:
    def test_signature_only(self):
        """The signature is fenced as Ruby."""
        assert render_markdown(HoverInfo("size", "String#size -> Integer")) == (
            "```ruby\nString#size -> Integer\n```"
        )

    def test_with_documentation(self):
        """Documentation follows a horizontal rule."""
        info = HoverInfo("size", "String#size -> Integer", "Returns the length.")
        assert render_markdown(info) == (
            "```ruby\nString#size -> Integer\n```\n\n---\n\nReturns the length."
        )


class TestHover:
    def test_replaces_line_with_target(self, make_oracle):
        """The oracle sees the target in place of the cursor row."""
        oracle = make_oracle({"--hover": "%upcase:::String#upcase -> String\n"})
        text = "h = 'x'\nputs h.upcase + 'y'"

        result = hover(oracle, text, Position(line=1, character=9))

        assert result.contents.kind == MarkupKind.Markdown
        assert "String#upcase -> String" in result.contents.value
        call = oracle.runner.calls[0]
        assert call.text == "h = 'x'\nh.upcase"
        assert call.flags == ["--hover", "--row=2"]

    def test_not_on_a_word(self, make_oracle):
        """Off a word the oracle is not run."""
        oracle = make_oracle()
        assert hover(oracle, "(  )", Position(line=0, character=1)) is None
        assert oracle.runner.calls == []

    def test_row_out_of_range(self, make_oracle):
        oracle = make_oracle()
        assert hover(oracle, "x", Position(line=3, character=0)) is None

    def test_no_hover_output(self, make_oracle):
        oracle = make_oracle({"--hover": ""})
        assert hover(oracle, "x", Position(line=0, character=0)) is None


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
def test_invalid_bytes_in_documentation(script_oracle):
    """Undecodable oracle output still renders a hover."""
    oracle = script_oracle(r"printf '%%foo:::foo() -> String:::caf\351 doc\n'")

    result = hover(oracle, "foo", Position(line=0, character=1))

    assert "foo() -> String" in result.contents.value
    assert "caf\ufffd doc" in result.contents.value
