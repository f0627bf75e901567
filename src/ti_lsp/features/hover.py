"""Hover: inferred signature and documentation of the token under the cursor."""

from __future__ import annotations

from lsprotocol.types import Hover, MarkupContent, MarkupKind, Position

from ..cursor import extract_target, line_at, replace_line
from ..oracle import HoverInfo, OracleClient


def render_markdown(info: HoverInfo, language_id: str = "ruby") -> str:
    parts = [f"```{language_id}\n{info.signature}\n```\n"]
    if info.documentation:
        parts.append(f"\n---\n\n{info.documentation}")
    return "".join(parts).strip()


def hover(
    oracle: OracleClient,
    text: str,
    position: Position,
    language_id: str = "ruby",
) -> Hover | None:
    line = line_at(text, position.line)
    if line is None:
        return None

    target = extract_target(line, position.character)
    if not target:
        return None

    # The oracle analyses the bare expression in place of the whole line
    info = oracle.hover(replace_line(text, position.line, target), position.line)
    if info is None:
        return None

    return Hover(
        contents=MarkupContent(kind=MarkupKind.Markdown, value=render_markdown(info, language_id))
    )
