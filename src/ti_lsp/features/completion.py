"""Completion from `--suggest`, or `--all-type` inside builtin config files."""

from lsprotocol.types import CompletionItem, Position

from ..cursor import strip_trailing_dot
from ..oracle import OracleClient, Suggestion

# Identifier characters plus member access
TRIGGER_CHARACTERS = [
    *"abcdefghijklmnopqrstuvwxyz",
    *"ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    *"0123456789",
    ".",
    "_",
]


def to_item(suggestion: Suggestion) -> CompletionItem:
    return CompletionItem(label=suggestion.method, detail=suggestion.detail)


def completion_items(
    oracle: OracleClient,
    text: str,
    position: Position,
    type_names: bool = False,
) -> list[CompletionItem]:
    """Suggestions for the cursor row.

    A dangling `.` is removed first so the receiver parses; the oracle
    then lists the methods available on it.
    """
    if type_names:
        suggestions = oracle.all_types(text)
    else:
        content = strip_trailing_dot(text, position.line)
        suggestions = oracle.suggest(content, position.line)

    return [to_item(s) for s in suggestions]
