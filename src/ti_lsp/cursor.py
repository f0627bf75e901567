"""Extract the expression under the cursor and prepare text for the oracle."""

WORD_SYMBOLS = frozenset("?!=_")


def is_word_char(ch: str) -> bool:
    """ASCII letters, digits and the method-name symbols `? ! = _`."""
    return (ch.isascii() and ch.isalnum()) or ch in WORD_SYMBOLS


def _word_bounds(line: str, col: int) -> tuple[int, int]:
    col = max(0, min(col, len(line)))

    start = col
    while start > 0 and is_word_char(line[start - 1]):
        start -= 1

    end = col
    while end < len(line) and is_word_char(line[end]):
        end += 1

    return start, end


def extract_word(line: str, col: int) -> str:
    """Bare identifier around `col`.

    Examples: "h.test 1" -> "test", "test? 1" -> "test?", "attr=" -> "attr="
    """
    start, end = _word_bounds(line, col)
    return line[start:end]


def extract_target(line: str, col: int) -> str:
    """Identifier around `col`, extended to `receiver.method` when a dot precedes it.

    Examples: "x = h.test 1" -> "h.test", "test 1" -> "test", "h.nil?" -> "h.nil?"
    """
    start, end = _word_bounds(line, col)
    if start == end:
        return ""

    i = start - 1
    while i >= 0 and line[i] in " \t":
        i -= 1
    if i < 0 or line[i] != ".":
        return line[start:end]

    i -= 1
    while i >= 0 and line[i] in " \t":
        i -= 1

    receiver_end = i + 1
    while i >= 0 and is_word_char(line[i]):
        i -= 1
    receiver_start = i + 1

    if receiver_start == receiver_end:
        return line[start:end]

    return line[receiver_start:end]


def split_lines(text: str) -> list[str]:
    """Split on newlines only, so row numbers agree with the oracle's."""
    return text.split("\n")


def line_at(text: str, row: int) -> str | None:
    lines = split_lines(text)
    if row < 0 or row >= len(lines):
        return None
    return lines[row]


def replace_line(text: str, row: int, replacement: str) -> str:
    """Return `text` with line `row` swapped for `replacement`."""
    lines = split_lines(text)
    if 0 <= row < len(lines):
        lines[row] = replacement
    return "\n".join(lines)


def strip_trailing_dot(text: str, row: int) -> str:
    """Drop a dangling `.` at the end of line `row` ("h." -> "h").

    Trailing whitespace after the dot is removed along with it.
    """
    lines = split_lines(text)
    if 0 <= row < len(lines):
        stripped = lines[row].rstrip()
        if stripped.endswith("."):
            lines[row] = stripped[:-1]
    return "\n".join(lines)
