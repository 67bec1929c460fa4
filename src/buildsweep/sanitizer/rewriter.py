"""Regenerate source text from collected edits."""

from typing import List, Tuple

from ..models import SourceEdit

HORIZONTAL_SPACE = b" \t"
LINE_BREAKS = b"\r\n"
UTF8_BOM = b"\xef\xbb\xbf"
# Neighbours that need no separating space
OPENING_TOKENS = b"([{"
CLOSING_TOKENS = b")]};,"


def _removal_span(buf: bytearray, start: int, end: int) -> Tuple[int, int, bytes]:
    """
    Widen a removal so it leaves tidy text behind.

    Returns:
        (start, end, replacement) to splice into ``buf``
    """
    left = start
    while left > 0 and buf[left - 1] in HORIZONTAL_SPACE:
        left -= 1
    right = end
    while right < len(buf) and buf[right] in HORIZONTAL_SPACE:
        right += 1

    at_line_start = (
        left == 0
        or buf[left - 1] == ord("\n")
        or (left == len(UTF8_BOM) and buf[:left] == UTF8_BOM)
    )
    at_line_end = right == len(buf) or buf[right] in LINE_BREAKS

    if at_line_start and at_line_end:
        # Nothing else on the line: drop it with its terminator
        if right < len(buf) and buf[right] == ord("\r"):
            right += 1
        if right < len(buf) and buf[right] == ord("\n"):
            right += 1
        return left, right, b""
    if at_line_end:
        return left, right, b""
    if at_line_start:
        return start, right, b""

    if b"\n" in buf[start:end]:
        # A multi-line comment terminated the line for ASI purposes
        return left, right, b"\n"
    if buf[left - 1] in OPENING_TOKENS or buf[right] in CLOSING_TOKENS:
        return left, right, b""
    return left, right, b" "


def apply_edits(source: bytes, edits: List[SourceEdit]) -> bytes:
    """
    Splice edits into the source, last edit first.

    Edits must not overlap. Text outside the edited ranges is kept byte for
    byte apart from whitespace freed up by removals.
    """
    buf = bytearray(source)
    for edit in sorted(edits, key=lambda e: e.start_byte, reverse=True):
        if edit.is_removal:
            start, end, replacement = _removal_span(buf, edit.start_byte, edit.end_byte)
        else:
            start, end = edit.start_byte, edit.end_byte
            replacement = edit.replacement.encode("utf-8")
        buf[start:end] = replacement
    return bytes(buf)
