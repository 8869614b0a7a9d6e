from __future__ import annotations

import re

BLANK_LINE = re.compile(r"^\s*$")
# indented line whose first visible character is not a list, number or quote marker
DEDENTABLE = re.compile(r"^[ \t]+[^-0-9>\s]")
LEADING_WS = re.compile(r"^[ \t]{1,3}")


def _normalize_line(line: str) -> str:
    if BLANK_LINE.match(line):
        return ""
    if DEDENTABLE.match(line):
        return LEADING_WS.sub("", line, count=1)
    return line


def normalize_indentation(text: str) -> str:
    """Collapse leftover indentation after a block marker has been removed.

    Whitespace-only lines are blanked. Up to three leading whitespace
    characters are dropped from plain lines; lines that still start with a
    ``-``, a digit or ``>`` keep their indentation since it carries nesting.
    """
    return "\n".join(_normalize_line(line) for line in text.split("\n"))
