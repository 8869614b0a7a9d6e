from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

logger = logging.getLogger(__name__)


class PatternKey(str, Enum):
    ASTERISK = "asterisk"
    INLINE_CODE = "inline-code"
    LATEX = "latex"
    HIGHLIGHT = "highlight"
    COMMENT = "comment"
    HEADER = "header"
    LIST = "list"
    NUMBERED_LIST = "numbered-list"
    QUOTE = "quote"
    TASK = "task"


@dataclass(frozen=True)
class Rule:
    pattern: re.Pattern[str]
    replacement: str = ""

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


@dataclass(frozen=True)
class PatternDescriptor:
    key: PatternKey
    label: str
    example: str
    rule: Rule


# content markers, removed wherever they appear
ASTERISK = re.compile(r"\*")
BACKTICK = re.compile(r"`")
DOLLAR = re.compile(r"\$")
EQUALS = re.compile(r"=")
COMMENT_SPAN = re.compile(r"%%.*?%%", re.DOTALL)

# block markers, anchored at line start; group 1 keeps the indentation
HEADER = re.compile(r"^([ \t]*)#[# \t]*", re.MULTILINE)
LIST_ITEM = re.compile(r"^([ \t]*)(?:[-*+][ \t]+)+", re.MULTILINE)
NUMBERED_ITEM = re.compile(r"^([ \t]*)(?:\d+\.[ \t]+)+", re.MULTILINE)
QUOTE = re.compile(r"^([ \t]*)>[> \t]*", re.MULTILINE)
TASK_ITEM = re.compile(r"^([ \t]*)(?:[-*][ \t]+\[.\][ \t]*)+", re.MULTILINE)

# legacy list variant: every hyphen anywhere
HYPHEN = re.compile(r"-")

MARKDOWN_PATTERNS: tuple[PatternDescriptor, ...] = (
    PatternDescriptor(
        PatternKey.ASTERISK, "Asterisk (*, **)", "*italic* or **bold**", Rule(ASTERISK)
    ),
    PatternDescriptor(
        PatternKey.INLINE_CODE, "Inline Code (`)", "`inline code`", Rule(BACKTICK)
    ),
    PatternDescriptor(PatternKey.LATEX, "LaTeX ($)", "$latex$", Rule(DOLLAR)),
    PatternDescriptor(
        PatternKey.HIGHLIGHT, "Highlight (=)", "==highlight==", Rule(EQUALS)
    ),
    PatternDescriptor(
        PatternKey.COMMENT, "Comment (%)", "%%comment%%", Rule(COMMENT_SPAN)
    ),
    PatternDescriptor(
        PatternKey.HEADER, "Header (#)", "# Header, #Tag", Rule(HEADER, r"\1")
    ),
    PatternDescriptor(
        PatternKey.LIST, "Unordered List (-)", "- List item", Rule(LIST_ITEM, r"\1")
    ),
    PatternDescriptor(
        PatternKey.NUMBERED_LIST,
        "Numbered List (1.)",
        '1. List item (may also affect numbers like "2025. Plan")',
        Rule(NUMBERED_ITEM, r"\1"),
    ),
    PatternDescriptor(
        PatternKey.QUOTE, "Quote (>)", "> Quoted text", Rule(QUOTE, r"\1")
    ),
    PatternDescriptor(
        PatternKey.TASK,
        "Task List (- [ ])",
        "- [ ] / - [x] Task item",
        Rule(TASK_ITEM, r"\1"),
    ),
)

RULES: dict[PatternKey, Rule] = {p.key: p.rule for p in MARKDOWN_PATTERNS}

LOOSE_LIST_RULE = Rule(HYPHEN)


def get_descriptor(key: Union[PatternKey, str]) -> PatternDescriptor | None:
    """Look up a descriptor by key, returning None for unknown keys."""
    try:
        pattern_key = PatternKey(key)
    except ValueError:
        return None
    return next(p for p in MARKDOWN_PATTERNS if p.key is pattern_key)


def remove_pattern(
    text: str, key: Union[PatternKey, str], *, loose_list: bool = False
) -> str:
    """Remove every occurrence of one markdown construct from ``text``.

    Unknown keys are an identity transform so that configurations written by
    newer versions keep working.
    """
    try:
        pattern_key = PatternKey(key)
    except ValueError:
        logger.debug("Unknown pattern key %r, leaving text unchanged", key)
        return text
    if pattern_key is PatternKey.LIST and loose_list:
        return LOOSE_LIST_RULE.apply(text)
    return RULES[pattern_key].apply(text)


def remove_phrase(text: str, phrase: str) -> str:
    # literal deletion, no regex
    if not phrase:
        return text
    return text.replace(phrase, "")
