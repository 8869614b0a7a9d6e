from __future__ import annotations

import logging
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Callable, Optional, Sequence

from .config import settings
from .parsers.md_parser import (
    MARKDOWN_PATTERNS,
    PatternDescriptor,
    remove_pattern,
    remove_phrase,
)
from .store import Configuration
from .utils.indent import normalize_indentation

logger = logging.getLogger(__name__)

CUSTOM_PHRASE_ITEM = "Custom Phrase"


@dataclass(frozen=True)
class Command:
    id: str
    name: str
    apply: Callable[[str], str]


def _pattern_transform(
    descriptor: PatternDescriptor, *, normalize: bool, loose_list: bool
) -> Callable[[str], str]:
    def _run(text: str) -> str:
        cleaned = remove_pattern(text, descriptor.key, loose_list=loose_list)
        return normalize_indentation(cleaned) if normalize else cleaned

    return _run


def _phrase_transform(phrase: str) -> Callable[[str], str]:
    def _run(text: str) -> str:
        return remove_phrase(text, phrase)

    return _run


def pattern_command(
    descriptor: PatternDescriptor,
    config: Configuration,
    *,
    normalize: Optional[bool] = None,
) -> Command:
    if normalize is None:
        normalize = settings.normalize_indentation
    return Command(
        id=f"remove-{descriptor.key.value}",
        name=f"Remove {descriptor.label}",
        apply=_pattern_transform(
            descriptor, normalize=normalize, loose_list=config.loose_list
        ),
    )


def phrase_command(config: Configuration, index: int) -> Optional[Command]:
    """Command for custom phrase ``index`` (0-based), or None when it is blank."""
    phrase = config.custom_phrases[index].strip()
    if not phrase:
        return None
    return Command(
        id=f"remove-custom-{index + 1}",
        name=f"Remove {CUSTOM_PHRASE_ITEM} {index + 1}",
        apply=_phrase_transform(phrase),
    )


def enabled_commands(
    config: Configuration, *, normalize: Optional[bool] = None
) -> list[Command]:
    commands = [
        pattern_command(p, config, normalize=normalize)
        for p in MARKDOWN_PATTERNS
        if config.is_enabled(p.key)
    ]
    for index in range(len(config.custom_phrases)):
        command = phrase_command(config, index)
        if command is not None:
            commands.append(command)
    return commands


def run_command(command: Command, selection: str) -> str:
    if not selection:
        logger.debug("Empty selection, skipping %s", command.id)
        return selection
    return command.apply(selection)


def chooser_items(config: Configuration) -> list[str]:
    items = [p.label for p in MARKDOWN_PATTERNS if config.is_enabled(p.key)]
    items.extend(
        f"{CUSTOM_PHRASE_ITEM} {i + 1}"
        for i, phrase in enumerate(config.custom_phrases)
        if phrase.strip()
    )
    return items


def resolve_item(
    item: str, config: Configuration, *, normalize: Optional[bool] = None
) -> Optional[Command]:
    """Map a chooser item back to the command it stands for."""
    for descriptor in MARKDOWN_PATTERNS:
        if item == descriptor.label and config.is_enabled(descriptor.key):
            return pattern_command(descriptor, config, normalize=normalize)
    prefix = f"{CUSTOM_PHRASE_ITEM} "
    if item.startswith(prefix):
        suffix = item[len(prefix) :]
        if suffix.isdigit() and 1 <= int(suffix) <= len(config.custom_phrases):
            return phrase_command(config, int(suffix) - 1)
    return None


def apply_choice(
    item: str,
    text: str,
    config: Configuration,
    *,
    normalize: Optional[bool] = None,
) -> str:
    command = resolve_item(item, config, normalize=normalize)
    if command is None:
        logger.debug("Unknown chooser item %r, leaving text unchanged", item)
        return text
    return run_command(command, text)


def _score(item: str, query: str) -> tuple[int, float]:
    lowered = item.lower()
    substring = 1 if query in lowered else 0
    return substring, SequenceMatcher(a=query, b=lowered).ratio()


def match_items(
    items: Sequence[str], query: str, *, limit: int = 5, cutoff: float = 0.3
) -> list[str]:
    """Fuzzy-rank chooser items against ``query``.

    Substring hits always rank above similarity-only hits.
    """
    query = query.strip().lower()
    if not query:
        return list(items)
    scored = [(_score(item, query), item) for item in items]
    ranked = [
        item
        for score, item in sorted(scored, key=lambda s: s[0], reverse=True)
        if score[0] or score[1] >= cutoff
    ]
    return ranked[:limit]
