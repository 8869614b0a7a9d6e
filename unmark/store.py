from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .parsers.md_parser import MARKDOWN_PATTERNS, PatternKey

logger = logging.getLogger(__name__)

PHRASE_SLOTS = 3


class ConfigurationError(ValueError):
    pass


class ReadOnlyDict(dict):
    """dict that refuses in-place edits; serializes like a plain dict."""

    def _readonly(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError("Configuration mappings are read-only")

    __setitem__ = __delitem__ = __ior__ = _readonly
    clear = pop = popitem = setdefault = update = _readonly


def _default_enabled() -> dict[str, bool]:
    return {p.key.value: True for p in MARKDOWN_PATTERNS}


def _frozen_defaults() -> ReadOnlyDict:
    return ReadOnlyDict(_default_enabled())


class Configuration(BaseModel):
    """User preferences: custom phrases and which patterns are offered."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    custom_phrases: tuple[str, ...] = Field(
        default=("",) * PHRASE_SLOTS, alias="customPhrases"
    )
    enabled_patterns: dict[str, bool] = Field(
        default_factory=_frozen_defaults, alias="enabledPatterns"
    )
    # legacy list removal that strips every hyphen
    loose_list: bool = Field(default=False, alias="looseList")

    @field_validator("custom_phrases", mode="before")
    @classmethod
    def _pad_phrases(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            value = ()
        if not isinstance(value, (list, tuple)):
            return value
        phrases = [p if isinstance(p, str) else "" for p in value]
        phrases = phrases[:PHRASE_SLOTS]
        phrases += [""] * (PHRASE_SLOTS - len(phrases))
        return tuple(phrases)

    @field_validator("enabled_patterns", mode="before")
    @classmethod
    def _fill_patterns(cls, value: Any) -> dict[str, bool]:
        if value is None:
            value = {}
        if not isinstance(value, dict):
            return value
        merged = _default_enabled()
        merged.update(value)
        return merged

    @field_validator("enabled_patterns", mode="after")
    @classmethod
    def _freeze_patterns(cls, value: dict[str, bool]) -> ReadOnlyDict:
        return ReadOnlyDict(value)

    def is_enabled(self, key: PatternKey | str) -> bool:
        return bool(self.enabled_patterns.get(PatternKey(key).value, False))

    def with_custom_phrase(self, index: int, phrase: str) -> "Configuration":
        if not 0 <= index < PHRASE_SLOTS:
            raise IndexError(f"Custom phrase index out of range: {index}")
        phrases = list(self.custom_phrases)
        phrases[index] = phrase
        return self.model_copy(update={"custom_phrases": tuple(phrases)})

    def with_pattern_enabled(
        self, key: PatternKey | str, enabled: bool
    ) -> "Configuration":
        patterns = dict(self.enabled_patterns)
        patterns[PatternKey(key).value] = enabled
        return self.model_copy(update={"enabled_patterns": ReadOnlyDict(patterns)})

    def with_loose_list(self, enabled: bool) -> "Configuration":
        return self.model_copy(update={"loose_list": enabled})

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ConfigStore:
    """JSON persistence for :class:`Configuration`.

    Loading merges the stored record over the defaults, so keys added by
    later versions come up with their documented default instead of missing.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Configuration:
        if not self.path.exists():
            logger.info("No configuration at %s, using defaults", self.path)
            return Configuration()
        try:
            record = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(
                f"Cannot read configuration {self.path}: {exc}"
            ) from exc
        if not isinstance(record, dict):
            raise ConfigurationError(
                f"Configuration {self.path} must be a JSON object"
            )
        try:
            config = Configuration.model_validate(record)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid configuration {self.path}: {exc}"
            ) from exc
        logger.info("Loaded configuration from %s", self.path)
        return config

    def save(self, config: Configuration) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(config.to_record(), ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
        logger.info("Saved configuration to %s", self.path)
