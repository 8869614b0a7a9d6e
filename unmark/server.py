from __future__ import annotations

from typing import Any, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .commands import (
    apply_choice,
    chooser_items,
    pattern_command,
    phrase_command,
    resolve_item,
    run_command,
)
from .config import settings
from .parsers.md_parser import (
    MARKDOWN_PATTERNS,
    PatternDescriptor,
    get_descriptor,
    remove_phrase,
)
from .store import PHRASE_SLOTS, ConfigStore, Configuration, ConfigurationError
from .utils.diff import highlight_removals

app = FastAPI(title="Unmark")


@app.exception_handler(ConfigurationError)
async def configuration_error(
    _request: Request, exc: ConfigurationError
) -> JSONResponse:
    return JSONResponse(status_code=500, content={"detail": str(exc)})


def get_store() -> ConfigStore:
    return ConfigStore(settings.config_path)


class RemoveRequest(BaseModel):
    text: str
    pattern: str
    normalize: Optional[bool] = None


class PhraseRequest(BaseModel):
    text: str
    index: Optional[int] = Field(default=None, ge=1, le=PHRASE_SLOTS)
    phrase: Optional[str] = None


class ChooseRequest(BaseModel):
    text: str
    item: str
    normalize: Optional[bool] = None


class TextResponse(BaseModel):
    text: str


class PreviewResponse(BaseModel):
    text: str
    highlighted: str


def _pattern_or_404(pattern: str) -> PatternDescriptor:
    descriptor = get_descriptor(pattern)
    if descriptor is None:
        raise HTTPException(status_code=404, detail=f"Unknown pattern: {pattern}")
    return descriptor


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/patterns")
def list_patterns(store: ConfigStore = Depends(get_store)) -> dict[str, Any]:
    config = store.load()
    return {
        "patterns": [
            {
                "key": p.key.value,
                "label": p.label,
                "example": p.example,
                "enabled": config.is_enabled(p.key),
            }
            for p in MARKDOWN_PATTERNS
        ],
        "items": chooser_items(config),
    }


@app.post("/api/remove")
def remove(
    req: RemoveRequest, store: ConfigStore = Depends(get_store)
) -> TextResponse:
    descriptor = _pattern_or_404(req.pattern)
    command = pattern_command(descriptor, store.load(), normalize=req.normalize)
    return TextResponse(text=run_command(command, req.text))


@app.post("/api/preview")
def preview(
    req: RemoveRequest, store: ConfigStore = Depends(get_store)
) -> PreviewResponse:
    descriptor = _pattern_or_404(req.pattern)
    command = pattern_command(descriptor, store.load(), normalize=req.normalize)
    cleaned = run_command(command, req.text)
    return PreviewResponse(
        text=cleaned, highlighted=highlight_removals(req.text, cleaned)
    )


@app.post("/api/phrase")
def phrase(
    req: PhraseRequest, store: ConfigStore = Depends(get_store)
) -> TextResponse:
    if req.phrase is not None:
        if not req.phrase.strip():
            return TextResponse(text=req.text)
        return TextResponse(text=remove_phrase(req.text, req.phrase))
    if req.index is None:
        raise HTTPException(
            status_code=422, detail="Either index or phrase is required"
        )
    command = phrase_command(store.load(), req.index - 1)
    if command is None:
        # blank phrase slots are never registered
        return TextResponse(text=req.text)
    return TextResponse(text=run_command(command, req.text))


@app.post("/api/choose")
def choose(
    req: ChooseRequest, store: ConfigStore = Depends(get_store)
) -> TextResponse:
    config = store.load()
    if resolve_item(req.item, config) is None:
        raise HTTPException(status_code=404, detail=f"Unknown item: {req.item}")
    return TextResponse(
        text=apply_choice(req.item, req.text, config, normalize=req.normalize)
    )


@app.get("/api/config")
def get_config(store: ConfigStore = Depends(get_store)) -> dict[str, Any]:
    return store.load().to_record()


@app.put("/api/config")
def put_config(
    config: Configuration, store: ConfigStore = Depends(get_store)
) -> dict[str, Any]:
    store.save(config)
    return config.to_record()
