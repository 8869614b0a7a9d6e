from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from .commands import (
    apply_choice,
    chooser_items,
    enabled_commands,
    match_items,
    pattern_command,
    run_command,
)
from .config import settings
from .parsers.md_parser import MARKDOWN_PATTERNS, get_descriptor, remove_phrase
from .server import app
from .store import ConfigStore, Configuration, ConfigurationError
from .utils.diff import highlight_removals

logger = logging.getLogger(__name__)

cli = typer.Typer(help="Strip markdown formatting markers from text")
config_cli = typer.Typer(help="Inspect and edit the stored configuration")
cli.add_typer(config_cli, name="config")


@cli.callback()
def main(
    ctx: typer.Context,
    config: Path = typer.Option(
        Path(settings.config_path), "--config", help="Configuration file"
    ),
    log_level: str = typer.Option(settings.log_level, help="Logging level"),
) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = ConfigStore(config)


def _load(ctx: typer.Context) -> Configuration:
    try:
        return ctx.obj.load()
    except ConfigurationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


def _save(ctx: typer.Context, config: Configuration) -> None:
    ctx.obj.save(config)
    typer.echo(f"Saved {ctx.obj.path}")


def _read_selection(file: Optional[Path]) -> str:
    if file is None:
        return sys.stdin.read()
    return file.read_text(encoding="utf-8")


def _write_result(text: str, file: Optional[Path], in_place: bool) -> None:
    if in_place:
        if file is None:
            raise typer.BadParameter("--in-place needs a FILE")
        file.write_text(text, encoding="utf-8")
        return
    typer.echo(text, nl=False)


@cli.command()
def patterns(ctx: typer.Context) -> None:
    """List the markdown patterns and whether each one is enabled."""
    config = _load(ctx)
    for p in MARKDOWN_PATTERNS:
        state = "on" if config.is_enabled(p.key) else "off"
        typer.echo(f"{p.key.value:<14} {p.label:<20} [{state}]  {p.example}")


@cli.command("commands")
def list_commands(ctx: typer.Context) -> None:
    """List the commands the current configuration offers."""
    for command in enabled_commands(_load(ctx)):
        typer.echo(f"{command.id:<22} {command.name}")


@cli.command()
def remove(
    ctx: typer.Context,
    pattern: str = typer.Argument(..., help="Pattern key, e.g. header or task"),
    file: Optional[Path] = typer.Argument(
        None, exists=True, dir_okay=False, help="Input file, stdin when omitted"
    ),
    normalize: bool = typer.Option(
        settings.normalize_indentation,
        "--normalize/--no-normalize",
        help="Collapse leftover indentation after removal",
    ),
    in_place: bool = typer.Option(False, "--in-place", "-i"),
    preview: bool = typer.Option(
        False, "--preview", help="Print the input with removed spans marked"
    ),
) -> None:
    """Remove one markdown construct from FILE or stdin."""
    descriptor = get_descriptor(pattern)
    if descriptor is None:
        keys = ", ".join(p.key.value for p in MARKDOWN_PATTERNS)
        raise typer.BadParameter(
            f"Unknown pattern {pattern!r}; choose from {keys}"
        )
    if preview and in_place:
        raise typer.BadParameter("--preview cannot be combined with --in-place")
    text = _read_selection(file)
    command = pattern_command(descriptor, _load(ctx), normalize=normalize)
    cleaned = run_command(command, text)
    if preview:
        marked = highlight_removals(text, cleaned, start_tag="[-", end_tag="-]")
        typer.echo(marked, nl=False)
        return
    _write_result(cleaned, file, in_place)


@cli.command()
def phrase(
    ctx: typer.Context,
    file: Optional[Path] = typer.Argument(
        None, exists=True, dir_okay=False, help="Input file, stdin when omitted"
    ),
    index: Optional[int] = typer.Option(
        None, "--index", "-n", min=1, max=3, help="Configured custom phrase (1-3)"
    ),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Ad-hoc phrase"),
    in_place: bool = typer.Option(False, "--in-place", "-i"),
) -> None:
    """Delete every literal occurrence of a phrase."""
    if (index is None) == (text is None):
        raise typer.BadParameter("Give exactly one of --index or --text")
    if index is not None:
        text = _load(ctx).custom_phrases[index - 1].strip()
    selection = _read_selection(file)
    if not text or not text.strip():
        typer.echo("Phrase is blank, nothing removed", err=True)
        cleaned = selection
    else:
        cleaned = remove_phrase(selection, text)
    _write_result(cleaned, file, in_place)


@cli.command()
def choose(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Fuzzy query over pattern labels"),
    file: Optional[Path] = typer.Argument(
        None, exists=True, dir_okay=False, help="Input file, stdin when omitted"
    ),
    in_place: bool = typer.Option(False, "--in-place", "-i"),
) -> None:
    """Pick a removal by fuzzy label match and apply it."""
    config = _load(ctx)
    matches = match_items(chooser_items(config), query, limit=1)
    if not matches:
        typer.echo(f"No removal matches {query!r}", err=True)
        raise typer.Exit(code=1)
    logger.info("Chose %s for query %r", matches[0], query)
    cleaned = apply_choice(matches[0], _read_selection(file), config)
    _write_result(cleaned, file, in_place)


@cli.command()
def serve(
    host: str = typer.Option(settings.host, help="Bind host"),
    port: int = typer.Option(settings.port, help="Bind port"),
) -> None:
    """Run the HTTP service for editor integrations."""
    uvicorn.run(app, host=host, port=port, reload=False)


@config_cli.command("show")
def config_show(ctx: typer.Context) -> None:
    typer.echo(json.dumps(_load(ctx).to_record(), ensure_ascii=False, indent=2))


@config_cli.command("set-phrase")
def config_set_phrase(
    ctx: typer.Context,
    index: int = typer.Argument(..., min=1, max=3),
    value: str = typer.Argument(..., help="Phrase, empty string to clear"),
) -> None:
    _save(ctx, _load(ctx).with_custom_phrase(index - 1, value))


def _toggle(ctx: typer.Context, key: str, enabled: bool) -> None:
    if get_descriptor(key) is None:
        raise typer.BadParameter(f"Unknown pattern {key!r}")
    _save(ctx, _load(ctx).with_pattern_enabled(key, enabled))


@config_cli.command("enable")
def config_enable(ctx: typer.Context, key: str) -> None:
    _toggle(ctx, key, True)


@config_cli.command("disable")
def config_disable(ctx: typer.Context, key: str) -> None:
    _toggle(ctx, key, False)


@config_cli.command("loose-list")
def config_loose_list(
    ctx: typer.Context,
    enabled: bool = typer.Argument(..., help="on/off"),
) -> None:
    """Strip every hyphen on list removal instead of only line markers."""
    _save(ctx, _load(ctx).with_loose_list(enabled))


if __name__ == "__main__":
    cli()
