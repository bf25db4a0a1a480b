# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI for managing custom rule paths."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..context import ScannerContext
from ..errors import ScanRulesError
from ..events import attach_console
from ..logging import fail, info, ok, section, warn


@dataclass(slots=True)
class _CliState:
    scanner: ScannerContext
    use_emoji: bool


app = typer.Typer(help="Manage custom rule paths for the scanner engines.", no_args_is_help=True)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show verbose notifications.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in output.")] = False,
) -> None:
    """Build the scanner context shared by every command."""

    try:
        scanner = ScannerContext.create().initialize()
    except ScanRulesError as exc:
        fail(str(exc), use_emoji=not no_emoji)
        raise typer.Exit(code=1) from exc
    attach_console(scanner.sink, verbose=verbose, use_emoji=not no_emoji)
    ctx.obj = _CliState(scanner=scanner, use_emoji=not no_emoji)


@app.command("add")
def add_command(
    ctx: typer.Context,
    language: Annotated[str, typer.Option("--language", "-l", help="Language the rules apply to.")],
    paths: Annotated[list[Path], typer.Option("--path", "-p", help="Rule file or directory; repeatable.")],
) -> None:
    """Register custom rule files for a language."""

    state: _CliState = ctx.obj
    try:
        added = state.scanner.catalog.add_paths(language, paths)
    except ScanRulesError as exc:
        fail(str(exc), use_emoji=state.use_emoji)
        raise typer.Exit(code=1) from exc
    if not added:
        warn("No rule files were found in the supplied paths.", use_emoji=state.use_emoji)
        return
    ok(f"Added {len(added)} rule path(s) for language '{language}':", use_emoji=state.use_emoji)
    for entry in added:
        info(f"  {entry}", use_emoji=False)


@app.command("remove")
def remove_command(
    ctx: typer.Context,
    paths: Annotated[list[Path], typer.Option("--path", "-p", help="Rule file or directory; repeatable.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Remove without asking for confirmation.")] = False,
) -> None:
    """Unregister custom rule files."""

    state: _CliState = ctx.obj
    catalog = state.scanner.catalog
    try:
        matching = catalog.get_matching_paths(paths)
        if not matching:
            warn("None of the supplied paths are registered.", use_emoji=state.use_emoji)
            return
        if not force:
            listing = "\n".join(f"  {entry}" for entry in matching)
            typer.confirm(f"These rule paths will be removed:\n{listing}\nContinue?", abort=True)
        removed = catalog.remove_paths(paths)
    except ScanRulesError as exc:
        fail(str(exc), use_emoji=state.use_emoji)
        raise typer.Exit(code=1) from exc
    ok(f"Removed {len(removed)} rule path(s):", use_emoji=state.use_emoji)
    for entry in removed:
        info(f"  {entry}", use_emoji=False)


@app.command("list")
def list_command(
    ctx: typer.Context,
    engine: Annotated[str | None, typer.Option("--engine", "-e", help="Only show paths for this engine.")] = None,
) -> None:
    """Show registered custom rule paths grouped by engine and language."""

    state: _CliState = ctx.obj
    scanner = state.scanner
    if engine is None:
        selected = scanner.enabled_engines()
    else:
        found = scanner.registry.try_get(engine)
        if found is None:
            known = ", ".join(scanner.registry)
            fail(f"Unknown engine '{engine}'. Registered engines: {known}", use_emoji=state.use_emoji)
            raise typer.Exit(code=1)
        selected = (found,)
    shown = False
    for candidate in selected:
        entries = scanner.catalog.get_entries_for_engine(candidate.name)
        if not entries:
            continue
        shown = True
        section(candidate.name, use_color=False)
        for language in sorted(entries):
            for entry in sorted(entries[language]):
                info(f"{language}: {entry}", use_emoji=False)
    if not shown:
        info("No custom rule paths are registered.", use_emoji=state.use_emoji)


__all__ = ["app"]
