"""Typer CLI entrypoint."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import typer

from panecast.core.config_loader import load_config
from panecast.core.context import pane_context
from panecast.core.errors import PanecastError
from panecast.core.model import MenuOptions, PromptOptions
from panecast.core.service import BroadcastService
from panecast.hosts.tmux import TmuxHost
from panecast.menu import open_broadcast_menu

app = typer.Typer(help="Broadcast text and submit keys to matching tmux panes")

_CONFIG = typer.Option(None, "--config", help="Path to a YAML config file")
_SESSION = typer.Option(None, "--session", help="tmux session (defaults to the current one)")
_SCOPE = typer.Option(None, "--scope", help="active_tab or all_tabs")
_TAB_MODE = typer.Option(None, "--tab-mode", help="all_panes or active_pane")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log dispatch details"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


def _build(
    config: Path | None,
    session: str | None,
    scope: str | None,
    tab_mode: str | None,
) -> tuple[BroadcastService, TmuxHost]:
    loaded = load_config(config)
    for warning in loaded.warnings:
        typer.echo(f"Warning: {warning}", err=True)

    overrides = {
        key: value
        for key, value in (("scope", scope), ("tab_mode", tab_mode))
        if value is not None
    }
    broadcast_config = dataclasses.replace(loaded.config, **overrides)
    host = TmuxHost(session)
    host.ensure_session()
    return BroadcastService(broadcast_config), host


def _fail(exc: PanecastError) -> typer.Exit:
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=1)


@app.command("panes")
def list_panes(
    config: Path | None = _CONFIG,
    session: str | None = _SESSION,
    scope: str | None = _SCOPE,
    tab_mode: str | None = _TAB_MODE,
) -> None:
    """List panes that a broadcast would reach and the target each matched."""
    try:
        service, host = _build(config, session, scope, tab_mode)
        matches = service.collect(host)
        if not matches:
            typer.echo("No target panes matched")
            return

        for match in matches:
            context = pane_context(match.pane)
            typer.echo(
                f"{match.pane.pane_id} {context.process or '-'} "
                f"'{context.title}' -> {match.target.name}"
            )
    except PanecastError as exc:
        raise _fail(exc) from None


@app.command("send")
def send_text(
    text: str,
    submit: bool = typer.Option(False, "--submit", help="Submit after sending the text"),
    config: Path | None = _CONFIG,
    session: str | None = _SESSION,
    scope: str | None = _SCOPE,
    tab_mode: str | None = _TAB_MODE,
) -> None:
    """Send TEXT verbatim to every matched pane."""
    try:
        service, host = _build(config, session, scope, tab_mode)
        if submit:
            matches = service.broadcast_text_and_submit(host, text)
        else:
            matches = service.broadcast_text(host, text)
        typer.echo(f"Sent to {len(matches)} panes")
    except PanecastError as exc:
        raise _fail(exc) from None


@app.command("submit")
def send_submit(
    config: Path | None = _CONFIG,
    session: str | None = _SESSION,
    scope: str | None = _SCOPE,
    tab_mode: str | None = _TAB_MODE,
) -> None:
    """Run each matched pane's submit action (Enter by default)."""
    try:
        service, host = _build(config, session, scope, tab_mode)
        matches = service.broadcast_submit(host)
        typer.echo(f"Submitted to {len(matches)} panes")
    except PanecastError as exc:
        raise _fail(exc) from None


@app.command("prompt")
def prompt(
    submit: bool = typer.Option(False, "--submit", help="Submit after sending the text"),
    allow_empty: bool = typer.Option(False, "--allow-empty", help="Broadcast an empty line"),
    description: str = typer.Option(PromptOptions.description, "--description"),
    config: Path | None = _CONFIG,
    session: str | None = _SESSION,
    scope: str | None = _SCOPE,
    tab_mode: str | None = _TAB_MODE,
) -> None:
    """Read a line from the terminal and broadcast it."""
    try:
        service, host = _build(config, session, scope, tab_mode)
        options = PromptOptions(description=description, submit=submit, allow_empty=allow_empty)
        service.prompt_and_broadcast(host, None, options)
    except PanecastError as exc:
        raise _fail(exc) from None


@app.command("menu")
def menu(
    title: str = typer.Option(MenuOptions.title, "--title"),
    config: Path | None = _CONFIG,
    session: str | None = _SESSION,
    scope: str | None = _SCOPE,
    tab_mode: str | None = _TAB_MODE,
) -> None:
    """Choose between broadcast, submit, and broadcast-and-submit."""
    try:
        service, host = _build(config, session, scope, tab_mode)
        open_broadcast_menu(service, host, None, MenuOptions(title=title))
    except PanecastError as exc:
        raise _fail(exc) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
