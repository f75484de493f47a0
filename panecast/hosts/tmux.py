"""tmux host implementation using the tmux command line client."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import typer

from panecast.core.errors import HostCommandError, HostUnavailableError
from panecast.core.model import Choice

LOGGER = logging.getLogger(__name__)

_PANE_FORMAT = "#{pane_id}\t#{pane_active}\t#{pane_pid}\t#{pane_current_command}\t#{pane_title}"
_WINDOW_FORMAT = "#{window_id}\t#{window_active}"
_TMUX_MOD_PREFIXES = (
    (("CTRL", "CONTROL"), "C-"),
    (("ALT", "OPT", "META"), "M-"),
    (("SHIFT",), "S-"),
)

Runner = Callable[[Sequence[str]], str]


def run_command(cmd: Sequence[str]) -> str:
    try:
        result = subprocess.run(
            list(cmd),
            check=False,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise HostUnavailableError(f"'{cmd[0]}' is not installed or not on PATH") from exc

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise HostCommandError(f"{' '.join(cmd)} -> exit {result.returncode}: {stderr}")
    return result.stdout


def tmux_key_name(key: str, mods: str = "") -> str:
    tokens = {token.strip().upper() for token in mods.split("|") if token.strip()}
    prefix = "".join(
        tmux_prefix for names, tmux_prefix in _TMUX_MOD_PREFIXES if tokens.intersection(names)
    )
    return f"{prefix}{key}"


@dataclass
class TmuxPane:
    pane_id: str
    active: bool
    pid: int | None
    command: str
    title: str
    runner: Runner = field(default=run_command, repr=False, compare=False)

    def get_title(self) -> str | None:
        return self.title or None

    def get_foreground_process_name(self) -> str | None:
        return self.command or None

    def get_foreground_process_argv(self) -> list[str] | None:
        if self.pid is None:
            return None
        pgid = self.runner(["ps", "-o", "tpgid=", "-p", str(self.pid)]).strip()
        if not pgid or pgid == "-1":
            return None
        args = self.runner(["ps", "-o", "args=", "-p", pgid]).strip()
        return args.split() if args else None

    def send_text(self, text: str) -> None:
        # tmux reads a trailing ";" as a command separator.
        if text.endswith(";"):
            text = text[:-1] + "\\;"
        self.runner(["tmux", "send-keys", "-l", "-t", self.pane_id, "--", text])

    def send_key(self, key: str, mods: str = "") -> None:
        self.runner(["tmux", "send-keys", "-t", self.pane_id, tmux_key_name(key, mods)])


@dataclass
class TmuxWindow:
    window_id: str
    active: bool
    runner: Runner = field(default=run_command, repr=False, compare=False)

    def panes(self) -> list[TmuxPane]:
        output = self.runner(["tmux", "list-panes", "-t", self.window_id, "-F", _PANE_FORMAT])
        return [pane for pane in map(self._parse_pane, output.splitlines()) if pane is not None]

    def active_pane(self) -> TmuxPane | None:
        return next((pane for pane in self.panes() if pane.active), None)

    def _parse_pane(self, line: str) -> TmuxPane | None:
        parts = line.split("\t", 4)
        if len(parts) < 5 or not parts[0]:
            LOGGER.debug("Skipping unparseable list-panes line: %r", line)
            return None
        pane_id, active, pid, command, title = parts
        return TmuxPane(
            pane_id=pane_id,
            active=active == "1",
            pid=int(pid) if pid.isdigit() else None,
            command=command,
            title=title,
            runner=self.runner,
        )


class TmuxHost:
    """Host adapter for one tmux session; tmux windows play the role of tabs."""

    def __init__(self, session: str | None = None, *, runner: Runner | None = None) -> None:
        self.session = session
        self.runner = runner or run_command

    def ensure_session(self) -> None:
        """Raise a HostError if the tmux server or the configured session is unreachable."""
        cmd = ["tmux", "has-session"]
        if self.session:
            cmd += ["-t", self.session]
        self.runner(cmd)

    def tabs(self) -> list[TmuxWindow]:
        cmd = ["tmux", "list-windows", "-F", _WINDOW_FORMAT]
        if self.session:
            cmd[2:2] = ["-t", self.session]
        windows: list[TmuxWindow] = []
        for line in self.runner(cmd).splitlines():
            window_id, _, active = line.partition("\t")
            if window_id:
                windows.append(TmuxWindow(window_id=window_id, active=active == "1", runner=self.runner))
        return windows

    def active_tab(self) -> TmuxWindow | None:
        return next((window for window in self.tabs() if window.active), None)

    def prompt_line(
        self,
        description: str,
        on_line: Callable[[str | None], None],
        pane: TmuxPane | None = None,
    ) -> None:
        try:
            line = typer.prompt(description, default="", show_default=False)
        except typer.Abort:
            return
        on_line(line)

    def select_choice(
        self,
        title: str,
        choices: Sequence[Choice],
        on_select: Callable[[str | None], None],
        pane: TmuxPane | None = None,
    ) -> None:
        typer.echo(title)
        for index, choice in enumerate(choices, start=1):
            typer.echo(f"  {index}) {choice.label}")
        try:
            answer = typer.prompt("Choice", default="", show_default=False).strip()
        except typer.Abort:
            return

        selected = _resolve_choice(answer, choices)
        if selected is None:
            if answer:
                typer.echo(f"Unknown choice '{answer}'", err=True)
            return
        on_select(selected.id)


def _resolve_choice(answer: str, choices: Sequence[Choice]) -> Choice | None:
    if answer.isdigit() and 1 <= int(answer) <= len(choices):
        return choices[int(answer) - 1]
    return next((choice for choice in choices if choice.id == answer), None)
