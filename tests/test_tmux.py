from __future__ import annotations

import subprocess

import pytest
import typer

from panecast.core.context import pane_context
from panecast.core.errors import HostCommandError, HostUnavailableError
from panecast.core.model import DEFAULT_CHOICES, PaneContext
from panecast.hosts.tmux import TmuxHost, run_command, tmux_key_name


class FakeTmux:
    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.outputs: dict[tuple[str, ...], str] = {}

    def __call__(self, cmd) -> str:
        cmd = list(cmd)
        self.calls.append(cmd)
        for prefix, output in self.outputs.items():
            if tuple(cmd[: len(prefix)]) == prefix:
                return output
        return ""


def _fake_tmux() -> FakeTmux:
    runner = FakeTmux()
    runner.outputs[("tmux", "list-windows")] = "@1\t0\n@2\t1\n"
    runner.outputs[("tmux", "list-panes", "-t", "@2")] = (
        "%3\t0\t100\tzsh\thost: ~/src\n"
        "%4\t1\t200\tnode\tClaude Code\twith tab\n"
    )
    runner.outputs[("ps", "-o", "tpgid=", "-p", "200")] = "  4242\n"
    runner.outputs[("ps", "-o", "args=", "-p", "4242")] = "node /usr/local/bin/claude --resume\n"
    return runner


def test_active_tab_and_panes_are_parsed() -> None:
    host = TmuxHost(runner=_fake_tmux())
    tab = host.active_tab()
    assert tab is not None
    assert tab.window_id == "@2"

    panes = tab.panes()
    assert [p.pane_id for p in panes] == ["%3", "%4"]
    assert panes[1].title == "Claude Code\twith tab"
    assert tab.active_pane().pane_id == "%4"


def test_session_is_passed_to_list_windows() -> None:
    runner = _fake_tmux()
    TmuxHost("work", runner=runner).tabs()
    assert runner.calls[0] == ["tmux", "list-windows", "-t", "work", "-F", "#{window_id}\t#{window_active}"]


def test_pane_context_uses_foreground_process_group() -> None:
    pane = TmuxHost(runner=_fake_tmux()).active_tab().panes()[1]
    assert pane_context(pane) == PaneContext(
        title="claude code\twith tab",
        process="node",
        argv="node /usr/local/bin/claude --resume",
    )


def test_argv_failure_leaves_context_usable() -> None:
    runner = _fake_tmux()
    pane = TmuxHost(runner=runner).active_tab().panes()[0]

    def failing(cmd):
        if cmd[0] == "ps":
            raise HostCommandError("ps failed")
        return runner(cmd)

    pane.runner = failing
    assert pane_context(pane).argv == ""


def test_send_text_and_keys() -> None:
    runner = _fake_tmux()
    pane = TmuxHost(runner=runner).active_tab().panes()[0]

    pane.send_text("echo hi")
    pane.send_key("Enter", "CTRL|SHIFT")

    assert runner.calls[-2] == ["tmux", "send-keys", "-l", "-t", "%3", "--", "echo hi"]
    assert runner.calls[-1] == ["tmux", "send-keys", "-t", "%3", "C-S-Enter"]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("-la", "-la"),
        ("--help", "--help"),
        ("cd x;", "cd x\\;"),
        ("a; b", "a; b"),
    ],
)
def test_send_text_is_passed_literally(text: str, expected: str) -> None:
    runner = _fake_tmux()
    pane = TmuxHost(runner=runner).active_tab().panes()[0]

    pane.send_text(text)

    assert runner.calls[-1] == ["tmux", "send-keys", "-l", "-t", "%3", "--", expected]


@pytest.mark.parametrize(
    ("key", "mods", "expected"),
    [
        ("Enter", "", "Enter"),
        ("Enter", "ALT", "M-Enter"),
        ("Enter", "opt|meta", "M-Enter"),
        ("Tab", "SHIFT|CONTROL", "C-S-Tab"),
    ],
)
def test_tmux_key_name(key: str, mods: str, expected: str) -> None:
    assert tmux_key_name(key, mods) == expected


def test_run_command_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing(cmd, check, capture_output, text):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, "run", missing)
    with pytest.raises(HostUnavailableError):
        run_command(["tmux", "list-windows"])

    def failing(cmd, check, capture_output, text):
        return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="no server running")

    monkeypatch.setattr(subprocess, "run", failing)
    with pytest.raises(HostCommandError) as exc:
        run_command(["tmux", "list-windows"])
    assert "no server running" in str(exc.value)


def test_prompt_line_cancel_does_not_call_back(monkeypatch: pytest.MonkeyPatch) -> None:
    def abort(*args, **kwargs):
        raise typer.Abort()

    monkeypatch.setattr(typer, "prompt", abort)
    received = []
    TmuxHost(runner=_fake_tmux()).prompt_line("Text:", received.append)
    assert received == []


def test_select_choice_by_number_or_id(monkeypatch: pytest.MonkeyPatch) -> None:
    answers = iter(["2", "broadcast_submit", "9"])
    monkeypatch.setattr(typer, "prompt", lambda *args, **kwargs: next(answers))

    received: list[str | None] = []
    host = TmuxHost(runner=_fake_tmux())
    for _ in range(3):
        host.select_choice("Broadcast input", DEFAULT_CHOICES, received.append)
    assert received == ["submit", "broadcast_submit"]


def test_ensure_session_checks_configured_session() -> None:
    runner = _fake_tmux()
    TmuxHost("work", runner=runner).ensure_session()
    TmuxHost(runner=runner).ensure_session()
    assert runner.calls == [["tmux", "has-session", "-t", "work"], ["tmux", "has-session"]]
