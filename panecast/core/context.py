"""Matchable context derived from a pane."""

from __future__ import annotations

from panecast.core.model import PaneContext
from panecast.hosts.base import Pane


def _lower_or_empty(value: object) -> str:
    if not value:
        return ""
    return str(value).lower()


def _process_argv(pane: Pane) -> str:
    # Process info is routinely unavailable (process exited, permissions).
    try:
        argv = pane.get_foreground_process_argv()
    except Exception:
        return ""
    if not argv:
        return ""
    return _lower_or_empty(" ".join(str(arg) for arg in argv))


def pane_context(pane: Pane) -> PaneContext:
    return PaneContext(
        title=_lower_or_empty(pane.get_title()),
        process=_lower_or_empty(pane.get_foreground_process_name()),
        argv=_process_argv(pane),
    )
