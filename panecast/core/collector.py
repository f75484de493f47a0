"""Pane enumeration according to the configured scope."""

from __future__ import annotations

from collections.abc import Hashable, Iterable

from panecast.core.model import BroadcastConfig
from panecast.hosts.base import Host, Pane, Tab


def _scoped_tabs(host: Host, scope: str) -> list[Tab]:
    if scope == "all_tabs":
        return list(host.tabs())
    active_tab = host.active_tab()
    return [active_tab] if active_tab is not None else []


def _tab_panes(tab: Tab, tab_mode: str) -> list[Pane]:
    if tab_mode == "active_pane":
        active_pane = tab.active_pane()
        return [active_pane] if active_pane is not None else []
    return list(tab.panes())


def unique_panes(panes: Iterable[Pane]) -> list[Pane]:
    seen: set[Hashable] = set()
    result: list[Pane] = []
    for pane in panes:
        if pane.pane_id in seen:
            continue
        seen.add(pane.pane_id)
        result.append(pane)
    return result


def collect_panes_default(host: Host, config: BroadcastConfig) -> list[Pane]:
    return unique_panes(
        pane
        for tab in _scoped_tabs(host, config.scope)
        for pane in _tab_panes(tab, config.tab_mode)
    )
