"""Stable public API for building tooling on top of panecast.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from panecast.core.config_loader import LoadedConfig, load_config
from panecast.core.errors import (
    ConfigLoadError,
    ConfigValidationError,
    HostCommandError,
    HostError,
    HostUnavailableError,
    PanecastError,
)
from panecast.core.keys import encode_key
from panecast.core.model import (
    BroadcastConfig,
    Choice,
    KeySpec,
    Match,
    MenuOptions,
    PaneContext,
    PromptOptions,
    Target,
)
from panecast.core.options import build_config, build_target
from panecast.core.service import BroadcastService
from panecast.hosts.base import Host, Pane, Tab
from panecast.hosts.tmux import TmuxHost
from panecast.menu import open_broadcast_menu

__all__ = [
    "PanecastError",
    "ConfigLoadError",
    "ConfigValidationError",
    "HostError",
    "HostCommandError",
    "HostUnavailableError",
    "BroadcastConfig",
    "Choice",
    "KeySpec",
    "Match",
    "MenuOptions",
    "PaneContext",
    "PromptOptions",
    "Target",
    "Host",
    "Pane",
    "Tab",
    "TmuxHost",
    "BroadcastService",
    "build_config",
    "build_target",
    "encode_key",
    "Client",
]


class Client:
    """Public client for broadcasting into multiplexer panes.

    A `Client` wraps config loading, pane collection/matching, and submit
    dispatch behind a stable API. `config` may be a `BroadcastConfig`, a raw
    options mapping, or None to load the user's config file.
    """

    def __init__(
        self,
        config: BroadcastConfig | Mapping[str, Any] | None = None,
        *,
        host: Host | None = None,
        config_path: Path | str | None = None,
    ) -> None:
        if isinstance(config, BroadcastConfig):
            loaded = LoadedConfig(config=config, warnings=())
        elif config is not None:
            loaded = LoadedConfig(config=build_config(config), warnings=())
        else:
            loaded = load_config(config_path)
        self._loaded = loaded
        self._service = BroadcastService(loaded.config)
        self.host = host or TmuxHost()

    @property
    def config(self) -> BroadcastConfig:
        return self._service.config

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._loaded.warnings

    def matches(self) -> list[Match]:
        return self._service.collect(self.host)

    def broadcast_text(self, text: str) -> list[Match]:
        return self._service.broadcast_text(self.host, text)

    def broadcast_submit(self) -> list[Match]:
        return self._service.broadcast_submit(self.host)

    def broadcast_text_and_submit(self, text: str) -> list[Match]:
        return self._service.broadcast_text_and_submit(self.host, text)

    def prompt_and_broadcast(
        self,
        pane: Pane | None = None,
        options: PromptOptions | None = None,
    ) -> None:
        self._service.prompt_and_broadcast(self.host, pane, options)

    def open_menu(
        self,
        pane: Pane | None = None,
        options: MenuOptions | None = None,
    ) -> None:
        open_broadcast_menu(self._service, self.host, pane, options)
