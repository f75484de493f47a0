"""Host interfaces.

A host adapter exposes the multiplexer window the broadcast starts from. Tabs
and panes are handles owned by the host; panecast only holds them for the
duration of one dispatch call.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Sequence
from typing import Protocol

from panecast.core.model import Choice


class Pane(Protocol):
    @property
    def pane_id(self) -> Hashable:
        """Stable identity, comparable for equality."""

    def get_title(self) -> str | None: ...

    def get_foreground_process_name(self) -> str | None: ...

    def get_foreground_process_argv(self) -> Sequence[str] | None:
        """Argument list of the foreground process. May raise if the process is gone."""

    def send_text(self, text: str) -> None: ...

    def send_key(self, key: str, mods: str = "") -> None: ...


class Tab(Protocol):
    def panes(self) -> Sequence[Pane]: ...

    def active_pane(self) -> Pane | None: ...


class Host(Protocol):
    def tabs(self) -> Sequence[Tab]: ...

    def active_tab(self) -> Tab | None: ...

    def prompt_line(
        self,
        description: str,
        on_line: Callable[[str | None], None],
        pane: Pane | None = None,
    ) -> None:
        """Ask for a line of input and call `on_line` with it.

        `on_line` is not called when the prompt is cancelled.
        """

    def select_choice(
        self,
        title: str,
        choices: Sequence[Choice],
        on_select: Callable[[str | None], None],
        pane: Pane | None = None,
    ) -> None:
        """Ask the user to pick one of `choices` and call `on_select` with its id."""
