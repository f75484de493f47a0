"""Choice menu that routes to one of the broadcast operations."""

from __future__ import annotations

from panecast.core.model import MenuOptions, PromptOptions
from panecast.core.service import BroadcastService
from panecast.hosts.base import Host, Pane


def open_broadcast_menu(
    service: BroadcastService,
    host: Host,
    pane: Pane | None = None,
    options: MenuOptions | None = None,
) -> None:
    options = options or MenuOptions()

    def _on_select(choice_id: str | None) -> None:
        if choice_id == "broadcast":
            service.prompt_and_broadcast(host, pane, PromptOptions(description=options.prompt))
        elif choice_id == "submit":
            service.broadcast_submit(host)
        elif choice_id == "broadcast_submit":
            service.prompt_and_broadcast(
                host, pane, PromptOptions(description=options.prompt, submit=True)
            )

    host.select_choice(options.title, options.choices, _on_select, pane)
