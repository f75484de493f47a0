from __future__ import annotations

import pytest

from panecast.core.model import PromptOptions
from panecast.core.service import BroadcastService
from panecast.menu import open_broadcast_menu


class RecordingService(BroadcastService):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple] = []

    def broadcast_submit(self, host):
        self.calls.append(("submit",))
        return []

    def prompt_and_broadcast(self, host, pane=None, options=None):
        self.calls.append(("prompt", options))


class ChoosingHost:
    def __init__(self, choice: str | None) -> None:
        self.choice = choice
        self.titles: list[str] = []
        self.choice_ids: list[str] = []
        self.labels: list[str] = []

    def select_choice(self, title, choices, on_select, pane=None) -> None:
        self.titles.append(title)
        self.choice_ids = [choice.id for choice in choices]
        self.labels = [choice.label for choice in choices]
        if self.choice is not None:
            on_select(self.choice)


@pytest.mark.parametrize(
    ("choice", "expected"),
    [
        ("broadcast", [("prompt", PromptOptions(description="Enter text to broadcast:"))]),
        ("submit", [("submit",)]),
        (
            "broadcast_submit",
            [("prompt", PromptOptions(description="Enter text to broadcast:", submit=True))],
        ),
        ("bogus", []),
        (None, []),
    ],
)
def test_menu_routes_choice(choice, expected) -> None:
    service = RecordingService()
    host = ChoosingHost(choice)

    open_broadcast_menu(service, host)

    assert host.titles == ["Broadcast input"]
    assert host.choice_ids == ["broadcast", "submit", "broadcast_submit"]
    assert service.calls == expected


def test_default_menu_labels() -> None:
    host = ChoosingHost(None)
    open_broadcast_menu(RecordingService(), host)
    assert host.labels == ["Broadcast only", "Submit only", "Broadcast and submit"]
