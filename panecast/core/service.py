"""Broadcast service used by the CLI, the public API, and host adapters."""

from __future__ import annotations

import logging
from collections.abc import Callable

from panecast.core.collector import collect_panes_default
from panecast.core.context import pane_context
from panecast.core.keys import encode_key
from panecast.core.model import BroadcastConfig, KeySpec, Match, PaneContext, PromptOptions, Target
from panecast.core.submit import effective_send_key_mode, effective_submit_keys, effective_submit_text
from panecast.core.target_match import match_target
from panecast.hosts.base import Host, Pane

LOGGER = logging.getLogger(__name__)


class BroadcastService:
    """Fan text and submit actions out to every pane a config selects.

    Every send is isolated: a pane that rejects text or a key is logged and
    skipped, and the remaining panes still receive the broadcast.
    """

    def __init__(self, config: BroadcastConfig | None = None) -> None:
        self.config = config or BroadcastConfig()
        self._collect_panes: Callable[[Host, BroadcastConfig], object] = (
            self.config.collect_panes or collect_panes_default
        )
        self._match: Callable[[Pane, PaneContext], Target | None]
        if self.config.target_matcher is not None:
            self._match = self._custom_match
        elif not self.config.targets:
            self._match = lambda pane, context: self.config.default_target
        else:
            self._match = self._default_match

    def collect(self, host: Host) -> list[Match]:
        matches: list[Match] = []
        for pane in self._panes(host):
            if not self._accepts(pane):
                continue
            target = self._match(pane, pane_context(pane))
            if target is not None:
                matches.append(Match(pane=pane, target=target))
            elif self.config.include_unmatched:
                matches.append(Match(pane=pane, target=self.config.default_target))
        return matches

    def broadcast_text(self, host: Host, text: str) -> list[Match]:
        matches = self.collect(host)
        self._log_info(f"Broadcasting text to {len(matches)} target panes")
        for match in matches:
            self._send_text(match.pane, text)
        return matches

    def broadcast_submit(self, host: Host) -> list[Match]:
        matches = self.collect(host)
        self._log_info(f"Broadcasting submit to {len(matches)} target panes")
        for match in matches:
            self.submit_to_pane(host, match.pane, match.target)
        return matches

    def broadcast_text_and_submit(self, host: Host, text: str) -> list[Match]:
        matches = self.collect(host)
        self._log_info(f"Broadcasting text+submit to {len(matches)} target panes")
        for match in matches:
            # Submit still runs when the text send failed for this pane.
            self._send_text(match.pane, text)
            self.submit_to_pane(host, match.pane, match.target)
        return matches

    def prompt_and_broadcast(
        self,
        host: Host,
        pane: Pane | None = None,
        options: PromptOptions | None = None,
    ) -> None:
        options = options or PromptOptions()

        def _on_line(line: str | None) -> None:
            if line is None:
                return
            if line == "" and not options.allow_empty:
                return
            if options.submit:
                self.broadcast_text_and_submit(host, line)
            else:
                self.broadcast_text(host, line)

        host.prompt_line(options.description, _on_line, pane)

    def submit_to_pane(self, host: Host, pane: Pane, target: Target) -> None:
        if target.submit_action is not None:
            try:
                target.submit_action(host, pane, target)
            except Exception as exc:
                self._log_error(f"Failed to run submit_action for target '{target.name}': {exc}")
            return

        submit_text = effective_submit_text(target, self.config)
        if submit_text:
            self._send_text(pane, submit_text)

        mode = effective_send_key_mode(target, self.config)
        for key in effective_submit_keys(target, self.config):
            if key.key:
                self._send_key(pane, key, mode)

    def _panes(self, host: Host) -> list[Pane]:
        try:
            panes = self._collect_panes(host, self.config)
        except Exception as exc:
            self._log_error(f"Failed to collect panes: {exc}")
            return []
        return list(panes or ())

    def _accepts(self, pane: Pane) -> bool:
        if self.config.pane_filter is None:
            return True
        try:
            return bool(self.config.pane_filter(pane))
        except Exception as exc:
            self._log_error(f"Pane filter failed for pane {pane.pane_id}: {exc}")
            return False

    def _default_match(self, pane: Pane, context: PaneContext) -> Target | None:
        return match_target(pane, context, self.config.targets, self.config.match_fields)

    def _custom_match(self, pane: Pane, context: PaneContext) -> Target | None:
        try:
            return self.config.target_matcher(pane, context, self.config.targets)
        except Exception as exc:
            self._log_error(f"Target matcher failed for pane {pane.pane_id}: {exc}")
            return None

    def _send_text(self, pane: Pane, text: str) -> None:
        try:
            pane.send_text(text)
        except Exception as exc:
            self._log_error(f"Failed to send text to pane {pane.pane_id}: {exc}")

    def _send_key(self, pane: Pane, key: KeySpec, mode: str) -> None:
        if mode == "text":
            sequence = encode_key(key, self.config.csi_u)
            if sequence is not None:
                self._send_text(pane, sequence)
                return
        try:
            pane.send_key(key.key, key.mods or "")
        except Exception as exc:
            self._log_error(f"Failed to send submit key {key.key} to pane {pane.pane_id}: {exc}")

    def _log_info(self, message: str) -> None:
        if self.config.log:
            LOGGER.info(message)

    def _log_error(self, message: str) -> None:
        if self.config.log:
            LOGGER.error(message)
