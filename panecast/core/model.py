"""Core data models used across collector, matcher, service, and CLI."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from panecast.core.errors import ConfigValidationError

if TYPE_CHECKING:
    from panecast.hosts.base import Host, Pane

SCOPES = ("active_tab", "all_tabs")
TAB_MODES = ("all_panes", "active_pane")
SEND_KEY_MODES = ("window", "text")
CONTEXT_FIELDS = ("title", "process", "argv")

PanePredicate = Callable[["Pane", "PaneContext"], Any]
PaneFilter = Callable[["Pane"], Any]
SubmitAction = Callable[["Host", "Pane", "Target"], Any]
TargetMatcher = Callable[["Pane", "PaneContext", "tuple[Target, ...]"], "Target | None"]
PaneCollector = Callable[["Host", "BroadcastConfig"], Any]


@dataclass(frozen=True)
class KeySpec:
    key: str
    mods: str = ""


@dataclass(frozen=True)
class PaneContext:
    title: str = ""
    process: str = ""
    argv: str = ""

    def value_of(self, name: str) -> str:
        return getattr(self, name, "") or ""


@dataclass(frozen=True)
class Target:
    """How panes matched by `patterns` or `match` are treated on broadcast.

    `submit_keys` of None defers to the engine default; an empty tuple
    disables submit keys. `submit_text` of None defers to the engine default;
    an empty string suppresses it.
    """

    name: str
    enabled: bool = True
    patterns: tuple[str, ...] = ()
    match: PanePredicate | None = field(default=None, compare=False)
    submit_keys: tuple[KeySpec, ...] | None = None
    submit_text: str | None = None
    submit_action: SubmitAction | None = field(default=None, compare=False)
    send_key_mode: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "patterns", tuple(str(p).lower() for p in self.patterns))
        if self.submit_keys is not None:
            object.__setattr__(self, "submit_keys", normalize_submit_keys(self.submit_keys))
        if self.send_key_mode is not None and self.send_key_mode not in SEND_KEY_MODES:
            raise ConfigValidationError(
                f"Target '{self.name}' has invalid send_key_mode '{self.send_key_mode}'. "
                f"Allowed: {', '.join(SEND_KEY_MODES)}"
            )


@dataclass(frozen=True)
class Match:
    pane: Pane
    target: Target


@dataclass(frozen=True)
class BroadcastConfig:
    targets: tuple[Target, ...] = ()
    default_submit_keys: tuple[KeySpec, ...] = (KeySpec("Enter"),)
    default_submit_text: str | None = None
    scope: str = "active_tab"
    tab_mode: str = "all_panes"
    match_fields: tuple[str, ...] = CONTEXT_FIELDS
    pane_filter: PaneFilter | None = field(default=None, compare=False)
    target_matcher: TargetMatcher | None = field(default=None, compare=False)
    collect_panes: PaneCollector | None = field(default=None, compare=False)
    include_unmatched: bool = False
    send_key_mode: str = "window"
    csi_u: bool = False
    log: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "targets", tuple(self.targets))
        object.__setattr__(self, "default_submit_keys", normalize_submit_keys(self.default_submit_keys))
        object.__setattr__(self, "match_fields", tuple(self.match_fields))
        _check_choice("scope", self.scope, SCOPES)
        _check_choice("tab_mode", self.tab_mode, TAB_MODES)
        _check_choice("send_key_mode", self.send_key_mode, SEND_KEY_MODES)
        for name in self.match_fields:
            _check_choice("match_fields", name, CONTEXT_FIELDS)

    @property
    def default_target(self) -> Target:
        return Target(
            name="default",
            submit_keys=self.default_submit_keys,
            submit_text=self.default_submit_text,
        )


@dataclass(frozen=True)
class PromptOptions:
    description: str = "Enter text to broadcast:"
    submit: bool = False
    allow_empty: bool = False


@dataclass(frozen=True)
class Choice:
    id: str
    label: str


DEFAULT_CHOICES = (
    Choice(id="broadcast", label="Broadcast only"),
    Choice(id="submit", label="Submit only"),
    Choice(id="broadcast_submit", label="Broadcast and submit"),
)


@dataclass(frozen=True)
class MenuOptions:
    title: str = "Broadcast input"
    prompt: str = "Enter text to broadcast:"
    choices: tuple[Choice, ...] = DEFAULT_CHOICES


def _check_choice(name: str, value: str, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        raise ConfigValidationError(
            f"Invalid {name} '{value}'. Allowed: {', '.join(allowed)}"
        )


def _as_key_spec(value: Any) -> KeySpec | None:
    if isinstance(value, KeySpec):
        return value
    if isinstance(value, Mapping) and value.get("key"):
        return KeySpec(key=str(value["key"]), mods=str(value.get("mods") or ""))
    return None


def normalize_submit_keys(value: Any) -> tuple[KeySpec, ...]:
    """Coerce a single descriptor, a descriptor sequence, or nothing into a tuple.

    A sequence counts only when its first element is a descriptor; malformed
    later elements are dropped.
    """
    single = _as_key_spec(value)
    if single is not None:
        return (single,)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and value:
        if _as_key_spec(value[0]) is None:
            return ()
        return tuple(spec for spec in map(_as_key_spec, value) if spec is not None)
    return ()
