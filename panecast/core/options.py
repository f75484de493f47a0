"""Build immutable config objects from raw option mappings.

Raw mappings come from YAML documents or from Python callers. The alternate
submit-key names are resolved here, once, so the dispatcher only ever sees the
normalized `Target.submit_keys` field.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from panecast.core.errors import ConfigValidationError
from panecast.core.model import BroadcastConfig, Target
from panecast.core.submit import DEFAULT_SUBMIT_KEYS, normalize_submit_keys, resolve_submit_keys

_SUBMIT_KEY_NAMES = ("submit_keys", "submit_key", "submit")
_TARGET_KEYS = frozenset(
    {
        "name",
        "enabled",
        "patterns",
        "match",
        "disable_submit_keys",
        "submit_text",
        "submit_action",
        "send_key_mode",
        *_SUBMIT_KEY_NAMES,
    }
)
_CONFIG_KEYS = frozenset(
    {
        "targets",
        "default_submit_keys",
        "default_submit_text",
        "scope",
        "tab_mode",
        "match_fields",
        "pane_filter",
        "target_matcher",
        "collect_panes",
        "include_unmatched",
        "send_key_mode",
        "csi_u",
        "log",
    }
)


def _reject_unknown(options: Mapping[str, Any], allowed: frozenset[str], context: str) -> None:
    unknown = sorted(set(options) - allowed)
    if unknown:
        raise ConfigValidationError(f"Unknown {context} option(s): {', '.join(unknown)}")


def _declares_submit_keys(options: Mapping[str, Any]) -> bool:
    if options.get("disable_submit_keys") is True:
        return True
    return any(options.get(name) is not None for name in _SUBMIT_KEY_NAMES)


def build_target(options: Mapping[str, Any], *, index: int = 0) -> Target:
    _reject_unknown(options, _TARGET_KEYS, "target")
    match = options.get("match")
    if match is not None and not callable(match):
        raise ConfigValidationError(f"Target #{index} 'match' must be callable")
    submit_action = options.get("submit_action")
    if submit_action is not None and not callable(submit_action):
        raise ConfigValidationError(f"Target #{index} 'submit_action' must be callable")

    patterns = options.get("patterns") or ()
    if isinstance(patterns, str):
        patterns = (patterns,)

    return Target(
        name=str(options.get("name") or f"target{index}"),
        enabled=options.get("enabled", True) is not False,
        patterns=tuple(patterns),
        match=match,
        submit_keys=resolve_submit_keys(options, ()) if _declares_submit_keys(options) else None,
        submit_text=options.get("submit_text"),
        submit_action=submit_action,
        send_key_mode=options.get("send_key_mode"),
    )


def build_config(options: Mapping[str, Any] | None = None) -> BroadcastConfig:
    options = dict(options or {})
    _reject_unknown(options, _CONFIG_KEYS, "config")

    targets = tuple(
        item if isinstance(item, Target) else build_target(item, index=index)
        for index, item in enumerate(options.pop("targets", None) or ())
    )
    default_keys = options.pop("default_submit_keys", None)
    options["default_submit_keys"] = normalize_submit_keys(
        default_keys if default_keys is not None else DEFAULT_SUBMIT_KEYS[0]
    )
    for name in ("pane_filter", "target_matcher", "collect_panes"):
        if options.get(name) is not None and not callable(options[name]):
            raise ConfigValidationError(f"Config option '{name}' must be callable")
    # Drop explicit None values so dataclass defaults apply.
    present = {key: value for key, value in options.items() if value is not None}
    return BroadcastConfig(targets=targets, **present)
