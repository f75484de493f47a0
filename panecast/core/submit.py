"""Submit behavior resolution for matched targets."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from panecast.core.model import BroadcastConfig, KeySpec, Target, normalize_submit_keys

DEFAULT_SUBMIT_KEYS = (KeySpec("Enter"),)


def _explicitly_false(value: Any) -> bool:
    return value is False or (isinstance(value, str) and value.strip().lower() == "false")


def resolve_submit_keys(
    options: Mapping[str, Any],
    default: Sequence[KeySpec] = DEFAULT_SUBMIT_KEYS,
) -> tuple[KeySpec, ...]:
    """Apply submit-key precedence to raw target options; the first rule that applies wins."""
    if options.get("disable_submit_keys") is True or _explicitly_false(options.get("submit_keys")):
        return ()
    for name in ("submit_keys", "submit_key", "submit"):
        if options.get(name) is not None:
            return normalize_submit_keys(options[name])
    return tuple(default)


def effective_submit_keys(target: Target, config: BroadcastConfig) -> tuple[KeySpec, ...]:
    if target.submit_keys is None:
        return config.default_submit_keys
    return target.submit_keys


def effective_submit_text(target: Target, config: BroadcastConfig) -> str | None:
    if target.submit_text is None:
        return config.default_submit_text
    return target.submit_text


def effective_send_key_mode(target: Target | None, config: BroadcastConfig) -> str:
    if target is not None and target.send_key_mode:
        return target.send_key_mode
    return config.send_key_mode
