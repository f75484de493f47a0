from __future__ import annotations

import pytest

from panecast.core.keys import encode_key, mods_to_mask
from panecast.core.model import BroadcastConfig, KeySpec, Target
from panecast.core.options import build_target
from panecast.core.submit import (
    effective_send_key_mode,
    effective_submit_keys,
    effective_submit_text,
    normalize_submit_keys,
    resolve_submit_keys,
)


def test_encode_plain_enter() -> None:
    assert encode_key(KeySpec("Enter")) == "\r"
    assert encode_key(KeySpec("enter"), csi_u=True) == "\r"


def test_encode_ctrl_enter_with_csi_u() -> None:
    assert encode_key(KeySpec("Enter", "CTRL"), csi_u=True) == "\x1b[13;5u"


def test_encode_ctrl_enter_without_csi_u_falls_back_to_cr() -> None:
    assert encode_key(KeySpec("Enter", "CTRL"), csi_u=False) == "\r"


def test_encode_other_keys_have_no_sequence() -> None:
    assert encode_key(KeySpec("Tab"), csi_u=True) is None
    assert encode_key(KeySpec(""), csi_u=True) is None


@pytest.mark.parametrize(
    ("mods", "mask"),
    [
        ("", 1),
        ("SHIFT", 2),
        ("alt", 3),
        ("OPT", 3),
        ("Control", 5),
        ("META", 9),
        ("SHIFT|CTRL", 6),
        ("SHIFT|ALT|CTRL|META", 16),
        ("HYPER", 1),
    ],
)
def test_mods_to_mask(mods: str, mask: int) -> None:
    assert mods_to_mask(mods) == mask


def test_encode_alt_shift_enter_with_csi_u() -> None:
    assert encode_key(KeySpec("Enter", "ALT|SHIFT"), csi_u=True) == "\x1b[13;4u"


def test_normalize_single_descriptor() -> None:
    assert normalize_submit_keys({"key": "Enter", "mods": "ALT"}) == (KeySpec("Enter", "ALT"),)
    assert normalize_submit_keys(KeySpec("Tab")) == (KeySpec("Tab"),)


def test_normalize_sequence_and_malformed_values() -> None:
    keys = [{"key": "Escape"}, KeySpec("Enter")]
    assert normalize_submit_keys(keys) == (KeySpec("Escape"), KeySpec("Enter"))
    assert normalize_submit_keys(["Enter"]) == ()
    assert normalize_submit_keys("Enter") == ()
    assert normalize_submit_keys(None) == ()
    assert normalize_submit_keys([]) == ()


def test_disable_submit_keys_beats_submit_keys() -> None:
    options = {"disable_submit_keys": True, "submit_keys": [{"key": "Enter"}]}
    assert resolve_submit_keys(options) == ()


def test_submit_keys_false_disables() -> None:
    assert resolve_submit_keys({"submit_keys": False, "submit_key": {"key": "Tab"}}) == ()


def test_submit_keys_beats_submit_key_beats_submit() -> None:
    assert resolve_submit_keys(
        {"submit_keys": {"key": "A"}, "submit_key": {"key": "B"}, "submit": {"key": "C"}}
    ) == (KeySpec("A"),)
    assert resolve_submit_keys({"submit_key": {"key": "B"}, "submit": {"key": "C"}}) == (KeySpec("B"),)
    assert resolve_submit_keys({"submit": {"key": "C"}}) == (KeySpec("C"),)


def test_resolve_falls_back_to_default() -> None:
    assert resolve_submit_keys({}) == (KeySpec("Enter"),)
    assert resolve_submit_keys({}, (KeySpec("Tab"),)) == (KeySpec("Tab"),)


def test_build_target_defers_to_engine_defaults_when_unset() -> None:
    target = build_target({"name": "plain", "patterns": ["zsh"]})
    config = BroadcastConfig(default_submit_keys=(KeySpec("Tab"),), default_submit_text="go")
    assert target.submit_keys is None
    assert effective_submit_keys(target, config) == (KeySpec("Tab"),)
    assert effective_submit_text(target, config) == "go"


def test_build_target_disabled_keys_are_empty_not_default() -> None:
    target = build_target({"name": "quiet", "submit_keys": False})
    assert target.submit_keys == ()
    assert effective_submit_keys(target, BroadcastConfig()) == ()


def test_empty_submit_text_suppresses_default() -> None:
    target = Target(name="t", submit_text="")
    assert effective_submit_text(target, BroadcastConfig(default_submit_text="go")) == ""


def test_send_key_mode_override() -> None:
    config = BroadcastConfig(send_key_mode="window")
    assert effective_send_key_mode(Target(name="t", send_key_mode="text"), config) == "text"
    assert effective_send_key_mode(Target(name="t"), config) == "window"
    assert effective_send_key_mode(None, config) == "window"
