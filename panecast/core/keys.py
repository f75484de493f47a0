"""Key descriptor encoding for text-mode submit keys."""

from __future__ import annotations

from panecast.core.model import KeySpec

_MOD_BITS = {
    "SHIFT": 1,
    "ALT": 2,
    "OPT": 2,
    "CTRL": 4,
    "CONTROL": 4,
    "META": 8,
}
_ENTER_KEYCODE = 13


def mods_to_mask(mods: str | None) -> int:
    """xterm-style modifier parameter: 1 plus the bits of every modifier token."""
    mask = 1
    if not mods:
        return mask
    for token in mods.split("|"):
        mask += _MOD_BITS.get(token.strip().upper(), 0)
    return mask


def encode_key(key: KeySpec, csi_u: bool = False) -> str | None:
    """Return the raw sequence for `key`, or None if it must go through the host."""
    if not key.key or key.key.lower() != "enter":
        return None
    mask = mods_to_mask(key.mods)
    if mask == 1 or not csi_u:
        # Without CSI-u, modified Enter degrades to a plain carriage return.
        return "\r"
    return f"\x1b[{_ENTER_KEYCODE};{mask}u"
