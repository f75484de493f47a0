"""Pane-to-target matching logic."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from panecast.core.model import CONTEXT_FIELDS, PaneContext, Target
from panecast.hosts.base import Pane

LOGGER = logging.getLogger(__name__)


def pattern_matches(context: PaneContext, fields: Sequence[str], pattern: str) -> bool:
    if pattern == "":
        return False
    for name in fields:
        haystack = context.value_of(name)
        if haystack and pattern in haystack:
            return True
    return False


def _predicate_matches(target: Target, pane: Pane, context: PaneContext) -> bool:
    try:
        return bool(target.match(pane, context))
    except Exception as exc:
        LOGGER.debug("Match predicate of target '%s' failed: %s", target.name, exc)
        return False


def target_matches(
    target: Target,
    pane: Pane,
    context: PaneContext,
    fields: Sequence[str] = CONTEXT_FIELDS,
) -> bool:
    if not target.enabled:
        return False
    if target.match is not None:
        return _predicate_matches(target, pane, context)
    return any(pattern_matches(context, fields, pattern.lower()) for pattern in target.patterns)


def match_target(
    pane: Pane,
    context: PaneContext,
    targets: Sequence[Target],
    fields: Sequence[str] = CONTEXT_FIELDS,
) -> Target | None:
    """Return the first enabled target in `targets` that accepts the pane."""
    for target in targets:
        if target_matches(target, pane, context, fields):
            return target
    return None
