"""Set operations over node taints and labels.

All functions return new collections and leave their inputs untouched.
Taints are keyed by their full ``(key, value, effect)`` identity, labels by
key. Every operation is idempotent, so folding the same policy outcome twice
gives the same node state as folding it once.
"""

from collections.abc import Iterable, Mapping

from node_tainter.models.taint import Taint


def add_taints(current: Iterable[Taint], to_add: Iterable[Taint]) -> list[Taint]:
    """Add taints, overwriting any entry with the same identity.

    Order of existing taints is preserved and new ones are appended.
    """
    merged: dict[tuple[str, str, str], Taint] = {}
    for taint in current:
        merged[taint.identity] = taint
    for taint in to_add:
        merged[taint.identity] = taint
    return list(merged.values())


def remove_taints(current: Iterable[Taint], to_remove: Iterable[Taint]) -> list[Taint]:
    """Remove taints by identity; taints not present are ignored."""
    removed = {t.identity for t in to_remove}
    result: list[Taint] = []
    seen: set[tuple[str, str, str]] = set()
    for taint in current:
        if taint.identity in removed or taint.identity in seen:
            continue
        seen.add(taint.identity)
        result.append(taint)
    return result


def add_labels(current: Mapping[str, str], to_add: Mapping[str, str]) -> dict[str, str]:
    """Add labels, overwriting existing values for the same key."""
    result = dict(current)
    result.update(to_add)
    return result


def remove_labels(current: Mapping[str, str], to_remove: Mapping[str, str]) -> dict[str, str]:
    """Remove labels by key, whatever their current value."""
    return {k: v for k, v in current.items() if k not in to_remove}


def taint_exists(taints: Iterable[Taint], taint: Taint) -> bool:
    """Whether a taint with the same key is present.

    This is the looser, key-only match used to decide whether a node is
    marked at all.
    """
    return any(t.key == taint.key for t in taints)


def label_exists(labels: Mapping[str, str], key: str, value: str) -> bool:
    """Whether the label is present with exactly this value."""
    return key in labels and labels[key] == value
