"""
dynastysim/succession.py
~~~~~~~~~~~~~~~~~~~~~~~~
Computes ordered lines of succession over the living-descendant graph.

The line is built depth-first: each child is placed immediately before
their own descendants, so the whole branch of a senior child precedes the
next sibling. Only living children are followed.

Gavelkind orders heirs exactly like primogeniture; titles are never split.
Elective orders by ``diplomacy + stewardship``, highest first, keeping the
children-list order for ties.
"""

from __future__ import annotations

import logging

from dynastysim.models import Character, SuccessionLaw

logger = logging.getLogger(__name__)


def _ordered_children(
    parent: Character,
    characters: dict[str, Character],
    law: SuccessionLaw,
) -> list[Character]:
    """Return ``parent``'s living children sorted for ``law``."""
    children = []
    for child_id in parent.children_ids:
        child = characters.get(child_id)
        if child is None:
            logger.warning("Dangling child id %s on %s. Skipping.", child_id, parent.id)
            continue
        if child.alive:
            children.append(child)

    if law in (SuccessionLaw.PRIMOGENITURE, SuccessionLaw.GAVELKIND):
        return sorted(children, key=lambda c: c.birth_week)
    if law == SuccessionLaw.ULTIMOGENITURE:
        return sorted(children, key=lambda c: c.birth_week, reverse=True)
    if law == SuccessionLaw.ELECTIVE:
        return sorted(
            children,
            key=lambda c: c.skills.diplomacy + c.skills.stewardship,
            reverse=True,
        )
    raise ValueError(f"Unhandled succession law: {law!r}")


def _walk_line(
    node: Character,
    characters: dict[str, Character],
    law: SuccessionLaw,
    visited: set[str],
    line: list[str],
) -> None:
    """Append ``node``'s descendants to ``line`` in pre-order."""
    if node.id in visited:
        return
    visited.add(node.id)

    for child in _ordered_children(node, characters, law):
        if child.id in visited:
            continue
        line.append(child.id)
        _walk_line(child, characters, law, visited, line)


def calculate_succession_line(
    root_id: str,
    characters: dict[str, Character],
    law: SuccessionLaw,
) -> list[str]:
    """Return the ordered IDs of ``root_id``'s living heirs, root excluded."""
    root = characters.get(root_id)
    if root is None:
        return []

    line: list[str] = []
    _walk_line(root, characters, law, set(), line)
    return line


def find_heir(
    root_id: str,
    characters: dict[str, Character],
    law: SuccessionLaw,
    dynasty_id: str | None = None,
) -> str | None:
    """First entry of the succession line, optionally restricted to a dynasty."""
    for heir_id in calculate_succession_line(root_id, characters, law):
        if dynasty_id is None or characters[heir_id].dynasty_id == dynasty_id:
            return heir_id
    return None
