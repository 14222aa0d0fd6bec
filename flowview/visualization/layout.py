"""
Hierarchical Flow Layout

Deterministic single-pass layout of a call graph: breadth-first levels
from the root services, left to right, each level centered vertically.

DETERMINISTIC:
Same node order + same edge list = identical positions.
No physics, no iteration, no randomness.

Level assignment is first-discovery-wins over a FIFO queue seeded with
every root in input order. For multi-parent and cyclic graphs the level
depends on that order; it is not a longest-path or rank-based layering.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple


H_SPACING = 250
V_SPACING = 120
Y_OFFSET = 200


@dataclass(frozen=True)
class LayoutEntry:
    """Assigned level and position of a single node."""
    node_id: str
    level: int
    x: float
    y: float


def build_adjacency(
    node_ids: Sequence[str],
    edges: Iterable[Tuple[str, str]],
) -> Tuple[Dict[str, List[str]], Dict[str, List[str]]]:
    """
    Build forward (children) and reverse (parents) maps.

    Every node gets an entry, even without edges.
    Child order follows edge iteration order.
    """
    children: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}
    parents: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}

    for source, target in edges:
        # Unknown ids are a caller bug; KeyError propagates
        children[source].append(target)
        parents[target].append(source)

    return children, parents


def find_roots(node_ids: Sequence[str], parents: Dict[str, List[str]]) -> List[str]:
    """
    Nodes without parents, in input order.

    A graph with no such node (e.g. a pure cycle or a self-loop) falls back
    to its first node as the sole root.
    """
    roots = [node_id for node_id in node_ids if not parents[node_id]]
    if not roots and node_ids:
        roots = [node_ids[0]]
    return roots


def assign_levels(
    node_ids: Sequence[str],
    children: Dict[str, List[str]],
    roots: Sequence[str],
) -> Dict[str, int]:
    """
    Breadth-first level assignment from all roots at level 0.

    A node keeps the level of the first time it is dequeued.
    Nodes unreachable from any root default to level 0.
    """
    levels: Dict[str, int] = {}
    queue = deque((root, 0) for root in roots)

    while queue:
        node_id, level = queue.popleft()
        if node_id in levels:
            continue
        levels[node_id] = level

        for child_id in children[node_id]:
            if child_id not in levels:
                queue.append((child_id, level + 1))

    for node_id in node_ids:
        levels.setdefault(node_id, 0)

    return levels


def group_by_level(node_ids: Sequence[str], levels: Dict[str, int]) -> Dict[int, List[str]]:
    """Group node ids by level, preserving input order inside each group."""
    groups: Dict[int, List[str]] = {}
    for node_id in node_ids:
        groups.setdefault(levels[node_id], []).append(node_id)
    return groups


def compute_layout(
    node_ids: Sequence[str],
    edges: Iterable[Tuple[str, str]],
) -> Dict[str, LayoutEntry]:
    """
    Lay out a call graph.

    Args:
        node_ids: node ids in backend order (must be unique)
        edges: (source_id, target_id) pairs referencing node_ids

    Returns:
        node id -> LayoutEntry, in input order. Empty input gives an empty layout.
    """
    node_ids = list(node_ids)
    if not node_ids:
        return {}

    children, parents = build_adjacency(node_ids, edges)
    roots = find_roots(node_ids, parents)
    levels = assign_levels(node_ids, children, roots)
    groups = group_by_level(node_ids, levels)

    index_in_group: Dict[str, int] = {}
    for group in groups.values():
        for index, node_id in enumerate(group):
            index_in_group[node_id] = index

    layout: Dict[str, LayoutEntry] = {}
    for node_id in node_ids:
        level = levels[node_id]
        group_size = len(groups[level])
        index = index_in_group[node_id]
        layout[node_id] = LayoutEntry(
            node_id=node_id,
            level=level,
            x=float(level * H_SPACING),
            y=(index - (group_size - 1) / 2) * V_SPACING + Y_OFFSET,
        )

    return layout
