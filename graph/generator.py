"""
generator.py — Procedural Graph Generation
===========================================
Factory functions that fill a Graph with a fresh layout.

Topologies:
  • random   – random spanning tree backbone + a few short cycles + random
               fill up to the requested density (always connected)
  • complete – every pair of nodes connected
  • cycle    – a ring through all nodes, plus random chords up to density

Nodes sit on a circle so labels never overlap.  Weights are 1–20.

Quality gate:
  A graph whose trace never rejects an edge teaches nothing about cycle
  detection.  `generate_checked` keeps regenerating until the chosen
  algorithm's step count reaches `min_steps_for(n)` (only
  possible with at least one rejected edge) and falls back to the last
  candidate after MAX_ATTEMPTS.
"""

import logging
import math
import random
from typing import List, Optional, Set, Tuple

from graph.edge import edge_key
from graph.errors import InvalidSetting
from graph.graph import Graph
from graph.node import MAX_LABELS


logger = logging.getLogger(__name__)

TOPOLOGIES = ("random", "complete", "cycle")
WEIGHT_RANGE: Tuple[int, int] = (1, 20)
MAX_ATTEMPTS = 25


def min_steps_for(node_count: int) -> int:
    # a tree-only trace is 3·(n-1) + 2 steps long; one rejection adds 2
    return 3 * node_count + 1


def _layout(graph: Graph, node_count: int, canvas_w: float, canvas_h: float) -> List[int]:
    cx, cy = canvas_w / 2, canvas_h / 2
    radius = min(canvas_w, canvas_h) * 0.35
    ids = []
    for i in range(node_count):
        angle = 2 * math.pi * i / node_count
        node = graph.add_node(cx + radius * math.cos(angle), cy + radius * math.sin(angle))
        ids.append(node.id)
    return ids


def _connect(graph: Graph, seen: Set[Tuple[int, int]], u: int, v: int, rng: random.Random) -> bool:
    if u == v or edge_key(u, v) in seen:
        return False
    graph.add_edge(u, v, rng.randint(*WEIGHT_RANGE))
    seen.add(edge_key(u, v))
    return True


def _fill_to_density(graph, seen, ids, density, rng) -> None:
    n = len(ids)
    max_edges = n * (n - 1) // 2
    target = max(len(seen), int(density * max_edges))
    candidates = [(ids[i], ids[j]) for i in range(n) for j in range(i + 1, n)
                  if edge_key(ids[i], ids[j]) not in seen]
    rng.shuffle(candidates)
    for u, v in candidates:
        if len(seen) >= target:
            break
        _connect(graph, seen, u, v, rng)


def _random_topology(graph, ids, density, rng) -> None:
    seen: Set[Tuple[int, int]] = set()

    # spanning-tree backbone: attach each unvisited node to a random visited one
    visited = [ids[rng.randrange(len(ids))]]
    unvisited = [i for i in ids if i != visited[0]]
    while unvisited:
        u = rng.choice(visited)
        v = unvisited.pop(rng.randrange(len(unvisited)))
        _connect(graph, seen, u, v, rng)
        visited.append(v)

    # short cycles so the trace has something to reject
    if len(ids) >= 3:
        small = len(ids) <= 6
        cycles = max(1, len(ids) // 3) if small else max(2, len(ids) // 3)
        for _ in range(cycles):
            size = 3 if small else rng.randint(3, min(5, len(ids)))
            ring = rng.sample(ids, size)
            for k in range(size):
                _connect(graph, seen, ring[k], ring[(k + 1) % size], rng)

    _fill_to_density(graph, seen, ids, density, rng)


def _complete_topology(graph, ids, density, rng) -> None:
    seen: Set[Tuple[int, int]] = set()
    for i in range(len(ids)):
        for j in range(i + 1, len(ids)):
            _connect(graph, seen, ids[i], ids[j], rng)


def _cycle_topology(graph, ids, density, rng) -> None:
    seen: Set[Tuple[int, int]] = set()
    for k in range(len(ids)):
        _connect(graph, seen, ids[k], ids[(k + 1) % len(ids)], rng)
    _fill_to_density(graph, seen, ids, density, rng)


_BUILDERS = {
    "random":   _random_topology,
    "complete": _complete_topology,
    "cycle":    _cycle_topology,
}


def generate_graph(
    graph: Graph,
    node_count: int = 8,
    density: float = 0.3,
    topology: str = "random",
    rng: Optional[random.Random] = None,
    canvas_w: float = 900,
    canvas_h: float = 600,
) -> Graph:
    """Clear `graph` and fill it in place.  `density` is a fraction 0–1."""
    if topology not in _BUILDERS:
        raise InvalidSetting(f"Unknown topology {topology!r}; expected one of {', '.join(TOPOLOGIES)}")
    if not 2 <= node_count <= MAX_LABELS:
        raise InvalidSetting(f"Node count must be between 2 and {MAX_LABELS}, got {node_count}")
    rng = rng or random.Random()

    graph.clear()
    ids = _layout(graph, node_count, canvas_w, canvas_h)
    _BUILDERS[topology](graph, ids, min(max(density, 0.0), 1.0), rng)
    return graph


def generate_checked(
    graph: Graph,
    count_steps,
    node_count: int = 8,
    density: float = 0.3,
    topology: str = "random",
    rng: Optional[random.Random] = None,
    canvas_w: float = 900,
    canvas_h: float = 600,
) -> int:
    """
    Generate until `count_steps(snapshot)` reaches the minimum.

    Returns the number of attempts used.  The graph always ends up holding
    the last candidate, gate passed or not.
    """
    rng = rng or random.Random()
    wanted = min_steps_for(node_count)
    for attempt in range(1, MAX_ATTEMPTS + 1):
        generate_graph(graph, node_count, density, topology, rng, canvas_w, canvas_h)
        steps = count_steps(graph.snapshot())
        if steps >= wanted:
            logger.info("generated %s graph with %d nodes in %d attempt(s), %d steps",
                        topology, node_count, attempt, steps)
            return attempt
    logger.warning("no %s graph with %d nodes reached %d steps after %d attempts; keeping last",
                   topology, node_count, wanted, MAX_ATTEMPTS)
    return MAX_ATTEMPTS
