"""Reduce theme tallies to a bounded node/edge set."""

from __future__ import annotations

from dataclasses import dataclass, field

from leaderlens.themes.extract import split_pair_key


@dataclass
class ThemeNode:
    id: str
    value: int

    @property
    def name(self) -> str:
        return self.id


@dataclass
class ThemeEdge:
    source: str
    target: str
    value: int


@dataclass
class ThemeNetwork:
    nodes: list[ThemeNode] = field(default_factory=list)
    edges: list[ThemeEdge] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def degree(self, node_id: str) -> int:
        return sum(1 for e in self.edges if node_id in (e.source, e.target))

    def to_dict(self) -> dict:
        return {
            "nodes": [{"id": n.id, "name": n.name, "value": n.value} for n in self.nodes],
            "links": [
                {"source": e.source, "target": e.target, "value": e.value}
                for e in self.edges
            ],
        }


def build_network(
    frequency: dict[str, int],
    co_occurrence: dict[str, int],
    threshold: int = 2,
    max_nodes: int = 50,
) -> ThemeNetwork:
    """Top ``max_nodes`` themes by frequency, joined by pairs counted ≥ ``threshold``.

    Ties keep the frequency table's insertion order. Pairs touching a theme
    outside the selection are dropped.
    """
    if threshold < 1:
        raise ValueError(f"threshold must be >= 1, got {threshold}")
    if max_nodes < 1:
        raise ValueError(f"max_nodes must be >= 1, got {max_nodes}")

    ranked = sorted(frequency.items(), key=lambda item: -item[1])[:max_nodes]
    nodes = [ThemeNode(id=theme, value=count) for theme, count in ranked]
    selected = {node.id for node in nodes}

    edges = []
    for key, weight in co_occurrence.items():
        if weight < threshold:
            continue
        source, target = split_pair_key(key)
        if source == target:
            continue
        if source in selected and target in selected:
            edges.append(ThemeEdge(source=source, target=target, value=weight))

    return ThemeNetwork(nodes=nodes, edges=edges)
