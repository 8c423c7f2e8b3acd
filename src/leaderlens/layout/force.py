"""Force-directed simulation for the theme network.

Follows the velocity-Verlet scheme of d3-force: every tick ``alpha`` decays
towards ``alpha_target``, each force adjusts node velocities, and velocities
are damped by ``velocity_decay`` before positions move. Pinned nodes
(``fx``/``fy`` set) stay put.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterator

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))


@dataclass
class SimNode:
    id: str
    radius: float = 5.0
    x: float | None = None
    y: float | None = None
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None
    index: int = 0


@dataclass
class SimLink:
    source: SimNode
    target: SimNode
    value: float = 1.0


class ForceSimulation:
    """Link, many-body, centering and collision forces over a set of nodes."""

    def __init__(
        self,
        nodes: list[SimNode],
        links: list[tuple[str, str]] | None = None,
        *,
        center: tuple[float, float] = (0.0, 0.0),
        link_distance: float = 100.0,
        charge_strength: float = -200.0,
        collide_padding: float = 5.0,
        alpha_min: float = 0.001,
        velocity_decay: float = 0.4,
        seed: int = 0,
    ):
        self.nodes = nodes
        self._by_id = {node.id: node for node in nodes}
        self.links = [
            SimLink(self._node(source), self._node(target))
            for source, target in (links or [])
        ]
        self.center = center
        self.link_distance = link_distance
        self.charge_strength = charge_strength
        self.collide_padding = collide_padding

        self.alpha = 1.0
        self.alpha_min = alpha_min
        self.alpha_decay = 1 - alpha_min ** (1 / 300)
        self.alpha_target = 0.0
        self.velocity_decay = 1 - velocity_decay
        self.ticks = 0
        self.stopped = False
        self._random = random.Random(seed)

        self._init_nodes()
        self._init_links()

    def _node(self, node_id: str) -> SimNode:
        try:
            return self._by_id[node_id]
        except KeyError:
            raise KeyError(f"Link references unknown node: {node_id}") from None

    def _init_nodes(self) -> None:
        # phyllotaxis arrangement for unplaced nodes
        for i, node in enumerate(self.nodes):
            node.index = i
            if node.fx is not None:
                node.x = node.fx
            if node.fy is not None:
                node.y = node.fy
            if node.x is None or node.y is None:
                radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
                angle = i * INITIAL_ANGLE
                node.x = self.center[0] + radius * math.cos(angle)
                node.y = self.center[1] + radius * math.sin(angle)

    def _init_links(self) -> None:
        count: dict[int, int] = {}
        for link in self.links:
            count[link.source.index] = count.get(link.source.index, 0) + 1
            count[link.target.index] = count.get(link.target.index, 0) + 1
        self._link_strength = []
        self._link_bias = []
        for link in self.links:
            s = count[link.source.index]
            t = count[link.target.index]
            self._link_strength.append(1 / min(s, t))
            self._link_bias.append(s / (s + t))

    def _jiggle(self) -> float:
        return (self._random.random() - 0.5) * 1e-6

    # forces

    def _force_link(self, alpha: float) -> None:
        for link, strength, bias in zip(self.links, self._link_strength, self._link_bias):
            source, target = link.source, link.target
            x = target.x + target.vx - source.x - source.vx or self._jiggle()
            y = target.y + target.vy - source.y - source.vy or self._jiggle()
            length = math.sqrt(x * x + y * y)
            length = (length - self.link_distance) / length * alpha * strength
            x *= length
            y *= length
            target.vx -= x * bias
            target.vy -= y * bias
            source.vx += x * (1 - bias)
            source.vy += y * (1 - bias)

    def _force_many_body(self, alpha: float) -> None:
        for node in self.nodes:
            for other in self.nodes:
                if other is node:
                    continue
                x = other.x - node.x
                y = other.y - node.y
                dist2 = x * x + y * y
                if x == 0:
                    x = self._jiggle()
                    dist2 += x * x
                if y == 0:
                    y = self._jiggle()
                    dist2 += y * y
                if dist2 < 1:
                    dist2 = math.sqrt(dist2)
                node.vx += x * self.charge_strength * alpha / dist2
                node.vy += y * self.charge_strength * alpha / dist2

    def _force_center(self) -> None:
        if not self.nodes:
            return
        sx = sum(node.x for node in self.nodes) / len(self.nodes) - self.center[0]
        sy = sum(node.y for node in self.nodes) / len(self.nodes) - self.center[1]
        for node in self.nodes:
            node.x -= sx
            node.y -= sy

    def _force_collide(self) -> None:
        for node in self.nodes:
            ri = node.radius + self.collide_padding
            ri2 = ri * ri
            xi = node.x + node.vx
            yi = node.y + node.vy
            for other in self.nodes[node.index + 1:]:
                rj = other.radius + self.collide_padding
                r = ri + rj
                x = xi - other.x - other.vx
                y = yi - other.y - other.vy
                dist2 = x * x + y * y
                if dist2 >= r * r:
                    continue
                if x == 0:
                    x = self._jiggle()
                    dist2 += x * x
                if y == 0:
                    y = self._jiggle()
                    dist2 += y * y
                dist = math.sqrt(dist2)
                push = (r - dist) / dist
                x *= push
                y *= push
                rj2 = rj * rj
                share = rj2 / (ri2 + rj2)
                node.vx += x * share
                node.vy += y * share
                other.vx -= x * (1 - share)
                other.vy -= y * (1 - share)

    # control

    def tick(self) -> None:
        self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay

        self._force_link(self.alpha)
        self._force_many_body(self.alpha)
        self._force_center()
        self._force_collide()

        for node in self.nodes:
            if node.fx is None:
                node.vx *= self.velocity_decay
                node.x += node.vx
            else:
                node.x = node.fx
                node.vx = 0.0
            if node.fy is None:
                node.vy *= self.velocity_decay
                node.y += node.vy
            else:
                node.y = node.fy
                node.vy = 0.0
        self.ticks += 1

    @property
    def settled(self) -> bool:
        return self.alpha < self.alpha_min

    def frames(self, max_ticks: int | None = None) -> Iterator[dict[str, tuple[float, float]]]:
        """Advance one tick per frame until settled, stopped or out of ticks."""
        count = 0
        while not self.stopped and not self.settled:
            if max_ticks is not None and count >= max_ticks:
                return
            self.tick()
            count += 1
            yield self.positions()

    def run(self, max_ticks: int = 300) -> dict[str, tuple[float, float]]:
        for _ in self.frames(max_ticks):
            pass
        return self.positions()

    def stop(self) -> None:
        self.stopped = True

    def restart(self) -> None:
        self.stopped = False

    def reheat(self, alpha_target: float = 0.3) -> None:
        self.alpha_target = alpha_target
        if self.alpha < alpha_target:
            self.alpha = alpha_target
        self.restart()

    def pin(self, node_id: str, x: float, y: float) -> None:
        """Fix a node at (x, y), as while it is being dragged."""
        node = self._node(node_id)
        node.fx = x
        node.fy = y

    def release(self, node_id: str) -> None:
        node = self._node(node_id)
        node.fx = None
        node.fy = None
        self.alpha_target = 0.0

    def positions(self) -> dict[str, tuple[float, float]]:
        return {node.id: (node.x, node.y) for node in self.nodes}
