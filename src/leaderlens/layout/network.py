"""Styled, positioned theme network ready for drawing."""

from __future__ import annotations

from dataclasses import dataclass, field

from leaderlens.layout.force import ForceSimulation, SimNode
from leaderlens.layout.scales import ColorScale, LinearScale, SqrtScale, extent
from leaderlens.models.config import LayoutConfig
from leaderlens.themes.network import ThemeNetwork

NODE_COLORS = {
    "official": ("#8ADDA9", "#1DB954"),
    "custom": ("#A7B3FF", "#6b7fff"),
}
NODE_STROKES = {"official": "#158c3f", "custom": "#4e5dc7"}
EDGE_WIDTH_RANGE = (1.0, 5.0)
LABEL_MAX_CHARS = 20


def truncate_label(name: str, max_chars: int = LABEL_MAX_CHARS) -> str:
    if len(name) <= max_chars:
        return name
    return name[: max_chars - 3] + "..."


@dataclass
class PlacedNode:
    id: str
    value: int
    x: float
    y: float
    radius: float
    fill: str
    stroke: str
    label: str
    degree: int = 0


@dataclass
class PlacedEdge:
    source: str
    target: str
    value: int
    width: float


@dataclass
class NetworkLayout:
    width: float
    height: float
    mode: str
    nodes: list[PlacedNode] = field(default_factory=list)
    edges: list[PlacedEdge] = field(default_factory=list)
    ticks: int = 0

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "mode": self.mode,
            "ticks": self.ticks,
            "nodes": [vars(n) for n in self.nodes],
            "links": [vars(e) for e in self.edges],
        }


class NetworkStyle:
    """Radius, colour and edge-width scales for one network.

    Radius and fill both grow with frequency, so larger and more saturated
    always means more frequent.
    """

    def __init__(self, network: ThemeNetwork, mode: str, config: LayoutConfig):
        if mode not in NODE_COLORS:
            raise ValueError(f"Unknown display mode: {mode}")
        values = extent([n.value for n in network.nodes])
        weights = extent([e.value for e in network.edges])
        self.mode = mode
        self.radius = SqrtScale(values, (config.min_radius, config.max_radius))
        self.fill = ColorScale(values, NODE_COLORS[mode])
        self.stroke = NODE_STROKES[mode]
        self.edge_width = LinearScale(weights, EDGE_WIDTH_RANGE)


def create_simulation(
    network: ThemeNetwork,
    style: NetworkStyle,
    config: LayoutConfig,
) -> ForceSimulation:
    nodes = [SimNode(id=n.id, radius=style.radius(n.value)) for n in network.nodes]
    return ForceSimulation(
        nodes,
        [(e.source, e.target) for e in network.edges],
        center=(config.network_width / 2, config.network_height / 2),
        link_distance=config.link_distance,
        charge_strength=config.charge_strength,
        collide_padding=config.collide_padding,
        seed=config.seed,
    )


def layout_network(
    network: ThemeNetwork,
    mode: str = "official",
    config: LayoutConfig | None = None,
) -> NetworkLayout:
    """Run a fresh simulation to rest and return the drawn network."""
    config = config or LayoutConfig()
    layout = NetworkLayout(width=config.network_width, height=config.network_height, mode=mode)
    if network.is_empty:
        return layout

    style = NetworkStyle(network, mode, config)
    simulation = create_simulation(network, style, config)
    positions = simulation.run(config.max_ticks)
    layout.ticks = simulation.ticks

    for node in network.nodes:
        x, y = positions[node.id]
        layout.nodes.append(PlacedNode(
            id=node.id,
            value=node.value,
            x=round(x, 2),
            y=round(y, 2),
            radius=round(style.radius(node.value), 2),
            fill=style.fill(node.value),
            stroke=style.stroke,
            label=truncate_label(node.name),
            degree=network.degree(node.id),
        ))
    for edge in network.edges:
        layout.edges.append(PlacedEdge(
            source=edge.source,
            target=edge.target,
            value=edge.value,
            width=round(style.edge_width(edge.value), 2),
        ))
    return layout
