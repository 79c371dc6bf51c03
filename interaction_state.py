"""
Hover state and neighbor highlighting.

Pointer and drag input arrive as small event objects. Hover events drive a
two-state machine (idle / hovering a node); drag events are forwarded to the
layout. The highlight for every node and link is derived from scratch from the
current graph and hovered id, so a re-render after a filter change never
carries a stale hover.
"""

from typing import Dict, List, Optional, Sequence, Set, Tuple

from archive_data import ArchiveItem
from network_config import NetworkConfig
from tag_connectivity import Link

# Node classifications
SELF = 'self'
CONNECTED = 'connected'
OTHER = 'other'
NEUTRAL = 'neutral'

# Link classifications (plus OTHER / NEUTRAL)
TOUCHING = 'touching'


class PointerEnter:
    def __init__(self, node_id: str):
        self.node_id = node_id


class PointerLeave:
    def __init__(self, node_id: Optional[str] = None):
        self.node_id = node_id


class DragStart:
    def __init__(self, node_id: str, pos: Tuple[float, float] = None):
        self.node_id = node_id
        self.pos = pos


class DragMove:
    def __init__(self, pos: Tuple[float, float]):
        self.pos = pos


class DragEnd:
    pass


class Activate:
    def __init__(self, node_id: str):
        self.node_id = node_id


class HoverStateMachine:
    """Idle when hovered_id is None, otherwise hovering that node"""

    def __init__(self):
        self.hovered_id = None

    @property
    def idle(self) -> bool:
        return self.hovered_id is None

    def pointer_enter(self, node_id: str) -> bool:
        changed = node_id != self.hovered_id
        self.hovered_id = node_id
        return changed

    def pointer_leave(self, node_id: Optional[str] = None) -> bool:
        # A late leave from the previous node must not clear the new hover
        if self.hovered_id is None:
            return False
        if node_id is not None and node_id != self.hovered_id:
            return False
        self.hovered_id = None
        return True

    def handle(self, event) -> bool:
        """Apply a hover event; returns True if the state changed"""
        if isinstance(event, PointerEnter):
            return self.pointer_enter(event.node_id)
        if isinstance(event, PointerLeave):
            return self.pointer_leave(event.node_id)
        return False

    def reset(self):
        self.hovered_id = None


class NodeStyle:
    def __init__(self, classification: str, opacity: float, scale: float):
        self.classification = classification
        self.opacity = opacity
        self.scale = scale

    def __eq__(self, other):
        return (isinstance(other, NodeStyle) and
                (self.classification, self.opacity, self.scale) ==
                (other.classification, other.opacity, other.scale))

    def __repr__(self):
        return f"NodeStyle({self.classification!r}, opacity={self.opacity}, scale={self.scale})"


class LinkStyle:
    def __init__(self, classification: str, color: str, opacity: float):
        self.classification = classification
        self.color = color
        self.opacity = opacity

    def __repr__(self):
        return f"LinkStyle({self.classification!r}, color={self.color!r}, opacity={self.opacity})"


class GraphHighlight:
    """Per-node and per-link styles for one hover state"""

    def __init__(self, hovered_id: Optional[str], connected: Set[str],
                 nodes: Dict[str, NodeStyle], links: List[Tuple[Link, LinkStyle]]):
        self.hovered_id = hovered_id
        self.connected = connected
        self.nodes = nodes
        self.links = links

    @property
    def idle(self) -> bool:
        return self.hovered_id is None

    def classification(self, node_id: str) -> str:
        return self.nodes[node_id].classification

    def classifications(self) -> Dict[str, str]:
        return {node_id: style.classification for node_id, style in self.nodes.items()}


def connected_ids(links: Sequence[Link], node_id: str) -> Set[str]:
    """Ids one link away from node_id"""
    connected = set()
    for source, target in links:
        if source == node_id:
            connected.add(target)
        if target == node_id:
            connected.add(source)
    connected.discard(node_id)
    return connected


def derive_highlight(nodes: Sequence[ArchiveItem], links: Sequence[Link],
                     hovered_id: Optional[str], config: NetworkConfig = None) -> GraphHighlight:
    config = config or NetworkConfig()
    node_ids = {node.id for node in nodes}
    if hovered_id not in node_ids:
        hovered_id = None

    connected = connected_ids(links, hovered_id) & node_ids if hovered_id else set()

    node_styles = {}
    for node in nodes:
        if hovered_id is None:
            node_styles[node.id] = NodeStyle(NEUTRAL, 1.0, 1.0)
        elif node.id == hovered_id:
            node_styles[node.id] = NodeStyle(SELF, 1.0, config.hover_scale)
        elif node.id in connected:
            node_styles[node.id] = NodeStyle(CONNECTED, 1.0, config.connected_scale)
        else:
            node_styles[node.id] = NodeStyle(OTHER, config.unrelated_opacity, 1.0)

    link_styles = []
    for link in links:
        if hovered_id is None:
            style = LinkStyle(NEUTRAL, config.line_color, config.link_opacity)
        elif hovered_id in link:
            style = LinkStyle(TOUCHING, config.line_color_hover, 1.0)
        else:
            style = LinkStyle(OTHER, config.line_color, config.dimmed_link_opacity)
        link_styles.append((link, style))

    return GraphHighlight(hovered_id, connected, node_styles, link_styles)
