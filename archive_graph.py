"""
Top-level graph state for one archive view.

ArchiveGraph owns everything that changes while the view is open: the active
theme filter, the projected nodes and links, the hover state, the viewport and
the running layout. Renderers talk to it through explicit methods and event
objects; nothing lives at module level, so several views can coexist.
"""

import copy
import webbrowser
from typing import Callable, List, Optional

from archive_data import ArchiveData, ArchiveItem
from filter_projection import Projection, available_filters, project
from force_layout import ForceLayoutController, LayoutFrame
from interaction_state import (Activate, DragEnd, DragMove, DragStart, GraphHighlight,
                               HoverStateMachine, PointerEnter, PointerLeave, derive_highlight)
from network_config import NetworkConfig
from tag_connectivity import build_graph, network_summary
from tag_ordering import sort_nodes_by_tag
from viewport_adapter import ViewportAdapter


class ArchiveGraph:
    """Filter, hover, layout and viewport state for the archive network"""

    def __init__(self, data: ArchiveData, config: NetworkConfig = None,
                 width: float = 0, height: float = 0, seed: int = None,
                 opener: Callable[[str], object] = None):
        self.config = config or NetworkConfig()
        self.data = data
        # Own copies, so positions and pins stay local to this view
        self.full_items = [copy.copy(item) for item in sort_nodes_by_tag(data.items, "")]
        self._items_by_id = {item.id: item for item in self.full_items}
        self.filters = available_filters(data)

        self.viewport = ViewportAdapter(self.config, width, height)
        self.hover = HoverStateMachine()
        self.active_filter = ""
        self.projection: Optional[Projection] = None
        self.graph = None
        self.layout: Optional[ForceLayoutController] = None
        self.generation = 0

        self._seed = seed
        self._opener = opener or webbrowser.open_new_tab
        self._tick_listeners: List[Callable[[LayoutFrame], None]] = []

        self.rebuild_for_filter("")

    @property
    def nodes(self) -> List[ArchiveItem]:
        return self.projection.nodes

    @property
    def links(self):
        return self.projection.links

    def add_tick_listener(self, callback: Callable[[LayoutFrame], None]):
        """Listen to ticks of the current and every future simulation"""
        self._tick_listeners.append(callback)
        if self.layout is not None:
            self.layout.on_tick(callback)
        return callback

    def rebuild_for_filter(self, tag: Optional[str]) -> Projection:
        """Project the archive for a theme and start a fresh simulation"""
        # The old simulation must be dead before the new one ticks
        if self.layout is not None:
            self.layout.dispose()

        self.active_filter = tag or ""
        self.projection = project(self.full_items, self.active_filter)
        self.graph = build_graph(self.projection.nodes, self.projection.links)
        self.layout = ForceLayoutController(
            self.projection.nodes,
            self.projection.links,
            self.config,
            center=self.viewport.center,
            seed=self._seed,
        )
        for callback in self._tick_listeners:
            self.layout.on_tick(callback)
        self.generation += 1
        return self.projection

    def highlight(self) -> GraphHighlight:
        return derive_highlight(self.projection.nodes, self.projection.links,
                                self.hover.hovered_id, self.config)

    def dispatch(self, event) -> Optional[GraphHighlight]:
        """
        Route one input event. Hover events return the new highlight when the
        hover state changed, everything else returns None.
        """
        if isinstance(event, (PointerEnter, PointerLeave)):
            if self.hover.handle(event):
                return self.highlight()
            return None
        if isinstance(event, DragStart):
            self.layout.drag_start(event.node_id, event.pos)
        elif isinstance(event, DragMove):
            self.layout.drag_move(event.pos)
        elif isinstance(event, DragEnd):
            self.layout.drag_end()
        elif isinstance(event, Activate):
            self.activate(event.node_id)
        else:
            raise ValueError(f"Unsupported event: {event!r}")
        return None

    def activate(self, node_id: str) -> bool:
        """Open a node's source URL, if it has one"""
        item = self._items_by_id.get(node_id)
        if item is None or not item.source:
            return False
        self._opener(item.source)
        return True

    def resize(self, width: float, height: float):
        return self.viewport.on_resize(width, height, self.layout)

    def scroll(self, scroll_y: float):
        return self.viewport.on_scroll(scroll_y)

    def summary(self):
        return network_summary(self.graph)

    def dispose(self):
        if self.layout is not None:
            self.layout.dispose()
        self._tick_listeners.clear()
        self.hover.reset()
