"""
Project the full archive onto the node/link set for one theme filter.
"""

from typing import List, Optional, Sequence

from archive_data import ArchiveData, ArchiveItem
from tag_connectivity import Link, build_links
from tag_ordering import sort_nodes_by_tag


class Projection:
    """Filtered, ordered nodes and the links between them"""

    def __init__(self, tag: str, nodes: List[ArchiveItem], links: List[Link]):
        self.tag = tag
        self.nodes = nodes
        self.links = links

    @property
    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def __repr__(self):
        return f"Projection(tag={self.tag!r}, nodes={len(self.nodes)}, links={len(self.links)})"


def apply_theme_filter(items: Sequence[ArchiveItem], tag: Optional[str]) -> List[ArchiveItem]:
    # Only themes are filtered on, never moods
    if not tag:
        return list(items)
    return [item for item in items if tag in item.themes]


def project(full_items: Sequence[ArchiveItem], tag: Optional[str] = "") -> Projection:
    tag = tag or ""
    nodes = sort_nodes_by_tag(apply_theme_filter(full_items, tag), tag)
    return Projection(tag, nodes, build_links(nodes))


def available_filters(data: ArchiveData) -> List[str]:
    """Theme values offered by the filter bar (not counting "All")"""
    if data.meta.get('themes'):
        return list(dict.fromkeys(data.meta['themes']))
    themes = set()
    for item in data.items:
        themes.update(item.themes)
    return sorted(themes)
