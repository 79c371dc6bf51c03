"""
Infer links between archive items from shared tags.

Two items are linked when they share at least one theme or at least one mood.
"""

from typing import Dict, List, Sequence, Tuple

import networkx as nx

from archive_data import ArchiveItem

Link = Tuple[str, str]


def nodes_share_connection(a: ArchiveItem, b: ArchiveItem) -> bool:
    shared_theme = not set(a.themes).isdisjoint(b.themes)
    shared_mood = not set(a.moods).isdisjoint(b.moods)
    return shared_theme or shared_mood


def build_links(items: Sequence[ArchiveItem]) -> List[Link]:
    """Link every pair (i, j), i < j, that shares a theme or a mood"""
    links = []
    for i in range(len(items)):
        for j in range(i + 1, len(items)):
            if items[i].id == items[j].id:
                continue
            if nodes_share_connection(items[i], items[j]):
                links.append((items[i].id, items[j].id))
    return links


def build_graph(items: Sequence[ArchiveItem], links: Sequence[Link]) -> nx.Graph:
    """Build a NetworkX graph from items and links"""
    graph = nx.Graph()
    for item in items:
        graph.add_node(item.id, name=item.display_name, themes=item.themes, moods=item.moods)
    for source, target in links:
        if source in graph and target in graph:
            graph.add_edge(source, target)
    return graph


def network_summary(graph: nx.Graph, top: int = 5) -> Dict[str, object]:
    """Basic network statistics for reporting"""
    summary = {
        'nodes': graph.number_of_nodes(),
        'links': graph.number_of_edges(),
        'density': 0.0,
        'components': 0,
        'largest_component': 0,
        'isolated': 0,
        'most_connected': [],
    }
    if graph.number_of_nodes() == 0:
        return summary

    summary['density'] = nx.density(graph)
    components = list(nx.connected_components(graph))
    summary['components'] = len(components)
    summary['largest_component'] = len(max(components, key=len))
    summary['isolated'] = nx.number_of_isolates(graph)

    degrees = sorted(graph.degree(), key=lambda x: (-x[1], x[0]))
    summary['most_connected'] = [
        (graph.nodes[node_id].get('name', node_id), degree)
        for node_id, degree in degrees[:top] if degree > 0
    ]
    return summary


def print_network_summary(summary: Dict[str, object]):
    print(f"\nNetwork stats:")
    print(f"  Nodes (images): {summary['nodes']}")
    print(f"  Links (shared tags): {summary['links']}")
    if summary['nodes'] > 0:
        print(f"  Network density: {summary['density']:.3f}")
        print(f"  Connected components: {summary['components']}")
        print(f"  Largest component size: {summary['largest_component']}")
        print(f"  Isolated images: {summary['isolated']}")
    if summary['most_connected']:
        print(f"  Most connected images:")
        for name, degree in summary['most_connected']:
            print(f"    {name}: {degree} links")
