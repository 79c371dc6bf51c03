"""
Image Archive Network Visualizer

This script builds the conceptual network of an image archive: images are
linked when they share a theme or a mood, laid out with a force simulation,
and exported as an interactive HTML page (theme filter, hover highlighting,
click to open the image source, scroll parallax).

Usage:
    python archive_network_visualizer.py --data data.json
    python archive_network_visualizer.py --data https://example.org/data.json --open
    python archive_network_visualizer.py --data data.json --gui
"""

import argparse
import json
import os
import sys
import webbrowser
from typing import Dict, List

import plotly.graph_objects as go

from archive_data import ArchiveData, DataLoadError, load_archive
from archive_graph import ArchiveGraph
from interaction_state import TOUCHING, derive_highlight
from network_config import NetworkConfig
from tag_connectivity import print_network_summary


class ArchiveNetworkVisualizer:
    """Create interactive network visualization of an image archive"""

    def __init__(self, data: ArchiveData, config: NetworkConfig = None, seed: int = None):
        self.data = data
        self.config = config or NetworkConfig()
        self.graph = ArchiveGraph(data, self.config, seed=seed)

        print_network_summary(self.graph.summary())
        if data.skipped:
            print(f"  Skipped malformed entries: {data.skipped}")

    def layout_filter(self, tag: str, max_ticks: int = 1000) -> int:
        """Project one filter and relax its layout; returns ticks run"""
        self.graph.rebuild_for_filter(tag)
        ticks = self.graph.layout.run(max_ticks)
        if self.graph.layout.dropped_links:
            print(f"  Note: dropped {self.graph.layout.dropped_links} links with unknown ids")
        return ticks

    def _filter_traces(self, tag: str, visible: bool) -> Dict[str, object]:
        """Edge, highlight and node traces plus hover data for the current projection"""
        config = self.config
        nodes = self.graph.nodes
        links = self.graph.links
        positions = self.graph.layout.positions()
        label = tag or 'All'

        edge_x = []
        edge_y = []
        for source, target in links:
            x0, y0 = positions[source]
            x1, y1 = positions[target]
            edge_x.extend([x0, x1, None])
            edge_y.extend([y0, y1, None])

        edge_trace = go.Scatter(
            x=edge_x, y=edge_y,
            mode='lines',
            line=dict(width=1.5, color=config.line_color),
            opacity=config.link_opacity,
            hoverinfo='none',
            name=f'Links ({label})',
            showlegend=False,
            visible=visible,
        )
        highlight_trace = go.Scatter(
            x=[], y=[],
            mode='lines',
            line=dict(width=2.5, color=config.line_color_hover),
            hoverinfo='none',
            name=f'Highlighted Links ({label})',
            showlegend=False,
            visible=visible,
        )

        node_text = []
        for node in nodes:
            degree = self.graph.graph.degree(node.id)
            hover_text = f"<b>{node.display_name}</b><br>"
            if node.themes:
                hover_text += f"Themes: {', '.join(node.themes)}<br>"
            if node.moods:
                hover_text += f"Moods: {', '.join(node.moods)}<br>"
            hover_text += f"Connections: {degree}"
            if node.source:
                hover_text += "<br><i>Click to open source</i>"
            node_text.append(hover_text)

        base_size = config.node_radius
        node_trace = go.Scatter(
            x=[positions[node.id][0] for node in nodes],
            y=[positions[node.id][1] for node in nodes],
            mode='markers',
            hoverinfo='text',
            text=node_text,
            marker=dict(
                size=[base_size] * len(nodes),
                color='rgba(0,0,0,0)',
                line=dict(width=2, color=config.line_color),
                opacity=1.0,
            ),
            name=f'Images ({label})',
            customdata=[[node.id, node.source or ''] for node in nodes],
            showlegend=False,
            visible=visible,
        )

        images = []
        for node in nodes:
            x, y = positions[node.id]
            images.append(dict(
                source=node.image,
                xref='x', yref='y',
                x=x, y=y,
                sizex=config.node_radius * 2, sizey=config.node_radius * 2,
                xanchor='center', yanchor='middle',
                sizing='contain',
                layer='below',
                opacity=1.0,
            ))

        # Hover styles per hovered node, precomputed from the highlight model
        hover_styles = []
        for node in nodes:
            highlight = derive_highlight(nodes, links, node.id, config)
            seg_x = []
            seg_y = []
            for (source, target), style in highlight.links:
                if style.classification == TOUCHING:
                    seg_x.extend([positions[source][0], positions[target][0], None])
                    seg_y.extend([positions[source][1], positions[target][1], None])
            hover_styles.append({
                'opacity': [highlight.nodes[n.id].opacity for n in nodes],
                'scale': [highlight.nodes[n.id].scale for n in nodes],
                'segX': seg_x,
                'segY': seg_y,
            })

        return {
            'traces': [edge_trace, highlight_trace, node_trace],
            'images': images,
            'hover': hover_styles,
            'count': len(nodes),
        }

    def create_visualization(self, output_file: str = 'image_archive_network.html',
                             dark_mode: bool = False, initial_filter: str = "",
                             max_ticks: int = 1000):
        """Create interactive Plotly visualization"""

        if not self.data.items:
            print("No archive data to visualize!")
            return None

        print("\nGenerating visualization...")

        if initial_filter and initial_filter not in self.graph.filters:
            print(f"  Note: unknown filter '{initial_filter}', showing all images")
            initial_filter = ""

        filters = [""] + self.graph.filters
        traces = []
        images_by_filter = {}
        filter_meta = {}

        for tag in filters:
            ticks = self.layout_filter(tag, max_ticks)
            label = tag or 'All'
            print(f"  {label}: {len(self.graph.nodes)} images, {len(self.graph.links)} links, settled after {ticks} ticks")

            built = self._filter_traces(tag, visible=(tag == initial_filter))
            filter_meta[tag] = {
                'edgeIdx': len(traces),
                'highlightIdx': len(traces) + 1,
                'nodeIdx': len(traces) + 2,
                'count': built['count'],
                'hover': built['hover'],
            }
            traces.extend(built['traces'])
            images_by_filter[tag] = built['images']

        # One dropdown entry per filter toggles its traces and images
        buttons = []
        for tag in filters:
            start = filter_meta[tag]['edgeIdx']
            visible = [start <= i < start + 3 for i in range(len(traces))]
            buttons.append(dict(
                label=tag or 'All',
                method='update',
                args=[{'visible': visible}, {'images': images_by_filter[tag]}],
            ))

        width = self.graph.viewport.width
        height = self.graph.viewport.height
        background = '#0f1320' if dark_mode else 'white'
        text_color = '#e8ecf4' if dark_mode else '#333333'

        fig = go.Figure(
            data=traces,
            layout=go.Layout(
                title=dict(
                    text=f'<b>Image Archive: Conceptual Network</b><br>{len(self.data.items)} images linked by shared themes and moods',
                    x=0.5,
                    xanchor='center',
                    font=dict(size=20, color=text_color)
                ),
                showlegend=False,
                width=width,
                height=height,
                hovermode='closest',
                margin=dict(b=20, l=5, r=5, t=100),
                images=images_by_filter[initial_filter],
                updatemenus=[dict(
                    type='dropdown',
                    buttons=buttons,
                    active=filters.index(initial_filter),
                    x=0.01, xanchor='left',
                    y=1.08, yanchor='top',
                )],
                xaxis=dict(
                    showgrid=False,
                    zeroline=False,
                    showticklabels=False,
                    range=[0, width],
                ),
                yaxis=dict(
                    showgrid=False,
                    zeroline=False,
                    showticklabels=False,
                    range=[height, 0],
                    scaleanchor='x',
                    scaleratio=1,
                ),
                plot_bgcolor=background,
                paper_bgcolor=background,
                clickmode='event',
                dragmode='pan'
            )
        )

        html_content = fig.to_html(include_plotlyjs='cdn')
        html_content = html_content.replace('</body>', self._custom_js(filter_meta, initial_filter, background) + '</body>')

        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(html_content)

        print(f"Visualization saved to: {output_file}")
        return output_file

    def _custom_js(self, filter_meta: Dict[str, dict], initial_filter: str, background: str) -> str:
        settings = {
            'filters': filter_meta,
            # Dropdown order; object key order is not reliable for numeric-looking tags
            'filterOrder': list(filter_meta),
            'initialFilter': initial_filter,
            'nodeRadius': self.config.node_radius,
            'linkOpacity': self.config.link_opacity,
            'dimmedLinkOpacity': self.config.dimmed_link_opacity,
            'parallaxFactor': self.config.parallax_factor,
            'transitionMs': self.config.transition_ms,
        }
        custom_js = f"""
<style>
body {{
    margin: 0;
    min-height: 160vh;
    background-color: {background};
}}
.plotly-graph-div {{
    will-change: transform;
}}
</style>
<script>
var ARCHIVE = {json.dumps(settings)};
"""
        # Rest of the script has no Python substitutions
        custom_js += """
document.addEventListener('DOMContentLoaded', function() {
    var myPlot = document.getElementsByClassName('plotly-graph-div')[0];
    var activeFilter = ARCHIVE.initialFilter;

    function initVisualization() {
        if (!myPlot || !myPlot.data) {
            setTimeout(initVisualization, 100);
            return;
        }

        // Track the filter chosen in the dropdown
        myPlot.on('plotly_buttonclicked', function(event) {
            activeFilter = ARCHIVE.filterOrder[event.active] || '';
        });

        function resetHover(meta) {
            var sizes = Array(meta.count).fill(ARCHIVE.nodeRadius);
            Plotly.restyle(myPlot, {'marker.size': [sizes], 'marker.opacity': 1}, [meta.nodeIdx]);
            Plotly.restyle(myPlot, {'opacity': ARCHIVE.linkOpacity}, [meta.edgeIdx]);
            Plotly.restyle(myPlot, {'x': [[]], 'y': [[]]}, [meta.highlightIdx]);
            var imageUpdate = {};
            for (var i = 0; i < meta.count; i++) {
                imageUpdate['images[' + i + '].opacity'] = 1;
                imageUpdate['images[' + i + '].sizex'] = ARCHIVE.nodeRadius * 2;
                imageUpdate['images[' + i + '].sizey'] = ARCHIVE.nodeRadius * 2;
            }
            Plotly.relayout(myPlot, imageUpdate);
        }

        function applyHover(meta, nodeIdx) {
            var style = meta.hover[nodeIdx];
            var sizes = style.scale.map(function(s) { return ARCHIVE.nodeRadius * s; });
            Plotly.restyle(myPlot, {'marker.size': [sizes], 'marker.opacity': [style.opacity]}, [meta.nodeIdx]);
            Plotly.restyle(myPlot, {'opacity': ARCHIVE.dimmedLinkOpacity}, [meta.edgeIdx]);
            Plotly.restyle(myPlot, {'x': [style.segX], 'y': [style.segY]}, [meta.highlightIdx]);
            var imageUpdate = {};
            for (var i = 0; i < meta.count; i++) {
                imageUpdate['images[' + i + '].opacity'] = style.opacity[i];
                imageUpdate['images[' + i + '].sizex'] = ARCHIVE.nodeRadius * 2 * style.scale[i];
                imageUpdate['images[' + i + '].sizey'] = ARCHIVE.nodeRadius * 2 * style.scale[i];
            }
            Plotly.relayout(myPlot, imageUpdate);
        }

        myPlot.on('plotly_hover', function(data) {
            var point = data.points[0];
            var meta = ARCHIVE.filters[activeFilter];
            if (!meta || point.curveNumber !== meta.nodeIdx) return;
            applyHover(meta, point.pointNumber);
        });

        myPlot.on('plotly_unhover', function() {
            var meta = ARCHIVE.filters[activeFilter];
            if (meta) resetHover(meta);
        });

        // Click: open source URL in new tab
        myPlot.on('plotly_click', function(data) {
            var point = data.points[0];
            var meta = ARCHIVE.filters[activeFilter];
            if (!meta || point.curveNumber !== meta.nodeIdx) return;
            var source = point.customdata[1];
            if (source) window.open(source, '_blank', 'noopener');
        });
    }

    // Parallax on scroll
    function onScroll() {
        if (!myPlot) return;
        var drift = (window.scrollY || window.pageYOffset) * ARCHIVE.parallaxFactor;
        myPlot.style.transform = 'translate(0px,' + drift + 'px)';
    }
    window.addEventListener('scroll', onScroll, {passive: true});
    onScroll();

    initVisualization();
});
</script>
"""
        return custom_js


def build_config(args) -> NetworkConfig:
    """Config file first, then command line overrides"""
    config = NetworkConfig.from_file(args.config) if args.config else NetworkConfig()
    overrides = {}
    for key in ('link_distance', 'charge_strength', 'node_radius'):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value
    return config.update(overrides)


def main(argv: List[str] = None):
    parser = argparse.ArgumentParser(
        description='Visualize an image archive as a network of shared themes and moods'
    )
    parser.add_argument(
        '--data',
        default='data.json',
        help='Archive document: local path or http(s) URL (default: data.json)'
    )
    parser.add_argument(
        '--output',
        default='image_archive_network.html',
        help='Output HTML file path'
    )
    parser.add_argument(
        '--open',
        action='store_true',
        help='Open visualization in browser after creating'
    )
    parser.add_argument(
        '--dark-mode',
        action='store_true',
        help='Use dark background instead of white'
    )
    parser.add_argument(
        '--filter',
        default='',
        help='Theme selected when the page opens (default: all images)'
    )
    parser.add_argument(
        '--config',
        help='JSON file with layout and styling overrides'
    )
    parser.add_argument('--link-distance', dest='link_distance', type=float, help='Target link length')
    parser.add_argument('--charge-strength', dest='charge_strength', type=float, help='Repulsion strength (negative)')
    parser.add_argument('--node-radius', dest='node_radius', type=float, help='Image glyph radius')
    parser.add_argument(
        '--max-ticks',
        type=int,
        default=1000,
        help='Upper bound on simulation ticks per filter'
    )
    parser.add_argument(
        '--seed',
        type=int,
        help='Random seed for reproducible layouts'
    )
    parser.add_argument(
        '--list-tags',
        action='store_true',
        help='List the available theme filters and exit'
    )
    parser.add_argument(
        '--gui',
        action='store_true',
        help='Open the interactive window instead of writing HTML'
    )

    args = parser.parse_args(argv)

    print("=" * 60)
    print("Image Archive Network Visualizer")
    print("=" * 60)

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if args.gui:
        from archive_network_gui import run_gui
        return run_gui(args.data, config, seed=args.seed)

    print(f"\nLoading archive from {args.data}...")
    try:
        data = load_archive(args.data)
    except DataLoadError as e:
        print(f"Error: {e}")
        print("Failed to load data. Check the archive document and try again.")
        return 1
    print(f"Loaded {len(data)} images")

    visualizer = ArchiveNetworkVisualizer(data, config, seed=args.seed)

    if args.list_tags:
        print("\nAvailable filters:")
        for tag in visualizer.graph.filters:
            print(f"  • {tag}")
        return 0

    output_path = visualizer.create_visualization(
        args.output,
        dark_mode=args.dark_mode,
        initial_filter=args.filter,
        max_ticks=args.max_ticks,
    )

    if args.open and output_path:
        print(f"\nOpening visualization in browser...")
        webbrowser.open('file://' + os.path.abspath(output_path))

    print("\nDone!")
    print("=" * 60)
    return 0


if __name__ == '__main__':
    sys.exit(main())
