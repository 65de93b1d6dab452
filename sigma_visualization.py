"""
sigma_visualization.py

Plotly-based visualization for finite σ-algebras.

This module turns collections of sets into interactive Hasse diagrams
(ordered by inclusion), draws the universe as a clickable strip of
elements, and renders individual frames of a closure trace.
"""

import networkx as nx
import plotly.graph_objects as go

from sigma_core import SigmaPoset, format_set, normalize, sigma_atoms


ADDED_COLOR = 'tomato'
MEMBER_COLOR = 'lightskyblue'
ATOM_COLOR = 'limegreen'
SELECTED_COLOR = 'gold'
UNSELECTED_COLOR = 'lightgray'


def compute_layout(G, layout_type):
    """
    Compute node positions based on layout algorithm.

    Args:
        G: NetworkX DiGraph
        layout_type: 'hierarchical', 'force', or 'circular'

    Returns:
        dict mapping node_id -> (x, y) position
    """
    if layout_type == 'hierarchical':
        return hierarchical_layout(G)
    elif layout_type == 'force':
        return nx.spring_layout(G, k=0.5, iterations=50, seed=0)
    elif layout_type == 'circular':
        return nx.circular_layout(G)
    else:
        raise ValueError(f"Unknown layout type: {layout_type}")


def hierarchical_layout(G):
    """
    Layer a DAG by longest path from its sources.

    Each node sits one level above the highest of its predecessors, so in
    an inclusion poset ∅ is at the bottom and Ω at the top.

    Args:
        G: NetworkX DiGraph

    Returns:
        dict mapping node_id -> (x, y) position
    """
    if G.number_of_nodes() == 0:
        return {}

    try:
        topo_order = list(nx.topological_sort(G))
    except nx.NetworkXUnfeasible:
        return nx.spring_layout(G, k=0.5, iterations=50, seed=0)

    levels = {}
    for node in topo_order:
        pred_levels = [levels[pred] for pred in G.predecessors(node)]
        levels[node] = max(pred_levels) + 1 if pred_levels else 0

    level_groups = {}
    for node, level in levels.items():
        level_groups.setdefault(level, []).append(node)

    pos = {}
    max_level = max(levels.values())
    for level, nodes in level_groups.items():
        y = level / max(max_level, 1)
        n_nodes = len(nodes)
        for i, node in enumerate(sorted(nodes)):
            x = i / (n_nodes - 1) if n_nodes > 1 else 0.5
            pos[node] = (x, y)

    return pos


def create_edge_trace(G, pos):
    """Plotly line trace for all edges of G."""
    edge_x = []
    edge_y = []

    for u, v in G.edges():
        x0, y0 = pos[u]
        x1, y1 = pos[v]
        edge_x.extend([x0, x1, None])
        edge_y.extend([y0, y1, None])

    return go.Scatter(
        x=edge_x,
        y=edge_y,
        line=dict(width=1, color='#888'),
        hoverinfo='none',
        mode='lines'
    )


def create_hover_text(node_id, s, G):
    """
    Hover text for a set in a Hasse diagram.

    Args:
        node_id: Node identifier
        s: FiniteSet at that node
        G: NetworkX DiGraph of the (reduced) poset

    Returns:
        str: HTML-formatted hover text
    """
    lines = [
        f"<b>{format_set(s)}</b>",
        f"|A| = {len(s)}",
        "",
        f"Covered by: {G.out_degree(node_id)}",
        f"Covers: {G.in_degree(node_id)}",
    ]
    return "<br>".join(lines)


def get_node_color(s, highlight, atoms):
    if s in highlight:
        return ADDED_COLOR
    if s in atoms:
        return ATOM_COLOR
    return MEMBER_COLOR


def create_node_trace(G, sets, pos, highlight=None, show_atoms=True, node_size=28):
    """
    Plotly marker trace for the sets of a poset.

    Args:
        G: NetworkX DiGraph
        sets: list of FiniteSets indexed by node ID
        pos: dict mapping node_id -> (x, y) position
        highlight: sets drawn in ADDED_COLOR
        show_atoms: colour the atoms of the collection in ATOM_COLOR
        node_size: marker size

    Returns:
        plotly.graph_objects.Scatter trace
    """
    highlight = {normalize(s) for s in (highlight or [])}
    atoms = set(sigma_atoms(sets)) if show_atoms else set()

    nodes = list(G.nodes())
    return go.Scatter(
        x=[pos[n][0] for n in nodes],
        y=[pos[n][1] for n in nodes],
        mode='markers+text',
        text=[format_set(sets[n]) for n in nodes],
        textposition='top center',
        textfont=dict(size=11, color='black'),
        hoverinfo='text',
        hovertext=[create_hover_text(n, sets[n], G) for n in nodes],
        customdata=[list(sets[n]) for n in nodes],
        marker=dict(
            size=node_size,
            color=[get_node_color(sets[n], highlight, atoms) for n in nodes],
            line=dict(width=1, color='darkgray')
        )
    )


def create_hasse_figure(collection, highlight=None, title=None, layout='hierarchical',
                        show_atoms=True, width=700, height=500):
    """
    Hasse diagram of a collection ordered by inclusion.

    Args:
        collection: iterable of sets
        highlight: optional sets to draw in the 'added' colour
        title: Optional title; defaults to the collection size
        layout: 'hierarchical', 'force', or 'circular'
        show_atoms: colour the minimal non-empty members
        width: figure width in pixels
        height: figure height in pixels

    Returns:
        plotly.graph_objects.Figure
    """
    poset = SigmaPoset(collection).transitive_reduction()
    G = poset.graph
    pos = compute_layout(G, layout)

    fig = go.Figure(data=[
        create_edge_trace(G, pos),
        create_node_trace(G, poset.set_list, pos, highlight=highlight, show_atoms=show_atoms),
    ])
    fig.update_layout(
        title=dict(text=title or f"Collection ({len(poset.set_list)} sets)", font=dict(size=14)),
        showlegend=False,
        hovermode='closest',
        margin=dict(b=20, l=20, r=20, t=50),
        xaxis=dict(showgrid=False, zeroline=False, showticklabels=False, range=[-0.15, 1.15]),
        yaxis=dict(showgrid=False, zeroline=False, showticklabels=False, range=[-0.15, 1.2]),
        plot_bgcolor='white',
        width=width,
        height=height
    )
    return fig


def create_universe_figure(omega, selected=None, width=350, height=120):
    """
    The universe as a row of clickable elements.

    Selected elements are drawn in SELECTED_COLOR. Each point carries its
    element as customdata for click handling.

    Args:
        omega: the universe
        selected: subset of omega currently selected

    Returns:
        plotly.graph_objects.Figure
    """
    omega = normalize(omega)
    selected = normalize(selected or [])
    elements = list(omega)
    n = len(elements)

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=[i / (n - 1) if n > 1 else 0.5 for i in range(n)],
        y=[0.5] * n,
        mode='markers+text',
        marker=dict(
            size=38,
            color=[SELECTED_COLOR if e in selected else UNSELECTED_COLOR for e in elements],
            line=dict(width=2, color='darkgray')
        ),
        text=[str(e) for e in elements],
        textposition='middle center',
        textfont=dict(size=14, color='black'),
        hoverinfo='text',
        hovertext=[f"ω = {e}<br>Click to toggle" for e in elements],
        customdata=elements
    ))
    fig.update_layout(
        showlegend=False,
        margin=dict(b=10, l=10, r=10, t=30),
        xaxis=dict(showgrid=False, zeroline=False, showticklabels=False, range=[-0.15, 1.15]),
        yaxis=dict(showgrid=False, zeroline=False, showticklabels=False, range=[0, 1]),
        plot_bgcolor='white',
        width=width,
        height=height,
        title=dict(text=f"Ω = {format_set(omega)}", font=dict(size=12))
    )
    return fig


def create_step_figure(step, total_steps=None, width=700, height=500):
    """
    Hasse diagram of one closure step, with the newly added sets highlighted.

    Args:
        step: GenerationStep
        total_steps: trace length, shown in the title if given

    Returns:
        plotly.graph_objects.Figure
    """
    counter = f"Step {step.step_number + 1}"
    if total_steps is not None:
        counter += f" / {total_steps}"
    return create_hasse_figure(
        step.current_collection,
        highlight=step.added_sets,
        title=f"{counter}: {step.description}",
        width=width,
        height=height
    )


def export_to_dot(poset, filename=None):
    """
    Export poset to GraphViz DOT format.

    Args:
        poset: SigmaPoset object
        filename: Optional filename to write to (if None, returns string)

    Returns:
        str: DOT format string (if filename is None)
    """
    lines = ['digraph G {', '  rankdir = BT;']

    for node in poset.graph.nodes():
        lines.append(f'  "{format_set(poset.get_set(node))}";')
    for u, v in poset.graph.edges():
        lines.append(f'  "{format_set(poset.get_set(u))}" -> "{format_set(poset.get_set(v))}";')

    lines.append('}')
    dot_string = '\n'.join(lines)

    if filename:
        with open(filename, 'w', encoding='utf-8') as f:
            f.write(dot_string)
        return None
    return dot_string
