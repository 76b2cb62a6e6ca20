from typing import Optional

import matplotlib.pyplot as plt
import networkx as nx

from .network import Network
from .structure import to_networkx


def visualize_network(network: Network, ax=None, path: Optional[str] = None):
    """
    Visualize a Network as a layered directed graph.
    Inputs = green, hidden = blue, outputs = red.
    Edge width follows the absolute weight value, negative weights are dashed.
    """
    G = to_networkx(network)

    colors = {"input": "lightgreen", "hidden": "lightblue", "output": "salmon"}

    # Layout: one column per layer, centred vertically
    pos = {}
    for layer, node_ids in enumerate(network.layers):
        offset = (len(node_ids) - 1) / 2
        for i, nid in enumerate(node_ids):
            pos[nid] = (layer, offset - i)

    own_figure = ax is None
    if own_figure:
        fig, ax = plt.subplots()

    node_colors = [colors[G.nodes[n]["role"]] for n in G.nodes()]
    nx.draw_networkx_nodes(G, pos, node_color=node_colors, node_size=800, ax=ax)

    edgelist = list(G.edges(data=True))
    widths = [0.5 + 2.0 * abs(data["weight"]) for _, _, data in edgelist]
    styles = ["solid" if data["weight"] >= 0 else "dashed" for _, _, data in edgelist]
    nx.draw_networkx_edges(
        G, pos, edgelist=[(u, v) for u, v, _ in edgelist],
        width=widths, style=styles, edge_color="black", ax=ax
    )

    labels = {n: f"{G.nodes[n]['bias']:.2f}" for n in G.nodes()}
    nx.draw_networkx_labels(G, pos, labels=labels, font_size=8, ax=ax)

    if path is not None:
        ax.figure.savefig(path)
    if own_figure:
        if path is None:
            plt.show()
        else:
            plt.close(ax.figure)
    return ax
