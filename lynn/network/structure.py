import networkx as nx

from .network import Network, node_type_for
from ..errors import InvalidTopology


def to_networkx(network: Network) -> nx.DiGraph:
    """Builds a directed graph view of the network, one graph node per neuron."""
    G = nx.DiGraph()
    for node in network.nodes.values():
        G.add_node(node.id, layer=node.layer, role=node.type, bias=node.bias, value=node.value)
    for weight in network.weights.values():
        G.add_edge(weight.parent, weight.child, weight=weight.value, id=weight.id)
    return G


def check_structure(network: Network) -> None:
    """
    Validates the layered structure and raises InvalidTopology on the first violation.

    Every layer is non-empty, every node of layer k > 0 has exactly one weight
    from each node of layer k - 1 and no other, input nodes have no incoming
    weights and output nodes have no outgoing weights.
    """
    if len(network.layers) < 2:
        raise InvalidTopology("A network needs at least an input and an output layer")
    for layer, node_ids in enumerate(network.layers):
        if not node_ids:
            raise InvalidTopology(f"Layer {layer} has no nodes")

    G = to_networkx(network)
    # Parallel weights would collapse into one edge in the view
    if G.number_of_edges() != len(network.weights):
        raise InvalidTopology("Two weights connect the same pair of nodes")
    if not nx.is_directed_acyclic_graph(G):
        raise InvalidTopology("Network contains a cycle")

    num_layers = len(network.layers)
    for layer, node_ids in enumerate(network.layers):
        expected_parents = set(network.layers[layer - 1]) if layer > 0 else set()
        expected_type = node_type_for(layer, num_layers)
        for nid in node_ids:
            node = network.nodes[nid]
            if node.type != expected_type or node.layer != layer:
                raise InvalidTopology(f"Node {nid} is marked {node.type} in layer {node.layer}, expected {expected_type} in layer {layer}")
            parents = set(G.predecessors(nid))
            if parents != expected_parents:
                raise InvalidTopology(f"Node {nid} in layer {layer} is not fully connected to layer {layer - 1}")
            if len(node.incoming) != len(expected_parents):
                raise InvalidTopology(f"Node {nid} has {len(node.incoming)} incoming weights, expected {len(expected_parents)}")

        if layer == num_layers - 1:
            if any(G.out_degree(nid) for nid in node_ids):
                raise InvalidTopology("Output nodes can't have outgoing weights")
