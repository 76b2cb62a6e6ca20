import logging
import math
from typing import Dict, List, Sequence

from .parts import Node, Weight
from ..errors import DivideByZeroOnApply, InputSizeMismatch, InvalidTopology, OutputSizeMismatch

logger = logging.getLogger("LyNN.network")


def sigmoid(x: float) -> float:
    """Logistic activation, 1 / (1 + e^-x)."""
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    # Same value, without overflowing exp() for large negative x
    z = math.exp(x)
    return z / (1.0 + z)


def node_type_for(layer: int, num_layers: int) -> str:
    if layer == 0:
        return "input"
    if layer == num_layers - 1:
        return "output"
    return "hidden"


class Network:
    """
    A fully connected feed-forward network.

    Nodes and weights live in flat dicts keyed by integer id. Each node keeps
    the ids of its incoming and outgoing weights in order, each weight keeps
    the ids of its parent and child node, and ``layers`` lists node ids from
    the input layer to the output layer.

    Training is a two-phase protocol: ``train`` accumulates the gradient
    contributions of one example and may be called any number of times,
    ``apply`` then averages what was accumulated, updates weights and biases,
    and resets the accumulators. ``apply`` must only be called after at
    least one ``train``.
    """
    def __init__(self):
        self.nodes: Dict[int, Node] = {}
        self.weights: Dict[int, Weight] = {}
        self.layers: List[List[int]] = []
        self.node_idx = 0
        self.weight_idx = 0

    # --- construction ---
    @classmethod
    def build(cls, input_size: int, hidden_layers: Sequence[int], output_size: int) -> "Network":
        """Builds a zeroed network with the given inputs, hidden layer sizes and outputs."""
        hidden_layers = list(hidden_layers)
        if input_size < 1:
            raise InvalidTopology("Can't have less than one input")
        if output_size < 1:
            raise InvalidTopology("Can't have less than one output")
        for size in hidden_layers:
            if size < 1:
                raise InvalidTopology("Can't have less than one node in a layer")

        net = cls()
        sizes = [input_size] + hidden_layers + [output_size]
        for layer, size in enumerate(sizes):
            net.layers.append([])
            node_type = node_type_for(layer, len(sizes))
            for _ in range(size):
                node = net.add_node(layer, node_type)

                # Fully connect to the layer right before this one
                if layer > 0:
                    for parent_id in net.layers[layer - 1]:
                        net.connect(parent_id, node.id)

        logger.debug(f"Built network: layers={net.layer_sizes}, weights={len(net.weights)}")
        return net

    def add_node(self, layer: int, node_type: str, bias: float = 0.0) -> Node:
        """Appends a new node to an existing layer."""
        node = Node(self.node_idx, layer, node_type=node_type, bias=bias)
        self.nodes[self.node_idx] = node
        self.layers[layer].append(node.id)
        self.node_idx += 1
        return node

    def connect(self, parent_id: int, child_id: int, value: float = 0.0) -> Weight:
        """Creates a weight from parent to child and links it on both ends."""
        weight = Weight(self.weight_idx, parent_id, child_id, value=value)
        self.weights[self.weight_idx] = weight
        self.nodes[parent_id].outgoing.append(weight.id)
        self.nodes[child_id].incoming.append(weight.id)
        self.weight_idx += 1
        return weight

    def randomize(self, rng) -> None:
        """Draws every bias and weight uniformly from [-0.5, 0.5) using ``rng.random()``."""
        for layer in self.layers:
            for node_id in layer:
                node = self.nodes[node_id]
                node.bias = rng.random() - 0.5
                for weight_id in node.outgoing:
                    self.weights[weight_id].value = rng.random() - 0.5
        logger.debug(f"Randomized {len(self.nodes)} biases and {len(self.weights)} weights")

    # --- properties ---
    @property
    def input_size(self) -> int:
        return len(self.layers[0])

    @property
    def output_size(self) -> int:
        return len(self.layers[-1])

    @property
    def num_hidden_layers(self) -> int:
        return len(self.layers) - 2

    @property
    def layer_sizes(self) -> List[int]:
        return [len(layer) for layer in self.layers]

    @property
    def input_nodes(self) -> List[Node]:
        return [self.nodes[nid] for nid in self.layers[0]]

    @property
    def output_nodes(self) -> List[Node]:
        return [self.nodes[nid] for nid in self.layers[-1]]

    def parents_of(self, node: Node) -> List[Node]:
        return [self.nodes[self.weights[wid].parent] for wid in node.incoming]

    def children_of(self, node: Node) -> List[Node]:
        return [self.nodes[self.weights[wid].child] for wid in node.outgoing]

    # --- forward ---
    def evaluate(self, inputs: Sequence[float]) -> List[float]:
        """Runs a forward pass and returns the output activations in node order."""
        inputs = list(inputs)
        if len(inputs) != self.input_size:
            raise InputSizeMismatch(self.input_size, len(inputs))

        for node, value in zip(self.input_nodes, inputs):
            node.value = float(value)

        for layer in self.layers[1:]:
            for node_id in layer:
                node = self.nodes[node_id]
                node.value = self._activate(node)

        return [node.value for node in self.output_nodes]

    def _activate(self, node: Node) -> float:
        total = node.bias
        for weight_id in node.incoming:
            weight = self.weights[weight_id]
            total += weight.value * self.nodes[weight.parent].value
        return sigmoid(total)

    # --- training ---
    def train(self, inputs: Sequence[float], targets: Sequence[float]) -> float:
        """
        Accumulates the gradient contributions of a single example.

        Returns the example's loss, the sum over outputs of 0.5 * (target - actual)^2.
        Nothing is applied until ``apply`` is called.
        """
        inputs = list(inputs)
        targets = list(targets)
        if len(inputs) != self.input_size:
            raise InputSizeMismatch(self.input_size, len(inputs))
        if len(targets) != self.output_size:
            raise OutputSizeMismatch(self.output_size, len(targets))

        actual = self.evaluate(inputs)

        loss = 0.0
        for node, target, out in zip(self.output_nodes, targets, actual):
            diff = target - out
            node.error = diff
            loss += 0.5 * diff * diff

        # Output errors are already set, walk the rest backwards down to the inputs
        for layer in reversed(self.layers[:-1]):
            for node_id in layer:
                self._backprop_node(self.nodes[node_id])

        return loss

    def _backprop_node(self, node: Node) -> None:
        total = 0.0
        for weight_id in node.outgoing:
            weight = self.weights[weight_id]
            child = self.nodes[weight.child]
            derivative = child.value * (1 - child.value)

            weight.grad += child.error * derivative * node.value
            weight.grad_count += 1

            total += child.error * derivative * weight.value
        node.error = total

        # Scaled by the node's own bias
        node.bias_grad += total * node.value * (1 - node.value) * node.bias
        node.bias_grad_count += 1

    def apply(self, rate: float = 1.0) -> None:
        """
        Adds ``rate`` times the averaged accumulated gradient to every weight and
        to the bias of every non-output node, then resets all accumulators.

        Output biases are never changed: backprop produces no bias contribution
        for the output layer.
        """
        trainable = [self.nodes[nid] for layer in self.layers[:-1] for nid in layer]

        for weight in self.weights.values():
            if weight.grad_count == 0:
                raise DivideByZeroOnApply(
                    f"Weight {weight.parent}->{weight.child} has no accumulated gradient, call train() before apply()"
                )
        for node in trainable:
            if node.bias_grad_count == 0:
                raise DivideByZeroOnApply(
                    f"Node {node.id} has no accumulated bias gradient, call train() before apply()"
                )

        batch = next(iter(self.weights.values())).grad_count if self.weights else 0

        for weight in self.weights.values():
            weight.value += rate * weight.grad / weight.grad_count
        for node in trainable:
            node.bias += rate * node.bias_grad / node.bias_grad_count
        self.zero_grad()

        logger.debug(f"Applied gradients averaged over {batch} example(s), rate={rate}")

    def zero_grad(self) -> None:
        """Discards any accumulated gradients without applying them."""
        for weight in self.weights.values():
            weight.reset_grad()
        for node in self.nodes.values():
            node.reset_grad()

    def __repr__(self):
        return f"Network(layers={self.layer_sizes}, weights={len(self.weights)})"
