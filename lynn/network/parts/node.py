from typing import List


class Node:
    """Represents one neuron in a layered network."""
    def __init__(self, id, layer, node_type="hidden", bias=0.0):
        self.id = id
        self.layer = layer
        self.type = node_type  # "input", "hidden", "output"
        self.value = 0.0
        self.bias = bias

        # Weight ids, in parent/child index order
        self.incoming: List[int] = []
        self.outgoing: List[int] = []

        # Backprop state
        self.error = 0.0
        self.bias_grad = 0.0
        self.bias_grad_count = 0

    def reset_grad(self):
        self.bias_grad = 0.0
        self.bias_grad_count = 0

    def __repr__(self):
        return f"Node(id={self.id}, layer={self.layer}, type='{self.type}', b={self.bias:.2f})"
