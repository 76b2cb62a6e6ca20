from typing import Sequence

from .network import Network, sigmoid
from .parts import Node, Weight


def build(input_size: int, hidden_layers: Sequence[int], output_size: int) -> Network:
    return Network.build(input_size, hidden_layers, output_size)


def initialize(network: Network, rng) -> Network:
    network.randomize(rng)
    return network


__all__ = ["Network", "Node", "Weight", "sigmoid", "build", "initialize"]
