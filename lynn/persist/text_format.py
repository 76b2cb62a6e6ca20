"""
Line-oriented text layout for saved networks.

Layer blocks are separated by one blank line, input layer first. A block
starts with the node count, then for each node one line holding its bias
and, except in the output layer, one line holding its outgoing weights in
child order, each followed by ``;``::

    2
    0.25
    -0.1;0.4;
    0.0
    0.3;-0.2;

    2
    0.1
    0.5;
    -0.3
    0.2;

    1
    0.05
"""
import logging
import os
import re
from typing import List

from ..errors import FormatError, InvalidTopology
from ..network import Network
from ..network.structure import check_structure
from ..network.network import node_type_for

logger = logging.getLogger("LyNN.persist")

LAYER_SEPARATOR = "\n\n"

COUNT_PATTERN = re.compile(r"\d+", re.ASCII)
# Decimal literals plus the nan/inf spellings repr() produces
NUMBER_PATTERN = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|nan|-?inf", re.ASCII)


def format_value(value: float) -> str:
    # repr() is the shortest string that parses back to the same float
    return repr(float(value))


def dumps(network: Network) -> str:
    """Serializes a network to text, walking layers from input to output."""
    blocks = []
    for layer in network.layers:
        lines = [str(len(layer))]
        for node_id in layer:
            node = network.nodes[node_id]
            lines.append(format_value(node.bias))
            if node.type != "output":
                lines.append("".join(format_value(network.weights[wid].value) + ";" for wid in node.outgoing))
        blocks.append("\n".join(lines))
    return LAYER_SEPARATOR.join(blocks)


def _parse_float(text: str, line: int) -> float:
    if not NUMBER_PATTERN.fullmatch(text):
        raise FormatError(f"Expected a number, got {text!r}", line=line)
    return float(text)


def _parse_weights(text: str, line: int) -> List[float]:
    if not text.endswith(";"):
        raise FormatError("Weight line must end with ';'", line=line)
    return [_parse_float(part, line) for part in text[:-1].split(";")]


def _split_blocks(text: str):
    """First pass: split into layer blocks, each a list of (line number, line)."""
    text = text.replace("\r\n", "\n")
    if text.endswith("\n"):
        text = text[:-1]
    if not text.strip():
        raise FormatError("Empty network text")

    blocks = []
    line_no = 1
    for raw_block in text.split(LAYER_SEPARATOR):
        lines = raw_block.split("\n")
        if any(not line.strip() for line in lines):
            raise FormatError("Unexpected blank line inside a layer block", line=line_no)
        blocks.append([(line_no + i, line.strip()) for i, line in enumerate(lines)])
        line_no += len(lines) + 1
    return blocks


def loads(text: str) -> Network:
    """
    Rebuilds a network from text produced by ``dumps``.

    Layers are read from output to input so the children of every weight
    already exist when the weight is linked. Node types come from layer
    position alone. Raises FormatError on malformed or truncated text.
    """
    blocks = _split_blocks(text)
    if len(blocks) < 2:
        raise FormatError(f"Expected at least an input and an output layer, found {len(blocks)} layer(s)")

    net = Network()
    net.layers = [[] for _ in blocks]
    num_layers = len(blocks)

    for layer in range(num_layers - 1, -1, -1):
        lines = blocks[layer]
        count_line, count_text = lines[0]
        if not COUNT_PATTERN.fullmatch(count_text):
            raise FormatError(f"Expected a node count, got {count_text!r}", line=count_line)
        count = int(count_text)
        if count < 1:
            raise FormatError(f"Layer {layer} must have at least one node", line=count_line)

        node_type = node_type_for(layer, num_layers)
        lines_per_node = 1 if node_type == "output" else 2
        expected = 1 + count * lines_per_node
        if len(lines) != expected:
            raise FormatError(
                f"Layer {layer} declares {count} node(s) and needs {expected} lines, found {len(lines)}",
                line=count_line
            )

        children = net.layers[layer + 1] if layer + 1 < num_layers else []
        for i in range(count):
            bias_line, bias_text = lines[1 + i * lines_per_node]
            node = net.add_node(layer, node_type, bias=_parse_float(bias_text, bias_line))

            if node_type == "output":
                continue
            weights_line, weights_text = lines[2 + i * lines_per_node]
            values = _parse_weights(weights_text, weights_line)
            if len(values) != len(children):
                raise FormatError(
                    f"Node {i} of layer {layer} has {len(values)} weight(s), next layer has {len(children)} node(s)",
                    line=weights_line
                )
            for child_id, value in zip(children, values):
                net.connect(node.id, child_id, value=value)

    try:
        check_structure(net)
    except InvalidTopology as e:
        raise FormatError(f"Loaded network is not a valid layered network: {e}") from e

    logger.debug(f"Loaded network: layers={net.layer_sizes}, weights={len(net.weights)}")
    return net


def save(network: Network, path: str) -> None:
    """Writes a network to a UTF-8 text file, creating parent directories."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(dumps(network))
    logger.debug(f"Saved network {network.layer_sizes} to {path}")


def load(path: str) -> Network:
    """Reads a network written by ``save``."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        text = f.read()
    return loads(text)
