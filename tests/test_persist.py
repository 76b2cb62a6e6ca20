import math

import pytest

from lynn import persist
from lynn.errors import FormatError
from lynn.network import Network


@pytest.fixture
def tiny_net():
    net = Network.build(2, [], 1)
    first, second = net.input_nodes
    first.bias = 0.25
    second.bias = -0.5
    net.weights[first.outgoing[0]].value = 0.125
    net.weights[second.outgoing[0]].value = -1.0
    net.output_nodes[0].bias = 0.5
    return net


TINY_TEXT = "2\n0.25\n0.125;\n-0.5\n-1.0;\n\n1\n0.5"


def _params(net):
    return (
        net.layer_sizes,
        [[net.nodes[nid].bias for nid in layer] for layer in net.layers],
        [[[net.weights[wid].value for wid in net.nodes[nid].outgoing] for nid in layer] for layer in net.layers],
    )


def test_dumps_layout(tiny_net):
    assert persist.dumps(tiny_net) == TINY_TEXT


def test_dumps_has_no_trailing_blank_line(random_net):
    text = persist.dumps(random_net)
    assert not text.endswith("\n")
    assert text.count("\n\n") == len(random_net.layers) - 1


def test_dumps_block_per_layer(random_net):
    blocks = persist.dumps(random_net).split("\n\n")
    assert len(blocks) == 4
    for block, size in zip(blocks[:-1], random_net.layer_sizes):
        lines = block.split("\n")
        assert lines[0] == str(size)
        assert len(lines) == 1 + 2 * size
        assert all(line.endswith(";") for line in lines[2::2])
    # Output layer: count plus one bias line per node
    assert blocks[-1].split("\n")[0] == "2"
    assert len(blocks[-1].split("\n")) == 3


def test_round_trip_is_exact(random_net):
    loaded = persist.loads(persist.dumps(random_net))
    assert _params(loaded) == _params(random_net)
    assert persist.dumps(loaded) == persist.dumps(random_net)


def test_round_trip_evaluates_identically(random_net):
    loaded = persist.loads(persist.dumps(random_net))
    for inputs in ([0.0, 0.0, 0.0], [1.0, -1.0, 0.5], [3.0, 2.0, -4.0]):
        assert loaded.evaluate(inputs) == random_net.evaluate(inputs)


def test_loads_assigns_roles_from_position():
    net = Network.build(1, [2, 3], 2)
    loaded = persist.loads(persist.dumps(net))
    assert [n.type for n in loaded.input_nodes] == ["input"]
    assert [n.type for n in loaded.output_nodes] == ["output", "output"]
    assert loaded.num_hidden_layers == 2
    for layer in loaded.layers[1:-1]:
        assert all(loaded.nodes[nid].type == "hidden" for nid in layer)


def test_loads_links_weights_both_ways(tiny_net):
    loaded = persist.loads(TINY_TEXT)
    out = loaded.output_nodes[0]
    assert [loaded.weights[wid].value for wid in out.incoming] == [0.125, -1.0]
    assert [p.bias for p in loaded.parents_of(out)] == [0.25, -0.5]
    assert all(w.grad_count == 0 for w in loaded.weights.values())


def test_loads_accepts_trailing_newline_and_crlf():
    assert persist.loads(TINY_TEXT + "\n").layer_sizes == [2, 1]
    assert persist.loads(TINY_TEXT.replace("\n", "\r\n")).layer_sizes == [2, 1]


def test_loads_reads_hand_written_numbers():
    net = persist.loads("1\n0\n1;\n\n1\n-3e-2")
    assert net.weights[0].value == 1.0
    assert net.output_nodes[0].bias == -0.03


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   \n",
        "2\n0.25\n0.125;\n-0.5\n-1.0;",  # single layer
        "x\n0.25\n0.125;\n\n1\n0.5",  # bad count
        "0\n\n1\n0.5",  # empty layer
        "2\n0.25\n0.125;\n\n1\n0.5",  # truncated layer
        "1\n0.25\n0.125;\n\n1\n0.5\n0.7",  # extra line in output layer
        "1\n0.25\n0.125;0.5;\n\n1\n0.5",  # too many weights
        "1\n0.25\n0.125\n\n1\n0.5",  # missing ';'
        "1\nabc\n0.125;\n\n1\n0.5",  # bad bias
        "1\n0.25\n0.1;x;\n\n2\n0.5\n0.5",  # bad weight
        "1\n0.25\n;\n\n1\n0.5",  # empty weight list
        "1\n0.25\n0.125;\n\n\n1\n0.5",  # extra blank line
        "1\n0.2_5\n0.125;\n\n1\n0.5",  # digit separator in bias
        "1\n0.25\n0.1_25;\n\n1\n0.5",  # digit separator in weight
        "1_0\n0.25\n0.125;\n\n1\n0.5",  # digit separator in count
        "+1\n0.25\n0.125;\n\n1\n0.5",  # signed count
        "1\n+0.25\n0.125;\n\n1\n0.5",  # leading plus
        "1\n0.25\ninfinity;\n\n1\n0.5",  # spelled-out infinity
        "1\n0.25\n0.125;\n\n1\nInf",  # capitalised inf
        "1\n0x1p-2\n0.125;\n\n1\n0.5",  # hex float
        "\u0661\n0.25\n0.125;\n\n1\n0.5",  # non-ASCII digit
    ],
)
def test_loads_rejects_malformed_text(text):
    with pytest.raises(FormatError):
        persist.loads(text)


def test_loads_reads_non_finite_values_from_dumps(tiny_net):
    tiny_net.output_nodes[0].bias = float("inf")
    first = tiny_net.input_nodes[0]
    tiny_net.weights[first.outgoing[0]].value = float("-inf")
    tiny_net.input_nodes[1].bias = float("nan")

    text = persist.dumps(tiny_net)
    assert text == "2\n0.25\n-inf;\nnan\n-1.0;\n\n1\ninf"

    loaded = persist.loads(text)
    assert loaded.output_nodes[0].bias == float("inf")
    assert loaded.weights[loaded.input_nodes[0].outgoing[0]].value == float("-inf")
    assert math.isnan(loaded.input_nodes[1].bias)


def test_format_error_reports_line():
    with pytest.raises(FormatError) as excinfo:
        persist.loads("1\n0.25\n0.125;\n\n1\nnope")
    assert excinfo.value.line == 6
    assert "line 6" in str(excinfo.value)


def test_format_error_is_value_error():
    with pytest.raises(ValueError):
        persist.loads("garbage")


def test_save_and_load_file(tmp_path, random_net):
    path = tmp_path / "nested" / "dir" / "net.lynn"
    persist.save(random_net, str(path))

    assert path.read_text(encoding="utf-8") == persist.dumps(random_net)
    loaded = persist.load(str(path))
    assert _params(loaded) == _params(random_net)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        persist.load(str(tmp_path / "missing.lynn"))
