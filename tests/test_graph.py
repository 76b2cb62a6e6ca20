import matplotlib.pyplot as plt

from lynn.network.graph import visualize_network


def test_visualize_network_to_file(tmp_path, random_net):
    path = tmp_path / "net.png"
    visualize_network(random_net, path=str(path))
    assert path.exists()
    assert path.stat().st_size > 0


def test_visualize_network_on_existing_axes(random_net):
    fig, ax = plt.subplots()
    assert visualize_network(random_net, ax=ax) is ax
    plt.close(fig)
