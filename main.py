from lynn import Config, Trainer, setup_logging
from lynn.network.graph import visualize_network

XOR = [
    ([0.0, 0.0], [0.0]),
    ([0.0, 1.0], [1.0]),
    ([1.0, 0.0], [1.0]),
    ([1.0, 1.0], [0.0]),
]

if __name__ == "__main__":
    config = Config()
    logger = setup_logging(config.log_path)
    trainer = Trainer(config)
    network = trainer.run(XOR)

    for inputs, targets in XOR:
        logger.info(f"{inputs} -> {network.evaluate(inputs)} (target {targets})")

    visualize_network(network, path=config.plot_path)
