import logging
import os
import random
from typing import Dict, List, Optional, Sequence

import pandas as pd

from . import persist
from .config import Config
from .evaluate import Example, evaluate_dataset
from .network import Network

STATS_COLUMNS = ["epoch", "train_loss", "loss", "rmse", "accuracy"]

# -------------------------------
# Logging helpers
# -------------------------------
def setup_logging(log_file: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """Sends "LyNN" logs to the console at ``level`` and, if given, to a file at DEBUG."""
    logger = logging.getLogger("LyNN")
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt = logging.Formatter("[%(asctime)s][%(name)s][%(levelname)s] %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fh = logging.FileHandler(log_file)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


# -------------------------------
# Training loop
# -------------------------------
class Trainer:
    def __init__(self, config: Config, network: Optional[Network] = None) -> None:
        self.config = config
        self.rng = random.Random(getattr(config, "seed", None))
        self.epochs = getattr(config, "epochs", 1)
        self.batch_size = getattr(config, "batch_size", 1)
        self.learning_rate = getattr(config, "learning_rate", 1.0)
        self.shuffle = getattr(config, "shuffle", True)
        self.log_interval = getattr(config, "log_interval", 100)
        self.stats_path = getattr(config, "stats_path", None)
        self.model_path = getattr(config, "model_path", None)
        self.logger = logging.getLogger("LyNN.trainer")

        if self.batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if self.log_interval < 1:
            raise ValueError("log_interval must be >= 1")

        if network is None:
            network = Network.build(config.input_size, config.hidden_layers, config.output_size)
            network.randomize(self.rng)
        self.network = network
        self.history: List[Dict[str, float]] = []

    def run(self, dataset: Sequence[Example]) -> Network:
        dataset = list(dataset)
        if not dataset:
            raise ValueError("Can't train on an empty dataset")

        if self.stats_path and not os.path.exists(self.stats_path):
            directory = os.path.dirname(self.stats_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            pd.DataFrame(columns=STATS_COLUMNS).to_csv(self.stats_path, index=False)

        # Drop anything a caller accumulated and never applied
        self.network.zero_grad()

        self.logger.info(
            f"Starting training: layers={self.network.layer_sizes}, examples={len(dataset)}, "
            f"epochs={self.epochs}, batch_size={self.batch_size}, rate={self.learning_rate}"
        )

        pending = []
        for epoch in range(1, self.epochs + 1):
            train_loss = self.run_epoch(dataset)
            metrics = {"epoch": epoch, "train_loss": train_loss, **evaluate_dataset(self.network, dataset)}
            self.history.append(metrics)
            pending.append(metrics)

            if epoch % self.log_interval == 0 or epoch == self.epochs:
                self.log_stats(pending)
                pending = []
                self.logger.info(
                    f"Epoch {epoch}/{self.epochs} | train_loss={train_loss:.6f}, "
                    f"loss={metrics['loss']:.6f}, rmse={metrics['rmse']:.6f}, accuracy={metrics['accuracy']:.3f}"
                )

        if self.model_path:
            persist.save(self.network, self.model_path)
            self.logger.info(f"Saved network to {self.model_path}")

        self.logger.info("Training complete")
        return self.network

    def run_epoch(self, dataset: Sequence[Example]) -> float:
        """Trains one pass over the dataset, applying once per batch. Returns the mean example loss."""
        order = list(dataset)
        if self.shuffle:
            self.rng.shuffle(order)

        total = 0.0
        for start in range(0, len(order), self.batch_size):
            for inputs, targets in order[start:start + self.batch_size]:
                total += self.network.train(inputs, targets)
            self.network.apply(self.learning_rate)
        return total / len(order)

    def log_stats(self, rows: List[Dict[str, float]]) -> None:
        if not self.stats_path or not rows:
            return
        df = pd.DataFrame(rows, columns=STATS_COLUMNS)
        df.to_csv(self.stats_path, mode="a", header=False, index=False)
